# Copyright (C) 2026 StableLlama
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.

"""Defines the llm request helpers unit so this responsibility stays isolated, testable, and easy to evolve."""

from __future__ import annotations

from typing import Any, Dict

import httpx

# Sampling parameters tuned for short, deterministic multiple-choice answers
TEMPERATURE = 0.1
MAX_TOKENS = 1000
TOP_P = 0.9


def build_headers(
    api_key: str | None,
    referer: str | None = None,
    title: str | None = None,
) -> Dict[str, str]:
    """Build upstream headers.

    ``HTTP-Referer`` and ``X-Title`` are OpenRouter attribution headers and
    are only sent when a value is available.
    """
    headers: Dict[str, str] = {"Content-Type": "application/json"}
    if api_key:
        headers["Authorization"] = f"Bearer {api_key}"
    if referer:
        headers["HTTP-Referer"] = referer
    if title:
        headers["X-Title"] = title
    return headers


def build_chat_body(model_id: str, messages: list[dict]) -> Dict[str, Any]:
    return {
        "model": model_id,
        "messages": messages,
        "temperature": TEMPERATURE,
        "max_tokens": MAX_TOKENS,
        "top_p": TOP_P,
    }


def build_timeout(timeout_s: int) -> httpx.Timeout:
    try:
        return httpx.Timeout(float(timeout_s or 60))
    except (TypeError, ValueError):
        return httpx.Timeout(60.0)


def chat_completions_url(base_url: str) -> str:
    return str(base_url).rstrip("/") + "/chat/completions"
