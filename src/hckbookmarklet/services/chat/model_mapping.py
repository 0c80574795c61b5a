# Copyright (C) 2026 StableLlama
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.

"""Translate bookmarklet model names into OpenRouter model ids."""

from __future__ import annotations

from types import MappingProxyType
from typing import Mapping

MODEL_MAPPING: Mapping[str, str] = MappingProxyType(
    {
        "gemini-1.5-flash": "google/gemini-flash-1.5",
        "meta-llama/Llama-3.3-70B-Instruct-Turbo": "meta-llama/llama-3.3-70b-instruct",
        "deepseek-reasoner": "deepseek/deepseek-r1",
        "deepseek-chat": "deepseek/deepseek-chat",
    }
)

# Display labels shown on the service info endpoint.
MODEL_LABELS: Mapping[str, str] = MappingProxyType(
    {
        "gemini-1.5-flash": "Gemini 1.5 Flash",
        "meta-llama/Llama-3.3-70B-Instruct-Turbo": "Llama 3.3 70B",
        "deepseek-reasoner": "DeepSeek Reasoner",
        "deepseek-chat": "DeepSeek Chat",
    }
)


def map_model_id(model_id: str) -> str:
    """Return the provider id for ``model_id``; unknown ids pass through unchanged."""
    return MODEL_MAPPING.get(model_id, model_id)


def list_supported_models() -> list[dict[str, str]]:
    return [
        {"id": name, "label": MODEL_LABELS.get(name, name), "upstream": upstream}
        for name, upstream in MODEL_MAPPING.items()
    ]
