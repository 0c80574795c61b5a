# Copyright (C) 2026 StableLlama
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.

"""Defines the llm completion ops unit so this responsibility stays isolated, testable, and easy to evolve."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Awaitable, Dict, Protocol

import httpx

from hckbookmarklet.services.llm.llm_logging import (
    add_llm_log,
    create_log_entry,
    finish_llm_log,
)
from hckbookmarklet.services.llm.llm_request_helpers import build_timeout


@dataclass(frozen=True)
class UpstreamReply:
    status_code: int
    body: Any

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300


class ChatSender(Protocol):
    """Async callable that performs one upstream chat completion POST."""

    def __call__(
        self,
        *,
        url: str,
        headers: Dict[str, str],
        body: Dict[str, Any],
        timeout_s: int,
    ) -> Awaitable[UpstreamReply]: ...


def _error_body(response: httpx.Response) -> Any:
    """Best-effort JSON body of a failed response; ``{}`` when unparsable."""
    try:
        return response.json()
    except ValueError:
        return {}


async def openai_chat_complete(
    *,
    url: str,
    headers: Dict[str, str],
    body: Dict[str, Any],
    timeout_s: int,
) -> UpstreamReply:
    """POST a chat completion request and return status plus decoded JSON.

    Non-success statuses are returned, not raised, so the caller can relay
    them. A success body that is not JSON raises ``ValueError``; transport
    failures raise ``httpx.HTTPError``.
    """
    log_entry = create_log_entry(url, "POST", headers, body)
    add_llm_log(log_entry)

    try:
        async with httpx.AsyncClient(timeout=build_timeout(timeout_s)) as client:
            r = await client.post(url, headers=headers, json=body)
            log_entry["response"]["status_code"] = r.status_code
            data = r.json() if r.is_success else _error_body(r)
            log_entry["response"]["body"] = data
            return UpstreamReply(status_code=r.status_code, body=data)
    except Exception as e:
        log_entry["response"]["error_detail"] = str(e)
        raise
    finally:
        finish_llm_log(log_entry)
