# Copyright (C) 2026 StableLlama
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.

"""Defines the chat api ops unit so this responsibility stays isolated, testable, and easy to evolve.

Request pipeline behind ``POST /api/chat``: validate the body, map the model
id, reformat image markers in the last message, prepend the system prompt,
call the upstream once and translate its reply. The upstream call is passed
in as ``send`` so the pipeline can run without a network.
"""

from __future__ import annotations

from typing import Any

from pydantic import ValidationError

from hckbookmarklet.core.config import UpstreamSettings
from hckbookmarklet.core.prompts import system_message
from hckbookmarklet.models.chat import (
    ChatMessage,
    ChatRequest,
    ChatResponse,
    ChatResponseDetails,
)
from hckbookmarklet.services.chat.model_mapping import map_model_id
from hckbookmarklet.services.chat.vision_content import (
    format_content_for_vision,
    has_image_marker,
)
from hckbookmarklet.services.exceptions import (
    InvalidInputError,
    MalformedUpstreamResponseError,
    UpstreamError,
)
from hckbookmarklet.services.llm.llm_completion_ops import ChatSender, UpstreamReply
from hckbookmarklet.services.llm.llm_request_helpers import (
    build_chat_body,
    build_headers,
    chat_completions_url,
)

SOURCE_LABEL = "openrouter_api"


def _validation_summary(exc: ValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()))
        parts.append(f"{loc}: {err.get('msg')}" if loc else str(err.get("msg")))
    return "; ".join(parts)


def parse_chat_request(payload: Any) -> ChatRequest:
    """Validate the inbound body.

    ``modelId`` is not validated: a missing or null id becomes ``""`` and
    any other value is forwarded as its string form.
    """
    if not isinstance(payload, dict):
        raise InvalidInputError()
    messages = payload.get("messages")
    if not messages or not isinstance(messages, list):
        raise InvalidInputError()

    model_id = payload.get("modelId")
    try:
        return ChatRequest.model_validate(
            {"messages": messages, "modelId": "" if model_id is None else str(model_id)}
        )
    except ValidationError as exc:
        raise InvalidInputError(
            _validation_summary(exc), error="Invalid message format"
        ) from exc


def prepare_messages(messages: list[ChatMessage]) -> list[dict]:
    """Return the upstream message list with the system prompt first.

    Only the last message is considered for image reformatting, and only
    when its content is still plain text. Keys outside the chat schema are
    forwarded as received.
    """
    *history, last = messages
    prepared = [m.model_dump(mode="json") for m in history]

    last_dump = last.model_dump(mode="json")
    content = last.content
    if isinstance(content, str) and has_image_marker(content):
        last_dump["content"] = [
            part.model_dump(mode="json") for part in format_content_for_vision(content)
        ]
    prepared.append(last_dump)

    return [system_message()] + prepared


def _upstream_error_message(reply: UpstreamReply) -> str:
    body = reply.body if isinstance(reply.body, dict) else {}
    error = body.get("error")
    message = error.get("message") if isinstance(error, dict) else None
    if message:
        return str(message)
    return f"HTTP {reply.status_code}"


def _message_text(content: Any) -> str:
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        # Some providers answer with content parts
        texts = [
            c.get("text", "")
            for c in content
            if isinstance(c, dict) and c.get("type") == "text"
        ]
        return "\n".join(t for t in texts if t)
    return ""


def translate_reply(reply: UpstreamReply, upstream_model: str) -> ChatResponse:
    """Map an upstream reply onto the bookmarklet response shape."""
    if not reply.ok:
        raise UpstreamError(
            _upstream_error_message(reply), status_code=reply.status_code
        )

    data = reply.body if isinstance(reply.body, dict) else {}
    choices = data.get("choices")
    first = choices[0] if isinstance(choices, list) and choices else None
    message = first.get("message") if isinstance(first, dict) else None
    if not isinstance(message, dict):
        raise MalformedUpstreamResponseError()

    model_used = str(data.get("model") or upstream_model)
    return ChatResponse(
        response=_message_text(message.get("content")),
        model=model_used,
        source=SOURCE_LABEL,
        details=ChatResponseDetails(modelOrigin=model_used, usage=data.get("usage")),
    )


async def complete_chat(
    payload: Any,
    *,
    send: ChatSender,
    settings: UpstreamSettings,
    referer: str | None = None,
) -> ChatResponse:
    """Run one bookmarklet chat request end to end.

    Raises a ``ServiceError`` subclass for every expected failure. Transport
    errors from ``send`` propagate unchanged.
    """
    chat_request = parse_chat_request(payload)
    upstream_model = map_model_id(chat_request.modelId)
    messages = prepare_messages(chat_request.messages)

    reply = await send(
        url=chat_completions_url(settings.base_url),
        headers=build_headers(
            settings.api_key,
            referer=referer or settings.app_url,
            title=settings.app_title,
        ),
        body=build_chat_body(upstream_model, messages),
        timeout_s=settings.timeout_s,
    )
    return translate_reply(reply, upstream_model)
