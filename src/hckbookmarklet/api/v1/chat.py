# Copyright (C) 2026 StableLlama
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.

"""Defines the chat unit so this responsibility stays isolated, testable, and easy to evolve.

API endpoint the bookmarklet posts questions to.
"""

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse, Response

from hckbookmarklet.api.v1.http_responses import ok_json, preflight_response
from hckbookmarklet.core.config import UpstreamSettings, resolve_openrouter_settings
from hckbookmarklet.models.chat import ChatErrorResponse, ChatResponse
from hckbookmarklet.services.chat.chat_api_ops import complete_chat
from hckbookmarklet.services.exceptions import InternalServerError, ServiceError
from hckbookmarklet.services.llm.llm_completion_ops import (
    ChatSender,
    openai_chat_complete,
)

router = APIRouter(tags=["Chat"])


def get_chat_sender() -> ChatSender:
    return openai_chat_complete


def get_upstream_settings() -> UpstreamSettings:
    try:
        return resolve_openrouter_settings()
    except Exception as exc:
        raise InternalServerError(str(exc) or "Unknown error") from exc


@router.post(
    "/chat",
    response_model=ChatResponse,
    responses={
        400: {"model": ChatErrorResponse},
        500: {"model": ChatErrorResponse},
    },
)
async def api_chat(
    request: Request,
    send: ChatSender = Depends(get_chat_sender),
    settings: UpstreamSettings = Depends(get_upstream_settings),
) -> JSONResponse:
    """Answer a multiple-choice question through the upstream model.

    Body JSON:
      {
        "messages": [{"role": "user|assistant|system", "content": str | [part, ...]}],
        "modelId": str
      }

    Any failure, including an unreadable body, is returned as a JSON error.
    """
    try:
        payload = await request.json()
        result = await complete_chat(
            payload,
            send=send,
            settings=settings,
            referer=request.headers.get("referer"),
        )
    except ServiceError:
        raise
    except Exception as exc:
        raise InternalServerError(str(exc) or "Unknown error") from exc
    return ok_json(result.model_dump(mode="json"))


@router.options("/chat")
async def api_chat_preflight() -> Response:
    return preflight_response()
