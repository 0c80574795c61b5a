# Copyright (C) 2026 StableLlama
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.

"""Defines the chat unit so this responsibility stays isolated, testable, and easy to evolve.

Pydantic models for the bookmarklet chat request and response bodies.
"""

from __future__ import annotations

from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field


class TextPart(BaseModel):
    model_config = ConfigDict(extra="allow")

    type: Literal["text"] = "text"
    text: str


class ImageUrl(BaseModel):
    model_config = ConfigDict(extra="allow")

    url: str


class ImagePart(BaseModel):
    model_config = ConfigDict(extra="allow")

    type: Literal["image_url"] = "image_url"
    image_url: ImageUrl


ContentPart = Annotated[Union[TextPart, ImagePart], Field(discriminator="type")]


class ChatMessage(BaseModel):
    """A single OpenAI-style chat message.

    ``content`` is either plain text or an ordered list of text/image parts.
    Unknown keys such as ``name`` are kept and forwarded upstream.
    """

    model_config = ConfigDict(extra="allow")

    role: Literal["user", "assistant", "system"]
    content: Union[str, list[ContentPart]]


class ChatRequest(BaseModel):
    """Request body for ``POST /api/chat``."""

    messages: list[ChatMessage]
    modelId: str = ""


class ChatResponseDetails(BaseModel):
    modelOrigin: str
    usage: Any = None


class ChatResponse(BaseModel):
    """Success body returned to the bookmarklet."""

    response: str
    model: str
    source: str = "openrouter_api"
    details: ChatResponseDetails


class ChatErrorResponse(BaseModel):
    error: str
    details: str | None = None
    message: str | None = None
