# Copyright (C) 2026 StableLlama
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.

"""Domain exception hierarchy for the service layer.

Purpose: Provide HTTP-agnostic domain exceptions that carry enough context for
the API layer (or a global exception handler) to translate them into the
bookmarklet's JSON error shape. Service code should raise these instead of
``HTTPException`` so that it stays decoupled from any web framework.
"""

from __future__ import annotations


class ServiceError(Exception):
    """Base domain exception that carries an HTTP-equivalent status code.

    ``error`` is the short, caller-facing summary. ``detail`` is optional
    secondary text rendered under ``detail_key`` in the response body.
    """

    default_status_code: int = 500
    default_error: str = "Internal server error"
    detail_key: str = "details"

    def __init__(
        self,
        detail: str | None = None,
        status_code: int | None = None,
        error: str | None = None,
    ):
        self.error = error or self.default_error
        super().__init__(detail or self.error)
        self.detail = detail
        self.status_code = (
            status_code if status_code is not None else self.default_status_code
        )

    def to_body(self) -> dict[str, str]:
        body = {"error": self.error}
        if self.detail is not None:
            body[self.detail_key] = self.detail
        return body


class InvalidInputError(ServiceError):
    """Raised when the inbound body violates the chat contract (HTTP 400)."""

    default_status_code = 400
    default_error = "Messages array is required and cannot be empty"


class UpstreamError(ServiceError):
    """Raised when the upstream API answers with a non-success status.

    The upstream status code is relayed to the caller unchanged.
    """

    default_status_code = 502
    default_error = "Failed to get response from AI model"


class MalformedUpstreamResponseError(ServiceError):
    """Raised when a successful upstream body has no ``choices[0].message``."""

    default_status_code = 500
    default_error = "Invalid response format from AI model"


class InternalServerError(ServiceError):
    """Raised for any other failure in the request pipeline (HTTP 500)."""

    default_status_code = 500
    default_error = "Internal server error"
    detail_key = "message"
