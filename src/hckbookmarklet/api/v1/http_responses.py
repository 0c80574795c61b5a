# Copyright (C) 2026 StableLlama
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.

"""Defines the http responses unit so this responsibility stays isolated, testable, and easy to evolve.

The bookmarklet runs inside arbitrary third-party pages, so every chat
response carries wildcard CORS headers.
"""

from fastapi.responses import JSONResponse, Response

CORS_HEADERS: dict[str, str] = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, POST, PUT, DELETE, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type, Authorization",
    "Access-Control-Max-Age": "86400",
}


def cors_headers() -> dict[str, str]:
    return dict(CORS_HEADERS)


def ok_json(content: object, status_code: int = 200) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=content, headers=cors_headers())


def error_json(error: str, status_code: int = 400, **extra: object) -> JSONResponse:
    body: dict[str, object] = {"error": error}
    body.update({k: v for k, v in extra.items() if v is not None})
    return JSONResponse(status_code=status_code, content=body, headers=cors_headers())


def preflight_response() -> Response:
    return Response(status_code=200, headers=cors_headers())
