# Copyright (C) 2026 StableLlama
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.

"""Defines the main unit so this responsibility stays isolated, testable, and easy to evolve.

Main application entry point for the HCK bookmarklet API server.
Includes error handling, router registration and the CLI launcher.
"""

from __future__ import annotations

import argparse
from typing import Optional
import os

from fastapi import FastAPI, APIRouter, Request
from fastapi.responses import JSONResponse

from hckbookmarklet.api.v1.http_responses import error_json
from hckbookmarklet.services.chat.model_mapping import list_supported_models
from hckbookmarklet.services.exceptions import ServiceError
from hckbookmarklet.services.llm.llm_logging import llm_debug_enabled

from hckbookmarklet.api.v1.chat import router as chat_router  # noqa: E402
from hckbookmarklet.api.v1.debug import router as debug_router  # noqa: E402

SERVICE_NAME = "HCK Bookmarklet API"


def service_info() -> dict:
    return {
        "name": SERVICE_NAME,
        "description": "API endpoint for the HCK Prova Paulista bookmarklet with OpenRouter integration",
        "endpoint": "POST /api/chat",
        "models": list_supported_models(),
        "features": [
            "Multiple AI models",
            "Image vision support",
            "CORS enabled",
            "Error handling",
        ],
    }


def create_app() -> FastAPI:
    """Create the FastAPI app.

    Uvicorn's reload mode requires an import string; using an app factory keeps
    route registration consistent across reload subprocesses.
    """

    app = FastAPI(title=SERVICE_NAME)

    api_v1_router = APIRouter(prefix="/api/v1")
    api_v1_router.include_router(chat_router)
    if llm_debug_enabled():
        api_v1_router.include_router(debug_router)
    api_v1_router.add_api_route(
        "/health", endpoint=lambda: {"status": "ok"}, methods=["GET"]
    )
    app.include_router(api_v1_router)

    # Path baked into deployed bookmarklets
    app.include_router(chat_router, prefix="/api", include_in_schema=False)

    app.add_api_route("/", endpoint=service_info, methods=["GET"])

    # --------------- global exception handler ---------------
    @app.exception_handler(ServiceError)
    async def _service_error_handler(
        _request: Request, exc: ServiceError
    ) -> JSONResponse:
        body = exc.to_body()
        return error_json(body.pop("error"), status_code=exc.status_code, **body)

    return app


app = create_app()


def build_arg_parser() -> argparse.ArgumentParser:
    """Build Arg Parser."""
    parser = argparse.ArgumentParser(
        prog="hckbookmarklet",
        description="Run the HCK bookmarklet FastAPI server",
    )
    parser.add_argument(
        "--host", default="127.0.0.1", help="Host to bind (default: 127.0.0.1)"
    )
    parser.add_argument(
        "--port", type=int, default=8000, help="Port to bind (default: 8000)"
    )
    parser.add_argument(
        "--reload",
        action="store_true",
        help="Enable auto-reload (development only)",
    )
    parser.add_argument(
        "--workers",
        type=int,
        default=None,
        help="Number of worker processes (overrides reload)",
    )
    parser.add_argument(
        "--log-level",
        default="info",
        choices=["critical", "error", "warning", "info", "debug", "trace"],
        help="Log level for the server (default: info)",
    )
    parser.add_argument(
        "--llm-dump",
        action="store_true",
        help="Dump raw upstream request/response data to a file",
    )
    parser.add_argument(
        "--llm-dump-path",
        default=None,
        help="Path for raw LLM dump file (overrides default)",
    )
    parser.add_argument(
        "--llm-debug",
        action="store_true",
        help="Keep recent upstream exchanges in memory and expose /api/v1/debug/llm_logs",
    )
    return parser


def main(argv: Optional[list[str]] = None) -> None:
    """CLI entrypoint to run the server via a normal Python invocation.

    Examples:
      python -m hckbookmarklet.main --help
      python -m hckbookmarklet.main --host 0.0.0.0 --port 8000 --reload
    """
    parser = build_arg_parser()
    args = parser.parse_args(argv)

    if args.llm_dump:
        os.environ["HCK_LLM_DUMP"] = "1"
    if args.llm_dump_path:
        os.environ["HCK_LLM_DUMP_PATH"] = args.llm_dump_path
    if args.llm_debug:
        os.environ["HCK_LLM_DEBUG"] = "1"

    # Import uvicorn lazily so that importing this module doesn't require it for tests/tools
    import uvicorn  # type: ignore

    use_import_string = bool(args.reload) or (
        isinstance(args.workers, int) and args.workers > 1
    )
    if use_import_string:
        app_target = "hckbookmarklet.main:create_app"
        factory = True
    else:
        # The module-level app was built before the flags above were read
        app_target = create_app() if args.llm_debug else app
        factory = False

    uvicorn.run(
        app_target,
        host=args.host,
        port=args.port,
        reload=bool(args.reload) if args.workers in (None, 0) else False,
        workers=args.workers,
        log_level=args.log_level,
        factory=factory,
    )


if __name__ == "__main__":
    main()
