"""FastAPI application factory for the ECS alert relay.

Usage::

    from ecsrelay.api.app import create_app

    app = create_app(relay=relay, config=config)

The factory is used by both the production bootstrap (``ecsrelay.app``) and
unit tests.
"""

from __future__ import annotations

from typing import Any

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from prometheus_client import make_asgi_app

from ecsrelay.api.routes import router
from ecsrelay.api.schemas import ErrorResponse
from ecsrelay.pipeline.normalizer import MalformedPayloadError

_log = structlog.get_logger(component="api.app")

_API_PREFIX = "/api/v1"


def create_app(relay: Any, config: Any = None) -> FastAPI:
    """Create and configure the relay FastAPI application.

    Args:
        relay:  AlertRelay instance that processes posted events.
        config: RelayConfig, kept on ``app.state`` for handlers.

    Returns:
        Configured FastAPI application, ready to be served by uvicorn.
    """
    from ecsrelay import __version__

    app = FastAPI(
        title="ecsrelay",
        summary="ECS failure alert relay",
        version=__version__,
        docs_url="/api/v1/docs",
        redoc_url=None,
        openapi_url="/api/v1/openapi.json",
    )

    app.state.relay = relay
    app.state.config = config

    app.include_router(router, prefix=_API_PREFIX)
    app.mount("/metrics", make_asgi_app())

    # -----------------------------------------------------------------------
    # Exception handlers
    # -----------------------------------------------------------------------

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        _request: Request,
        exc: RequestValidationError,
    ) -> JSONResponse:
        """The request body is not a JSON object."""
        errors = exc.errors()
        first_msg = str(errors[0].get("msg", "")) if errors else ""
        return JSONResponse(
            status_code=400,
            content=ErrorResponse(error="INVALID_EVENT", detail=first_msg).model_dump(),
        )

    @app.exception_handler(MalformedPayloadError)
    async def malformed_payload_handler(
        _request: Request,
        exc: MalformedPayloadError,
    ) -> JSONResponse:
        return JSONResponse(
            status_code=422,
            content=ErrorResponse(error="MALFORMED_PAYLOAD", detail=str(exc)).model_dump(),
        )

    @app.exception_handler(Exception)
    async def generic_exception_handler(
        request: Request,
        exc: Exception,
    ) -> JSONResponse:
        """Catch-all for unhandled exceptions; never expose stack traces."""
        _log.error(
            "unhandled_exception",
            path=str(request.url.path),
            method=request.method,
            error=str(exc),
        )
        return JSONResponse(
            status_code=500,
            content=ErrorResponse(
                error="INTERNAL_ERROR",
                detail="An unexpected error occurred.",
            ).model_dump(),
        )

    return app
