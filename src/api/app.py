#!/usr/bin/env python3
"""
HTTP application factory.

Every response is a JSON envelope: ``{"success": true, "data": ...}`` on
success and ``{"success": false, "error": ...}`` on failure.
"""

import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from core.container import Container, get_container
from core.exceptions import DemocracyLensError, RateLimitError, ErrorClassifier, MISSING_FIELDS

from api.routes import router

logger = logging.getLogger(__name__)

RATE_LIMIT_MESSAGE = "Too many requests. Please try again later."


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "error": message})


def create_app(container: Optional[Container] = None) -> FastAPI:
    """
    Build the FastAPI app around a dependency container.

    Args:
        container: Wired container; the process-wide one when omitted
    """
    container = container or get_container()
    config = container.get('config')

    app = FastAPI(title="Democracy Lens API")
    app.state.container = container

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[config.app.frontend_origin],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(RateLimitError)
    async def handle_rate_limit(request: Request, exc: RateLimitError):
        logger.warning(f"{request.method} {request.url.path} rate limited: {exc.message}")
        return _error(429, RATE_LIMIT_MESSAGE)

    @app.exception_handler(DemocracyLensError)
    async def handle_app_error(request: Request, exc: DemocracyLensError):
        status_code = ErrorClassifier.status_code(exc)
        if status_code >= 500:
            logger.error(f"{request.method} {request.url.path} failed: {exc.to_dict()}")
        else:
            logger.info(f"{request.method} {request.url.path} rejected ({status_code}): {exc.message}")
        return _error(status_code, exc.message)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        in_query = any(err.get('loc', ('',))[0] == 'query' for err in exc.errors())
        message = "Missing required parameters" if in_query else MISSING_FIELDS
        logger.info(f"{request.method} {request.url.path} invalid request: {exc.errors()}")
        return _error(400, message)

    @app.exception_handler(Exception)
    async def handle_unexpected(request: Request, exc: Exception):
        logger.exception(f"Unhandled error on {request.method} {request.url.path}")
        return _error(500, "Internal server error")

    app.include_router(router)
    return app
