"""Exception handlers mapping service errors onto HTTP responses."""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from core.exceptions import ConfigurationError

logger = logging.getLogger(__name__)


def register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(ConfigurationError)
    async def handle_configuration_error(request: Request, exc: ConfigurationError):
        logger.error(f"Configuration error on {request.url.path}: {exc.message}")
        return JSONResponse(
            status_code=503,
            content={
                "detail": "Service is not configured",
                "error": type(exc).__name__,
                "message": exc.message,
                "path": request.url.path,
            },
        )
