"""Error Handlers — global exception handlers for the community REST API.

Invariants:
    - CommunityError → {code, message, data.status} with the error's HTTP status
    - RequestValidationError → 400 rest_invalid_param with field-level details
    - Exception (catch-all) → 500, never leaks internal details
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from community_rest.core.errors import CommunityError, ErrorSeverity

logger = logging.getLogger(__name__)


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""
    _register_community_error_handler(app)
    _register_validation_error_handler(app)
    _register_generic_error_handler(app)


def _register_community_error_handler(app: FastAPI) -> None:

    @app.exception_handler(CommunityError)
    async def community_error_handler(request: Request, exc: CommunityError):
        """Handle all domain/infrastructure errors."""
        log = logger.error if exc.http_status >= 500 and exc.http_status != 501 else logger.info
        log(
            f"{type(exc).__name__}: {exc.message}",
            extra={
                "error_code": exc.code, "path": request.url.path,
                "method": request.method,
            },
        )
        headers = {"WWW-Authenticate": "Basic"} if exc.http_status == 401 else None
        return JSONResponse(
            status_code=exc.http_status, content=exc.to_response(), headers=headers,
        )


def _register_validation_error_handler(app: FastAPI) -> None:

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError,
    ):
        logger.warning(
            f"Validation error on {request.url.path}: {exc.errors()}",
        )
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=_build_validation_error_response(exc),
        )


def _register_generic_error_handler(app: FastAPI) -> None:

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception):
        """Catch-all — never leaks internal details."""
        logger.error(
            f"Unhandled exception on {request.url.path}: {exc}",
            exc_info=True,
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "code": "rest_internal_error",
                "message": "An unexpected error occurred",
                "data": {
                    "status": 500,
                    "category": "internal",
                    "severity": ErrorSeverity.CRITICAL.value,
                },
            },
        )


def _build_validation_error_response(exc: RequestValidationError) -> dict:
    details = [
        {
            "field": ".".join(str(loc) for loc in e["loc"]),
            "message": e["msg"],
            "type": e["type"],
        }
        for e in exc.errors()
    ]
    params = {d["field"].split(".")[-1]: d["message"] for d in details}
    return {
        "code": "rest_invalid_param",
        "message": f"Invalid parameter(s): {', '.join(params)}",
        "data": {
            "status": 400,
            "category": "validation",
            "severity": ErrorSeverity.ERROR.value,
            "params": params,
            "details": details,
        },
    }
