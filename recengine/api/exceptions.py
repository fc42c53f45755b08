"""HTTP error mapping for the RecEngine API.

Engine exceptions carry a message and details; this module decides which
HTTP status each one maps to and renders them as JSON.
"""

import logging
from typing import Dict, Type

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from recengine.recommender.errors import (
    DuplicateItemError,
    EmptyCatalogError,
    EngineNotReadyError,
    InvalidInteractionTypeError,
    InvalidModeError,
    NoCategoriesError,
    RecEngineError,
    UnknownItemError,
    UnknownUserError,
)

logger = logging.getLogger(__name__)

STATUS_CODES: Dict[Type[RecEngineError], int] = {
    UnknownItemError: status.HTTP_404_NOT_FOUND,
    UnknownUserError: status.HTTP_404_NOT_FOUND,
    InvalidInteractionTypeError: status.HTTP_400_BAD_REQUEST,
    InvalidModeError: status.HTTP_400_BAD_REQUEST,
    NoCategoriesError: status.HTTP_400_BAD_REQUEST,
    EmptyCatalogError: status.HTTP_422_UNPROCESSABLE_ENTITY,
    DuplicateItemError: status.HTTP_422_UNPROCESSABLE_ENTITY,
    EngineNotReadyError: status.HTTP_503_SERVICE_UNAVAILABLE,
}


def status_code_for(exc: RecEngineError) -> int:
    """HTTP status for an engine exception (500 if unmapped)."""
    for exc_type in type(exc).__mro__:
        if exc_type in STATUS_CODES:
            return STATUS_CODES[exc_type]
    return status.HTTP_500_INTERNAL_SERVER_ERROR


async def recengine_exception_handler(request: Request, exc: RecEngineError) -> JSONResponse:
    status_code = status_code_for(exc)
    log = logger.error if status_code >= 500 else logger.warning
    log(
        "Request rejected by engine",
        extra={
            "path": str(request.url.path),
            "status_code": status_code,
            "error_type": type(exc).__name__,
            "error": exc.message,
        },
    )
    return JSONResponse(
        status_code=status_code,
        content={
            "error": type(exc).__name__,
            "message": exc.message,
            "details": exc.details,
        },
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(RecEngineError, recengine_exception_handler)
