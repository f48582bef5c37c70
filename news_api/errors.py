"""
Error mapping — the single place that turns exceptions into HTTP responses.

Every exception that escapes a request handler is passed through a fixed
chain of stages.  A stage either returns a ``JSONResponse`` (handled) or
``None`` (pass-through); the first response wins and no later stage runs.

1. Database errors: the driver rejected caller input (SQLSTATE class 22
   or 23) or the request parser did -> 400 "Bad Request".
2. Domain errors: ``ApiError`` raised by the service layer, or a routing
   ``HTTPException`` -> its own status and message.
3. Fallback: anything else -> 500 "server error".

All error bodies are flat ``{"msg": str}``.
"""
import logging
from typing import Callable

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import DBAPIError, DataError, IntegrityError
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)

BAD_REQUEST = "Bad Request"
ARTICLE_NOT_FOUND = "Article id not found"
SERVER_ERROR = "server error"


class ApiError(Exception):
    """A domain failure carrying the HTTP status and message to report."""

    def __init__(self, status: int, msg: str) -> None:
        super().__init__(msg)
        self.status = status
        self.msg = msg

    def __repr__(self) -> str:
        return f"ApiError(status={self.status!r}, msg={self.msg!r})"


def _error_response(status: int, msg: str) -> JSONResponse:
    return JSONResponse(status_code=status, content={"msg": msg})


# ---------------------------------------------------------------------------
# Stages
# ---------------------------------------------------------------------------

# SQLSTATE classes raised for bad caller input: 22 data exception,
# 23 integrity constraint violation.
INPUT_ERROR_SQLSTATE_CLASSES: frozenset[str] = frozenset({"22", "23"})


def _driver_sqlstate(exc: DBAPIError) -> str:
    orig = exc.orig
    code = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)
    return code if isinstance(code, str) else ""


def database_error_stage(exc: Exception) -> JSONResponse | None:
    if isinstance(exc, (DataError, IntegrityError)) or (
        isinstance(exc, DBAPIError) and _driver_sqlstate(exc)[:2] in INPUT_ERROR_SQLSTATE_CLASSES
    ):
        logger.warning("Database rejected input: %s", getattr(exc, "orig", exc))
        return _error_response(400, BAD_REQUEST)
    if isinstance(exc, RequestValidationError):
        logger.debug("Request validation failed: %s", exc.errors())
        return _error_response(400, BAD_REQUEST)
    return None


def domain_error_stage(exc: Exception) -> JSONResponse | None:
    if isinstance(exc, ApiError):
        return _error_response(exc.status, exc.msg)
    # Routing failures (unknown path, wrong method) carry their own status.
    if isinstance(exc, StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content={"msg": exc.detail},
            headers=getattr(exc, "headers", None),
        )
    return None


def fallback_stage(exc: Exception) -> JSONResponse | None:
    logger.exception("Unhandled error", exc_info=exc)
    return _error_response(500, SERVER_ERROR)


ERROR_STAGES: tuple[Callable[[Exception], JSONResponse | None], ...] = (
    database_error_stage,
    domain_error_stage,
    fallback_stage,
)


def map_error(exc: Exception) -> JSONResponse:
    """Run *exc* through the stage chain and return the first response."""
    for stage in ERROR_STAGES:
        response = stage(exc)
        if response is not None:
            return response
    # fallback_stage always answers; keep the type checker honest.
    return _error_response(500, SERVER_ERROR)


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """FastAPI handler so path/body parsing failures share the same chain."""
    return map_error(exc)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Give routing 404/405 responses the same flat ``{"msg": ...}`` body."""
    return map_error(exc)
