"""Error kinds reported by the HTTP handlers.

Every failure leaving a handler is a :class:`ServiceError` carrying one of
three kinds; the exception handlers registered by :func:`register_error_handlers`
turn it into ``{"error": <message>}`` with the matching status code.
"""

from __future__ import annotations

import enum
from contextlib import contextmanager
from typing import Iterator

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import DBAPIError, SQLAlchemyError

from persons.logging import get_logger

logger = get_logger(__file__)


class ErrorKind(enum.Enum):
    CLIENT_ERROR = status.HTTP_400_BAD_REQUEST
    NOT_FOUND = status.HTTP_404_NOT_FOUND
    BACKEND_FAILURE = status.HTTP_500_INTERNAL_SERVER_ERROR

    @property
    def status_code(self) -> int:
        return self.value


class ServiceError(Exception):
    def __init__(self, kind: ErrorKind, message: str):
        super().__init__(message)
        self.kind = kind
        self.message = message


def storage_message(exc: SQLAlchemyError) -> str:
    """Return the driver's message without SQLAlchemy's SQL/params suffix."""

    if isinstance(exc, DBAPIError) and exc.orig is not None:
        return str(exc.orig)
    return str(exc).split("\n", 1)[0]


@contextmanager
def storage_errors(kind: ErrorKind) -> Iterator[None]:
    """Re-raise storage and input errors inside the block as ``ServiceError(kind)``."""

    try:
        yield
    except SQLAlchemyError as exc:
        raise ServiceError(kind, storage_message(exc)) from exc
    except ValueError as exc:
        raise ServiceError(ErrorKind.CLIENT_ERROR, str(exc)) from exc


def _validation_message(exc: RequestValidationError) -> str:
    parts = []
    for error in exc.errors():
        loc = ".".join(str(p) for p in error.get("loc", ()) if p != "body")
        msg = error.get("msg", "invalid value")
        parts.append(f"{loc}: {msg}" if loc else msg)
    return "; ".join(parts) or "invalid request"


async def service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
    if exc.kind is ErrorKind.BACKEND_FAILURE:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    else:
        logger.warning("%s %s -> %d: %s", request.method, request.url.path, exc.kind.status_code, exc.message)
    return JSONResponse(status_code=exc.kind.status_code, content={"error": exc.message})


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return await service_error_handler(
        request, ServiceError(ErrorKind.CLIENT_ERROR, _validation_message(exc))
    )


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ServiceError, service_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
