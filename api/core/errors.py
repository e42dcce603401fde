"""
Store error kinds and their HTTP mapping.

Repositories raise these; `install_exception_handlers` turns every failure
into a `{"error": message}` body with a status code that matches the kind.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException

logger = logging.getLogger(__name__)


class StoreError(RuntimeError):
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR


class NotFoundError(StoreError):
    status_code = status.HTTP_404_NOT_FOUND


class ConflictError(StoreError):
    status_code = status.HTTP_409_CONFLICT


class AlreadyLikedError(ConflictError):
    pass


class NotLikedError(ConflictError):
    pass


class FetchFailedError(StoreError):
    pass


def error_body(message: str) -> dict[str, str]:
    return {"error": message}


async def _store_error_handler(_: Request, exc: StoreError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=error_body(str(exc)))


async def _http_error_handler(_: Request, exc: HTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(str(exc.detail)),
        headers=exc.headers,
    )


async def _database_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.exception("database_error method=%s path=%s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_body("Database error."),
    )


def install_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StoreError, _store_error_handler)
    app.add_exception_handler(HTTPException, _http_error_handler)
    app.add_exception_handler(SQLAlchemyError, _database_error_handler)
