# complaints/core/errors.py
"""Error taxonomy shared by every service module.

Services raise these; ``register_exception_handlers`` turns them into
HTTP responses so routes never build error payloads by hand.
"""
import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

logger = logging.getLogger(__name__)


class AppError(Exception):
    status_code = 500

    def __init__(self, message: str, field: str | None = None):
        super().__init__(message)
        self.message = message
        self.field = field


class ValidationError(AppError):
    status_code = 422


class NotFoundError(AppError):
    status_code = 404


class ForbiddenError(AppError):
    status_code = 403


class UnauthenticatedError(AppError):
    status_code = 401


class ConflictError(AppError):
    status_code = 409


class StoreError(AppError):
    status_code = 500


def _app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    body: dict = {"detail": exc.message}
    if isinstance(exc, ValidationError):
        body["errors"] = [{"field": exc.field, "message": exc.message}]
    headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, UnauthenticatedError) else None
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content=body, headers=headers)


def _store_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.exception("Store failure on %s %s", request.method, request.url.path)
    return _app_error_handler(request, StoreError("Internal server error"))


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppError, _app_error_handler)
    app.add_exception_handler(SQLAlchemyError, _store_error_handler)


__all__ = [
    "AppError",
    "ValidationError",
    "NotFoundError",
    "ForbiddenError",
    "UnauthenticatedError",
    "ConflictError",
    "StoreError",
    "register_exception_handlers",
]
