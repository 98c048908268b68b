"""Typed errors raised by the services and their HTTP mapping."""
import logging
from typing import Dict, List, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)

FieldErrors = Dict[str, List[str]]


class FeedbackBoardError(Exception):
    """Base exception for the feedback board."""

    def __init__(self, code: str, message: str, errors: Optional[FieldErrors] = None, status_code: int = 500):
        self.code = code
        self.message = message
        self.errors = errors
        self.status_code = status_code
        super().__init__(message)


class ValidationError(FeedbackBoardError):
    """Malformed input, reported per field."""

    def __init__(self, message: str = "Validation failed", errors: Optional[FieldErrors] = None):
        super().__init__("VALIDATION_ERROR", message, errors, status_code=422)

    @classmethod
    def for_field(cls, field: str, message: str) -> "ValidationError":
        return cls(message, {field: [message]})


class NotFoundError(FeedbackBoardError):
    """Referenced entity is absent."""

    def __init__(self, resource: str, resource_id=None):
        message = f"{resource} not found" if resource_id is None else f"{resource} {resource_id} not found"
        super().__init__("NOT_FOUND", message, status_code=404)


class AuthenticationError(FeedbackBoardError):
    """Missing, unknown or expired bearer token."""

    def __init__(self, message: str = "Unauthenticated."):
        super().__init__("AUTHENTICATION_ERROR", message, status_code=401)


class AuthorizationError(FeedbackBoardError):
    """Authenticated but not permitted."""

    def __init__(self, message: str = "Unauthorized"):
        super().__init__("AUTHORIZATION_ERROR", message, status_code=403)


class ConflictError(FeedbackBoardError):
    """Reserved for uniqueness violations."""

    def __init__(self, message: str):
        super().__init__("CONFLICT", message, status_code=409)


def _error_body(message: str, errors: Optional[FieldErrors] = None) -> dict:
    body = {"message": message}
    if errors:
        body["errors"] = errors
    return body


def _field_name(loc) -> str:
    parts = [str(part) for part in loc if part not in ("body", "query", "path")]
    return ".".join(parts) or "request"


def register_exception_handlers(app: FastAPI) -> None:
    """Map typed errors and request validation failures to JSON responses."""

    @app.exception_handler(FeedbackBoardError)
    async def feedback_board_error_handler(request: Request, exc: FeedbackBoardError):
        if isinstance(exc, AuthorizationError):
            logger.warning(
                "access denied on %s %s: %s",
                request.method,
                request.url.path,
                exc.message,
            )
        return JSONResponse(status_code=exc.status_code, content=_error_body(exc.message, exc.errors))

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        errors: FieldErrors = {}
        for error in exc.errors():
            errors.setdefault(_field_name(error.get("loc", ())), []).append(error.get("msg", "Invalid value"))
        return JSONResponse(status_code=422, content=_error_body("Validation failed", errors))
