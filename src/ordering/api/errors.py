"""Translate domain exceptions into HTTP responses.

Every failure body has the shape ``{"error": <message or {field: [messages]}>}``.
"""

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from protean.exceptions import ExpectedVersionError, ObjectNotFoundError, ValidationError
from protean.integrations.fastapi import register_exception_handlers

from ordering.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    PaymentFailure,
    RoleConflictError,
    ServerError,
)

# Most specific first: RoleConflictError must win over ConflictError
STATUS_CODES = [
    (RoleConflictError, 403),
    (AuthenticationError, 401),
    (AuthorizationError, 403),
    (ConflictError, 409),
    (ExpectedVersionError, 409),
    (PaymentFailure, 502),
    (ServerError, 503),
    (ValidationError, 400),
    (ObjectNotFoundError, 404),
]


def status_code_for(exc: Exception) -> int:
    for exc_type, status_code in STATUS_CODES:
        if isinstance(exc, exc_type):
            return status_code
    return 500


def _messages(exc: Exception):
    messages = getattr(exc, "messages", None)
    return messages if messages else str(exc)


async def _domain_error(request: Request, exc: Exception) -> JSONResponse:  # noqa: ARG001
    status_code = status_code_for(exc)
    headers = {"WWW-Authenticate": "Bearer"} if status_code == 401 else None
    return JSONResponse(status_code=status_code, content={"error": _messages(exc)}, headers=headers)


async def _request_error(request: Request, exc: RequestValidationError) -> JSONResponse:  # noqa: ARG001
    messages: dict[str, list[str]] = {}
    for error in exc.errors():
        field = ".".join(str(part) for part in error.get("loc", ()) if part != "body") or "_entity"
        messages.setdefault(field, []).append(error.get("msg", "Invalid value"))
    return JSONResponse(status_code=400, content={"error": messages})


def register_error_handlers(app: FastAPI) -> None:
    """Install Protean's handlers, then the ordering mapping on top."""
    register_exception_handlers(app)
    for exc_type, _ in STATUS_CODES:
        app.add_exception_handler(exc_type, _domain_error)
    app.add_exception_handler(RequestValidationError, _request_error)
