# src/common/errors.py

"""
Domain failures and their HTTP mapping.

Every domain failure is a single ForumError tagged with an ErrorKind; the
handlers below map each kind to one status code.
"""

import enum
import logging
from datetime import datetime, timezone
from http import HTTPStatus
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException

logger = logging.getLogger(__name__)

class ErrorKind(enum.Enum):
    INVALID_INPUT = "invalid_input"
    CONFLICT = "conflict"
    NOT_FOUND = "not_found"
    RULE_VIOLATION = "rule_violation"

STATUS_BY_KIND = {
    ErrorKind.INVALID_INPUT: status.HTTP_400_BAD_REQUEST,
    ErrorKind.CONFLICT: status.HTTP_400_BAD_REQUEST,
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.RULE_VIOLATION: status.HTTP_400_BAD_REQUEST,
}

class ForumError(Exception):
    """
    A caller-facing domain failure.

    `code` names the broken business rule for RULE_VIOLATION (e.g. "self-solution").
    """

    def __init__(self, kind: ErrorKind, message: str, code: Optional[str] = None):
        self.kind = kind
        self.message = message
        self.code = code
        super().__init__(message)

    def __repr__(self):
        return f"<ForumError(kind={self.kind.value}, code={self.code}, message={self.message})>"

def invalid_input(message: str) -> ForumError:
    return ForumError(ErrorKind.INVALID_INPUT, message)

def conflict(message: str) -> ForumError:
    return ForumError(ErrorKind.CONFLICT, message)

def not_found(message: str) -> ForumError:
    return ForumError(ErrorKind.NOT_FOUND, message)

def rule_violation(code: str, message: str) -> ForumError:
    return ForumError(ErrorKind.RULE_VIOLATION, message, code=code)

def error_body(code: int, message: str, path: str, kind: Optional[str] = None) -> dict:
    return {
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "status": code,
        "error": HTTPStatus(code).phrase,
        "kind": kind,
        "message": message,
        "path": path,
    }

async def forum_error_handler(request: Request, exc: ForumError) -> JSONResponse:
    code = STATUS_BY_KIND[exc.kind]
    logger.warning(f"{request.method} {request.url.path} -> {code} {exc.kind.value}: {exc.message}")
    body = error_body(code, exc.message, request.url.path, exc.kind.value)
    if exc.code:
        body["rule"] = exc.code
    return JSONResponse(status_code=code, content=body)

async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = []
    for error in exc.errors():
        # Drop the "body"/"query"/"path" prefix so only the field path remains.
        location = [str(part) for part in error.get("loc", ())[1:]]
        errors.append({"field": ".".join(location) or "body", "message": error.get("msg", "")})
    logger.warning(f"{request.method} {request.url.path} -> 400 validation: {errors}")
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=errors)

async def http_error_handler(request: Request, exc: HTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(exc.status_code, str(exc.detail), request.url.path),
        headers=getattr(exc, "headers", None),
    )

async def rate_limit_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    code = status.HTTP_429_TOO_MANY_REQUESTS
    logger.warning(f"{request.method} {request.url.path} -> {code} rate limit {exc.detail}")
    response = JSONResponse(
        status_code=code,
        content=error_body(code, f"Rate limit exceeded: {exc.detail}", request.url.path),
    )
    view_rate_limit = getattr(request.state, "view_rate_limit", None)
    if view_rate_limit is not None:
        response = request.app.state.limiter._inject_headers(response, view_rate_limit)
    return response

def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(RateLimitExceeded, rate_limit_handler)
    app.add_exception_handler(ForumError, forum_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(HTTPException, http_error_handler)
