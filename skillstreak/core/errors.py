"""
Error types and FastAPI handlers.

Every error response has the same body:
    {"success": false, "error": {"code", "message", "request_id"}, "detail": message}
and echoes the request id in the x-request-id header.
"""

import logging
from typing import Dict, Optional
from uuid import uuid4

from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException
from starlette.requests import Request

from skillstreak.core.logging import get_request_id

logger = logging.getLogger("skillstreak")


class AppError(Exception):
    code = "app_error"
    status_code = 500

    def __init__(self, message: str, *, code: Optional[str] = None, status_code: Optional[int] = None, request_id: Optional[str] = None):
        super().__init__(message)
        self.message = message
        if code:
            self.code = code
        if status_code:
            self.status_code = status_code
        self.request_id = request_id

    def headers(self) -> Dict[str, str]:
        return {}


class ValidationError(AppError, ValueError):
    code = "validation_error"
    status_code = 400


class NotFoundError(AppError, LookupError):
    code = "not_found"
    status_code = 404


class RateLimitError(AppError):
    code = "rate_limited"
    status_code = 429

    def __init__(self, message: str, *, retry_after_s: int = 60, **kwargs):
        super().__init__(message, **kwargs)
        self.retry_after_s = retry_after_s

    def headers(self) -> Dict[str, str]:
        return {"Retry-After": str(self.retry_after_s)}


def _extract_request_id(request: Request, fallback: Optional[str] = None) -> str:
    return (
        getattr(request.state, "request_id", None)
        or get_request_id()
        or fallback
        or str(uuid4())
    )


def _error_response(
    rid: str,
    status_code: int,
    code: str,
    message: str,
    headers: Optional[Dict[str, str]] = None,
) -> JSONResponse:
    payload = {
        "success": False,
        "error": {"code": code, "message": message, "request_id": rid},
        "detail": message,
    }
    response = JSONResponse(status_code=status_code, content=payload, headers=headers)
    response.headers["x-request-id"] = rid
    return response


async def app_error_handler(request: Request, exc: AppError):
    rid = exc.request_id or _extract_request_id(request)
    logger.log(
        logging.ERROR if exc.status_code >= 500 else logging.WARNING,
        "app.error",
        extra={"request_id": rid, "error_code": exc.code, "status": exc.status_code, "reason": exc.message},
    )
    return _error_response(rid, exc.status_code, exc.code, exc.message, exc.headers())


async def http_error_handler(request: Request, exc: HTTPException):
    rid = _extract_request_id(request)
    code = "not_found" if exc.status_code == 404 else "http_error"
    message = str(exc.detail) if exc.detail else "HTTP error"
    logger.warning("http.error", extra={"request_id": rid, "error_code": code, "status": exc.status_code})
    return _error_response(rid, exc.status_code, code, message, getattr(exc, "headers", None))


def _describe_validation_errors(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    first = errors[0]
    location = ".".join(str(part) for part in first.get("loc", ()) if part not in ("body", "query", "path"))
    text = first.get("msg", "invalid value")
    return f"{location}: {text}" if location else text


async def request_validation_handler(request: Request, exc: RequestValidationError):
    """Malformed request bodies and query params share the validation_error contract."""
    rid = _extract_request_id(request)
    message = _describe_validation_errors(exc)
    logger.warning("request.invalid", extra={"request_id": rid, "error_code": "validation_error", "status": 400, "reason": message})
    return _error_response(rid, 400, "validation_error", message)


async def unhandled_exception_handler(request: Request, exc: Exception):
    rid = _extract_request_id(request)
    logger.error("unhandled.exception", exc_info=exc, extra={"request_id": rid, "error_code": "internal_error", "status": 500})
    return _error_response(rid, 500, "internal_error", "Unexpected error")
