from typing import Any, Optional
from fastapi import Request, HTTPException, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from symptom_journal.middleware.tracing import TRACE_ID_CTX_VAR


class JournalError(Exception):
    """Base error whose ``message`` is safe to show to the user."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Something went wrong"

    def __init__(self, message: Optional[str] = None, **extra: Any):
        self.message = message or self.default_message
        # merged into the error envelope
        self.extra = extra
        super().__init__(self.message)


class ConfigError(JournalError):
    default_message = "Invalid configuration"


class EntryValidationError(JournalError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid entry"


class StoreError(JournalError):
    default_message = "Failed to load entries"


class AIServiceError(JournalError):
    default_message = "AI service unavailable"


class AnalysisError(JournalError):
    default_message = "Failed to analyze symptoms"


class AnalysisParseError(JournalError):
    """Raised by the strict interpreter; ``kind`` is no_json, invalid_json or schema_mismatch."""

    default_message = "AI response did not match the analysis schema"

    def __init__(self, kind: str, message: Optional[str] = None):
        self.kind = kind
        super().__init__(message)


def status_to_code(status_code: int) -> str:
    mapping = {
        400: "BAD_REQUEST",
        401: "UNAUTHORIZED",
        403: "FORBIDDEN",
        404: "NOT_FOUND",
        405: "METHOD_NOT_ALLOWED",
        413: "PAYLOAD_TOO_LARGE",
        415: "UNSUPPORTED_MEDIA_TYPE",
        422: "UNPROCESSABLE_ENTITY",
        429: "TOO_MANY_REQUESTS",
        500: "INTERNAL_SERVER_ERROR",
        502: "BAD_GATEWAY",
    }
    return mapping.get(status_code, f"HTTP_{status_code}")


def error_body(status_code: int, message: str, **extra: Any) -> dict:
    body = {
        "error": message,
        "code": status_to_code(status_code),
        "message": message,
        "trace_id": TRACE_ID_CTX_VAR.get(),
    }
    body.update(extra)
    return body


async def handle_journal_error(request: Request, exc: JournalError):
    return JSONResponse(status_code=exc.status_code, content=error_body(exc.status_code, exc.message, **exc.extra))


async def handle_http_exception(request: Request, exc: HTTPException):
    detail: Any = exc.detail
    message = detail if isinstance(detail, str) else "HTTP error"
    body = error_body(exc.status_code, message)
    if detail is not None:
        body["details"] = detail
    return JSONResponse(status_code=exc.status_code, content=body, headers=getattr(exc, "headers", None))


async def handle_request_validation_error(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    first = errors[0] if errors else {}
    field = ".".join(str(p) for p in first.get("loc", ()) if p != "body")
    message = f"{field}: {first.get('msg')}" if field else str(first.get("msg") or "Invalid request")
    body = error_body(status.HTTP_422_UNPROCESSABLE_ENTITY, message, details=jsonable_encoder(errors))
    return JSONResponse(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, content=body)


async def handle_unhandled_exception(request: Request, exc: Exception):
    body = error_body(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "An unexpected error occurred",
        details=str(exc),
    )
    return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=body)
