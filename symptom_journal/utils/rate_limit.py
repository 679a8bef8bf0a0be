import logging
import math
import time
from contextvars import ContextVar

from fastapi import Request
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address

from symptom_journal.config import DEFAULT_ANALYZE_RATE_LIMIT
from symptom_journal.utils.exceptions import error_body

logger = logging.getLogger("symptom_journal")

# Limit string of the app serving the current request; bound by bind_ai_rate_limit.
AI_RATE_LIMIT_CTX_VAR: ContextVar[str] = ContextVar("ai_rate_limit", default=DEFAULT_ANALYZE_RATE_LIMIT)

limiter = Limiter(key_func=get_remote_address, default_limits=[])


def ai_rate_limit() -> str:
    return AI_RATE_LIMIT_CTX_VAR.get()


async def bind_ai_rate_limit(request: Request) -> None:
    """Route dependency: expose ``settings.analyze_rate_limit`` to the limiter decorator."""
    AI_RATE_LIMIT_CTX_VAR.set(request.app.state.settings.analyze_rate_limit)


def retry_after_seconds(request: Request, exc: RateLimitExceeded) -> int:
    """Seconds until the exceeded window resets, never less than 1."""
    view_limit = getattr(request.state, "view_rate_limit", None)
    if view_limit is not None:
        item, keys = view_limit
        reset_time = limiter.limiter.get_window_stats(item, *keys)[0]
        return max(1, math.ceil(reset_time - time.time()))
    return max(1, exc.limit.limit.get_expiry())


async def rate_limit_handler(request: Request, exc: RateLimitExceeded):
    retry_after = retry_after_seconds(request, exc)
    logger.info({
        "function": "rate_limit",
        "path": str(request.url.path),
        "client": get_remote_address(request),
        "retry_after": retry_after,
    })
    return JSONResponse(
        status_code=429,
        headers={"Retry-After": str(retry_after)},
        content=error_body(429, "Too many requests. Please wait a bit and try again."),
    )
