import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

TRACE_ID_CTX_VAR: ContextVar[str] = ContextVar("trace_id", default="")


class TracingMiddleware(BaseHTTPMiddleware):
    """
    Tags every request with a trace id, exposes it to log records and error
    envelopes through a context variable and echoes it in ``x-trace-id``.
    """
    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        trace_id = request.headers.get("x-trace-id") or str(uuid.uuid4())
        TRACE_ID_CTX_VAR.set(trace_id)
        request.state.trace_id = trace_id

        response = await call_next(request)

        response.headers["x-trace-id"] = trace_id
        return response
