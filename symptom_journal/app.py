# --- imports (top of symptom_journal/app.py) ---
import json
import logging
from datetime import datetime
from typing import Optional

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException as StarletteHTTPException

from symptom_journal.config import Settings
from symptom_journal.db.session import build_engine, build_session_factory
from symptom_journal.middleware.tracing import TRACE_ID_CTX_VAR, TracingMiddleware
from symptom_journal.models import init_db
from symptom_journal.routes import analyze_routes, entries_routes
from symptom_journal.services.gemini import GeminiClient
from symptom_journal.utils.exceptions import (
    JournalError,
    handle_http_exception,
    handle_request_validation_error,
    handle_journal_error,
    handle_unhandled_exception,
)
from symptom_journal.utils.rate_limit import limiter, rate_limit_handler


# --- logging setup ---
class JsonFormatter(logging.Formatter):
    def format(self, record):  # type: ignore[override]
        payload = {
            "timestamp": datetime.utcnow().isoformat(timespec="seconds") + "Z",
            "level": record.levelname,
            "function": record.funcName,
            "trace_id": TRACE_ID_CTX_VAR.get() or None,
        }
        if isinstance(record.msg, dict):
            payload.update(record.msg)
        else:
            payload["message"] = record.getMessage()
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False, default=str)


def configure_logging() -> logging.Logger:
    logger = logging.getLogger("symptom_journal")
    logger.setLevel(logging.INFO)
    if not any(isinstance(h, logging.StreamHandler) for h in logger.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(JsonFormatter())
        logger.addHandler(handler)
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("uvicorn").setLevel(logging.INFO)
    return logger


logger = configure_logging()


def create_app(
    settings: Optional[Settings] = None,
    ai_client: Optional[GeminiClient] = None,
    session_factory=None,
) -> FastAPI:
    """Build the app with explicitly constructed clients.

    Anything not passed in is built from ``settings`` (itself read from the
    environment when omitted), so missing configuration fails here.
    """
    settings = settings or Settings.from_env()
    if session_factory is None:
        engine = build_engine(settings.database_url, settings.database_key, echo=settings.sql_echo)
        session_factory = build_session_factory(engine)
    ai_client = ai_client or GeminiClient.from_settings(settings)

    app = FastAPI(title="Symptom Journal", version="0.1.0")
    app.state.settings = settings
    app.state.session_factory = session_factory
    app.state.ai_client = ai_client
    app.state.limiter = limiter

    @app.on_event("startup")
    def _init_db():
        init_db(session_factory.kw["bind"])
        logger.info({"function": "startup", "model": getattr(ai_client, "model", None), "user_id": settings.demo_user_id})

    app.add_middleware(TracingMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(RateLimitExceeded, rate_limit_handler)
    app.add_exception_handler(JournalError, handle_journal_error)
    app.add_exception_handler(StarletteHTTPException, handle_http_exception)
    app.add_exception_handler(RequestValidationError, handle_request_validation_error)
    app.add_exception_handler(Exception, handle_unhandled_exception)

    app.include_router(entries_routes.router)
    app.include_router(analyze_routes.router)

    @app.get("/healthz")
    def healthz():
        return {"status": "ok"}

    return app
