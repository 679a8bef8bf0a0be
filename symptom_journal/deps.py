"""FastAPI dependencies wiring explicitly constructed clients into routes."""

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from symptom_journal.config import Settings
from symptom_journal.db.session import get_db
from symptom_journal.services.entry_store import EntryStore
from symptom_journal.services.gemini import GeminiClient


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_entry_store(
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> EntryStore:
    """Entry store bound to the demo user."""
    return EntryStore(db, user_id=settings.demo_user_id)


def get_ai_client(request: Request) -> GeminiClient:
    return request.app.state.ai_client
