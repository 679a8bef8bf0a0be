import os
import sys
import uuid
from datetime import date
from pathlib import Path

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

# Required configuration for anything that reads the environment
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("DATABASE_KEY", "test-store-key")
os.environ.setdefault("GEMINI_API_KEY", "test-gemini-key")

# Ensure the project root is on sys.path so `import symptom_journal` works when
# running pytest from the repository root without an editable install.
ROOT_DIR = Path(__file__).resolve().parents[2]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from symptom_journal.app import create_app
from symptom_journal.config import Settings
from symptom_journal.db.session import Base
from symptom_journal.schemas.entries import SymptomEntryOut
from symptom_journal.services.entry_store import EntryStore
from symptom_journal.utils.exceptions import AIServiceError
from symptom_journal.utils.rate_limit import limiter

DEMO_USER = "demo-user"

# In-memory SQLite shared across connections
engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


class FakeAIClient:
    """Stands in for GeminiClient; replays queued texts or exceptions in order."""

    model = "fake-gemini"

    def __init__(self):
        self.responses = []
        self.prompts = []
        self.mime_types = []

    def queue(self, *items):
        self.responses.extend(items)
        return self

    async def generate_content(self, prompt, response_mime_type=None):
        self.prompts.append(prompt)
        self.mime_types.append(response_mime_type)
        if not self.responses:
            raise AIServiceError("no fake response queued")
        item = self.responses.pop(0)
        if isinstance(item, Exception):
            raise item
        return item


@pytest.fixture(autouse=True)
def create_schema():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(autouse=True)
def reset_rate_limiter():
    limiter.reset()
    yield


@pytest.fixture
def settings() -> Settings:
    return Settings(
        database_url="sqlite://",
        database_key="test-store-key",
        gemini_api_key="test-gemini-key",
        demo_user_id=DEMO_USER,
    )


@pytest.fixture
def fake_ai() -> FakeAIClient:
    return FakeAIClient()


@pytest.fixture
def app(settings, fake_ai):
    return create_app(settings, ai_client=fake_ai, session_factory=TestingSessionLocal)


@pytest.fixture
def client(app) -> TestClient:
    return TestClient(app)


@pytest.fixture
def db():
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def store(db) -> EntryStore:
    return EntryStore(db, user_id=DEMO_USER)


def make_entry(day: str, symptoms=("Headache",), severity: int = 3, notes: str = "", **extra) -> SymptomEntryOut:
    return SymptomEntryOut(
        id=extra.pop("id", str(uuid.uuid4())),
        user_id=extra.pop("user_id", DEMO_USER),
        date=date.fromisoformat(day),
        symptoms=list(symptoms),
        severity=severity,
        notes=notes,
        **extra,
    )


@pytest.fixture
def entry_factory():
    return make_entry
