# symptom_journal/models/__init__.py
from sqlalchemy.engine import Engine

from symptom_journal.db.session import Base

# Import model modules so SQLAlchemy registers all mappers.
from . import symptom_entry  # noqa: F401
from . import health_insight  # noqa: F401


def init_db(engine: Engine) -> None:
    """Create tables if they don't exist."""
    Base.metadata.create_all(bind=engine)
