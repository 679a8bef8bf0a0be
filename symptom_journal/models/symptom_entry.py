"""SymptomEntry model.

Generic JSON for SQLite, JSONB on Postgres.
"""
import uuid
import datetime as dt
from typing import List, Optional

from sqlalchemy import CheckConstraint, Date, DateTime, Integer, String, Text, text
from sqlalchemy.dialects.postgresql import JSONB as PG_JSONB
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.types import JSON as SA_JSON

from symptom_journal.db.session import Base

SEVERITY_MIN = 1
SEVERITY_MAX = 8

JSONType = SA_JSON().with_variant(PG_JSONB(), "postgresql")


class SymptomEntry(Base):
    __tablename__ = "symptom_entries"
    __table_args__ = (
        CheckConstraint(
            f"severity >= {SEVERITY_MIN} AND severity <= {SEVERITY_MAX}",
            name="ck_symptom_entries_severity_range",
        ),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    date: Mapped[dt.date] = mapped_column(Date, nullable=False, index=True)
    symptoms: Mapped[List[str]] = mapped_column(JSONType, nullable=False, default=list)
    severity: Mapped[int] = mapped_column(Integer, nullable=False)
    notes: Mapped[str] = mapped_column(Text, nullable=False, default="")

    # attachments and AI summary are part of the row shape; no flow fills them yet
    voice_notes_url: Mapped[Optional[str]] = mapped_column(String(1024), nullable=True)
    photos_urls: Mapped[Optional[List[str]]] = mapped_column(JSONType, nullable=True)
    ai_summary: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    created_at: Mapped[dt.datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=text("CURRENT_TIMESTAMP"),
    )
    updated_at: Mapped[dt.datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=text("CURRENT_TIMESTAMP"),
        server_onupdate=text("CURRENT_TIMESTAMP"),
    )
