import enum
import uuid
from datetime import datetime
from typing import List

from sqlalchemy import CheckConstraint, DateTime, Enum, Float, String, Text, text
from sqlalchemy.orm import Mapped, mapped_column

from symptom_journal.db.session import Base
from symptom_journal.models.symptom_entry import JSONType


class InsightType(str, enum.Enum):
    PATTERN = "pattern"
    CORRELATION = "correlation"
    RECOMMENDATION = "recommendation"
    ALERT = "alert"


class HealthInsight(Base):
    """
    A derived observation tied to a set of entries. The table is declared so the
    schema is in place; nothing writes to it yet.
    """
    __tablename__ = "health_insights"
    __table_args__ = (
        CheckConstraint(
            "confidence_score >= 0 AND confidence_score <= 1",
            name="ck_health_insights_confidence_range",
        ),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    entry_ids: Mapped[List[str]] = mapped_column(JSONType, nullable=False, default=list)
    insight_type: Mapped[InsightType] = mapped_column(
        Enum(InsightType, name="insight_type", values_callable=lambda e: [m.value for m in e]),
        nullable=False,
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    confidence_score: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=text("CURRENT_TIMESTAMP"),
    )
