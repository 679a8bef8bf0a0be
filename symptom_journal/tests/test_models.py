from datetime import date

import pytest
from sqlalchemy.exc import IntegrityError

from symptom_journal.models.health_insight import HealthInsight, InsightType
from symptom_journal.models.symptom_entry import SymptomEntry
from symptom_journal.schemas.entries import HealthInsightOut, SymptomEntryOut


def test_symptom_entry_optional_fields(db):
    entry = SymptomEntry(
        user_id="demo-user",
        date=date(2024, 1, 1),
        symptoms=["Headache"],
        severity=4,
        voice_notes_url="https://files.example/voice.m4a",
        photos_urls=["https://files.example/a.jpg"],
    )
    db.add(entry)
    db.commit()
    db.refresh(entry)

    out = SymptomEntryOut.model_validate(entry)
    assert out.notes == ""
    assert out.photos_urls == ["https://files.example/a.jpg"]
    assert out.ai_summary is None
    assert out.updated_at is not None


def test_severity_check_constraint(db):
    db.add(SymptomEntry(user_id="demo-user", date=date(2024, 1, 1), symptoms=["Cough"], severity=0))
    with pytest.raises(IntegrityError):
        db.commit()
    db.rollback()


def test_health_insight_table(db):
    insight = HealthInsight(
        user_id="demo-user",
        entry_ids=["e-1", "e-2"],
        insight_type=InsightType.CORRELATION,
        title="Poor sleep precedes headaches",
        description="Headache entries follow nights logged with sleep issues.",
        confidence_score=0.7,
    )
    db.add(insight)
    db.commit()
    db.refresh(insight)

    out = HealthInsightOut.model_validate(insight)
    assert out.insight_type == "correlation"
    assert out.entry_ids == ["e-1", "e-2"]
    assert out.created_at is not None
