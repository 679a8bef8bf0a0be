# symptom_journal/schemas/entries.py
from datetime import date as Date, datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from symptom_journal.models.symptom_entry import SEVERITY_MAX, SEVERITY_MIN


class SymptomEntryCreate(BaseModel):
    """Fields submitted by the entry form."""

    date: Date = Field(default_factory=Date.today, description="Calendar date of the entry.")
    symptoms: List[str] = Field(default_factory=list, description="Selected symptom labels, in selection order.")
    severity: int = Field(3, ge=SEVERITY_MIN, le=SEVERITY_MAX, description="Overall severity, 1-8.")
    notes: str = Field("", max_length=5000)


class SymptomEntryOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    date: Date
    symptoms: List[str]
    severity: int
    notes: str = ""
    voice_notes_url: Optional[str] = None
    photos_urls: Optional[List[str]] = None
    ai_summary: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class HealthInsightOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    entry_ids: List[str]
    insight_type: str
    title: str
    description: str
    confidence_score: float = Field(0.0, ge=0.0, le=1.0)
    created_at: Optional[datetime] = None
