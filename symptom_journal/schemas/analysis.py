# symptom_journal/schemas/analysis.py
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class SymptomAnalysis(BaseModel):
    """Shape the model is asked to produce. Only enforced by the strict interpreter."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    summary: str
    urgency: Literal["low", "medium", "high"]
    patterns: List[str] = Field(default_factory=list)
    recommendations: List[str] = Field(default_factory=list)
    doctor_notes: str = Field(..., alias="doctorNotes")


class InsightsOut(BaseModel):
    insights: List[str]
    analysis: Optional[dict] = None
    urgency_tone: str
