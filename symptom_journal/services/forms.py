"""Entry form rules: symptom choices, defaults and pre-submit validation."""
from __future__ import annotations

from datetime import date
from typing import Any, Dict, List, Optional

from symptom_journal.models.symptom_entry import SEVERITY_MAX, SEVERITY_MIN
from symptom_journal.schemas.entries import SymptomEntryCreate
from symptom_journal.utils.exceptions import EntryValidationError

COMMON_SYMPTOMS: List[str] = [
    "Headache",
    "Fatigue",
    "Nausea",
    "Fever",
    "Cough",
    "Sore Throat",
    "Muscle Pain",
    "Joint Pain",
    "Dizziness",
    "Sleep Issues",
    "Anxiety",
    "Stomach Pain",
    "Back Pain",
    "Shortness of Breath",
]

DEFAULT_SEVERITY = 3
NO_SYMPTOMS_MESSAGE = "Please select at least one symptom"


def toggle_symptom(selected: List[str], symptom: str) -> List[str]:
    if symptom in selected:
        return [s for s in selected if s != symptom]
    return [*selected, symptom]


def form_defaults(today: Optional[date] = None) -> Dict[str, Any]:
    return {
        "date": (today or date.today()).isoformat(),
        "symptoms": [],
        "severity": DEFAULT_SEVERITY,
        "notes": "",
        "common_symptoms": list(COMMON_SYMPTOMS),
        "severity_scale": {"min": SEVERITY_MIN, "max": SEVERITY_MAX},
    }


def validate_entry(form: SymptomEntryCreate) -> Dict[str, Any]:
    """Return store-ready fields or raise EntryValidationError before any write."""
    symptoms = [s for s in form.symptoms if (s or "").strip()]
    if not symptoms:
        raise EntryValidationError(NO_SYMPTOMS_MESSAGE)
    if not SEVERITY_MIN <= form.severity <= SEVERITY_MAX:
        raise EntryValidationError(f"Severity must be between {SEVERITY_MIN} and {SEVERITY_MAX}")
    return {
        "date": form.date,
        "symptoms": symptoms,
        "severity": form.severity,
        "notes": form.notes or "",
    }
