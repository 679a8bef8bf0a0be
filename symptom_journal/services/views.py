"""
Derived display values for the dashboard tabs.

Everything here is a pure function of the loaded entries; nothing touches the
store or the AI client. Ordering is re-derived per view: the timeline is newest
first, the chart oldest first, whatever order the store returned.
"""
from __future__ import annotations

import math
from collections import Counter
from datetime import date, timedelta
from typing import Any, Dict, List, Optional, Sequence

from symptom_journal.schemas.entries import SymptomEntryOut

SEVERITY_BUCKETS = (
    # (upper bound inclusive, label, color)
    (2, "Mild", "green"),
    (4, "Moderate", "yellow"),
    (6, "Severe", "orange"),
)
TOP_SYMPTOMS = 5
WEEK = timedelta(days=7)


def _bucket(severity: int):
    for upper, label, color in SEVERITY_BUCKETS:
        if severity <= upper:
            return label, color
    return "Very Severe", "red"


def severity_label(severity: int) -> str:
    return _bucket(severity)[0]


def severity_color(severity: int) -> str:
    return _bucket(severity)[1]


def urgency_tone(urgency: Any) -> str:
    if urgency == "high":
        return "danger"
    if urgency == "medium":
        return "warning"
    return "ok"


def _round_half_up(value: float, digits: int = 1) -> float:
    factor = 10 ** digits
    return math.floor(value * factor + 0.5) / factor


def _entry_row(entry: SymptomEntryOut) -> Dict[str, Any]:
    row = entry.model_dump(mode="json")
    row["severity_label"] = severity_label(entry.severity)
    row["severity_color"] = severity_color(entry.severity)
    return row


def timeline_view(entries: Sequence[SymptomEntryOut]) -> List[Dict[str, Any]]:
    ordered = sorted(entries, key=lambda e: e.date, reverse=True)
    return [_entry_row(e) for e in ordered]


def chart_series(entries: Sequence[SymptomEntryOut]) -> List[Dict[str, Any]]:
    ordered = sorted(entries, key=lambda e: e.date)
    return [
        {
            "date": e.date.strftime("%b %d"),
            "severity": e.severity,
            "symptoms": len(e.symptoms),
            "fullDate": e.date.isoformat(),
        }
        for e in ordered
    ]


def header_stats(entries: Sequence[SymptomEntryOut], today: Optional[date] = None) -> Dict[str, int]:
    today = today or date.today()
    week_ago = today - WEEK
    return {
        "total_entries": len(entries),
        "this_week": sum(1 for e in entries if e.date >= week_ago),
        "ai_analyses": sum(1 for e in entries if e.ai_summary),
    }


def symptom_frequencies(entries: Sequence[SymptomEntryOut]) -> Counter:
    counts: Counter = Counter()
    for e in entries:
        counts.update(e.symptoms)
    return counts


def most_common_symptoms(entries: Sequence[SymptomEntryOut], limit: int = TOP_SYMPTOMS) -> List[Dict[str, Any]]:
    total = len(entries)
    return [
        {"symptom": name, "count": count, "share": (count / total) if total else 0.0}
        for name, count in symptom_frequencies(entries).most_common(limit)
    ]


def average_severity(entries: Sequence[SymptomEntryOut]) -> float:
    if not entries:
        return 0.0
    return _round_half_up(sum(e.severity for e in entries) / len(entries))


def insight_stats(entries: Sequence[SymptomEntryOut]) -> Dict[str, Any]:
    return {
        "total_entries": len(entries),
        "average_severity": average_severity(entries),
        "unique_symptoms": len(symptom_frequencies(entries)),
        "most_common": most_common_symptoms(entries),
    }


def doctor_report(entries: Sequence[SymptomEntryOut], today: Optional[date] = None) -> Dict[str, Any]:
    """Chronological summary meant to be printed or handed to a clinician."""
    ordered = sorted(entries, key=lambda e: e.date)
    distribution = {label: 0 for _, label, _ in SEVERITY_BUCKETS}
    distribution["Very Severe"] = 0
    for e in ordered:
        distribution[severity_label(e.severity)] += 1

    return {
        "generated_on": (today or date.today()).isoformat(),
        "period": {
            "start": ordered[0].date.isoformat() if ordered else None,
            "end": ordered[-1].date.isoformat() if ordered else None,
        },
        "total_entries": len(ordered),
        "average_severity": average_severity(ordered),
        "severity_distribution": distribution,
        "most_common": most_common_symptoms(ordered),
        "entries": [
            {
                "date": e.date.isoformat(),
                "symptoms": list(e.symptoms),
                "severity": e.severity,
                "severity_label": severity_label(e.severity),
                "notes": e.notes,
            }
            for e in ordered
        ],
        "disclaimer": (
            "Self-reported symptom log. For informational purposes only and not a "
            "substitute for professional medical advice."
        ),
    }
