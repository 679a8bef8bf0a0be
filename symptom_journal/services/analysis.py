"""
Prompt building and response interpretation for AI symptom analysis.

Two request modes share the same client:

* structured analysis: the model is asked for a JSON object with the keys
  ``summary, urgency, patterns, recommendations, doctorNotes``;
* free-text insights: 3-5 one-sentence observations, one per line.

Entries are embedded verbatim, identifiers included, and are never truncated.
"""
from __future__ import annotations

import json
import logging
import re
from typing import Any, Dict, List, Sequence

from pydantic import ValidationError

from symptom_journal.schemas.analysis import SymptomAnalysis
from symptom_journal.utils.exceptions import AIServiceError, AnalysisError, AnalysisParseError

logger = logging.getLogger("symptom_journal")

# greedy: first "{" through last "}"
JSON_OBJECT_RE = re.compile(r"\{[\s\S]*\}")

MAX_INSIGHTS = 5
FALLBACK_RECOMMENDATION = "Consult with a healthcare provider for personalized advice"
INSIGHTS_UNAVAILABLE = "Unable to generate insights at this time."


def serialize_entries(entries: Sequence[Any]) -> str:
    return json.dumps(list(entries), indent=2, ensure_ascii=False, default=str)


def build_analysis_prompt(entries: Sequence[Any]) -> str:
    return (
        "As a healthcare AI assistant, analyze the following symptom entries and provide:\n"
        "1. A concise summary of the health patterns\n"
        "2. Urgency level (low/medium/high) for seeking medical care\n"
        "3. Notable patterns or correlations\n"
        "4. General health recommendations\n"
        "5. Notes formatted for sharing with a doctor\n\n"
        "Symptom entries:\n"
        f"{serialize_entries(entries)}\n\n"
        "Format your response as JSON with keys: summary, urgency, patterns, recommendations, doctorNotes.\n"
        "Be helpful but remind users this is not a substitute for professional medical advice."
    )


def build_insights_prompt(entries: Sequence[Any]) -> str:
    return (
        "Analyze these health entries for patterns and correlations:\n"
        f"{serialize_entries(entries)}\n\n"
        "Provide 3-5 brief insights about patterns, trends, or correlations you notice.\n"
        "Each insight should be one sentence. Focus on actionable observations."
    )


def fallback_analysis(text: str) -> Dict[str, Any]:
    return {
        "summary": text,
        "urgency": "low",
        "patterns": [],
        "recommendations": [FALLBACK_RECOMMENDATION],
        "doctorNotes": text,
    }


def interpret_analysis(text: str, strict: bool = False) -> Dict[str, Any]:
    """Extract the analysis object from raw model text.

    Lenient mode returns whatever object was parsed, unvalidated, and falls back
    to a fixed-shape object built from ``text`` when nothing parses. Strict mode
    validates against SymptomAnalysis and raises AnalysisParseError instead.
    """
    match = JSON_OBJECT_RE.search(text or "")
    if not match:
        if strict:
            raise AnalysisParseError("no_json", "AI response contained no JSON object")
        return fallback_analysis(text)

    try:
        parsed = json.loads(match.group(0))
    except (json.JSONDecodeError, RecursionError):
        if strict:
            raise AnalysisParseError("invalid_json", "AI response JSON could not be parsed")
        logger.info({"function": "interpret_analysis", "status": "fallback", "reason": "invalid_json"})
        return fallback_analysis(text)

    if not strict:
        return parsed

    try:
        return SymptomAnalysis.model_validate(parsed).model_dump(by_alias=True)
    except ValidationError as e:
        raise AnalysisParseError("schema_mismatch", f"AI response did not match the analysis schema: {e.error_count()} error(s)")


def interpret_insights(text: str) -> List[str]:
    lines = [line for line in (text or "").splitlines() if line.strip()]
    return lines[:MAX_INSIGHTS]


async def analyze_symptoms(client, entries: Sequence[Any], strict: bool = False) -> Dict[str, Any]:
    """One AI call for a structured analysis of ``entries``."""
    prompt = build_analysis_prompt(entries)
    try:
        text = await client.generate_content(
            prompt, response_mime_type="application/json" if strict else None
        )
    except AIServiceError as e:
        logger.exception("analyze_symptoms failed")
        raise AnalysisError("Failed to analyze symptoms") from e

    try:
        result = interpret_analysis(text, strict=strict)
    except AnalysisParseError as e:
        logger.warning({"function": "analyze_symptoms", "status": "rejected", "kind": e.kind})
        raise AnalysisError("Failed to analyze symptoms") from e

    logger.info({
        "function": "analyze_symptoms",
        "entries": len(entries),
        "urgency": result.get("urgency") if isinstance(result, dict) else None,
    })
    return result


async def generate_health_insights(client, entries: Sequence[Any]) -> List[str]:
    """Short observations about ``entries``; degrades to a fixed message on AI failure."""
    prompt = build_insights_prompt(entries)
    try:
        text = await client.generate_content(prompt)
    except AIServiceError:
        logger.exception("generate_health_insights failed")
        return [INSIGHTS_UNAVAILABLE]
    insights = interpret_insights(text)
    logger.info({"function": "generate_health_insights", "entries": len(entries), "insights": len(insights)})
    return insights


def describe_capabilities() -> Dict[str, Any]:
    return {
        "message": "AI Symptom Analysis API",
        "endpoints": {
            "POST /api/analyze": "Analyze symptom entries and generate insights",
        },
    }


__all__ = [
    "analyze_symptoms",
    "build_analysis_prompt",
    "build_insights_prompt",
    "describe_capabilities",
    "fallback_analysis",
    "generate_health_insights",
    "interpret_analysis",
    "interpret_insights",
]
