# symptom_journal/routes/analyze_routes.py
import logging

from fastapi import APIRouter, Depends, Request
from starlette.concurrency import run_in_threadpool

from symptom_journal.config import Settings
from symptom_journal.deps import get_ai_client, get_entry_store, get_settings
from symptom_journal.schemas.analysis import InsightsOut
from symptom_journal.services import analysis, views
from symptom_journal.services.dashboard import DashboardController
from symptom_journal.services.entry_store import EntryStore
from symptom_journal.services.gemini import GeminiClient
from symptom_journal.utils.exceptions import AnalysisError, EntryValidationError
from symptom_journal.utils.rate_limit import ai_rate_limit, bind_ai_rate_limit, limiter

router = APIRouter(prefix="/api", tags=["analysis"], dependencies=[Depends(bind_ai_rate_limit)])
logger = logging.getLogger("symptom_journal")

INVALID_ENTRIES = "Invalid entries data"
INSIGHTS_FAILED = "Failed to generate AI insights. Please try again."


@router.get("/analyze")
def analyze_capabilities():
    return analysis.describe_capabilities()


@router.post("/analyze")
@limiter.limit(ai_rate_limit)
async def analyze(
    request: Request,
    client: GeminiClient = Depends(get_ai_client),
    settings: Settings = Depends(get_settings),
):
    """Analyze the posted entries.

    Accepts: {"entries": [...]}; entries are forwarded verbatim.
    Returns the analysis object, or {"error": ...} with 400/500.
    """
    try:
        body = await request.json()
    except ValueError:
        raise EntryValidationError(INVALID_ENTRIES)
    entries = body.get("entries") if isinstance(body, dict) else None
    if not isinstance(entries, list):
        raise EntryValidationError(INVALID_ENTRIES)

    return await analysis.analyze_symptoms(client, entries, strict=settings.analysis_strict)


@router.post("/insights", response_model=InsightsOut)
@limiter.limit(ai_rate_limit)
async def refresh_insights(
    request: Request,
    store: EntryStore = Depends(get_entry_store),
    client: GeminiClient = Depends(get_ai_client),
    settings: Settings = Depends(get_settings),
):
    """Insights tab refresh: short observations plus a structured analysis of the stored entries."""
    controller = DashboardController(store, active_tab="insights")
    await run_in_threadpool(controller.load)
    entries = controller.entries_payload()
    if not entries:
        return InsightsOut(insights=[], analysis=None, urgency_tone=views.urgency_tone(None))

    insights = await analysis.generate_health_insights(client, entries)
    try:
        result = await analysis.analyze_symptoms(client, entries, strict=settings.analysis_strict)
    except AnalysisError as e:
        raise AnalysisError(INSIGHTS_FAILED, insights=insights) from e

    urgency = result.get("urgency") if isinstance(result, dict) else None
    return InsightsOut(insights=insights, analysis=result, urgency_tone=views.urgency_tone(urgency))
