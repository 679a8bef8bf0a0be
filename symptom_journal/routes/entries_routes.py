# symptom_journal/routes/entries_routes.py
from typing import List

from fastapi import APIRouter, Depends, Query, status

from symptom_journal.deps import get_entry_store
from symptom_journal.schemas.entries import SymptomEntryCreate, SymptomEntryOut
from symptom_journal.services.dashboard import DEFAULT_TAB, DashboardController
from symptom_journal.services.entry_store import EntryStore

router = APIRouter(prefix="/api", tags=["entries"])


@router.get("/entries", response_model=List[SymptomEntryOut])
def list_entries(store: EntryStore = Depends(get_entry_store)):
    return store.list_all()


@router.post("/entries", status_code=status.HTTP_201_CREATED)
def create_entry(
    payload: SymptomEntryCreate,
    tab: str = Query(DEFAULT_TAB),
    store: EntryStore = Depends(get_entry_store),
):
    """Save one entry, then return the freshly reloaded dashboard."""
    controller = DashboardController(store, active_tab=tab)
    created = controller.submit(payload)
    return {"entry": created.model_dump(mode="json"), "dashboard": controller.snapshot()}


@router.get("/dashboard")
def get_dashboard(
    tab: str = Query(DEFAULT_TAB),
    store: EntryStore = Depends(get_entry_store),
):
    controller = DashboardController(store, active_tab=tab)
    controller.load()
    return controller.snapshot()
