"""Dashboard state: the loaded entries, a loading flag and the active tab.

The collection is always re-fetched in full, on first load and after every
successful submission; there is no optimistic insert.
"""
from __future__ import annotations

import logging
from datetime import date
from typing import Any, Dict, List, Optional

from symptom_journal.schemas.entries import SymptomEntryCreate, SymptomEntryOut
from symptom_journal.services import views
from symptom_journal.services.entry_store import EntryStore
from symptom_journal.services.forms import form_defaults, validate_entry
from symptom_journal.utils.exceptions import EntryValidationError

logger = logging.getLogger("symptom_journal")

TABS = ("log", "timeline", "insights", "report")
DEFAULT_TAB = "log"


class DashboardController:
    def __init__(self, store: EntryStore, active_tab: str = DEFAULT_TAB):
        self.store = store
        self.entries: List[SymptomEntryOut] = []
        self.loading = False
        self.active_tab = DEFAULT_TAB
        self.select_tab(active_tab)

    def select_tab(self, tab: str) -> str:
        if tab not in TABS:
            raise EntryValidationError(f"Unknown tab {tab!r}; expected one of {', '.join(TABS)}")
        self.active_tab = tab
        return tab

    def load(self) -> List[SymptomEntryOut]:
        self.loading = True
        try:
            rows = self.store.list_all()
            self.entries = [SymptomEntryOut.model_validate(r) for r in rows]
        finally:
            self.loading = False
        return self.entries

    def submit(self, form: SymptomEntryCreate) -> SymptomEntryOut:
        """Validate, insert, then reload the whole collection."""
        fields = validate_entry(form)
        row = self.store.insert(fields)
        created = SymptomEntryOut.model_validate(row)
        self.load()
        return created

    def entries_payload(self) -> List[Dict[str, Any]]:
        return [e.model_dump(mode="json") for e in self.entries]

    def tab_view(self, today: Optional[date] = None) -> Dict[str, Any]:
        if self.active_tab == "log":
            return {"form": form_defaults(today)}
        if self.active_tab == "timeline":
            return {
                "timeline": views.timeline_view(self.entries),
                "chart": views.chart_series(self.entries),
            }
        if self.active_tab == "insights":
            return {"stats": views.insight_stats(self.entries)}
        return {"report": views.doctor_report(self.entries, today)}

    def snapshot(self, today: Optional[date] = None) -> Dict[str, Any]:
        return {
            "active_tab": self.active_tab,
            "tabs": list(TABS),
            "loading": self.loading,
            "entries": self.entries_payload(),
            "stats": views.header_stats(self.entries, today),
            "view": self.tab_view(today),
        }


__all__ = ["DashboardController", "TABS"]
