from __future__ import annotations

from typing import Any, Dict, List

import logging
from sqlalchemy import desc
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from symptom_journal.models.symptom_entry import SymptomEntry
from symptom_journal.utils.exceptions import StoreError

logger = logging.getLogger("symptom_journal")

INSERTABLE_FIELDS = ("date", "symptoms", "severity", "notes", "voice_notes_url", "photos_urls")


class EntryStore:
    """CRUD pass-through over ``symptom_entries`` for a single implicit user."""

    def __init__(self, db: Session, user_id: str):
        self.db = db
        self.user_id = user_id

    def insert(self, fields: Dict[str, Any]) -> SymptomEntry:
        """Write one row with this store's user id attached."""
        values = {k: fields[k] for k in INSERTABLE_FIELDS if k in fields}
        try:
            entry = SymptomEntry(user_id=self.user_id, **values)
            self.db.add(entry)
            self.db.commit()
            self.db.refresh(entry)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.exception("entry insert failed")
            raise StoreError("Failed to save entry") from e

        logger.info({
            "function": "insert_entry",
            "status": "inserted",
            "entry_id": str(entry.id),
            "symptoms": len(entry.symptoms or []),
        })
        return entry

    def list_all(self) -> List[SymptomEntry]:
        """Every entry for this user, newest date first.

        Views re-sort on their own; callers should not rely on this order.
        """
        try:
            return (
                self.db.query(SymptomEntry)
                .filter(SymptomEntry.user_id == self.user_id)
                .order_by(desc(SymptomEntry.date))
                .all()
            )
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.exception("entry load failed")
            raise StoreError("Failed to load entries") from e


__all__ = ["EntryStore"]
