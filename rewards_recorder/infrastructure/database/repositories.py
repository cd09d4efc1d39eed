"""Data access layer for awards stored as one JSON blob in the key-value table"""

import json
import logging
from dataclasses import replace
from datetime import datetime
from typing import Any, Iterable, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from rewards_recorder.config import settings
from rewards_recorder.domain.entry import generate_award_id
from rewards_recorder.domain.exceptions import StorageError
from rewards_recorder.domain.models import Award, AwardDraft
from rewards_recorder.domain.records import award_from_record, award_to_record
from rewards_recorder.infrastructure.database.models import KeyValueEntry

logger = logging.getLogger(__name__)


class AwardRepository:
    """
    Repository for awards.

    The whole collection is read and written as a single JSON array under
    ``key``; every mutation rewrites the array (last write wins).
    """

    def __init__(
        self,
        db: Session,
        key: str | None = None,
        tz: str | None = None,
        catalog_version: str | None = None,
    ):
        self.db = db
        self.key = key or settings.storage_key
        self.tz = tz or settings.timezone
        self.catalog_version = catalog_version or settings.bank_catalog_version

    def _load(self) -> List[Award]:
        try:
            entry = self.db.get(KeyValueEntry, self.key)
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StorageError(f"Could not read awards: {e}") from e

        if entry is None:
            return []

        try:
            records = json.loads(entry.value)
        except ValueError:
            logger.error("Stored award data is not valid JSON, treating as empty", extra={"key": self.key})
            return []
        if not isinstance(records, list):
            logger.error("Stored award data is not a list, treating as empty", extra={"key": self.key})
            return []

        awards = []
        for record in records:
            try:
                awards.append(award_from_record(record, self.tz, self.catalog_version))
            except (KeyError, ValueError, TypeError) as e:
                logger.warning(f"Skipping unreadable award record: {e}", extra={"key": self.key})
        return awards

    def _save(self, awards: Iterable[Award]) -> None:
        payload = json.dumps([award_to_record(a) for a in awards], ensure_ascii=False)
        try:
            entry = self.db.get(KeyValueEntry, self.key)
            if entry is None:
                self.db.add(KeyValueEntry(key=self.key, value=payload))
            else:
                entry.value = payload
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StorageError(f"Could not save awards: {e}") from e

    def list(self) -> List[Award]:
        """All awards in insertion order"""
        return self._load()

    def get(self, award_id: str) -> Optional[Award]:
        return next((a for a in self._load() if a.id == award_id), None)

    def create(self, draft: AwardDraft, now: datetime | None = None) -> Award:
        """Persist a single prepared draft"""
        return self.create_many([draft], now)[0]

    def create_many(self, drafts: Iterable[AwardDraft], now: datetime | None = None) -> List[Award]:
        """Persist a batch of prepared drafts in one write"""
        awards = self._load()
        existing_ids = {a.id for a in awards}

        created = []
        for draft in drafts:
            award_id = generate_award_id(now)
            while award_id in existing_ids:
                award_id = generate_award_id(now)
            existing_ids.add(award_id)
            created.append(
                Award(
                    id=award_id,
                    value=draft.value,
                    bank=draft.bank,
                    draw_date=draft.draw_date,
                    expiry_date=draft.expiry_date,
                    merchant=draft.merchant,
                    notes=draft.notes,
                )
            )

        self._save(awards + created)
        return created

    def update(self, award_id: str, **changes: Any) -> Optional[Award]:
        """
        Merge field changes into an award.

        Returns None when no award has this id. The id itself never changes.
        """
        changes.pop("id", None)
        awards = self._load()
        for index, award in enumerate(awards):
            if award.id == award_id:
                awards[index] = replace(award, **changes)
                self._save(awards)
                return awards[index]
        return None

    def delete(self, award_id: str) -> bool:
        """Remove an award; False when it did not exist"""
        awards = self._load()
        remaining = [a for a in awards if a.id != award_id]
        if len(remaining) == len(awards):
            return False
        self._save(remaining)
        return True

    def replace_all(self, awards: Iterable[Award]) -> int:
        """Swap the whole collection (import); returns the new size"""
        awards = list(awards)
        self._save(awards)
        return len(awards)

    def clear(self) -> None:
        """Drop every award"""
        try:
            entry = self.db.get(KeyValueEntry, self.key)
            if entry is not None:
                self.db.delete(entry)
                self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StorageError(f"Could not clear awards: {e}") from e
