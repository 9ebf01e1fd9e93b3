"""
Read path for classified entries: stored rows, normalized and classified,
served through the entry cache.
"""

import logging
from typing import List, Optional

from timeledger.application.cache import EntryCache
from timeledger.domain.models.classified_entry import ClassifiedEntry
from timeledger.domain.repositories.day_ledger_repository import DayLedgerRepository
from timeledger.domain.services.entry_classifier import EntryClassifier
from timeledger.infrastructure.mappers.day_ledger_mapper import normalize_rows

logger = logging.getLogger(__name__)


class EntryLoader:
    """Loads classified entries for a list query, reading through the cache."""

    def __init__(
        self,
        repository: DayLedgerRepository,
        classifier: Optional[EntryClassifier] = None,
        cache: Optional[EntryCache] = None
    ):
        self.repository = repository
        self.classifier = classifier or EntryClassifier()
        self.cache = cache

    async def load(
        self,
        employee_id: Optional[int] = None,
        month: Optional[int] = None,
        year: Optional[int] = None,
        all_users: bool = False
    ) -> List[ClassifiedEntry]:
        key = EntryCache.key(employee_id, month, year, all_users)

        if self.cache is not None:
            cached = await self.cache.get(key)
            if cached is not None:
                return cached

        rows = await self.repository.list_rows(
            employee_id=employee_id, month=month, year=year, all_users=all_users
        )
        entries = self.classifier.classify_records(normalize_rows(rows))
        logger.debug(f"Classified {len(rows)} stored row(s) into {len(entries)} entries for {key}")

        if self.cache is not None:
            await self.cache.put(key, entries)
        return entries
