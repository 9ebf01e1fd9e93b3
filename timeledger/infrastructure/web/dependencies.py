"""
Dependency wiring for the routers.
Builds repositories, domain services and use cases per request.
"""

from typing import Annotated

from fastapi import Depends
from sqlalchemy.orm import Session

from timeledger.application.cache import EntryCache, KeyedLock
from timeledger.application.entry_loader import EntryLoader
from timeledger.config import settings
from timeledger.domain.services import (
    AggregationEngine,
    EntryClassifier,
    ReconciliationEngine,
    RecurrenceExpander,
    UnitConverter,
)
from timeledger.infrastructure.db.database import get_db
from timeledger.infrastructure.repositories import SQLAlchemyDayLedgerRepository, SQLAlchemyDirectoryRepository


# Process-wide state shared by every request
entry_cache = EntryCache(enabled=settings.entry_cache_enabled)
day_locks = KeyedLock()
classifier = EntryClassifier()
aggregation = AggregationEngine()
converter = UnitConverter(settings.hours_per_day)
expander = RecurrenceExpander(settings.max_recurrence_days)


def get_entry_cache() -> EntryCache:
    return entry_cache


def get_day_locks() -> KeyedLock:
    return day_locks


def get_ledger_repository(session: Annotated[Session, Depends(get_db)]) -> SQLAlchemyDayLedgerRepository:
    """Dependency to get the day ledger repository."""
    return SQLAlchemyDayLedgerRepository(session)


def get_directory_repository(session: Annotated[Session, Depends(get_db)]) -> SQLAlchemyDirectoryRepository:
    """Dependency to get the directory repository."""
    return SQLAlchemyDirectoryRepository(session)


def get_engine(
    repository: Annotated[SQLAlchemyDayLedgerRepository, Depends(get_ledger_repository)]
) -> ReconciliationEngine:
    return ReconciliationEngine(repository, max_daily_hours=settings.max_daily_hours)


def get_entry_loader(
    repository: Annotated[SQLAlchemyDayLedgerRepository, Depends(get_ledger_repository)],
    cache: Annotated[EntryCache, Depends(get_entry_cache)]
) -> EntryLoader:
    return EntryLoader(repository, classifier, cache)
