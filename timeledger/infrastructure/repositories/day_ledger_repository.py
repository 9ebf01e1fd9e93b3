"""
Day ledger repository implementation using SQLAlchemy.
"""

import logging
from calendar import monthrange
from datetime import date
from typing import Any, Dict, List, Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from timeledger.domain.models.base import ConflictError, NotFoundError, PersistenceError
from timeledger.domain.models.day_ledger import DayLedger
from timeledger.domain.repositories.day_ledger_repository import DayLedgerRepository as DayLedgerRepositoryInterface
from timeledger.infrastructure.db.models import DayLedgerModel, WorkSegmentModel
from timeledger.infrastructure.mappers.day_ledger_mapper import DayLedgerMapper

logger = logging.getLogger(__name__)


class SQLAlchemyDayLedgerRepository(DayLedgerRepositoryInterface):
    """SQLAlchemy implementation of the day ledger repository."""

    def __init__(self, session: Session):
        self.session = session
        self.mapper = DayLedgerMapper()

    async def get_day_ledger(self, employee_id: int, day: date) -> Optional[DayLedger]:
        """Get the ledger for an employee and day."""
        try:
            model = self._query().filter_by(employee_id=employee_id, day=day).first()
        except SQLAlchemyError as e:
            raise PersistenceError("Failed to load day ledger", e)

        if not model:
            return None

        return self.mapper.model_to_domain(model)

    async def create_day_ledger(self, ledger: DayLedger) -> DayLedger:
        """Insert a new ledger with its segments."""
        model = self.mapper.domain_to_model(ledger)
        self.session.add(model)
        self._commit(f"create day ledger for employee {ledger.employee_id} on {ledger.day}")
        self.session.refresh(model)
        return self.mapper.model_to_domain(model)

    async def update_day_ledger(self, ledger: DayLedger) -> DayLedger:
        """Write ledger state over the stored row, syncing its segments."""
        model = self._query().filter_by(id=ledger.id).first()
        if not model:
            raise NotFoundError("DayLedger", ledger.id)

        self.mapper.update_model(model, ledger)
        self._commit(f"update day ledger {ledger.id}")
        self.session.refresh(model)
        return self.mapper.model_to_domain(model)

    async def delete_day_ledger(self, ledger_id: int) -> bool:
        """Delete a ledger by ID."""
        model = self.session.query(DayLedgerModel).filter_by(id=ledger_id).first()
        if not model:
            return False

        self.session.delete(model)
        self._commit(f"delete day ledger {ledger_id}")
        return True

    async def delete_work_segment(self, segment_id: int) -> bool:
        """Delete a work segment by ID."""
        model = self.session.query(WorkSegmentModel).filter_by(id=segment_id).first()
        if not model:
            return False

        self.session.delete(model)
        self._commit(f"delete work segment {segment_id}")
        # The parent's segment collection was loaded before the delete.
        self.session.expire_all()
        return True

    async def list_rows(
        self,
        employee_id: Optional[int] = None,
        month: Optional[int] = None,
        year: Optional[int] = None,
        all_users: bool = False
    ) -> List[Dict[str, Any]]:
        """List stored day rows, optionally restricted to an employee and a month or year."""
        query = self._query()

        if employee_id is not None and not all_users:
            query = query.filter(DayLedgerModel.employee_id == employee_id)

        if year is not None:
            if month is not None:
                start = date(year, month, 1)
                end = date(year, month, monthrange(year, month)[1])
            else:
                start, end = date(year, 1, 1), date(year, 12, 31)
            query = query.filter(DayLedgerModel.day >= start, DayLedgerModel.day <= end)

        try:
            models = query.order_by(DayLedgerModel.day, DayLedgerModel.id).all()
        except SQLAlchemyError as e:
            raise PersistenceError("Failed to list day ledgers", e)

        return [self.mapper.model_to_row(model) for model in models]

    def _query(self):
        return self.session.query(DayLedgerModel).options(selectinload(DayLedgerModel.worked_hours))

    def _commit(self, action: str) -> None:
        try:
            self.session.commit()
        except IntegrityError as e:
            self.session.rollback()
            logger.warning(f"Integrity error on {action}: {e.orig}")
            raise ConflictError(f"Could not {action}: conflicting stored data")
        except SQLAlchemyError as e:
            self.session.rollback()
            logger.error(f"Database error on {action}: {e}")
            raise PersistenceError(f"Could not {action}", e)
