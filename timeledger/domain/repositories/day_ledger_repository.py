"""Day ledger repository interface.
Defines the contract for day ledger persistence operations.
"""

from abc import ABC, abstractmethod
from typing import List, Optional, Dict, Any
from datetime import date

from timeledger.domain.models.day_ledger import DayLedger


class DayLedgerRepository(ABC):
    """
    Repository interface for the DayLedger entity.
    Implementations raise PersistenceError on backend failures.
    """

    @abstractmethod
    async def get_day_ledger(self, employee_id: int, day: date) -> Optional[DayLedger]:
        """
        Find the ledger for an employee and day.
        Returns None if the day has no ledger yet.
        """
        pass

    @abstractmethod
    async def create_day_ledger(self, ledger: DayLedger) -> DayLedger:
        """
        Persist a new ledger and its segments.
        Returns the stored ledger with IDs assigned.
        """
        pass

    @abstractmethod
    async def update_day_ledger(self, ledger: DayLedger) -> DayLedger:
        """
        Replace the stored state of an existing ledger.
        Segments without an ID are inserted, stored segments missing from
        the ledger are removed.
        """
        pass

    @abstractmethod
    async def delete_day_ledger(self, ledger_id: int) -> bool:
        """
        Delete a ledger and all its segments.
        Returns False if it did not exist.
        """
        pass

    @abstractmethod
    async def delete_work_segment(self, segment_id: int) -> bool:
        """
        Delete a single work segment.
        Returns False if it did not exist.
        """
        pass

    @abstractmethod
    async def list_rows(
        self,
        employee_id: Optional[int] = None,
        month: Optional[int] = None,
        year: Optional[int] = None,
        all_users: bool = False
    ) -> List[Dict[str, Any]]:
        """
        List raw stored day rows, each with its nested worked hours.
        Rows use the backend's own field names; callers normalize them.
        """
        pass
