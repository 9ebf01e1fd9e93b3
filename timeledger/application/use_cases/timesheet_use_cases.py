"""
Timesheet use cases for the application layer.
Implements logging, editing, deleting and listing time.
"""

import asyncio
import logging
from datetime import date
from typing import List, Optional

from timeledger.application.cache import EntryCache, KeyedLock
from timeledger.application.entry_loader import EntryLoader
from timeledger.application.use_cases.base_use_case import (
    AuthorizedUseCase, CommandUseCase, QueryUseCase
)
from timeledger.application.dto.timesheet_dto import (
    AddEntryRequestDTO, UpdateSegmentRequestDTO, DeleteEntryRequestDTO,
    ListEntriesRequestDTO, BatchFailureDTO, BatchResultDTO,
    ClassifiedEntryResponseDTO, DayLedgerResponseDTO, DeleteEntryResponseDTO,
    EntryListResponseDTO
)
from timeledger.domain.models.base import DomainException, NotFoundError
from timeledger.domain.models.classified_entry import EntryType
from timeledger.domain.models.directory import UserRole
from timeledger.domain.repositories.directory_repository import DirectoryRepository
from timeledger.domain.services.entry_classifier import EntryClassifier
from timeledger.domain.services.reconciliation_engine import ReconciliationEngine
from timeledger.domain.services.recurrence import RecurrenceExpander, RecurrenceRule

logger = logging.getLogger(__name__)


class AddRecurringEntriesUseCase(AuthorizedUseCase, CommandUseCase[AddEntryRequestDTO, BatchResultDTO]):
    """
    Use case for logging one entry on every date of its recurrence.

    A single-date request fails as a whole. For DAILY and WEEKLY requests each
    date is written independently: failures are collected into the batch
    result and never stop the remaining dates.
    """

    def __init__(
        self,
        engine: ReconciliationEngine,
        directory_repository: DirectoryRepository,
        expander: Optional[RecurrenceExpander] = None,
        cache: Optional[EntryCache] = None,
        locks: Optional[KeyedLock] = None,
        concurrent: bool = False
    ):
        super().__init__()
        self.engine = engine
        self.directory_repository = directory_repository
        self.expander = expander or RecurrenceExpander()
        self.cache = cache
        self.locks = locks or KeyedLock()
        self.concurrent = concurrent

    async def _check_authorization(self, request: AddEntryRequestDTO) -> None:
        self._employee_for(request.employee_id)

    async def _execute_command_logic(self, request: AddEntryRequestDTO) -> BatchResultDTO:
        employee_id = self._employee_for(request.employee_id)
        plan = self.expander.expand(request.day, request.recurrence_end, request.recurrence)
        customer_id = await self._customer_for(request)

        async def add(day: date) -> None:
            async with self.locks.hold((employee_id, day)):
                await self.engine.add_entry(
                    employee_id, day, request.kind,
                    project_id=request.project_id,
                    hours=request.hours,
                    customer_id=customer_id,
                )
            self.changed = True

        if plan.rule == RecurrenceRule.NONE:
            await add(plan.start)
            return BatchResultDTO(succeeded=[plan.start])

        dates = plan.dates()
        if self.concurrent:
            outcomes = await asyncio.gather(*(self._attempt(add, day) for day in dates))
        else:
            outcomes = [await self._attempt(add, day) for day in dates]

        result = BatchResultDTO(
            succeeded=[day for day, failure in zip(dates, outcomes) if failure is None],
            failed=[failure for failure in outcomes if failure is not None],
        )
        logger.info(
            f"Recurring {request.kind} for employee {employee_id}: "
            f"{len(result.succeeded)} written, {len(result.failed)} failed"
        )
        return result

    async def _attempt(self, add, day: date) -> Optional[BatchFailureDTO]:
        try:
            await add(day)
            return None
        except DomainException as e:
            logger.warning(f"Could not log {day}: {e.code}: {e.message}")
            return BatchFailureDTO(date=day, error=e.message, error_code=e.code)
        except Exception as e:
            logger.exception(f"Unexpected error logging {day}")
            return BatchFailureDTO(date=day, error=str(e) or type(e).__name__, error_code="UNKNOWN_ERROR")

    async def _customer_for(self, request: AddEntryRequestDTO) -> Optional[int]:
        """The customer a work entry is billed to: the one given, else the project's client."""
        if request.kind != EntryType.WORK.value or request.project_id is None:
            return request.customer_id
        if request.customer_id is not None:
            return request.customer_id
        return await client_of_project(self.directory_repository, request.project_id)


async def client_of_project(directory_repository: DirectoryRepository, project_id: int) -> Optional[int]:
    project = await directory_repository.get_project(project_id)
    if project is None:
        raise NotFoundError("Project", project_id)
    return project.client_id


class UpdateSegmentUseCase(AuthorizedUseCase, CommandUseCase[UpdateSegmentRequestDTO, DayLedgerResponseDTO]):
    """
    Use case for editing one work segment of a day.
    A segment moved to another project is billed to that project's client.
    """

    def __init__(
        self,
        engine: ReconciliationEngine,
        classifier: Optional[EntryClassifier] = None,
        cache: Optional[EntryCache] = None,
        directory_repository: Optional[DirectoryRepository] = None
    ):
        super().__init__()
        self.engine = engine
        self.classifier = classifier or EntryClassifier()
        self.cache = cache
        self.directory_repository = directory_repository

    async def _check_authorization(self, request: UpdateSegmentRequestDTO) -> None:
        self._employee_for(request.employee_id)

    async def _execute_command_logic(self, request: UpdateSegmentRequestDTO) -> DayLedgerResponseDTO:
        if request.segment_id is None:
            raise NotFoundError("WorkSegment", None)

        employee_id = self._employee_for(request.employee_id)
        customer_id = None
        if request.project_id is not None and self.directory_repository is not None:
            customer_id = await client_of_project(self.directory_repository, request.project_id)

        ledger = await self.engine.update_segment(
            employee_id, request.day, request.segment_id,
            project_id=request.project_id,
            hours=request.hours,
            customer_id=customer_id,
        )
        self.changed = True

        return DayLedgerResponseDTO(
            timesheet_id=ledger.id,
            employee_id=ledger.employee_id,
            day=ledger.day,
            entries=[
                ClassifiedEntryResponseDTO.from_domain(entry)
                for entry in self.classifier.classify_ledger(ledger)
            ],
        )


class DeleteEntryUseCase(AuthorizedUseCase, CommandUseCase[DeleteEntryRequestDTO, DeleteEntryResponseDTO]):
    """
    Use case for deleting a classified entry.
    Deleting an entry that no longer exists reports deleted=False.
    """

    def __init__(
        self,
        engine: ReconciliationEngine,
        classifier: Optional[EntryClassifier] = None,
        cache: Optional[EntryCache] = None
    ):
        super().__init__()
        self.engine = engine
        self.classifier = classifier or EntryClassifier()
        self.cache = cache

    async def _check_authorization(self, request: DeleteEntryRequestDTO) -> None:
        self._employee_for(request.employee_id)

    async def _execute_command_logic(self, request: DeleteEntryRequestDTO) -> DeleteEntryResponseDTO:
        employee_id = self._employee_for(request.employee_id)

        ledger = await self.engine.get_day(employee_id, request.day)
        if ledger is None:
            return DeleteEntryResponseDTO(entry_id=request.entry_id, deleted=False)

        entry = next(
            (e for e in self.classifier.classify_ledger(ledger) if e.id == request.entry_id),
            None
        )
        if entry is None:
            logger.info(f"Entry {request.entry_id} not found on {request.day} for employee {employee_id}")
            return DeleteEntryResponseDTO(entry_id=request.entry_id, deleted=False)

        deleted = await self.engine.delete_entry(entry)
        self.changed = deleted
        return DeleteEntryResponseDTO(entry_id=request.entry_id, deleted=deleted)


class ListEntriesUseCase(AuthorizedUseCase, QueryUseCase[ListEntriesRequestDTO, EntryListResponseDTO]):
    """Use case for listing classified entries."""

    def __init__(self, loader: EntryLoader):
        super().__init__()
        self.loader = loader

    async def _check_authorization(self, request: ListEntriesRequestDTO) -> None:
        if request.all_users:
            self._require_role(UserRole.ADMIN.value)
        else:
            self._employee_for(request.employee_id)

    async def _execute_business_logic(self, request: ListEntriesRequestDTO) -> EntryListResponseDTO:
        employee_id = None if request.all_users else self._employee_for(request.employee_id)

        entries = await self.loader.load(
            employee_id=employee_id,
            month=request.month,
            year=request.year,
            all_users=request.all_users,
        )

        items: List[ClassifiedEntryResponseDTO] = [
            ClassifiedEntryResponseDTO.from_domain(entry) for entry in entries
        ]
        return EntryListResponseDTO(
            entries=items,
            total=len(items),
            total_hours=sum(entry.hours for entry in entries if entry.is_work),
        )
