"""
Timesheet router.
Handles logging, editing, deleting and listing time entries.
"""

from datetime import date
from typing import Annotated, Optional

from fastapi import APIRouter, Depends, Query, status

from timeledger.application.cache import EntryCache, KeyedLock
from timeledger.application.entry_loader import EntryLoader
from timeledger.application.dto.timesheet_dto import (
    AddEntryRequestDTO,
    BatchResultDTO,
    DayLedgerResponseDTO,
    DeleteEntryRequestDTO,
    DeleteEntryResponseDTO,
    EntryListResponseDTO,
    ListEntriesRequestDTO,
    UpdateSegmentRequestDTO,
)
from timeledger.application.use_cases.timesheet_use_cases import (
    AddRecurringEntriesUseCase,
    DeleteEntryUseCase,
    ListEntriesUseCase,
    UpdateSegmentUseCase,
)
from timeledger.config import settings
from timeledger.domain.services.reconciliation_engine import ReconciliationEngine
from timeledger.infrastructure.auth import CurrentUser, get_current_user
from timeledger.infrastructure.repositories import SQLAlchemyDirectoryRepository
from timeledger.infrastructure.web.dependencies import (
    classifier,
    expander,
    get_day_locks,
    get_directory_repository,
    get_engine,
    get_entry_cache,
    get_entry_loader,
)
from timeledger.infrastructure.web.middleware.error_handler import build_request, unwrap


router = APIRouter()


@router.get("/entries", response_model=EntryListResponseDTO)
async def list_entries(
    user: Annotated[CurrentUser, Depends(get_current_user)],
    loader: Annotated[EntryLoader, Depends(get_entry_loader)],
    employee_id: Optional[int] = Query(None, gt=0, description="Employee, defaults to the caller"),
    month: Optional[int] = Query(None, ge=1, le=12),
    year: Optional[int] = Query(None, ge=1900, le=9999),
    all_users: bool = Query(False, description="Every employee's entries (admins only)")
):
    """
    List classified timesheet entries.

    - **employee_id**: Employee to list (admins only for someone else)
    - **month** / **year**: Restrict to a month or a year
    - **all_users**: List every employee (admins only)
    """
    request = build_request(
        ListEntriesRequestDTO, employee_id=employee_id, month=month, year=year, all_users=all_users
    )
    use_case = ListEntriesUseCase(loader).set_current_user(user.id, user.roles)
    return unwrap(await use_case.execute(request))


@router.post("/entries", status_code=status.HTTP_201_CREATED, response_model=BatchResultDTO)
async def add_entry(
    request: AddEntryRequestDTO,
    user: Annotated[CurrentUser, Depends(get_current_user)],
    engine: Annotated[ReconciliationEngine, Depends(get_engine)],
    directory: Annotated[SQLAlchemyDirectoryRepository, Depends(get_directory_repository)],
    cache: Annotated[EntryCache, Depends(get_entry_cache)],
    locks: Annotated[KeyedLock, Depends(get_day_locks)]
):
    """
    Log time on a day, optionally repeated over a date range.

    - **day**: Day to log (first day of a recurrence)
    - **kind**: WORK, VACATION, SICK_LEAVE or PERMIT
    - **project_id** / **hours**: Required for WORK
    - **hours**: Permit hours for PERMIT
    - **recurrence** / **recurrence_end**: DAILY (weekdays) or WEEKLY until the end date
    """
    use_case = AddRecurringEntriesUseCase(
        engine,
        directory,
        expander=expander,
        cache=cache,
        locks=locks,
        concurrent=settings.concurrent_batches,
    ).set_current_user(user.id, user.roles)
    return unwrap(await use_case.execute(request))


@router.patch("/segments/{segment_id}", response_model=DayLedgerResponseDTO)
async def update_segment(
    segment_id: int,
    request: UpdateSegmentRequestDTO,
    user: Annotated[CurrentUser, Depends(get_current_user)],
    engine: Annotated[ReconciliationEngine, Depends(get_engine)],
    directory: Annotated[SQLAlchemyDirectoryRepository, Depends(get_directory_repository)],
    cache: Annotated[EntryCache, Depends(get_entry_cache)]
):
    """
    Edit the project or hours of one work segment.

    - **segment_id**: Work segment to edit
    - **day**: Day the segment was logged on
    """
    request = request.model_copy(update={"segment_id": segment_id})
    use_case = UpdateSegmentUseCase(engine, classifier, cache, directory).set_current_user(user.id, user.roles)
    return unwrap(await use_case.execute(request))


@router.delete("/entries/{entry_id}", response_model=DeleteEntryResponseDTO)
async def delete_entry(
    entry_id: str,
    user: Annotated[CurrentUser, Depends(get_current_user)],
    engine: Annotated[ReconciliationEngine, Depends(get_engine)],
    cache: Annotated[EntryCache, Depends(get_entry_cache)],
    day: date = Query(..., description="Day the entry belongs to"),
    employee_id: Optional[int] = Query(None, gt=0)
):
    """
    Delete a classified entry.
    Deleting an entry twice is harmless: the second call reports deleted=false.
    """
    request = build_request(DeleteEntryRequestDTO, entry_id=entry_id, day=day, employee_id=employee_id)
    use_case = DeleteEntryUseCase(engine, classifier, cache).set_current_user(user.id, user.roles)
    return unwrap(await use_case.execute(request))
