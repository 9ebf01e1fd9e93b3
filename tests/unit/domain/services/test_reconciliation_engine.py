"""
Unit tests for ReconciliationEngine.
"""

import pytest
from datetime import date

from timeledger.domain.models.base import ConflictError, NotFoundError, PersistenceError, ValidationError
from timeledger.domain.models.classified_entry import EntryType
from timeledger.domain.services.entry_classifier import EntryClassifier
from timeledger.domain.services.reconciliation_engine import ReconciliationEngine

from fakes import ALICE_ID, InMemoryDayLedgerRepository


DAY = date(2024, 1, 3)


class TestReconciliationEngineAdd:
    """Test cases for adding entries."""

    def setup_method(self):
        self.repository = InMemoryDayLedgerRepository()
        self.engine = ReconciliationEngine(self.repository)
        self.classifier = EntryClassifier()

    @pytest.mark.asyncio
    async def test_add_work_creates_ledger(self):
        """Test the first WORK entry creates a ledger with one segment."""
        ledger = await self.engine.add_entry(ALICE_ID, DAY, EntryType.WORK, project_id=100, hours=8, customer_id=10)

        assert ledger.id is not None
        assert len(ledger.worked_hours) == 1
        assert ledger.worked_hours[0].customer_id == 10

        entries = self.classifier.classify_ledger(ledger)
        assert len(entries) == 1
        assert entries[0].entry_type == EntryType.WORK
        assert entries[0].hours == 8

    @pytest.mark.asyncio
    async def test_work_segments_accumulate(self):
        """Test repeated WORK entries append segments to the same day."""
        await self.engine.add_entry(ALICE_ID, DAY, "WORK", project_id=100, hours=5)
        ledger = await self.engine.add_entry(ALICE_ID, DAY, "WORK", project_id=100, hours=3)

        assert len(self.repository.ledgers) == 1
        assert [s.hours for s in ledger.worked_hours] == [5, 3]

    @pytest.mark.asyncio
    async def test_sick_leave_replaces_work(self):
        """Test SICK_LEAVE after WORK wipes the work and classifies as leave."""
        await self.engine.add_entry(ALICE_ID, DAY, "WORK", project_id=100, hours=8)
        ledger = await self.engine.add_entry(ALICE_ID, DAY, "SICK_LEAVE")

        assert ledger.illness is True
        assert ledger.worked_hours == []
        assert [e.entry_type for e in self.classifier.classify_ledger(ledger)] == [EntryType.SICK_LEAVE]

    @pytest.mark.asyncio
    async def test_leave_wipes_permits(self):
        """Test VACATION also clears permit hours."""
        await self.engine.add_entry(ALICE_ID, DAY, "PERMIT", hours=2)
        ledger = await self.engine.add_entry(ALICE_ID, DAY, "VACATION")

        assert ledger.holiday is True
        assert ledger.permits_hours == 0

    @pytest.mark.asyncio
    async def test_work_after_leave_clears_leave(self):
        """Test a WORK entry on a leave day turns it back into a work day."""
        await self.engine.add_entry(ALICE_ID, DAY, "VACATION")
        ledger = await self.engine.add_entry(ALICE_ID, DAY, "WORK", project_id=100, hours=4)

        assert ledger.holiday is False
        assert ledger.illness is False
        assert len(ledger.worked_hours) == 1

    @pytest.mark.asyncio
    async def test_permit_keeps_segments(self):
        """Test PERMIT on a work day keeps segments and sets permit hours."""
        await self.engine.add_entry(ALICE_ID, DAY, "WORK", project_id=100, hours=6)
        ledger = await self.engine.add_entry(ALICE_ID, DAY, "PERMIT", hours=2)

        assert ledger.permits_hours == 2
        assert len(ledger.worked_hours) == 1
        assert [e.id for e in self.classifier.classify_ledger(ledger)][-1] == f"ts-{ledger.id}-permit"

    @pytest.mark.asyncio
    async def test_permit_overwrites_previous_permit(self):
        """Test a second PERMIT replaces the stored permit hours."""
        await self.engine.add_entry(ALICE_ID, DAY, "PERMIT", hours=2)
        ledger = await self.engine.add_entry(ALICE_ID, DAY, "PERMIT", hours=3)

        assert ledger.permits_hours == 3

    @pytest.mark.asyncio
    async def test_stored_ledger_is_not_mutated(self):
        """Test the ledger read from the repository is copied before changes."""
        first = await self.engine.add_entry(ALICE_ID, DAY, "WORK", project_id=100, hours=6)
        await self.engine.add_entry(ALICE_ID, DAY, "SICK_LEAVE")

        assert len(first.worked_hours) == 1

    @pytest.mark.asyncio
    async def test_leave_with_hours_conflicts(self):
        """Test leave carrying a project or hours is a conflict."""
        with pytest.raises(ConflictError):
            await self.engine.add_entry(ALICE_ID, DAY, "SICK_LEAVE", hours=8)
        with pytest.raises(ConflictError):
            await self.engine.add_entry(ALICE_ID, DAY, "VACATION", project_id=100)

        assert self.repository.ledgers == {}

    @pytest.mark.asyncio
    async def test_permit_with_project_conflicts(self):
        """Test a permit cannot be booked on a project."""
        with pytest.raises(ConflictError, match="PERMIT"):
            await self.engine.add_entry(ALICE_ID, DAY, "PERMIT", project_id=100, hours=2)

    @pytest.mark.asyncio
    async def test_work_requires_project_and_hours(self):
        """Test WORK validation."""
        with pytest.raises(ValidationError, match="Project ID"):
            await self.engine.add_entry(ALICE_ID, DAY, "WORK", hours=8)
        with pytest.raises(ValidationError, match="positive"):
            await self.engine.add_entry(ALICE_ID, DAY, "WORK", project_id=100, hours=0)
        with pytest.raises(ValidationError, match="exceed"):
            await self.engine.add_entry(ALICE_ID, DAY, "WORK", project_id=100, hours=25)

    @pytest.mark.asyncio
    async def test_daily_cap_covers_the_whole_day(self):
        """Test segments that fit one by one cannot add up past the daily cap."""
        await self.engine.add_entry(ALICE_ID, DAY, "WORK", project_id=100, hours=20)

        with pytest.raises(ValidationError, match="per day"):
            await self.engine.add_entry(ALICE_ID, DAY, "WORK", project_id=100, hours=20)
        with pytest.raises(ValidationError, match="per day"):
            await self.engine.add_entry(ALICE_ID, DAY, "PERMIT", hours=5)

        ledger = await self.engine.add_entry(ALICE_ID, DAY, "WORK", project_id=101, hours=4)
        assert ledger.total_worked_hours == 24
        assert self.repository.only_ledger().permits_hours == 0

    @pytest.mark.asyncio
    async def test_daily_cap_is_configurable(self):
        """Test the cap comes from the engine's settings."""
        engine = ReconciliationEngine(self.repository, max_daily_hours=10)
        await engine.add_entry(ALICE_ID, DAY, "WORK", project_id=100, hours=8)

        with pytest.raises(ValidationError, match="more than the 10 allowed"):
            await engine.add_entry(ALICE_ID, DAY, "PERMIT", hours=3)

    @pytest.mark.asyncio
    async def test_unknown_kind(self):
        """Test unsupported entry types are rejected."""
        with pytest.raises(ValidationError, match="Unsupported entry type"):
            await self.engine.add_entry(ALICE_ID, DAY, "OVERTIME", project_id=100, hours=2)

    @pytest.mark.asyncio
    async def test_repository_errors_propagate(self):
        """Test storage failures surface unchanged."""
        self.repository.failing_days.add(DAY)

        with pytest.raises(PersistenceError):
            await self.engine.add_entry(ALICE_ID, DAY, "WORK", project_id=100, hours=8)


class TestReconciliationEngineUpdate:
    """Test cases for editing segments."""

    def setup_method(self):
        self.repository = InMemoryDayLedgerRepository()
        self.engine = ReconciliationEngine(self.repository)

    @pytest.mark.asyncio
    async def test_update_segment_keeps_others(self):
        """Test editing one segment leaves its siblings alone."""
        await self.engine.add_entry(ALICE_ID, DAY, "WORK", project_id=100, hours=5, customer_id=10)
        ledger = await self.engine.add_entry(ALICE_ID, DAY, "WORK", project_id=101, hours=3)
        first, second = ledger.worked_hours

        updated = await self.engine.update_segment(ALICE_ID, DAY, second.id, project_id=200, hours=4)

        assert [(s.id, s.project_id, s.hours) for s in updated.worked_hours] == [
            (first.id, 100, 5), (second.id, 200, 4)
        ]

    @pytest.mark.asyncio
    async def test_changing_project_sets_customer(self):
        """Test a new project replaces the old customer."""
        ledger = await self.engine.add_entry(ALICE_ID, DAY, "WORK", project_id=100, hours=5, customer_id=10)

        updated = await self.engine.update_segment(
            ALICE_ID, DAY, ledger.worked_hours[0].id, project_id=200, customer_id=20
        )

        assert updated.worked_hours[0].customer_id == 20
        assert updated.worked_hours[0].hours == 5

    @pytest.mark.asyncio
    async def test_update_respects_daily_cap(self):
        """Test editing a segment cannot push the day over the daily cap."""
        await self.engine.add_entry(ALICE_ID, DAY, "WORK", project_id=100, hours=20)
        ledger = await self.engine.add_entry(ALICE_ID, DAY, "WORK", project_id=101, hours=2)

        with pytest.raises(ValidationError, match="per day"):
            await self.engine.update_segment(ALICE_ID, DAY, ledger.worked_hours[1].id, hours=6)

        assert self.repository.only_ledger().total_worked_hours == 22

    @pytest.mark.asyncio
    async def test_update_missing_day(self):
        """Test editing a day without a ledger is not found."""
        with pytest.raises(NotFoundError):
            await self.engine.update_segment(ALICE_ID, DAY, 1, hours=2)

    @pytest.mark.asyncio
    async def test_update_missing_segment(self):
        """Test editing an unknown segment is not found."""
        await self.engine.add_entry(ALICE_ID, DAY, "WORK", project_id=100, hours=5)

        with pytest.raises(NotFoundError, match="WorkSegment"):
            await self.engine.update_segment(ALICE_ID, DAY, 999, hours=2)

    @pytest.mark.asyncio
    async def test_update_validates_hours(self):
        """Test edited hours must be positive."""
        with pytest.raises(ValidationError):
            await self.engine.update_segment(ALICE_ID, DAY, 1, hours=-1)


class TestReconciliationEngineDelete:
    """Test cases for deleting entries."""

    def setup_method(self):
        self.repository = InMemoryDayLedgerRepository()
        self.engine = ReconciliationEngine(self.repository)
        self.classifier = EntryClassifier()

    async def entries(self):
        ledger = await self.engine.get_day(ALICE_ID, DAY)
        return self.classifier.classify_ledger(ledger) if ledger else []

    @pytest.mark.asyncio
    async def test_delete_twice_is_harmless(self):
        """Test deleting the same entry twice returns False the second time."""
        await self.engine.add_entry(ALICE_ID, DAY, "WORK", project_id=100, hours=5)
        await self.engine.add_entry(ALICE_ID, DAY, "WORK", project_id=101, hours=3)
        entry = (await self.entries())[0]

        assert await self.engine.delete_entry(entry) is True
        assert await self.engine.delete_entry(entry) is False
        assert [e.project_id for e in await self.entries()] == [101]

    @pytest.mark.asyncio
    async def test_deleting_last_segment_drops_ledger(self):
        """Test an emptied ledger is removed."""
        await self.engine.add_entry(ALICE_ID, DAY, "WORK", project_id=100, hours=5)
        entry = (await self.entries())[0]

        assert await self.engine.delete_entry(entry) is True
        assert self.repository.ledgers == {}

    @pytest.mark.asyncio
    async def test_deleting_last_segment_keeps_permits(self):
        """Test a ledger still holding permits survives its last segment."""
        await self.engine.add_entry(ALICE_ID, DAY, "WORK", project_id=100, hours=5)
        await self.engine.add_entry(ALICE_ID, DAY, "PERMIT", hours=2)
        work = (await self.entries())[0]

        await self.engine.delete_entry(work)

        remaining = await self.entries()
        assert [e.entry_type for e in remaining] == [EntryType.PERMIT]
        assert remaining[0].permits_hours == 2

    @pytest.mark.asyncio
    async def test_delete_leave_removes_ledger(self):
        """Test deleting a leave entry deletes the day."""
        await self.engine.add_entry(ALICE_ID, DAY, "VACATION")
        entry = (await self.entries())[0]

        assert await self.engine.delete_entry(entry) is True
        assert await self.engine.delete_entry(entry) is False
        assert self.repository.ledgers == {}

    @pytest.mark.asyncio
    async def test_delete_synthetic_permit_keeps_work(self):
        """Test deleting the split-off permit only clears permit hours."""
        await self.engine.add_entry(ALICE_ID, DAY, "WORK", project_id=100, hours=6)
        await self.engine.add_entry(ALICE_ID, DAY, "PERMIT", hours=2)
        permit = (await self.entries())[-1]

        assert await self.engine.delete_entry(permit) is True
        assert await self.engine.delete_entry(permit) is False

        ledger = self.repository.only_ledger()
        assert ledger.permits_hours == 0
        assert len(ledger.worked_hours) == 1

    @pytest.mark.asyncio
    async def test_delete_permit_only_day(self):
        """Test deleting a permit-only day removes the ledger."""
        await self.engine.add_entry(ALICE_ID, DAY, "PERMIT", hours=3)
        permit = (await self.entries())[0]

        assert await self.engine.delete_entry(permit) is True
        assert self.repository.ledgers == {}
