"""승인 조정 서비스 테스트.

Reconciliation service tests — propagation to linked, paired and
referencing punches, idempotency, and validation before any write.
"""

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession

from timeclock.models.justification import Decision, Justification, JustificationReason, JustificationStatus
from timeclock.models.punch import PunchKind, PunchStatus
from timeclock.repositories.punch_repository import punch_repository
from timeclock.services.justification_service import justification_service
from timeclock.services.pairing_service import pair
from timeclock.services.reconciliation_service import reconciliation_service
from timeclock.services.status_service import ShiftLabel, resolve_status
from timeclock.utils.exceptions import NotFoundError, ValidationError

from tests.conftest import add_punch, at


@pytest_asyncio.fixture
async def missing_shift(db: AsyncSession) -> Justification:
    """출퇴근 모두 누락 소명 — ENTRY + EXIT (PENDING), justification on the EXIT."""
    justification = await justification_service.submit_missing_shift(
        db, "w1", "Worker w1", at(8), at(17), JustificationReason.FORGOT
    )
    await db.commit()
    return justification


async def _punches(db: AsyncSession):
    return await punch_repository.list_by_worker(db, "w1")


class TestApprove:
    """승인 전파."""

    async def test_approve_closes_both_sides(self, db: AsyncSession, missing_shift):
        result = await reconciliation_service.decide(db, missing_shift.id, Decision.APPROVE, "Dr. Ana")
        await db.commit()

        assert result.status == JustificationStatus.APPROVED
        assert result.decided_by == "Dr. Ana"
        assert result.decided_at is not None
        for punch in await _punches(db):
            assert punch.status == PunchStatus.CLOSED
            assert punch.approved_by == "Dr. Ana"

        shifts = pair(await _punches(db))
        assert len(shifts) == 1
        status = resolve_status(shifts[0])
        assert status.label == ShiftLabel.CLOSED
        assert status.detail == "Dr. Ana"

    async def test_approve_twice_is_a_no_op(self, db: AsyncSession, missing_shift):
        first = await reconciliation_service.decide(db, missing_shift.id, Decision.APPROVE, "Dr. Ana")
        await db.commit()
        decided_at = first.decided_at
        before = [(p.id, p.status, p.approved_by) for p in await _punches(db)]

        second = await reconciliation_service.decide(db, missing_shift.id, Decision.APPROVE, "Dr. Ana")
        await db.commit()

        assert second.decided_at == decided_at
        assert [(p.id, p.status, p.approved_by) for p in await _punches(db)] == before

    async def test_missing_entry_reaches_exit_by_reverse_reference(self, db: AsyncSession):
        orphan = await add_punch(db, PunchKind.EXIT, at(17), punch_id="x1")
        justification = await justification_service.submit_missing_entry(
            db, "w1", "Worker w1", orphan.id, at(8), JustificationReason.DEVICE_FAILURE
        )
        await db.commit()

        await reconciliation_service.decide(db, justification.id, Decision.APPROVE, "Dr. Ana")
        await db.commit()

        exit_punch = await punch_repository.get_by_id(db, "x1")
        assert exit_punch.status == PunchStatus.CLOSED
        assert exit_punch.approved_by == "Dr. Ana"
        shifts = pair(await _punches(db))
        assert len(shifts) == 1
        assert resolve_status(shifts[0]).label == ShiftLabel.CLOSED

    async def test_missing_linked_punch_is_logged_not_raised(self, db: AsyncSession, missing_shift):
        await punch_repository.delete(db, missing_shift.linked_punch_id)
        await db.commit()

        result = await reconciliation_service.decide(db, missing_shift.id, Decision.APPROVE, "Dr. Ana")

        assert result.status == JustificationStatus.APPROVED


class TestReject:
    """거절 전파 및 검증."""

    async def test_reject_marks_every_linked_punch(self, db: AsyncSession, missing_shift):
        await reconciliation_service.decide(db, missing_shift.id, Decision.REJECT, "Dr. Ana", reason="no record")
        await db.commit()

        for punch in await _punches(db):
            assert punch.status == PunchStatus.REJECTED
            assert punch.rejected_by == "Dr. Ana"
            assert punch.rejection_reason == "no record"
            assert punch.approved_by is None

        status = resolve_status(pair(await _punches(db))[0])
        assert status.label == ShiftLabel.REJECTED
        assert status.detail == "Dr. Ana - no record"

    async def test_reject_without_reason_writes_nothing(self, db: AsyncSession, missing_shift):
        with pytest.raises(ValidationError):
            await reconciliation_service.decide(db, missing_shift.id, Decision.REJECT, "Dr. Ana", reason="  ")

        assert missing_shift.status == JustificationStatus.PENDING
        assert all(p.status == PunchStatus.PENDING for p in await _punches(db))

    async def test_opposite_decision_last_write_wins(self, db: AsyncSession, missing_shift):
        await reconciliation_service.decide(db, missing_shift.id, Decision.REJECT, "Dr. Ana", reason="late")
        await db.commit()

        result = await reconciliation_service.decide(db, missing_shift.id, Decision.APPROVE, "Dr. Bia")
        await db.commit()

        assert result.status == JustificationStatus.APPROVED
        assert result.rejection_reason is None
        for punch in await _punches(db):
            assert punch.status == PunchStatus.CLOSED
            assert punch.approved_by == "Dr. Bia"
            assert punch.rejected_by is None

    async def test_unknown_justification(self, db: AsyncSession):
        with pytest.raises(NotFoundError):
            await reconciliation_service.decide(db, "nope", Decision.APPROVE, "Dr. Ana")
