"""승인 조정 서비스 — 관리자 결정을 연결된 모든 기록에 반영.

Reconciliation Service — Applies a manager's approve/reject decision on a
justification to every record linked to it: the justification itself, the
punch it governs, that punch's paired ENTRY (forward pair_ref) and every
punch whose pair_ref points at the governed punch (reverse reference).

Writes happen in a fixed order (justification, linked, paired, referencing)
inside the caller's transaction; the route commits once. Each update is
skipped when the record already holds the target state, so re-running the
same decision is a no-op.
"""

from datetime import datetime
from typing import Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from timeclock.models.justification import Decision, Justification, JustificationStatus
from timeclock.models.punch import PunchRecord, PunchStatus
from timeclock.repositories.justification_repository import justification_repository
from timeclock.repositories.punch_repository import punch_repository
from timeclock.utils.clock import utcnow
from timeclock.utils.exceptions import NotFoundError, ValidationError
from timeclock.utils.log import get_logger

logger = get_logger("reconciliation")


class ReconciliationService:
    """관리자 결정 조정 서비스.

    Reconciliation service for approve/reject decisions.
    """

    def _apply(
        self,
        punch: PunchRecord,
        decision: Decision,
        actor: str,
        reason: str | None,
    ) -> bool:
        """타각 하나에 결정을 적용합니다. 변경 여부 반환.

        Apply a decision to one punch. Returns False when the punch already
        holds the target state.
        """
        if decision == Decision.APPROVE:
            target = (PunchStatus.CLOSED.value, actor, None, None)
        else:
            target = (PunchStatus.REJECTED.value, None, actor, reason)

        current = (punch.status, punch.approved_by, punch.rejected_by, punch.rejection_reason)
        if current == target:
            return False

        punch.status, punch.approved_by, punch.rejected_by, punch.rejection_reason = target
        return True

    async def decide(
        self,
        db: AsyncSession,
        justification_id: str,
        decision: Decision,
        actor: str,
        reason: str | None = None,
    ) -> Justification:
        """소명에 대한 관리자 결정을 적용합니다.

        Apply a manager decision to a justification and propagate it to every
        linked punch. Missing secondary punches are logged and skipped.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            justification_id: 소명 ID (Justification id)
            decision: 승인 또는 거절 (APPROVE or REJECT)
            actor: 결정한 관리자 이름 (Deciding manager's display name)
            reason: 거절 사유, 거절 시 필수 (Rejection reason, required on REJECT)

        Returns:
            Justification: 갱신된 소명 (Updated justification)

        Raises:
            NotFoundError: 소명이 없을 때 (When the justification does not exist)
            ValidationError: 사유 없는 거절 (REJECT without a reason)
        """
        justification: Justification | None = await justification_repository.get_by_id(db, justification_id)
        if justification is None:
            raise NotFoundError("소명을 찾을 수 없습니다 (Justification not found)")

        reason = reason.strip() if reason else None
        if decision == Decision.REJECT and not reason:
            raise ValidationError("거절 사유가 필요합니다 (A reason is required to reject)")

        # 1. 소명 갱신 — Update the justification itself
        target_status = (
            JustificationStatus.APPROVED if decision == Decision.APPROVE else JustificationStatus.REJECTED
        )
        target_reason: str | None = reason if decision == Decision.REJECT else None
        same_decision: bool = (
            justification.status == target_status
            and justification.decided_by == actor
            and justification.rejection_reason == target_reason
        )
        if not same_decision:
            now: datetime = utcnow()
            justification.status = target_status.value
            justification.decided_by = actor
            justification.decided_at = now
            justification.rejection_reason = target_reason

        changed: list[str] = []

        # 2. 대상 타각 — Linked punch
        linked: PunchRecord | None = None
        if justification.linked_punch_id:
            linked = await punch_repository.get_by_id(db, justification.linked_punch_id)
            if linked is None:
                logger.warning(
                    "justification %s links missing punch %s",
                    justification.id,
                    justification.linked_punch_id,
                )
        else:
            logger.warning("justification %s has no linked punch", justification.id)

        if linked is not None:
            if self._apply(linked, decision, actor, reason):
                changed.append(linked.id)

            # 3. 짝 ENTRY — Forward pair reference
            if linked.pair_ref:
                paired: PunchRecord | None = await punch_repository.get_by_id(db, linked.pair_ref)
                if paired is None:
                    logger.warning("punch %s pairs with missing punch %s", linked.id, linked.pair_ref)
                elif self._apply(paired, decision, actor, reason):
                    changed.append(paired.id)

            # 4. 역참조 EXIT — Punches referencing the linked punch
            referencing: Sequence[PunchRecord] = await punch_repository.list_referencing(db, linked.id)
            for punch in referencing:
                if self._apply(punch, decision, actor, reason):
                    changed.append(punch.id)

        await db.flush()
        logger.info(
            "decision %s on justification %s by %s updated punches %s",
            decision.value,
            justification.id,
            actor,
            changed,
        )
        return justification


# 싱글턴 인스턴스 — Singleton instance
reconciliation_service: ReconciliationService = ReconciliationService()
