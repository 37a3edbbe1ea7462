"""소명 제출 서비스 — 누락 근무/퇴근/출근 소명 생성.

Justification Service — Worker-submitted justification requests. Each
request creates the missing punch(es) as MANUAL/PENDING and a PENDING
justification linked to them, in the caller's transaction:

    missing-shift  -> new ENTRY + new EXIT (EXIT.pair_ref = ENTRY), linked to the EXIT
    missing-exit   -> new EXIT for an existing ENTRY, linked to the EXIT
    missing-entry  -> new ENTRY for an orphan EXIT (EXIT.pair_ref = new ENTRY),
                      linked to the ENTRY; the decision reaches the EXIT by reverse reference
"""

from datetime import datetime
from typing import Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from timeclock.models.justification import Justification, JustificationReason, JustificationStatus
from timeclock.models.punch import PunchKind, PunchOrigin, PunchRecord, PunchStatus, new_id
from timeclock.repositories.justification_repository import justification_repository
from timeclock.repositories.punch_repository import punch_repository
from timeclock.utils.clock import as_utc, utcnow
from timeclock.utils.exceptions import ForbiddenError, NotFoundError, ValidationError
from timeclock.utils.log import get_logger

logger = get_logger("justifications")


def _check_reason(reason: JustificationReason, description: str | None) -> None:
    if reason == JustificationReason.OTHER and not (description and description.strip()):
        raise ValidationError("기타 사유는 설명이 필요합니다 (Description is required when reason is OTHER)")


def _manual_punch(
    source: PunchRecord | None,
    worker_id: str,
    worker_name: str,
    kind: PunchKind,
    timestamp: datetime,
    location_id: str | None = None,
    sector_id: str | None = None,
    location_label: str | None = None,
    pair_ref: str | None = None,
) -> PunchRecord:
    """소명용 수동 타각 — MANUAL/PENDING punch, inheriting the place of `source` when given."""
    return PunchRecord(
        id=new_id(),
        worker_id=worker_id,
        worker_name=worker_name,
        timestamp=as_utc(timestamp),
        kind=kind.value,
        origin=PunchOrigin.MANUAL.value,
        status=PunchStatus.PENDING.value,
        location_id=location_id or (source.location_id if source else None),
        sector_id=sector_id or (source.sector_id if source else None),
        location_label=location_label or (source.location_label if source else None),
        code=source.code if source else None,
        pair_ref=pair_ref,
    )


class JustificationService:
    """소명 제출 및 조회 서비스.

    Justification submission and listing service.
    """

    async def _owned_punch(
        self,
        db: AsyncSession,
        punch_id: str,
        worker_id: str,
    ) -> PunchRecord:
        punch: PunchRecord | None = await punch_repository.get_by_id(db, punch_id)
        if punch is None:
            raise NotFoundError("타각을 찾을 수 없습니다 (Punch not found)")
        if punch.worker_id != worker_id:
            raise ForbiddenError("본인의 타각만 소명할 수 있습니다 (Only your own punches can be justified)")
        return punch

    async def _create(
        self,
        db: AsyncSession,
        worker_id: str,
        worker_name: str,
        linked: PunchRecord,
        reason: JustificationReason,
        description: str | None,
    ) -> Justification:
        justification = Justification(
            id=new_id(),
            worker_id=worker_id,
            worker_name=worker_name,
            sector_id=linked.sector_id,
            linked_punch_id=linked.id,
            reason=reason.value,
            description=description.strip() if description else None,
            status=JustificationStatus.PENDING.value,
            requested_at=utcnow(),
        )
        stored: Justification = await justification_repository.upsert(db, justification)
        logger.info("justification %s submitted by worker %s for punch %s", stored.id, worker_id, linked.id)
        return stored

    async def submit_missing_shift(
        self,
        db: AsyncSession,
        worker_id: str,
        worker_name: str,
        entry_at: datetime,
        exit_at: datetime,
        reason: JustificationReason,
        description: str | None = None,
        location_id: str | None = None,
        sector_id: str | None = None,
        location_label: str | None = None,
    ) -> Justification:
        """출퇴근이 모두 누락된 근무를 소명합니다.

        Justify a shift whose entry and exit are both missing.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            worker_id: 작업자 ID (Requesting worker)
            worker_name: 작업자 이름 (Worker display name)
            entry_at: 출근 시각 (Claimed entry instant)
            exit_at: 퇴근 시각 (Claimed exit instant)
            reason: 사유 분류 (Categorical reason)
            description: 설명, 기타 사유 시 필수 (Description, required for OTHER)
            location_id: 병원 ID, 선택 (Optional location)
            sector_id: 부서 ID, 선택 (Optional sector)
            location_label: 장소 표시, 선택 (Optional free-text place)

        Returns:
            Justification: 생성된 소명 (Created justification, linked to the new EXIT)

        Raises:
            ValidationError: 퇴근이 출근 이후가 아니거나 설명 누락
                             (Exit not after entry, or OTHER without description)
        """
        _check_reason(reason, description)
        if as_utc(exit_at) <= as_utc(entry_at):
            raise ValidationError("퇴근은 출근 이후여야 합니다 (Exit must be after the entry)")

        entry: PunchRecord = await punch_repository.upsert(
            db,
            _manual_punch(
                None, worker_id, worker_name, PunchKind.ENTRY, entry_at, location_id, sector_id, location_label
            ),
        )
        exit_punch: PunchRecord = await punch_repository.upsert(
            db,
            _manual_punch(entry, worker_id, worker_name, PunchKind.EXIT, exit_at, pair_ref=entry.id),
        )
        return await self._create(db, worker_id, worker_name, exit_punch, reason, description)

    async def submit_missing_exit(
        self,
        db: AsyncSession,
        worker_id: str,
        worker_name: str,
        entry_id: str,
        exit_at: datetime,
        reason: JustificationReason,
        description: str | None = None,
    ) -> Justification:
        """퇴근이 누락된 ENTRY를 소명합니다.

        Justify a missing exit for an existing ENTRY of the caller.

        Raises:
            NotFoundError: ENTRY가 없을 때 (When the entry does not exist)
            ForbiddenError: 다른 작업자의 타각 (Entry of another worker)
            ValidationError: ENTRY가 아니거나 이미 퇴근이 있거나 시각 오류
                             (Not an ENTRY, already has an exit, or exit not after it)
        """
        _check_reason(reason, description)
        entry: PunchRecord = await self._owned_punch(db, entry_id, worker_id)
        if entry.kind != PunchKind.ENTRY:
            raise ValidationError("출근 타각이 아닙니다 (Target punch is not an ENTRY)")
        if as_utc(exit_at) <= as_utc(entry.timestamp):
            raise ValidationError("퇴근은 출근 이후여야 합니다 (Exit must be after the entry)")

        existing: Sequence[PunchRecord] = await punch_repository.list_referencing(db, entry.id)
        if existing:
            raise ValidationError("이미 퇴근 기록이 있습니다 (The entry already has an exit)")

        exit_punch: PunchRecord = await punch_repository.upsert(
            db,
            _manual_punch(entry, worker_id, worker_name, PunchKind.EXIT, exit_at, pair_ref=entry.id),
        )
        return await self._create(db, worker_id, worker_name, exit_punch, reason, description)

    async def submit_missing_entry(
        self,
        db: AsyncSession,
        worker_id: str,
        worker_name: str,
        exit_id: str,
        entry_at: datetime,
        reason: JustificationReason,
        description: str | None = None,
    ) -> Justification:
        """출근이 누락된 고아 EXIT를 소명합니다.

        Justify a missing entry for an orphan EXIT of the caller. The EXIT is
        re-pointed at the new ENTRY, and the justification governs the ENTRY.

        Raises:
            NotFoundError: EXIT가 없을 때 (When the exit does not exist)
            ForbiddenError: 다른 작업자의 타각 (Exit of another worker)
            ValidationError: 고아 EXIT가 아니거나 시각 오류
                             (Not an orphan EXIT, or entry not before it)
        """
        _check_reason(reason, description)
        exit_punch: PunchRecord = await self._owned_punch(db, exit_id, worker_id)
        if exit_punch.kind != PunchKind.EXIT or exit_punch.pair_ref:
            raise ValidationError("짝 없는 퇴근 타각이 아닙니다 (Target punch is not an orphan EXIT)")
        if as_utc(entry_at) >= as_utc(exit_punch.timestamp):
            raise ValidationError("출근은 퇴근 이전이어야 합니다 (Entry must be before the exit)")

        entry: PunchRecord = await punch_repository.upsert(
            db,
            _manual_punch(exit_punch, worker_id, worker_name, PunchKind.ENTRY, entry_at),
        )
        exit_punch.pair_ref = entry.id
        await punch_repository.upsert(db, exit_punch)
        return await self._create(db, worker_id, worker_name, entry, reason, description)

    def build_response(self, justification: Justification) -> dict:
        """소명 응답 딕셔너리 — Justification response dict with instants in UTC."""
        return {
            "id": justification.id,
            "worker_id": justification.worker_id,
            "worker_name": justification.worker_name,
            "sector_id": justification.sector_id,
            "linked_punch_id": justification.linked_punch_id,
            "reason": justification.reason,
            "description": justification.description,
            "status": justification.status,
            "requested_at": as_utc(justification.requested_at),
            "decided_at": as_utc(justification.decided_at) if justification.decided_at else None,
            "decided_by": justification.decided_by,
            "rejection_reason": justification.rejection_reason,
        }

    async def list_justifications(
        self,
        db: AsyncSession,
        status: JustificationStatus | None = None,
        worker_id: str | None = None,
    ) -> Sequence[Justification]:
        """소명 목록 — By worker (optionally by status) or by status alone; all pending by default."""
        if worker_id is not None:
            return await justification_repository.list_by_worker(db, worker_id, status)
        return await justification_repository.list_by_status(db, status or JustificationStatus.PENDING)


# 싱글턴 인스턴스 — Singleton instance
justification_service: JustificationService = JustificationService()
