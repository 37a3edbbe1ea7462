"""타각 기록 서비스 — 키오스크/수동 타각, 퇴근 기록, 관리자 삭제.

Punch Service — Records kiosk (biometric) and manual punches, closes an
ENTRY with an EXIT and performs administrative deletes through the store's
pair-repairing delete.
"""

from datetime import datetime
from typing import Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from timeclock.models.punch import PunchKind, PunchOrigin, PunchRecord, PunchStatus, new_id
from timeclock.repositories.punch_repository import punch_repository
from timeclock.utils.clock import as_utc
from timeclock.utils.exceptions import ConflictError, NotFoundError, ValidationError
from timeclock.utils.log import get_logger

logger = get_logger("punches")


class PunchService:
    """타각 기록 서비스.

    Punch recording service used by the kiosk and manager routes.
    """

    async def record_punch(
        self,
        db: AsyncSession,
        worker_id: str,
        worker_name: str,
        kind: PunchKind,
        timestamp: datetime,
        origin: PunchOrigin = PunchOrigin.BIOMETRIC,
        location_id: str | None = None,
        sector_id: str | None = None,
        location_label: str | None = None,
        code: str | None = None,
        note: str | None = None,
    ) -> PunchRecord:
        """타각 하나를 기록합니다.

        Record one punch. Biometric punches are OPEN; a biometric EXIT closes
        the worker's latest open ENTRY before it (the EXIT then carries the
        pair_ref and both sides become CLOSED). Without such an ENTRY the
        EXIT stays an OPEN orphan. Manual punches are PENDING until a manager
        decides.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            worker_id: 작업자 ID (Worker id)
            worker_name: 작업자 이름 (Worker display name)
            kind: 타각 종류 (Punch kind)
            timestamp: 타각 시각 (Instant of the event)
            origin: 출처 (BIOMETRIC or MANUAL)
            location_id: 병원 ID, 선택 (Optional location)
            sector_id: 부서 ID, 선택 (Optional sector)
            location_label: 장소 표시, 선택 (Optional free-text place)
            code: 등록 코드, 선택 (Optional registration code)
            note: 메모, 선택 (Optional note)

        Returns:
            PunchRecord: 저장된 타각 (Stored punch)
        """
        timestamp = as_utc(timestamp)
        manual: bool = origin == PunchOrigin.MANUAL
        punch = PunchRecord(
            id=new_id(),
            worker_id=worker_id,
            worker_name=worker_name,
            timestamp=timestamp,
            kind=kind.value,
            origin=origin.value,
            status=(PunchStatus.PENDING if manual else PunchStatus.OPEN).value,
            location_id=location_id,
            sector_id=sector_id,
            location_label=location_label,
            code=code,
            note=note,
        )

        if kind == PunchKind.EXIT and not manual:
            entry: PunchRecord | None = await punch_repository.get_latest_open_entry(db, worker_id, timestamp)
            if entry is not None:
                punch.pair_ref = entry.id
                punch.status = PunchStatus.CLOSED.value
                entry.status = PunchStatus.CLOSED.value
                # 퇴근 타각에 장소 정보가 없으면 출근 기준 — inherit the entry's place
                punch.location_id = punch.location_id or entry.location_id
                punch.sector_id = punch.sector_id or entry.sector_id
            else:
                logger.info("exit %s for worker %s recorded without an open entry", punch.id, worker_id)

        return await punch_repository.upsert(db, punch)

    async def record_exit(
        self,
        db: AsyncSession,
        entry_id: str,
        timestamp: datetime,
        origin: PunchOrigin = PunchOrigin.MANUAL,
        note: str | None = None,
    ) -> PunchRecord:
        """특정 ENTRY를 닫는 EXIT를 기록합니다.

        Record an EXIT that closes the given ENTRY. When the ENTRY is already
        CLOSED, an existing EXIT at the same instant is returned unchanged;
        any other EXIT is a conflict.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            entry_id: 닫을 ENTRY ID (ENTRY to close)
            timestamp: 퇴근 시각 (Exit instant)
            origin: 출처 (BIOMETRIC or MANUAL; manual exits stay PENDING)
            note: 메모, 선택 (Optional note)

        Returns:
            PunchRecord: EXIT 타각 (The recorded or already existing EXIT)

        Raises:
            NotFoundError: ENTRY가 없을 때 (When the entry does not exist)
            ValidationError: ENTRY가 아니거나 퇴근이 출근보다 이르거나 같을 때
                             (Target is not an ENTRY, or exit is not after it)
            ConflictError: 이미 다른 퇴근으로 닫혔을 때 (Entry already closed by another exit)
        """
        entry: PunchRecord | None = await punch_repository.get_by_id(db, entry_id)
        if entry is None:
            raise NotFoundError("출근 타각을 찾을 수 없습니다 (Entry punch not found)")
        if entry.kind != PunchKind.ENTRY:
            raise ValidationError("출근 타각이 아닙니다 (Target punch is not an ENTRY)")

        timestamp = as_utc(timestamp)
        if timestamp <= as_utc(entry.timestamp):
            raise ValidationError("퇴근은 출근 이후여야 합니다 (Exit must be after the entry)")

        existing: Sequence[PunchRecord] = await punch_repository.list_referencing(db, entry.id)
        if entry.status == PunchStatus.CLOSED or existing:
            for exit_punch in existing:
                if as_utc(exit_punch.timestamp) == timestamp:
                    return exit_punch
            raise ConflictError("이미 다른 퇴근으로 닫힌 출근입니다 (Entry already closed by another exit)")

        manual: bool = origin == PunchOrigin.MANUAL
        exit_punch = PunchRecord(
            id=new_id(),
            worker_id=entry.worker_id,
            worker_name=entry.worker_name,
            timestamp=timestamp,
            kind=PunchKind.EXIT.value,
            origin=origin.value,
            status=(PunchStatus.PENDING if manual else PunchStatus.CLOSED).value,
            location_id=entry.location_id,
            sector_id=entry.sector_id,
            location_label=entry.location_label,
            code=entry.code,
            note=note,
            pair_ref=entry.id,
        )
        stored: PunchRecord = await punch_repository.upsert(db, exit_punch)
        # 대기/거절 상태는 관리자 결정 전까지 유지 — only an OPEN entry is closed here
        if entry.status == PunchStatus.OPEN:
            entry.status = PunchStatus.CLOSED.value
            await db.flush()
        return stored

    def build_response(self, punch: PunchRecord) -> dict:
        """타각 응답 딕셔너리 — Punch response dict with the timestamp in UTC."""
        return {
            "id": punch.id,
            "worker_id": punch.worker_id,
            "worker_name": punch.worker_name,
            "timestamp": as_utc(punch.timestamp),
            "kind": punch.kind,
            "origin": punch.origin,
            "status": punch.status,
            "location_id": punch.location_id,
            "sector_id": punch.sector_id,
            "location_label": punch.location_label,
            "approved_by": punch.approved_by,
            "rejected_by": punch.rejected_by,
            "rejection_reason": punch.rejection_reason,
            "pair_ref": punch.pair_ref,
            "note": punch.note,
        }

    async def delete_punch(
        self,
        db: AsyncSession,
        punch_id: str,
    ) -> None:
        """관리자 삭제 — Administrative delete with pair repair.

        Raises:
            NotFoundError: 타각이 없을 때 (When the punch does not exist)
        """
        deleted: bool = await punch_repository.delete(db, punch_id)
        if not deleted:
            raise NotFoundError("타각을 찾을 수 없습니다 (Punch not found)")
        logger.info("punch %s deleted", punch_id)


# 싱글턴 인스턴스 — Singleton instance
punch_service: PunchService = PunchService()
