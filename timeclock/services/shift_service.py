"""근무 조회 서비스 — 타각 로드, 짝짓기, 상태 판정, 응답 구성.

Shift Service — Loads punches for a query scope, pairs them into shifts,
resolves each shift's display status and builds response dicts with
directory names resolved.
"""

from datetime import date
from typing import Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from timeclock.models.justification import Justification
from timeclock.models.punch import PunchRecord
from timeclock.repositories.directory_repository import (
    location_repository,
    sector_repository,
    worker_repository,
)
from timeclock.repositories.justification_repository import justification_repository
from timeclock.repositories.punch_repository import punch_repository
from timeclock.services.pairing_service import Shift, pair
from timeclock.services.status_service import ShiftStatus, resolve_status
from timeclock.utils.clock import as_utc

UNKNOWN_NAME: str = "Unknown"


def _punch_dict(punch: PunchRecord | None) -> dict | None:
    if punch is None:
        return None
    return {
        "id": punch.id,
        "timestamp": as_utc(punch.timestamp),
        "kind": punch.kind,
        "origin": punch.origin,
        "status": punch.status,
        "approved_by": punch.approved_by,
        "rejected_by": punch.rejected_by,
        "rejection_reason": punch.rejection_reason,
        "pair_ref": punch.pair_ref,
        "note": punch.note,
    }


class ShiftService:
    """근무 조회 서비스.

    Shift query service combining the punch store, the pairing engine
    and the status resolver.
    """

    async def list_shifts(
        self,
        db: AsyncSession,
        worker_id: str | None = None,
        date_from: date | None = None,
        date_to: date | None = None,
        location_id: str | None = None,
        sector_id: str | None = None,
        ascending: bool = False,
    ) -> list[dict]:
        """범위 내 근무 목록을 조회합니다.

        List shifts for a query scope. Pairing always runs over the whole
        loaded set; the sector filter is applied to the derived shifts so
        that an ENTRY and its EXIT are never split by the filter.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            worker_id: 작업자 필터, 선택 (Optional worker filter)
            date_from: 시작일, 포함 (Inclusive start date)
            date_to: 종료일, 포함 (Inclusive end date)
            location_id: 병원 필터, 선택 (Optional location filter)
            sector_id: 부서 필터, 선택 (Optional sector filter)
            ascending: 오래된 순 여부 (Oldest first instead of newest first)

        Returns:
            list[dict]: 근무 응답 목록 (Shift response dicts)
        """
        punches: Sequence[PunchRecord] = await punch_repository.list_all(
            db, worker_id=worker_id, date_from=date_from, date_to=date_to, location_id=location_id
        )
        justifications: Sequence[Justification] = await justification_repository.list_by_linked_punches(
            db, [p.id for p in punches]
        )

        shifts: list[Shift] = pair(punches, justifications, ascending=ascending)
        if sector_id is not None:
            shifts = [s for s in shifts if s.sector_id == sector_id]

        return await self.build_responses(db, shifts)

    async def build_responses(
        self,
        db: AsyncSession,
        shifts: list[Shift],
    ) -> list[dict]:
        """근무 응답 딕셔너리 목록을 구성합니다.

        Build shift response dicts, resolving worker, location and sector
        names in bulk. Missing directory rows show as "Unknown".
        """
        worker_names = await worker_repository.get_names(db, {s.worker_id for s in shifts})
        location_names = await location_repository.get_names(
            db, {s.location_id for s in shifts if s.location_id}
        )
        sector_names = await sector_repository.get_names(db, {s.sector_id for s in shifts if s.sector_id})

        responses: list[dict] = []
        for shift in shifts:
            status: ShiftStatus = resolve_status(shift)
            justification: Justification | None = shift.justification
            responses.append(
                {
                    "id": shift.anchor.id,
                    "worker_id": shift.worker_id,
                    "worker_name": worker_names.get(shift.worker_id) or shift.worker_name or UNKNOWN_NAME,
                    "date": shift.date,
                    "location_id": shift.location_id,
                    "location_name": (
                        location_names.get(shift.location_id, UNKNOWN_NAME)
                        if shift.location_id
                        else shift.location_label
                    ),
                    "sector_id": shift.sector_id,
                    "sector_name": sector_names.get(shift.sector_id, UNKNOWN_NAME) if shift.sector_id else None,
                    "entry": _punch_dict(shift.entry),
                    "exit": _punch_dict(shift.exit),
                    "status": status.label.value,
                    "status_detail": status.detail,
                    "justification_id": justification.id if justification else None,
                    "justification_status": justification.status if justification else None,
                }
            )
        return responses


# 싱글턴 인스턴스 — Singleton instance
shift_service: ShiftService = ShiftService()
