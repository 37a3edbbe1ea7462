"""타각 레포지토리 — Punch Store.

Punch Repository — Durable keyed storage of punch records.
Provides get/list/upsert/delete by id and by worker. Every write validates
the pair reference (EXIT -> ENTRY of the same worker), and deletes repair
the pair they break.
"""

from datetime import date, datetime, time, timedelta, timezone
from typing import Sequence

from sqlalchemy import Select, exists, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import aliased

from timeclock.models.punch import PunchKind, PunchRecord, PunchStatus
from timeclock.repositories.base import BaseRepository
from timeclock.utils.clock import as_utc
from timeclock.utils.exceptions import ValidationError


def _day_start(value: date) -> datetime:
    return datetime.combine(value, time.min, tzinfo=timezone.utc)


class PunchRepository(BaseRepository[PunchRecord]):
    """타각 기록 레포지토리.

    Punch record repository with worker/date/location filtering,
    reverse pair lookups and pair-preserving deletes.

    Extends:
        BaseRepository[PunchRecord]
    """

    def __init__(self) -> None:
        super().__init__(PunchRecord)

    def _filtered(
        self,
        worker_id: str | None = None,
        date_from: date | None = None,
        date_to: date | None = None,
        location_id: str | None = None,
        sector_id: str | None = None,
        status: str | None = None,
        kind: str | None = None,
    ) -> Select:
        query: Select = select(PunchRecord)

        if worker_id is not None:
            query = query.where(PunchRecord.worker_id == worker_id)
        if date_from is not None:
            query = query.where(PunchRecord.timestamp >= _day_start(date_from))
        if date_to is not None:
            # 종료일 포함 — inclusive end date
            query = query.where(PunchRecord.timestamp < _day_start(date_to + timedelta(days=1)))
        if location_id is not None:
            query = query.where(PunchRecord.location_id == location_id)
        if sector_id is not None:
            query = query.where(PunchRecord.sector_id == sector_id)
        if status is not None:
            query = query.where(PunchRecord.status == status)
        if kind is not None:
            query = query.where(PunchRecord.kind == kind)

        return query.order_by(PunchRecord.timestamp.asc(), PunchRecord.id.asc())

    async def list_by_worker(
        self,
        db: AsyncSession,
        worker_id: str,
        date_from: date | None = None,
        date_to: date | None = None,
        location_id: str | None = None,
    ) -> Sequence[PunchRecord]:
        """특정 작업자의 타각 목록을 조회합니다.

        List a worker's punches, oldest first.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            worker_id: 작업자 ID (Worker id)
            date_from: 시작일, UTC 기준 포함 (Inclusive start date, UTC)
            date_to: 종료일, UTC 기준 포함 (Inclusive end date, UTC)
            location_id: 병원 필터, 선택 (Optional location filter)

        Returns:
            Sequence[PunchRecord]: 타각 목록 (Punches ordered by timestamp, id)
        """
        query = self._filtered(worker_id, date_from, date_to, location_id)
        result = await db.execute(query)
        return result.scalars().all()

    async def list_all(
        self,
        db: AsyncSession,
        worker_id: str | None = None,
        date_from: date | None = None,
        date_to: date | None = None,
        location_id: str | None = None,
        sector_id: str | None = None,
        status: str | None = None,
        kind: str | None = None,
    ) -> Sequence[PunchRecord]:
        """필터 조건에 맞는 모든 타각을 조회합니다.

        List every punch matching the optional filters, oldest first.
        """
        query = self._filtered(worker_id, date_from, date_to, location_id, sector_id, status, kind)
        result = await db.execute(query)
        return result.scalars().all()

    async def list_referencing(
        self,
        db: AsyncSession,
        punch_id: str,
    ) -> Sequence[PunchRecord]:
        """pair_ref로 이 타각을 가리키는 타각 목록 — Punches whose pair_ref is punch_id."""
        query: Select = (
            select(PunchRecord)
            .where(PunchRecord.pair_ref == punch_id)
            .order_by(PunchRecord.timestamp.asc(), PunchRecord.id.asc())
        )
        result = await db.execute(query)
        return result.scalars().all()

    async def get_latest_open_entry(
        self,
        db: AsyncSession,
        worker_id: str,
        before: datetime,
    ) -> PunchRecord | None:
        """EXIT가 닫을 수 있는 가장 최근 ENTRY를 조회합니다.

        Latest OPEN ENTRY of the worker strictly before `before` that no EXIT
        references yet. An entry already claimed by an exit (e.g. a pending
        missing-exit justification) is never offered a second one.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            worker_id: 작업자 ID (Worker id)
            before: 퇴근 시각 (Exit instant; the entry must be earlier)

        Returns:
            PunchRecord | None: 후보 ENTRY 또는 None (Candidate entry or None)
        """
        referencing = aliased(PunchRecord)
        query: Select = (
            select(PunchRecord)
            .where(PunchRecord.worker_id == worker_id)
            .where(PunchRecord.kind == PunchKind.ENTRY.value)
            .where(PunchRecord.status == PunchStatus.OPEN.value)
            .where(PunchRecord.timestamp < as_utc(before))
            .where(~exists().where(referencing.pair_ref == PunchRecord.id))
            .order_by(PunchRecord.timestamp.desc(), PunchRecord.id.desc())
            .limit(1)
        )
        result = await db.execute(query)
        return result.scalar_one_or_none()

    async def validate_pair_ref(
        self,
        db: AsyncSession,
        record: PunchRecord,
    ) -> None:
        """pair_ref 불변식 검증 — pair_ref may only point from an EXIT to an ENTRY of the same worker.

        Raises:
            ValidationError: 불변식 위반 시 (When the invariant is violated)
        """
        if record.pair_ref is None:
            return
        if record.kind != PunchKind.EXIT:
            raise ValidationError(f"Only an EXIT may carry pair_ref (punch {record.id} is {record.kind})")
        if record.pair_ref == record.id:
            raise ValidationError("A punch cannot reference itself")

        # 검증 중 미확정 변경이 flush되지 않도록 — keep pending changes out of the store until validated
        with db.no_autoflush:
            target: PunchRecord | None = await self.get_by_id(db, record.pair_ref)
        if target is None:
            raise ValidationError(f"pair_ref {record.pair_ref} does not exist")
        if target.kind != PunchKind.ENTRY:
            raise ValidationError(f"pair_ref {record.pair_ref} is not an ENTRY")
        if target.worker_id != record.worker_id:
            raise ValidationError("pair_ref points to another worker's punch")

    async def upsert(
        self,
        db: AsyncSession,
        db_obj: PunchRecord,
    ) -> PunchRecord:
        """타각을 검증 후 저장합니다 — Validate pair_ref and the timestamp, then insert or overwrite."""
        db_obj.timestamp = as_utc(db_obj.timestamp)
        await self.validate_pair_ref(db, db_obj)
        return await super().upsert(db, db_obj)

    async def delete(
        self,
        db: AsyncSession,
        record_id: str,
    ) -> bool:
        """관리자 삭제 — 짝을 함께 복구합니다.

        Administrative delete that repairs the pair:
        deleting an ENTRY also deletes every EXIT that references it;
        deleting an EXIT reopens the ENTRY it referenced.

        Returns:
            bool: 삭제 여부 (False when the punch did not exist)
        """
        target: PunchRecord | None = await self.get_by_id(db, record_id)
        if target is None:
            return False

        if target.kind == PunchKind.ENTRY:
            for exit_punch in await self.list_referencing(db, target.id):
                await db.delete(exit_punch)
        elif target.kind == PunchKind.EXIT and target.pair_ref:
            entry: PunchRecord | None = await self.get_by_id(db, target.pair_ref)
            if entry is not None and entry.status == PunchStatus.CLOSED:
                entry.status = PunchStatus.OPEN.value

        await db.delete(target)
        await db.flush()
        return True


# 싱글턴 인스턴스 — Singleton instance
punch_repository: PunchRepository = PunchRepository()
