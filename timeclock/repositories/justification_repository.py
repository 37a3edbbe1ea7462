"""소명 레포지토리 — Justification Store.

Justification Repository — Durable keyed storage of justification requests.
Rows carrying a legacy status string are normalized to the canonical status
as they are read, and the normalization is written back so later reads do
not repeat it.
"""

from typing import Sequence

from sqlalchemy import Select, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from timeclock.models.justification import Justification, JustificationStatus
from timeclock.repositories.base import BaseRepository
from timeclock.utils.status_map import is_canonical_justification_status, normalize_justification_status

_CANONICAL: list[str] = [s.value for s in JustificationStatus]


class JustificationRepository(BaseRepository[Justification]):
    """소명 요청 레포지토리.

    Justification repository with status/worker/linked-punch queries.

    Extends:
        BaseRepository[Justification]
    """

    def __init__(self) -> None:
        super().__init__(Justification)

    async def _normalize(
        self,
        db: AsyncSession,
        rows: Sequence[Justification],
    ) -> Sequence[Justification]:
        """레거시 상태를 정규화하고 저장합니다 — Normalize legacy statuses in place and persist."""
        changed = False
        for row in rows:
            if not is_canonical_justification_status(row.status):
                row.status = normalize_justification_status(row.status).value
                changed = True
        if changed:
            await db.flush()
        return rows

    async def get_by_id(
        self,
        db: AsyncSession,
        record_id: str,
    ) -> Justification | None:
        """ID로 소명을 조회합니다 (레거시 상태 정규화 포함).

        Retrieve a justification by id, normalizing a legacy status.
        """
        record: Justification | None = await super().get_by_id(db, record_id)
        if record is not None:
            await self._normalize(db, [record])
        return record

    async def list_by_status(
        self,
        db: AsyncSession,
        status: JustificationStatus,
    ) -> Sequence[Justification]:
        """상태별 소명 목록을 조회합니다.

        List justifications with the given canonical status, oldest request first.
        Legacy rows are loaded too, normalized, and kept when they map to `status`.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            status: 정규 상태 (Canonical status)

        Returns:
            Sequence[Justification]: 소명 목록 (Matching justifications)
        """
        query: Select = (
            select(Justification)
            .where(or_(Justification.status == status.value, Justification.status.not_in(_CANONICAL)))
            .order_by(Justification.requested_at.asc(), Justification.id.asc())
        )
        result = await db.execute(query)
        rows = await self._normalize(db, result.scalars().all())
        return [row for row in rows if row.status == status]

    async def list_by_worker(
        self,
        db: AsyncSession,
        worker_id: str,
        status: JustificationStatus | None = None,
    ) -> Sequence[Justification]:
        """작업자별 소명 목록 — A worker's justifications, newest request first."""
        query: Select = (
            select(Justification)
            .where(Justification.worker_id == worker_id)
            .order_by(Justification.requested_at.desc(), Justification.id.asc())
        )
        result = await db.execute(query)
        rows = await self._normalize(db, result.scalars().all())
        if status is not None:
            return [row for row in rows if row.status == status]
        return rows

    async def list_by_linked_punches(
        self,
        db: AsyncSession,
        punch_ids: Sequence[str],
    ) -> Sequence[Justification]:
        """대상 타각 ID 목록으로 소명 조회 — Justifications governing any of the given punches."""
        if not punch_ids:
            return []
        query: Select = (
            select(Justification)
            .where(Justification.linked_punch_id.in_(list(punch_ids)))
            .order_by(Justification.requested_at.asc(), Justification.id.asc())
        )
        result = await db.execute(query)
        return await self._normalize(db, result.scalars().all())

    async def list_all(
        self,
        db: AsyncSession,
    ) -> Sequence[Justification]:
        """전체 소명 목록 (정규화 없이) — Every row as stored, used by the sweep."""
        result = await db.execute(select(Justification).order_by(Justification.id.asc()))
        return result.scalars().all()


# 싱글턴 인스턴스 — Singleton instance
justification_repository: JustificationRepository = JustificationRepository()
