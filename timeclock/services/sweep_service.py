"""일관성 스윕 서비스 — 운영자가 실행하는 데이터 복구 작업.

Consistency Sweep — Operator-triggered repair of the store. Each category
runs and commits on its own; a failing category is rolled back and recorded
in the report while the following categories still run. Every category is
idempotent, so a second run reports all-zero counts.
"""

from collections import defaultdict
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Awaitable, Callable, Sequence

from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from timeclock.config import settings
from timeclock.models.directory import Location, Manager, Sector, Worker
from timeclock.models.justification import Decision, Justification, JustificationStatus
from timeclock.models.punch import PunchKind, PunchRecord, PunchStatus
from timeclock.repositories.directory_repository import location_repository, manager_repository
from timeclock.repositories.justification_repository import justification_repository
from timeclock.repositories.punch_repository import punch_repository
from timeclock.utils.clock import as_utc
from timeclock.utils.log import get_logger
from timeclock.utils.status_map import (
    is_canonical_justification_status,
    is_canonical_punch_kind,
    is_canonical_punch_status,
    normalize_justification_status,
    normalize_punch_kind,
    normalize_punch_status,
)

logger = get_logger("sweep")

_EPOCH: datetime = datetime(1970, 1, 1, tzinfo=timezone.utc)


@dataclass
class SweepReport:
    """스윕 결과 — Counts of repaired rows per category, plus failures.

    Attributes:
        counts: 카테고리별 수정 건수 (Affected rows per category)
        errors: 실패한 카테고리와 메시지 (Failed categories with their messages)
    """

    counts: dict[str, int] = field(default_factory=dict)
    errors: list[str] = field(default_factory=list)

    @property
    def total(self) -> int:
        return sum(self.counts.values())


def _created_key(row: Location | Manager) -> tuple[datetime, str]:
    return (as_utc(row.created_at) if row.created_at else _EPOCH, row.id)


class SweepService:
    """일관성 스윕 서비스.

    Consistency sweep service. Categories run in a fixed order: directory
    deduplication, placeholder workers, dangling references, status
    normalization, then stuck records.
    """

    async def _dedupe_locations(self, db: AsyncSession) -> int:
        """슬러그 중복 병원 제거, 최신 유지 — Keep the most recently created location per slug."""
        rows: Sequence[Location] = await location_repository.get_all(db)
        groups: dict[str, list[Location]] = defaultdict(list)
        for row in rows:
            groups[row.slug].append(row)

        removed = 0
        for duplicates in groups.values():
            if len(duplicates) < 2:
                continue
            duplicates.sort(key=_created_key, reverse=True)
            keeper: Location = duplicates[0]
            for stale in duplicates[1:]:
                # 부서/타각 참조를 유지 대상으로 이전 — repoint references to the kept row
                await db.execute(
                    update(Sector).where(Sector.location_id == stale.id).values(location_id=keeper.id)
                )
                await db.execute(
                    update(PunchRecord)
                    .where(PunchRecord.location_id == stale.id)
                    .values(location_id=keeper.id)
                )
                await db.delete(stale)
                removed += 1
        return removed

    async def _dedupe_managers(self, db: AsyncSession) -> int:
        """사용자명 중복 관리자 제거, 최신 유지 — Keep the most recently created manager per username."""
        rows: Sequence[Manager] = await manager_repository.get_all(db)
        groups: dict[str, list[Manager]] = defaultdict(list)
        for row in rows:
            groups[row.username].append(row)

        removed = 0
        for duplicates in groups.values():
            if len(duplicates) < 2:
                continue
            duplicates.sort(key=_created_key, reverse=True)
            for stale in duplicates[1:]:
                await db.delete(stale)
                removed += 1
        return removed

    async def _placeholder_workers(self, db: AsyncSession, owners: dict[str, str]) -> int:
        known: set[str] = set((await db.execute(select(Worker.id))).scalars().all())
        created = 0
        for worker_id in sorted(owners):
            if worker_id in known:
                continue
            db.add(
                Worker(
                    id=worker_id,
                    name=owners[worker_id] or settings.PLACEHOLDER_WORKER_NAME,
                    is_placeholder=True,
                )
            )
            created += 1
        return created

    async def _workers_from_punches(self, db: AsyncSession) -> int:
        """타각 소유자 누락 시 임시 작업자 생성 — Placeholder workers for orphan punch owners."""
        owners: dict[str, str] = {}
        for row in (await db.execute(select(PunchRecord.worker_id, PunchRecord.worker_name))).all():
            owners[row.worker_id] = owners.get(row.worker_id) or row.worker_name
        return await self._placeholder_workers(db, owners)

    async def _workers_from_justifications(self, db: AsyncSession) -> int:
        """소명 작성자 누락 시 임시 작업자 생성 — Placeholder workers for orphan justification owners."""
        owners: dict[str, str] = {}
        for row in (await db.execute(select(Justification.worker_id, Justification.worker_name))).all():
            owners[row.worker_id] = owners.get(row.worker_id) or row.worker_name
        return await self._placeholder_workers(db, owners)

    async def _clear_justification_links(self, db: AsyncSession) -> int:
        """존재하지 않는 타각을 가리키는 소명 링크 제거 — Null out dangling linked_punch_id."""
        punch_ids: set[str] = set((await db.execute(select(PunchRecord.id))).scalars().all())
        cleared = 0
        for row in await justification_repository.list_all(db):
            if row.linked_punch_id and row.linked_punch_id not in punch_ids:
                row.linked_punch_id = None
                cleared += 1
        return cleared

    async def _clear_pair_refs(self, db: AsyncSession) -> int:
        """유효하지 않은 pair_ref 제거 — Null out pair_refs that break the EXIT -> ENTRY invariant."""
        punches: Sequence[PunchRecord] = await punch_repository.list_all(db)
        by_id: dict[str, PunchRecord] = {p.id: p for p in punches}
        cleared = 0
        for punch in punches:
            if not punch.pair_ref:
                continue
            target: PunchRecord | None = by_id.get(punch.pair_ref)
            valid: bool = (
                normalize_punch_kind(punch.kind) == PunchKind.EXIT
                and target is not None
                and target.id != punch.id
                and normalize_punch_kind(target.kind) == PunchKind.ENTRY
                and target.worker_id == punch.worker_id
            )
            if not valid:
                punch.pair_ref = None
                cleared += 1
        return cleared

    async def _normalize_punch_statuses(self, db: AsyncSession) -> int:
        normalized = 0
        for punch in await punch_repository.list_all(db):
            if not is_canonical_punch_status(punch.status):
                punch.status = normalize_punch_status(punch.status).value
                normalized += 1
        return normalized

    async def _normalize_justification_statuses(self, db: AsyncSession) -> int:
        normalized = 0
        for row in await justification_repository.list_all(db):
            if not is_canonical_justification_status(row.status):
                row.status = normalize_justification_status(row.status).value
                normalized += 1
        return normalized

    async def _normalize_punch_kinds(self, db: AsyncSession) -> int:
        normalized = 0
        for punch in await punch_repository.list_all(db):
            if is_canonical_punch_kind(punch.kind):
                continue
            kind: PunchKind | None = normalize_punch_kind(punch.kind)
            if kind is None:
                logger.warning("punch %s has unknown kind %r, left untouched", punch.id, punch.kind)
                continue
            punch.kind = kind.value
            normalized += 1
        return normalized

    async def _unstick_punches(self, db: AsyncSession) -> int:
        """결정이 기록됐지만 상태가 남은 타각 — Decided punches still OPEN/PENDING."""
        fixed = 0
        for punch in await punch_repository.list_all(db):
            if punch.status not in (PunchStatus.OPEN, PunchStatus.PENDING):
                continue
            if punch.rejected_by:
                punch.status = PunchStatus.REJECTED.value
                punch.approved_by = None
                fixed += 1
            elif punch.approved_by:
                punch.status = PunchStatus.CLOSED.value
                fixed += 1
        return fixed

    async def _unstick_justifications(self, db: AsyncSession) -> int:
        """결정자가 있지만 대기 중인 소명 — PENDING justifications whose decision already reached the punch."""
        fixed = 0
        for row in await justification_repository.list_all(db):
            if row.status != JustificationStatus.PENDING or not row.decided_by or not row.linked_punch_id:
                continue
            punch: PunchRecord | None = await punch_repository.get_by_id(db, row.linked_punch_id)
            if punch is None:
                continue

            decision: Decision | None = None
            if punch.status == PunchStatus.CLOSED and punch.approved_by == row.decided_by:
                decision = Decision.APPROVE
            elif punch.status == PunchStatus.REJECTED and punch.rejected_by == row.decided_by:
                decision = Decision.REJECT
            if decision is None:
                continue

            if decision == Decision.APPROVE:
                row.status = JustificationStatus.APPROVED.value
                row.rejection_reason = None
            else:
                row.status = JustificationStatus.REJECTED.value
                row.rejection_reason = row.rejection_reason or punch.rejection_reason
            fixed += 1
        return fixed

    def _categories(self) -> list[tuple[str, Callable[[AsyncSession], Awaitable[int]]]]:
        return [
            ("locations_deduplicated", self._dedupe_locations),
            ("managers_deduplicated", self._dedupe_managers),
            ("workers_from_punches", self._workers_from_punches),
            ("workers_from_justifications", self._workers_from_justifications),
            ("justification_links_cleared", self._clear_justification_links),
            ("punch_kinds_normalized", self._normalize_punch_kinds),
            ("pair_refs_cleared", self._clear_pair_refs),
            ("punch_statuses_normalized", self._normalize_punch_statuses),
            ("justification_statuses_normalized", self._normalize_justification_statuses),
            ("punches_unstuck", self._unstick_punches),
            ("justifications_unstuck", self._unstick_justifications),
        ]

    async def sweep(self, db: AsyncSession) -> SweepReport:
        """일관성 스윕을 실행합니다.

        Run every repair category, committing each one separately.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)

        Returns:
            SweepReport: 카테고리별 건수와 오류 (Per-category counts and errors)
        """
        report = SweepReport()
        for name, repair in self._categories():
            try:
                count: int = await repair(db)
                await db.commit()
            except SQLAlchemyError as exc:
                await db.rollback()
                report.counts[name] = 0
                report.errors.append(f"{name}: {exc}")
                logger.error("sweep category %s failed: %s", name, exc)
                continue
            report.counts[name] = count

        logger.info("sweep finished: %d rows repaired, %d errors", report.total, len(report.errors))
        return report


# 싱글턴 인스턴스 — Singleton instance
sweep_service: SweepService = SweepService()
