"""일관성 스윕 테스트.

Consistency sweep tests — each repair category, and idempotence of a
second run.
"""

from datetime import timedelta

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from timeclock.models.directory import Location, Manager, Sector, Worker
from timeclock.models.justification import Justification
from timeclock.models.punch import PunchKind, PunchStatus
from timeclock.repositories.punch_repository import punch_repository
from timeclock.services.sweep_service import sweep_service

from tests.conftest import add_punch, at


async def _add_justification(db: AsyncSession, **fields) -> Justification:
    row = Justification(requested_at=at(18), **fields)
    db.add(row)
    await db.flush()
    return row


class TestSweepCategories:
    """카테고리별 복구."""

    async def test_nothing_to_repair_is_all_zero(self, db: AsyncSession):
        report = await sweep_service.sweep(db)

        assert report.errors == []
        assert report.total == 0
        assert set(report.counts) >= {"pair_refs_cleared", "punch_statuses_normalized"}

    async def test_duplicate_slugs_keep_most_recent(self, db: AsyncSession):
        db.add(Location(id="old", name="Hospital A", slug="hosp-a", created_at=at(8, day=1)))
        db.add(Location(id="new", name="Hospital A (new)", slug="hosp-a", created_at=at(8, day=5)))
        db.add(Sector(id="s1", location_id="old", name="ICU"))
        await db.commit()

        report = await sweep_service.sweep(db)

        assert report.counts["locations_deduplicated"] == 1
        remaining = (await db.execute(select(Location.id))).scalars().all()
        assert remaining == ["new"]
        sector = (await db.execute(select(Sector).where(Sector.id == "s1"))).scalar_one()
        assert sector.location_id == "new"

    async def test_duplicate_managers(self, db: AsyncSession):
        db.add(Manager(id="m-old", username="ana", created_at=at(8, day=1)))
        db.add(Manager(id="m-new", username="ana", created_at=at(8, day=2)))
        await db.commit()

        report = await sweep_service.sweep(db)

        assert report.counts["managers_deduplicated"] == 1

    async def test_placeholder_workers(self, db: AsyncSession):
        db.add(Worker(id="w1", name="Known"))
        await add_punch(db, PunchKind.ENTRY, at(8), worker_id="w1")
        await add_punch(db, PunchKind.ENTRY, at(8), worker_id="ghost", worker_name="")
        await _add_justification(db, worker_id="ghost2", worker_name="Ghost Two")
        await db.commit()

        report = await sweep_service.sweep(db)

        assert report.counts["workers_from_punches"] == 1
        assert report.counts["workers_from_justifications"] == 1
        ghost = (await db.execute(select(Worker).where(Worker.id == "ghost"))).scalar_one()
        assert ghost.is_placeholder is True
        assert ghost.name == "Unnamed"
        ghost2 = (await db.execute(select(Worker).where(Worker.id == "ghost2"))).scalar_one()
        assert ghost2.name == "Ghost Two"

    async def test_dangling_links_and_pair_refs(self, db: AsyncSession):
        await _add_justification(db, id="j1", worker_id="w1", linked_punch_id="gone")
        entry = await add_punch(db, PunchKind.ENTRY, at(8), punch_id="e1")
        # 제약을 우회해 잘못된 pair_ref를 직접 저장 — stored directly, bypassing validation
        await add_punch(db, PunchKind.EXIT, at(17), punch_id="x1", pair_ref="gone")
        await add_punch(db, PunchKind.ENTRY, at(9), punch_id="e2", pair_ref=entry.id)
        await db.commit()

        report = await sweep_service.sweep(db)

        assert report.counts["justification_links_cleared"] == 1
        assert report.counts["pair_refs_cleared"] == 2
        assert (await punch_repository.get_by_id(db, "x1")).pair_ref is None
        assert (await punch_repository.get_by_id(db, "e2")).pair_ref is None

    async def test_legacy_values_and_stuck_records(self, db: AsyncSession):
        await add_punch(db, PunchKind.ENTRY, at(8), punch_id="p1", status="Fechado")
        legacy_kind = await add_punch(db, PunchKind.EXIT, at(17), punch_id="p2")
        legacy_kind.kind = "SAIDA"
        await add_punch(db, PunchKind.ENTRY, at(8, day=11), punch_id="p3", status=PunchStatus.PENDING, approved_by="Dr. Ana")
        await add_punch(db, PunchKind.ENTRY, at(8, day=12), punch_id="p4", status=PunchStatus.OPEN, rejected_by="Dr. Ana")
        await _add_justification(db, id="j1", worker_id="w1", status="Aprovada")
        await _add_justification(db, id="j2", worker_id="w1", linked_punch_id="p3", status="PENDING", decided_by="Dr. Ana")
        await db.commit()

        report = await sweep_service.sweep(db)

        assert report.errors == []
        assert report.counts["punch_statuses_normalized"] == 1
        assert report.counts["punch_kinds_normalized"] == 1
        assert report.counts["justification_statuses_normalized"] == 1
        assert report.counts["punches_unstuck"] == 2
        assert report.counts["justifications_unstuck"] == 1
        assert (await punch_repository.get_by_id(db, "p1")).status == PunchStatus.CLOSED
        assert (await punch_repository.get_by_id(db, "p2")).kind == PunchKind.EXIT
        assert (await punch_repository.get_by_id(db, "p3")).status == PunchStatus.CLOSED
        assert (await punch_repository.get_by_id(db, "p4")).status == PunchStatus.REJECTED

    async def test_failed_category_is_reported_and_later_ones_still_commit(self, db: AsyncSession, monkeypatch):
        async def failing_repair(db: AsyncSession) -> int:
            raise SQLAlchemyError("boom")

        monkeypatch.setattr(sweep_service, "_clear_pair_refs", failing_repair)
        await add_punch(db, PunchKind.EXIT, at(17), punch_id="x1", pair_ref="gone")
        await add_punch(db, PunchKind.ENTRY, at(8), punch_id="p1", status="Fechado")
        await db.commit()

        report = await sweep_service.sweep(db)

        assert report.counts["pair_refs_cleared"] == 0
        assert len(report.errors) == 1
        assert report.errors[0].startswith("pair_refs_cleared")
        assert report.counts["punch_statuses_normalized"] == 1
        # 커밋된 값만 남는지 확인 — only committed state survives a rollback
        await db.rollback()
        assert (await punch_repository.get_by_id(db, "p1")).status == PunchStatus.CLOSED
        assert (await punch_repository.get_by_id(db, "x1")).pair_ref == "gone"


class TestSweepIdempotence:
    """두 번째 실행은 모두 0."""

    async def test_second_run_reports_nothing(self, db: AsyncSession):
        db.add(Location(id="l1", name="A", slug="a", created_at=at(8, day=1)))
        db.add(Location(id="l2", name="A", slug="a", created_at=at(8, day=1) + timedelta(hours=1)))
        await add_punch(db, PunchKind.ENTRY, at(8), worker_id="ghost", status="Aberto")
        await add_punch(db, PunchKind.EXIT, at(17), worker_id="ghost", pair_ref="missing")
        await _add_justification(db, worker_id="ghost", linked_punch_id="missing", status="Rejeitada")
        await db.commit()

        first = await sweep_service.sweep(db)
        second = await sweep_service.sweep(db)

        assert first.total > 0
        assert second.total == 0
        assert second.errors == []
