"""참조 데이터 레포지토리 — Worker / Location / Sector / Manager directories.

Read-side lookups used to resolve display names and validate references.
Registration lives outside this service; the sweep is the only writer here.
"""

from typing import Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from timeclock.models.directory import Location, Manager, Sector, Worker
from timeclock.repositories.base import BaseRepository


class WorkerRepository(BaseRepository[Worker]):
    """작업자 디렉터리 — Worker directory."""

    def __init__(self) -> None:
        super().__init__(Worker)

    async def get_worker(self, db: AsyncSession, worker_id: str) -> Worker | None:
        return await self.get_by_id(db, worker_id)

    async def list_workers(self, db: AsyncSession) -> Sequence[Worker]:
        """이름순 작업자 목록 — Every worker, placeholders included, by name."""
        return await self.get_all(db, order_by=Worker.name.asc())

    async def get_names(self, db: AsyncSession, worker_ids: set[str]) -> dict[str, str]:
        """ID → 이름 매핑 — Bulk id-to-name lookup."""
        if not worker_ids:
            return {}
        result = await db.execute(select(Worker.id, Worker.name).where(Worker.id.in_(worker_ids)))
        return {row.id: row.name for row in result.all()}


class LocationRepository(BaseRepository[Location]):
    """병원 디렉터리 — Location (hospital) directory."""

    def __init__(self) -> None:
        super().__init__(Location)

    async def get_location(self, db: AsyncSession, location_id: str) -> Location | None:
        return await self.get_by_id(db, location_id)

    async def get_names(self, db: AsyncSession, location_ids: set[str]) -> dict[str, str]:
        if not location_ids:
            return {}
        result = await db.execute(select(Location.id, Location.name).where(Location.id.in_(location_ids)))
        return {row.id: row.name for row in result.all()}


class SectorRepository(BaseRepository[Sector]):
    """부서 디렉터리 — Sector directory."""

    def __init__(self) -> None:
        super().__init__(Sector)

    async def get_sector(self, db: AsyncSession, sector_id: str) -> Sector | None:
        return await self.get_by_id(db, sector_id)

    async def list_sectors_for_location(self, db: AsyncSession, location_id: str) -> Sequence[Sector]:
        result = await db.execute(
            select(Sector).where(Sector.location_id == location_id).order_by(Sector.name.asc(), Sector.id.asc())
        )
        return result.scalars().all()

    async def get_names(self, db: AsyncSession, sector_ids: set[str]) -> dict[str, str]:
        if not sector_ids:
            return {}
        result = await db.execute(select(Sector.id, Sector.name).where(Sector.id.in_(sector_ids)))
        return {row.id: row.name for row in result.all()}


class ManagerRepository(BaseRepository[Manager]):
    """관리자 디렉터리 — Manager directory."""

    def __init__(self) -> None:
        super().__init__(Manager)


# 싱글턴 인스턴스 — Singleton instances
worker_repository: WorkerRepository = WorkerRepository()
location_repository: LocationRepository = LocationRepository()
sector_repository: SectorRepository = SectorRepository()
manager_repository: ManagerRepository = ManagerRepository()
