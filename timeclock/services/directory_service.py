"""참조 데이터 서비스 — 작업자/병원/부서 조회.

Directory Service — Read-only views over the worker and location/sector
directories, plus the reference checks used when a punch names a place.
"""

from typing import Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from timeclock.models.directory import Location, Sector, Worker
from timeclock.repositories.directory_repository import (
    location_repository,
    sector_repository,
    worker_repository,
)
from timeclock.utils.clock import as_utc
from timeclock.utils.exceptions import NotFoundError, ValidationError


class DirectoryService:
    """참조 데이터 조회 서비스."""

    def build_worker_response(self, worker: Worker) -> dict:
        return {
            "id": worker.id,
            "name": worker.name,
            "registration": worker.registration,
            "specialty": worker.specialty,
            "status": worker.status,
            "is_placeholder": worker.is_placeholder,
        }

    def build_sector_response(self, sector: Sector) -> dict:
        return {"id": sector.id, "location_id": sector.location_id, "name": sector.name}

    async def list_workers(self, db: AsyncSession) -> list[dict]:
        workers: Sequence[Worker] = await worker_repository.list_workers(db)
        return [self.build_worker_response(w) for w in workers]

    async def get_worker(self, db: AsyncSession, worker_id: str) -> dict:
        """작업자 상세 — Raises NotFoundError when the worker is unknown."""
        worker: Worker | None = await worker_repository.get_worker(db, worker_id)
        if worker is None:
            raise NotFoundError("작업자를 찾을 수 없습니다 (Worker not found)")
        return self.build_worker_response(worker)

    async def get_location(self, db: AsyncSession, location_id: str) -> dict:
        """병원 상세 (부서 포함) — Location with its sectors, by name.

        Raises:
            NotFoundError: 병원이 없을 때 (When the location does not exist)
        """
        location: Location | None = await location_repository.get_location(db, location_id)
        if location is None:
            raise NotFoundError("병원을 찾을 수 없습니다 (Location not found)")
        sectors: Sequence[Sector] = await sector_repository.list_sectors_for_location(db, location.id)
        return {
            "id": location.id,
            "name": location.name,
            "slug": location.slug,
            "created_at": as_utc(location.created_at) if location.created_at else None,
            "sectors": [self.build_sector_response(s) for s in sectors],
        }

    async def resolve_worker_name(self, db: AsyncSession, worker_id: str, fallback: str) -> str:
        """등록된 이름 우선 — Directory name when registered, else the supplied one."""
        worker: Worker | None = await worker_repository.get_worker(db, worker_id)
        if worker is not None and worker.name:
            return worker.name
        return fallback

    async def check_sector(self, db: AsyncSession, sector_id: str | None, location_id: str | None) -> None:
        """부서가 병원에 속하는지 확인합니다.

        A registered sector must belong to the given location. Unknown ids pass:
        registration lives outside this service and may lag behind the kiosk.

        Raises:
            ValidationError: 다른 병원의 부서일 때 (Sector of another location)
        """
        if sector_id is None or location_id is None:
            return
        sector: Sector | None = await sector_repository.get_sector(db, sector_id)
        if sector is not None and sector.location_id not in (None, location_id):
            raise ValidationError("부서가 해당 병원에 속하지 않습니다 (Sector does not belong to the location)")


# 싱글턴 인스턴스 — Singleton instance
directory_service: DirectoryService = DirectoryService()
