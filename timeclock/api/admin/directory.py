"""관리자 참조 데이터 라우터 — 작업자/병원/부서 조회 API.

Admin Directory Router — Read-only worker and location lookups for
manager screens (filters, name resolution).
"""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from timeclock.api.deps import Actor, require_manager
from timeclock.database import get_db
from timeclock.schemas.directory import LocationResponse, WorkerResponse
from timeclock.services.directory_service import directory_service

router: APIRouter = APIRouter()


@router.get("/workers", response_model=list[WorkerResponse])
async def list_workers(
    db: Annotated[AsyncSession, Depends(get_db)],
    actor: Annotated[Actor, Depends(require_manager)],
) -> list[dict]:
    """작업자 목록을 조회합니다 — Every worker, by name."""
    return await directory_service.list_workers(db)


@router.get("/workers/{worker_id}", response_model=WorkerResponse)
async def get_worker(
    worker_id: str,
    db: Annotated[AsyncSession, Depends(get_db)],
    actor: Annotated[Actor, Depends(require_manager)],
) -> dict:
    """작업자 상세를 조회합니다."""
    return await directory_service.get_worker(db, worker_id)


@router.get("/locations/{location_id}", response_model=LocationResponse)
async def get_location(
    location_id: str,
    db: Annotated[AsyncSession, Depends(get_db)],
    actor: Annotated[Actor, Depends(require_manager)],
) -> dict:
    """병원 상세와 소속 부서를 조회합니다.

    Retrieve a location and its sectors.

    Args:
        location_id: 병원 ID (Location id)
        db: 비동기 데이터베이스 세션 (Async database session)
        actor: 인증된 관리자 (Authenticated manager)

    Returns:
        dict: 병원과 부서 목록 (Location with sectors)
    """
    return await directory_service.get_location(db, location_id)
