"""관리자 근무 라우터 — 전체 작업자 근무 조회 API.

Admin Shift Router — Derived shift views for any worker.
"""

from datetime import date
from typing import Annotated, Literal

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from timeclock.api.deps import Actor, require_manager
from timeclock.database import get_db
from timeclock.schemas.shift import ShiftResponse
from timeclock.services.shift_service import shift_service

router: APIRouter = APIRouter()


@router.get("", response_model=list[ShiftResponse])
async def list_shifts(
    db: Annotated[AsyncSession, Depends(get_db)],
    actor: Annotated[Actor, Depends(require_manager)],
    worker_id: Annotated[str | None, Query()] = None,
    date_from: Annotated[date | None, Query()] = None,
    date_to: Annotated[date | None, Query()] = None,
    location_id: Annotated[str | None, Query()] = None,
    sector_id: Annotated[str | None, Query()] = None,
    order: Annotated[Literal["asc", "desc"], Query()] = "desc",
) -> list[dict]:
    """근무 목록을 조회합니다.

    List shifts with optional worker, date range, location and sector filters.

    Args:
        db: 비동기 데이터베이스 세션 (Async database session)
        actor: 인증된 관리자 (Authenticated manager)
        worker_id: 작업자 필터, 선택 (Optional worker filter)
        date_from: 시작일, 포함 (Inclusive start date)
        date_to: 종료일, 포함 (Inclusive end date)
        location_id: 병원 필터, 선택 (Optional location filter)
        sector_id: 부서 필터, 선택 (Optional sector filter)
        order: 정렬 — asc 또는 desc (Sort order, newest first by default)

    Returns:
        list[dict]: 근무 목록 (Shift list)
    """
    return await shift_service.list_shifts(
        db,
        worker_id=worker_id,
        date_from=date_from,
        date_to=date_to,
        location_id=location_id,
        sector_id=sector_id,
        ascending=order == "asc",
    )
