"""앱 근무 라우터 — 내 근무 조회 API.

App Shift Router — The caller's own derived shifts.
"""

from datetime import date
from typing import Annotated, Literal

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from timeclock.api.deps import Actor, require_worker
from timeclock.database import get_db
from timeclock.schemas.shift import ShiftResponse
from timeclock.services.shift_service import shift_service

router: APIRouter = APIRouter()


@router.get("", response_model=list[ShiftResponse])
async def list_my_shifts(
    db: Annotated[AsyncSession, Depends(get_db)],
    actor: Annotated[Actor, Depends(require_worker)],
    date_from: Annotated[date | None, Query()] = None,
    date_to: Annotated[date | None, Query()] = None,
    location_id: Annotated[str | None, Query()] = None,
    order: Annotated[Literal["asc", "desc"], Query()] = "desc",
) -> list[dict]:
    """내 근무 목록을 조회합니다 — List the caller's shifts only."""
    return await shift_service.list_shifts(
        db,
        worker_id=actor.id,
        date_from=date_from,
        date_to=date_to,
        location_id=location_id,
        ascending=order == "asc",
    )
