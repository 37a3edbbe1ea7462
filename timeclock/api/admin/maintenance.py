"""관리자 유지보수 라우터 — 일관성 스윕 실행 API.

Admin Maintenance Router — Operator-triggered consistency sweep.
"""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from timeclock.api.deps import Actor, require_manager
from timeclock.database import get_db
from timeclock.schemas.shift import SweepReportResponse
from timeclock.services.sweep_service import SweepReport, sweep_service

router: APIRouter = APIRouter()


@router.post("/sweep", response_model=SweepReportResponse)
async def run_sweep(
    db: Annotated[AsyncSession, Depends(get_db)],
    actor: Annotated[Actor, Depends(require_manager)],
) -> dict:
    """일관성 스윕을 실행합니다. 카테고리별로 커밋됩니다.

    Run the consistency sweep; each category commits on its own.

    Returns:
        dict: 카테고리별 건수와 오류 (Per-category counts and errors)
    """
    report: SweepReport = await sweep_service.sweep(db)
    return {"counts": report.counts, "total": report.total, "errors": report.errors}
