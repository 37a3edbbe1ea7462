"""앱 소명 라우터 — 내 소명 조회 및 제출 API.

App Justification Router — The caller's justifications and submissions
for a missing shift, a missing exit or a missing entry.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from timeclock.api.deps import Actor, require_worker
from timeclock.database import get_db
from timeclock.models.justification import JustificationStatus
from timeclock.schemas.justification import (
    JustificationResponse,
    MissingEntryRequest,
    MissingExitRequest,
    MissingShiftRequest,
)
from timeclock.services.justification_service import justification_service

router: APIRouter = APIRouter()


@router.get("", response_model=list[JustificationResponse])
async def list_my_justifications(
    db: Annotated[AsyncSession, Depends(get_db)],
    actor: Annotated[Actor, Depends(require_worker)],
    status: Annotated[JustificationStatus | None, Query()] = None,
) -> list[dict]:
    """내 소명 목록을 조회합니다 — The caller's justifications, newest first."""
    rows = await justification_service.list_justifications(db, status=status, worker_id=actor.id)
    await db.commit()
    return [justification_service.build_response(row) for row in rows]


@router.post("/missing-shift", response_model=JustificationResponse, status_code=status.HTTP_201_CREATED)
async def submit_missing_shift(
    data: MissingShiftRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
    actor: Annotated[Actor, Depends(require_worker)],
) -> dict:
    """출퇴근 모두 누락된 근무를 소명합니다.

    Justify a shift with no punches at all. Creates a PENDING manual entry
    and exit, and a justification governing the exit.

    Args:
        data: 누락 근무 요청 (Missing shift request)
        db: 비동기 데이터베이스 세션 (Async database session)
        actor: 인증된 작업자 (Authenticated worker)

    Returns:
        dict: 생성된 소명 (Created justification)
    """
    justification = await justification_service.submit_missing_shift(
        db,
        worker_id=actor.id,
        worker_name=actor.name,
        entry_at=data.entry_at,
        exit_at=data.exit_at,
        reason=data.reason,
        description=data.description,
        location_id=data.location_id,
        sector_id=data.sector_id,
        location_label=data.location_label,
    )
    await db.commit()
    return justification_service.build_response(justification)


@router.post("/missing-exit", response_model=JustificationResponse, status_code=status.HTTP_201_CREATED)
async def submit_missing_exit(
    data: MissingExitRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
    actor: Annotated[Actor, Depends(require_worker)],
) -> dict:
    """퇴근 누락을 소명합니다 — Justify a missing exit for one of the caller's entries."""
    justification = await justification_service.submit_missing_exit(
        db,
        worker_id=actor.id,
        worker_name=actor.name,
        entry_id=data.entry_id,
        exit_at=data.exit_at,
        reason=data.reason,
        description=data.description,
    )
    await db.commit()
    return justification_service.build_response(justification)


@router.post("/missing-entry", response_model=JustificationResponse, status_code=status.HTTP_201_CREATED)
async def submit_missing_entry(
    data: MissingEntryRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
    actor: Annotated[Actor, Depends(require_worker)],
) -> dict:
    """출근 누락을 소명합니다 — Justify a missing entry for one of the caller's orphan exits."""
    justification = await justification_service.submit_missing_entry(
        db,
        worker_id=actor.id,
        worker_name=actor.name,
        exit_id=data.exit_id,
        entry_at=data.entry_at,
        reason=data.reason,
        description=data.description,
    )
    await db.commit()
    return justification_service.build_response(justification)
