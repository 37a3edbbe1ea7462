"""관리자 소명 라우터 — 소명 조회 및 승인/거절 API.

Admin Justification Router — Justification queue and manager decisions.
A decision is committed once, then pushed to the remote system of record
in the background.
"""

from typing import Annotated

from fastapi import APIRouter, BackgroundTasks, Depends, Query
from fastapi.encoders import jsonable_encoder
from sqlalchemy.ext.asyncio import AsyncSession

from timeclock.api.deps import Actor, require_manager
from timeclock.database import get_db
from timeclock.models.justification import Decision, JustificationStatus
from timeclock.schemas.justification import JustificationResponse, RejectRequest
from timeclock.services.justification_service import justification_service
from timeclock.services.reconciliation_service import reconciliation_service
from timeclock.services.remote_sync_service import remote_sync_service

router: APIRouter = APIRouter()


@router.get("", response_model=list[JustificationResponse])
async def list_justifications(
    db: Annotated[AsyncSession, Depends(get_db)],
    actor: Annotated[Actor, Depends(require_manager)],
    status: Annotated[JustificationStatus | None, Query()] = None,
    worker_id: Annotated[str | None, Query()] = None,
) -> list[dict]:
    """소명 목록을 조회합니다. 기본값은 대기 중 소명.

    List justifications by status and/or worker; pending ones by default.

    Args:
        db: 비동기 데이터베이스 세션 (Async database session)
        actor: 인증된 관리자 (Authenticated manager)
        status: 상태 필터 (Status filter)
        worker_id: 작업자 필터 (Worker filter)

    Returns:
        list[dict]: 소명 목록 (Justification list)
    """
    rows = await justification_service.list_justifications(db, status=status, worker_id=worker_id)
    # 레거시 상태 정규화 저장 — persist read-time normalization
    await db.commit()
    return [justification_service.build_response(row) for row in rows]


@router.post("/{justification_id}/approve", response_model=JustificationResponse)
async def approve_justification(
    justification_id: str,
    background_tasks: BackgroundTasks,
    db: Annotated[AsyncSession, Depends(get_db)],
    actor: Annotated[Actor, Depends(require_manager)],
) -> dict:
    """소명을 승인합니다 — Approve a justification and every linked punch."""
    justification = await reconciliation_service.decide(db, justification_id, Decision.APPROVE, actor.name)
    await db.commit()

    response: dict = justification_service.build_response(justification)
    background_tasks.add_task(remote_sync_service.push, "decision", jsonable_encoder(response))
    return response


@router.post("/{justification_id}/reject", response_model=JustificationResponse)
async def reject_justification(
    justification_id: str,
    data: RejectRequest,
    background_tasks: BackgroundTasks,
    db: Annotated[AsyncSession, Depends(get_db)],
    actor: Annotated[Actor, Depends(require_manager)],
) -> dict:
    """소명을 거절합니다.

    Reject a justification and every linked punch. The reason is mandatory.

    Args:
        justification_id: 소명 ID (Justification id)
        data: 거절 사유 (Rejection reason)
        background_tasks: 원격 동기화 예약 (Remote sync scheduling)
        db: 비동기 데이터베이스 세션 (Async database session)
        actor: 인증된 관리자 (Authenticated manager)

    Returns:
        dict: 갱신된 소명 (Updated justification)
    """
    justification = await reconciliation_service.decide(
        db, justification_id, Decision.REJECT, actor.name, reason=data.reason
    )
    await db.commit()

    response: dict = justification_service.build_response(justification)
    background_tasks.add_task(remote_sync_service.push, "decision", jsonable_encoder(response))
    return response
