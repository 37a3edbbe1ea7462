"""관리자 타각 라우터 — 수동 타각, 퇴근 기록, 관리자 삭제 API.

Admin Punch Router — Manual punches, exit recording and administrative
deletes with pair repair.
"""

from typing import Annotated

from fastapi import APIRouter, BackgroundTasks, Depends, status
from fastapi.encoders import jsonable_encoder
from sqlalchemy.ext.asyncio import AsyncSession

from timeclock.api.deps import Actor, require_manager
from timeclock.database import get_db
from timeclock.models.punch import PunchOrigin
from timeclock.schemas.punch import ExitRequest, ManualPunchRequest, PunchResponse
from timeclock.services.directory_service import directory_service
from timeclock.services.punch_service import punch_service
from timeclock.services.remote_sync_service import remote_sync_service

router: APIRouter = APIRouter()


@router.post("", response_model=PunchResponse, status_code=status.HTTP_201_CREATED)
async def create_manual_punch(
    data: ManualPunchRequest,
    background_tasks: BackgroundTasks,
    db: Annotated[AsyncSession, Depends(get_db)],
    actor: Annotated[Actor, Depends(require_manager)],
) -> dict:
    """관리자가 작업자 대신 수동 타각을 기록합니다.

    Record a manual punch on a worker's behalf. Manual punches stay PENDING
    until a justification decision reaches them.

    Args:
        data: 수동 타각 요청 (Manual punch request)
        background_tasks: 원격 동기화 예약 (Remote sync scheduling)
        db: 비동기 데이터베이스 세션 (Async database session)
        actor: 인증된 관리자 (Authenticated manager)

    Returns:
        dict: 저장된 타각 (Stored punch)
    """
    await directory_service.check_sector(db, data.sector_id, data.location_id)
    worker_name: str = await directory_service.resolve_worker_name(db, data.worker_id, data.worker_name)
    punch = await punch_service.record_punch(
        db,
        worker_id=data.worker_id,
        worker_name=worker_name,
        kind=data.kind,
        timestamp=data.timestamp,
        origin=PunchOrigin.MANUAL,
        location_id=data.location_id,
        sector_id=data.sector_id,
        location_label=data.location_label,
        code=data.code,
        note=data.note,
    )
    await db.commit()

    response: dict = punch_service.build_response(punch)
    background_tasks.add_task(remote_sync_service.push, "punch", jsonable_encoder(response))
    return response


@router.post("/{entry_id}/exit", response_model=PunchResponse, status_code=status.HTTP_201_CREATED)
async def record_exit(
    entry_id: str,
    data: ExitRequest,
    background_tasks: BackgroundTasks,
    db: Annotated[AsyncSession, Depends(get_db)],
    actor: Annotated[Actor, Depends(require_manager)],
) -> dict:
    """ENTRY를 닫는 퇴근을 기록합니다.

    Record the EXIT closing an entry. Repeating the same exit returns the
    existing one; a different exit for a closed entry is a 409.

    Args:
        entry_id: 출근 타각 ID (Entry punch id)
        data: 퇴근 시각 (Exit instant)
        background_tasks: 원격 동기화 예약 (Remote sync scheduling)
        db: 비동기 데이터베이스 세션 (Async database session)
        actor: 인증된 관리자 (Authenticated manager)

    Returns:
        dict: 퇴근 타각 (Exit punch)
    """
    exit_punch = await punch_service.record_exit(db, entry_id, data.timestamp, note=data.note)
    await db.commit()

    response: dict = punch_service.build_response(exit_punch)
    background_tasks.add_task(remote_sync_service.push, "punch", jsonable_encoder(response))
    return response


@router.delete("/{punch_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_punch(
    punch_id: str,
    db: Annotated[AsyncSession, Depends(get_db)],
    actor: Annotated[Actor, Depends(require_manager)],
) -> None:
    """타각을 삭제합니다 — Delete a punch and repair its pair."""
    await punch_service.delete_punch(db, punch_id)
    await db.commit()
