"""앱 타각 라우터 — 키오스크/작업자 생체 타각 API.

App Punch Router — Biometric punches from a kiosk or a worker's device.
"""

from typing import Annotated

from fastapi import APIRouter, BackgroundTasks, Depends, status
from fastapi.encoders import jsonable_encoder
from sqlalchemy.ext.asyncio import AsyncSession

from timeclock.api.deps import Actor, Role, require_kiosk_or_worker
from timeclock.database import get_db
from timeclock.models.punch import PunchOrigin
from timeclock.schemas.punch import KioskPunchRequest, PunchResponse
from timeclock.services.directory_service import directory_service
from timeclock.services.punch_service import punch_service
from timeclock.services.remote_sync_service import remote_sync_service
from timeclock.utils.clock import utcnow
from timeclock.utils.exceptions import ValidationError

router: APIRouter = APIRouter()


@router.post("", response_model=PunchResponse, status_code=status.HTTP_201_CREATED)
async def create_punch(
    data: KioskPunchRequest,
    background_tasks: BackgroundTasks,
    db: Annotated[AsyncSession, Depends(get_db)],
    actor: Annotated[Actor, Depends(require_kiosk_or_worker)],
) -> dict:
    """생체 타각을 기록합니다.

    Record a biometric punch. A worker token always punches for itself;
    a kiosk token must name the worker. An EXIT closes the worker's latest
    open ENTRY when there is one.

    Args:
        data: 타각 요청 (Punch request)
        background_tasks: 원격 동기화 예약 (Remote sync scheduling)
        db: 비동기 데이터베이스 세션 (Async database session)
        actor: 키오스크 또는 작업자 (Kiosk or worker)

    Returns:
        dict: 저장된 타각 (Stored punch)

    Raises:
        ValidationError: 키오스크 요청에 작업자 ID 누락 (Kiosk request without worker_id)
    """
    if actor.role == Role.WORKER:
        worker_id, worker_name = actor.id, actor.name
    else:
        if not data.worker_id:
            raise ValidationError("작업자 ID가 필요합니다 (worker_id is required for kiosk punches)")
        worker_id = data.worker_id
        worker_name = await directory_service.resolve_worker_name(db, worker_id, data.worker_name or "")

    await directory_service.check_sector(db, data.sector_id, data.location_id)

    punch = await punch_service.record_punch(
        db,
        worker_id=worker_id,
        worker_name=worker_name,
        kind=data.kind,
        timestamp=data.timestamp or utcnow(),
        origin=PunchOrigin.BIOMETRIC,
        location_id=data.location_id,
        sector_id=data.sector_id,
        location_label=data.location_label,
        code=data.code,
    )
    await db.commit()

    response: dict = punch_service.build_response(punch)
    background_tasks.add_task(remote_sync_service.push, "punch", jsonable_encoder(response))
    return response
