"""타각 관련 Pydantic 요청/응답 스키마 정의.

Punch Pydantic request/response schema definitions.
Covers kiosk punches, manager manual punches and exit recording.
"""

from datetime import datetime

from pydantic import BaseModel

from timeclock.models.punch import PunchKind


class KioskPunchRequest(BaseModel):
    """키오스크 타각 요청 스키마.

    Kiosk (biometric) punch request. A worker token punches for itself;
    a kiosk token must name the worker.

    Attributes:
        kind: 타각 종류 (Punch kind)
        worker_id: 작업자 ID, 키오스크 토큰일 때 필수 (Required for kiosk tokens)
        worker_name: 작업자 이름 (Display name, kiosk tokens)
        timestamp: 타각 시각, 없으면 서버 시각 (Defaults to server time)
    """

    kind: PunchKind  # 타각 종류 (ENTRY, BREAK_OUT, BREAK_IN, EXIT)
    worker_id: str | None = None  # 작업자 ID (Worker id, kiosk only)
    worker_name: str | None = None  # 작업자 이름 (Worker display name, kiosk only)
    timestamp: datetime | None = None  # 타각 시각 (Instant, default now)
    location_id: str | None = None  # 병원 ID (Location id)
    sector_id: str | None = None  # 부서 ID (Sector id)
    location_label: str | None = None  # 장소 표시 (Free-text place)
    code: str | None = None  # 등록 코드 (Registration code)


class ManualPunchRequest(BaseModel):
    """관리자 수동 타각 요청 스키마.

    Manual punch entered by a manager on a worker's behalf.
    """

    worker_id: str  # 작업자 ID (Worker id)
    worker_name: str = ""  # 작업자 이름 (Worker display name)
    kind: PunchKind  # 타각 종류 (Punch kind)
    timestamp: datetime  # 타각 시각 (Instant)
    location_id: str | None = None  # 병원 ID (Location id)
    sector_id: str | None = None  # 부서 ID (Sector id)
    location_label: str | None = None  # 장소 표시 (Free-text place)
    code: str | None = None  # 등록 코드 (Registration code)
    note: str | None = None  # 메모 (Note)


class ExitRequest(BaseModel):
    """퇴근 기록 요청 스키마 — Exit closing an existing entry."""

    timestamp: datetime  # 퇴근 시각 (Exit instant)
    note: str | None = None  # 메모 (Note)


class PunchResponse(BaseModel):
    """타각 응답 스키마.

    Punch response schema.
    """

    id: str  # 타각 ID (Punch id)
    worker_id: str  # 작업자 ID (Worker id)
    worker_name: str  # 작업자 이름 (Worker display name)
    timestamp: datetime  # 타각 시각 (Instant, UTC)
    kind: str  # 타각 종류 (Punch kind)
    origin: str  # 출처 (BIOMETRIC or MANUAL)
    status: str  # 상태 (Punch status)
    location_id: str | None = None  # 병원 ID (Location id)
    sector_id: str | None = None  # 부서 ID (Sector id)
    location_label: str | None = None  # 장소 표시 (Free-text place)
    approved_by: str | None = None  # 승인자 (Approver)
    rejected_by: str | None = None  # 거절자 (Rejecter)
    rejection_reason: str | None = None  # 거절 사유 (Rejection reason)
    pair_ref: str | None = None  # 짝 ENTRY ID (Paired entry id)
    note: str | None = None  # 메모 (Note)
