"""소명 관련 Pydantic 요청/응답 스키마 정의.

Justification Pydantic request/response schema definitions.
Covers worker submissions (missing shift, exit or entry) and manager decisions.
"""

from datetime import datetime

from pydantic import BaseModel

from timeclock.models.justification import JustificationReason


# === 작업자 제출 (Worker submissions) ===

class MissingShiftRequest(BaseModel):
    """출퇴근 모두 누락 소명 요청 스키마.

    Missing-shift justification request; both sides are created.

    Attributes:
        entry_at: 출근 시각 (Claimed entry instant)
        exit_at: 퇴근 시각 (Claimed exit instant, must be after entry_at)
        reason: 사유 분류 (Categorical reason)
        description: 설명 (Required when reason is OTHER)
    """

    entry_at: datetime  # 출근 시각 (Entry instant)
    exit_at: datetime  # 퇴근 시각 (Exit instant)
    reason: JustificationReason  # 사유 분류 (Reason)
    description: str | None = None  # 설명 — 기타 사유 시 필수 (Required for OTHER)
    location_id: str | None = None  # 병원 ID (Location id)
    sector_id: str | None = None  # 부서 ID (Sector id)
    location_label: str | None = None  # 장소 표시 (Free-text place)


class MissingExitRequest(BaseModel):
    """퇴근 누락 소명 요청 스키마 — Missing exit for an existing entry."""

    entry_id: str  # 대상 출근 타각 ID (Entry punch id)
    exit_at: datetime  # 퇴근 시각 (Exit instant)
    reason: JustificationReason  # 사유 분류 (Reason)
    description: str | None = None  # 설명 (Description)


class MissingEntryRequest(BaseModel):
    """출근 누락 소명 요청 스키마 — Missing entry for an orphan exit."""

    exit_id: str  # 대상 퇴근 타각 ID (Orphan exit punch id)
    entry_at: datetime  # 출근 시각 (Entry instant)
    reason: JustificationReason  # 사유 분류 (Reason)
    description: str | None = None  # 설명 (Description)


# === 관리자 결정 (Manager decisions) ===

class RejectRequest(BaseModel):
    """거절 요청 스키마 — Rejection body; the reason is mandatory."""

    reason: str  # 거절 사유 (Rejection reason)


class JustificationResponse(BaseModel):
    """소명 응답 스키마.

    Justification response schema.
    """

    id: str  # 소명 ID (Justification id)
    worker_id: str  # 작업자 ID (Worker id)
    worker_name: str  # 작업자 이름 (Worker display name)
    sector_id: str | None = None  # 부서 ID (Sector id)
    linked_punch_id: str | None = None  # 대상 타각 ID (Governed punch id)
    reason: str  # 사유 분류 (Reason)
    description: str | None = None  # 설명 (Description)
    status: str  # 상태 (PENDING, APPROVED, REJECTED)
    requested_at: datetime  # 요청 일시 (Request time)
    decided_at: datetime | None = None  # 결정 일시 (Decision time)
    decided_by: str | None = None  # 결정자 (Deciding manager)
    rejection_reason: str | None = None  # 거절 사유 (Rejection reason)
