"""근무(Shift) 및 유지보수 응답 스키마 정의.

Shift view and maintenance response schema definitions.
Shifts are derived on every query and never stored.
"""

from datetime import date, datetime

from pydantic import BaseModel


class ShiftPunch(BaseModel):
    """근무 내 타각 요약 — Punch summary embedded in a shift."""

    id: str  # 타각 ID (Punch id)
    timestamp: datetime  # 타각 시각 (Instant, UTC)
    kind: str  # 타각 종류 (Punch kind)
    origin: str  # 출처 (Origin)
    status: str  # 상태 (Punch status)
    approved_by: str | None = None  # 승인자 (Approver)
    rejected_by: str | None = None  # 거절자 (Rejecter)
    rejection_reason: str | None = None  # 거절 사유 (Rejection reason)
    pair_ref: str | None = None  # 짝 ENTRY ID (Paired entry id)
    note: str | None = None  # 메모 (Note)


class ShiftResponse(BaseModel):
    """근무 응답 스키마.

    Shift response schema. `id` is the id of the anchor punch (the entry,
    or the exit for an orphan exit).

    Attributes:
        status: 표시 상태 (Open, Pending, Closed, Rejected)
        status_detail: 상세 — 승인자 또는 "거절자 - 사유" (Approver, or "rejecter - reason")
    """

    id: str  # 기준 타각 ID (Anchor punch id)
    worker_id: str  # 작업자 ID (Worker id)
    worker_name: str  # 작업자 이름 (Worker display name)
    date: date  # 근무일, UTC 기준 (Shift date, UTC)
    location_id: str | None = None  # 병원 ID (Location id)
    location_name: str | None = None  # 병원 이름 (Location name or free-text label)
    sector_id: str | None = None  # 부서 ID (Sector id)
    sector_name: str | None = None  # 부서 이름 (Sector name)
    entry: ShiftPunch | None = None  # 출근 타각 (Entry side)
    exit: ShiftPunch | None = None  # 퇴근 타각 (Exit side)
    status: str  # 표시 상태 (Display label)
    status_detail: str | None = None  # 상태 상세 (Status detail)
    justification_id: str | None = None  # 소명 ID (Governing justification)
    justification_status: str | None = None  # 소명 상태 (Justification status)


class SweepReportResponse(BaseModel):
    """일관성 스윕 결과 스키마 — Per-category repair counts and failures."""

    counts: dict[str, int]  # 카테고리별 건수 (Rows repaired per category)
    total: int  # 전체 건수 (Total rows repaired)
    errors: list[str] = []  # 실패 카테고리 (Failed categories)
