"""근무 소명(justification) SQLAlchemy ORM 모델 정의.

Justification SQLAlchemy ORM model definitions.
A justification is a worker's request to validate an irregular or missing
punch. It governs one punch (`linked_punch_id`) and is closed by a manager
decision that propagates to every linked punch.

Tables:
    - justifications: 소명 요청 (Worker justification requests)
"""

import enum
from datetime import datetime, timezone

from sqlalchemy import DateTime, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from timeclock.database import Base
from timeclock.models.punch import new_id


class JustificationStatus(str, enum.Enum):
    """소명 상태 — Canonical justification status."""

    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


class JustificationReason(str, enum.Enum):
    """소명 사유 분류 — Categorical reason. OTHER requires a description."""

    FORGOT = "FORGOT"
    DEVICE_FAILURE = "DEVICE_FAILURE"
    EMERGENCY = "EMERGENCY"
    SCHEDULE_CHANGE = "SCHEDULE_CHANGE"
    OTHER = "OTHER"


class Decision(str, enum.Enum):
    """관리자 결정 — Manager decision applied by the reconciliation service."""

    APPROVE = "APPROVE"
    REJECT = "REJECT"


class Justification(Base):
    """소명 요청 모델.

    Justification request model. Created together with one or two PENDING
    punches; terminated by an approve/reject decision.

    Attributes:
        id: 고유 식별자 (Opaque unique identifier)
        worker_id: 요청 작업자 ID (Requesting worker)
        worker_name: 작업자 이름 (Denormalized display name)
        sector_id: 부서 ID (Sector of the shift)
        linked_punch_id: 대상 타각 ID (Punch this justification governs, nullable)
        reason: 사유 분류 (Categorical reason)
        description: 상세 설명 (Free text, required when reason is OTHER)
        status: 상태 (PENDING, APPROVED, REJECTED; legacy strings normalized on read)
        requested_at: 요청 일시 (Request timestamp)
        decided_at: 결정 일시 (Decision timestamp)
        decided_by: 결정자 (Deciding manager)
        rejection_reason: 거절 사유 (Rejection reason)
    """

    __tablename__ = "justifications"

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=new_id)
    worker_id: Mapped[str] = mapped_column(String(64), nullable=False)
    worker_name: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    sector_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    linked_punch_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    reason: Mapped[str] = mapped_column(String(40), nullable=False, default=JustificationReason.FORGOT.value)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(String(40), nullable=False, default=JustificationStatus.PENDING.value)
    requested_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    decided_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    decided_by: Mapped[str | None] = mapped_column(String(255), nullable=True)
    rejection_reason: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))

    __table_args__ = (
        Index("ix_justifications_worker", "worker_id"),
        Index("ix_justifications_status", "status"),
        Index("ix_justifications_linked_punch", "linked_punch_id"),
    )
