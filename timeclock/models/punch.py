"""타각(출퇴근 기록) SQLAlchemy ORM 모델 정의.

Punch record SQLAlchemy ORM model definitions.
A punch is a single clock event captured by a biometric kiosk or entered
manually. Shifts are never stored; they are derived from punches on read.

Tables:
    - punches: 타각 기록 (One row per clock event)
"""

import enum
import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from timeclock.database import Base


def new_id() -> str:
    """불투명 문자열 ID 생성 — Generate an opaque string identifier."""
    return uuid.uuid4().hex


class PunchKind(str, enum.Enum):
    """타각 종류 — Punch kind. Pairing only looks at ENTRY and EXIT."""

    ENTRY = "ENTRY"
    BREAK_OUT = "BREAK_OUT"
    BREAK_IN = "BREAK_IN"
    EXIT = "EXIT"


class PunchOrigin(str, enum.Enum):
    """타각 출처 — Where the punch came from."""

    BIOMETRIC = "BIOMETRIC"
    MANUAL = "MANUAL"


class PunchStatus(str, enum.Enum):
    """타각 상태 — Canonical punch status.

    OPEN: 짝 대기 (unpaired, awaiting its counterpart)
    PENDING: 관리자 결정 대기 (awaiting manager decision)
    CLOSED: 짝 완료/승인 (paired and approved/valid)
    REJECTED: 관리자 거절 (denied by a manager)
    """

    OPEN = "OPEN"
    PENDING = "PENDING"
    CLOSED = "CLOSED"
    REJECTED = "REJECTED"


class PunchRecord(Base):
    """타각 기록 모델 — 단일 출퇴근 이벤트.

    Punch record model — one clock event for one worker.

    `worker_id` and `pair_ref` are deliberately not foreign keys: punch history
    must survive a missing worker row, and the pair reference is validated in
    the service layer on every write (EXIT -> ENTRY only).

    Status is stored as a plain string so that rows written by older versions
    (e.g. "Fechado", "Aguardando autorização") can still be loaded and then
    normalized by the consistency sweep.

    Attributes:
        id: 고유 식별자 (Opaque unique identifier)
        worker_id: 작업자 ID (Owning worker)
        worker_name: 작업자 이름, 표시용 (Denormalized display name)
        timestamp: 타각 시각 (Instant of the event)
        kind: 종류 (ENTRY, BREAK_OUT, BREAK_IN, EXIT)
        location_id: 병원 ID, 선택 (Optional location reference)
        sector_id: 부서 ID, 선택 (Optional sector reference)
        location_label: 장소 표시 문자열 (Free-text place label)
        code: 레거시 등록 코드 (Legacy registration code)
        note: 메모 (Optional note)
        origin: 출처 (BIOMETRIC or MANUAL)
        status: 상태 (OPEN, PENDING, CLOSED, REJECTED)
        approved_by: 승인자 (Approver, exclusive with rejected_by)
        rejected_by: 거절자 (Rejecter)
        rejection_reason: 거절 사유 (Rejection reason)
        pair_ref: 짝 ENTRY ID, EXIT만 보유 (ENTRY id, only carried by an EXIT)
    """

    __tablename__ = "punches"

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=new_id)
    worker_id: Mapped[str] = mapped_column(String(64), nullable=False)
    worker_name: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    timestamp: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    kind: Mapped[str] = mapped_column(String(20), nullable=False)
    location_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    sector_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    location_label: Mapped[str | None] = mapped_column(String(255), nullable=True)
    code: Mapped[str | None] = mapped_column(String(64), nullable=True)
    note: Mapped[str | None] = mapped_column(Text, nullable=True)
    origin: Mapped[str] = mapped_column(String(20), nullable=False, default=PunchOrigin.BIOMETRIC.value)
    # 상태 — legacy 값 보존을 위해 enum 대신 문자열 (plain string so legacy values still load)
    status: Mapped[str] = mapped_column(String(40), nullable=False, default=PunchStatus.OPEN.value)
    approved_by: Mapped[str | None] = mapped_column(String(255), nullable=True)
    rejected_by: Mapped[str | None] = mapped_column(String(255), nullable=True)
    rejection_reason: Mapped[str | None] = mapped_column(Text, nullable=True)
    pair_ref: Mapped[str | None] = mapped_column(String(64), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))

    __table_args__ = (
        Index("ix_punches_worker_timestamp", "worker_id", "timestamp"),
        Index("ix_punches_pair_ref", "pair_ref"),
    )

    @property
    def is_manual(self) -> bool:
        """수동 타각 여부 — origin 필드만으로 판단."""
        return self.origin == PunchOrigin.MANUAL

    @property
    def is_approved(self) -> bool:
        """명시적 승인 여부 — CLOSED with an approver stamped on it."""
        return self.status == PunchStatus.CLOSED and bool(self.approved_by)

    @property
    def is_provisional(self) -> bool:
        """잠정 타각 여부 — manual and not yet decided by a manager."""
        return self.is_manual and self.status not in (PunchStatus.CLOSED, PunchStatus.REJECTED)
