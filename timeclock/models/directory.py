"""참조 데이터 SQLAlchemy ORM 모델 — 작업자, 병원, 부서, 관리자.

Reference-data ORM models consumed read-only by the core: workers, locations
(hospitals), sectors and managers. Registration of these rows is handled
elsewhere; the consistency sweep is the only core writer.

Tables:
    - workers: 조합원 작업자 (Cooperative workers)
    - locations: 병원 (Hospitals, `slug` intended unique but not enforced)
    - sectors: 병원 내 부서 (Sectors inside a location)
    - managers: 관리자 계정 (Manager accounts, `username` intended unique but not enforced)
"""

import enum
from datetime import datetime, timezone

from sqlalchemy import Boolean, DateTime, ForeignKey, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from timeclock.database import Base
from timeclock.models.punch import new_id


class WorkerStatus(str, enum.Enum):
    """작업자 상태 — Worker membership status."""

    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"
    SUSPENDED = "SUSPENDED"


class Worker(Base):
    """작업자 모델.

    Worker model. `is_placeholder` marks rows synthesized by the sweep for
    punches whose owner no longer existed.
    """

    __tablename__ = "workers"

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=new_id)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    registration: Mapped[str | None] = mapped_column(String(64), nullable=True)
    specialty: Mapped[str | None] = mapped_column(String(120), nullable=True)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default=WorkerStatus.ACTIVE.value)
    is_placeholder: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))


class Location(Base):
    """병원(근무지) 모델 — Hospital / work location."""

    __tablename__ = "locations"

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=new_id)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    # URL 식별자 — 유니크 의도지만 제약 없음, 스윕이 중복 제거
    slug: Mapped[str] = mapped_column(String(120), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))

    __table_args__ = (Index("ix_locations_slug", "slug"),)


class Sector(Base):
    """부서 모델 — Sector within a location."""

    __tablename__ = "sectors"

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=new_id)
    location_id: Mapped[str | None] = mapped_column(String(64), ForeignKey("locations.id", ondelete="SET NULL"), nullable=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)


class Manager(Base):
    """관리자 계정 모델 — Manager account (credentials live in the identity service)."""

    __tablename__ = "managers"

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=new_id)
    # 로그인 이름 — 유니크 의도지만 제약 없음, 스윕이 중복 제거
    username: Mapped[str] = mapped_column(String(120), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
