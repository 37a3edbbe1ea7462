"""SQLAlchemy ORM 모델 패키지 — 모든 도메인 모델의 중앙 임포트 지점.

SQLAlchemy ORM models package — Central import point for all domain models.
Importing from this package ensures all models are registered with the
SQLAlchemy metadata, which is required for Alembic migrations and test schemas.

Modules:
    punch: 타각 기록과 종류/출처/상태 (Punch records and their enums)
    justification: 소명 요청과 결정 (Justifications, reasons, decisions)
    directory: 작업자, 병원, 부서, 관리자 (Workers, locations, sectors, managers)
"""

from timeclock.models.punch import PunchRecord, PunchKind, PunchOrigin, PunchStatus
from timeclock.models.justification import Justification, JustificationStatus, JustificationReason, Decision
from timeclock.models.directory import Worker, WorkerStatus, Location, Sector, Manager

__all__ = [
    "PunchRecord", "PunchKind", "PunchOrigin", "PunchStatus",
    "Justification", "JustificationStatus", "JustificationReason", "Decision",
    "Worker", "WorkerStatus", "Location", "Sector", "Manager",
]
