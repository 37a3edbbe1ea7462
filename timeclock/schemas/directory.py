"""참조 데이터 관련 Pydantic 응답 스키마 정의.

Directory Pydantic response schema definitions.
Read-only views of workers, locations and sectors used by manager screens
to fill filters and resolve names.
"""

from datetime import datetime

from pydantic import BaseModel


class WorkerResponse(BaseModel):
    """작업자 응답 스키마.

    Attributes:
        is_placeholder: 스윕이 생성한 임시 작업자 여부 (Synthesized by the sweep)
    """

    id: str  # 작업자 ID (Worker id)
    name: str  # 이름 (Display name)
    registration: str | None = None  # 등록 번호 (Registration number)
    specialty: str | None = None  # 전문 분야 (Specialty)
    status: str  # 상태 (ACTIVE, INACTIVE)
    is_placeholder: bool  # 임시 작업자 여부 (Placeholder flag)


class SectorResponse(BaseModel):
    """부서 응답 스키마."""

    id: str  # 부서 ID (Sector id)
    location_id: str | None = None  # 병원 ID (Location id)
    name: str  # 부서 이름 (Sector name)


class LocationResponse(BaseModel):
    """병원 응답 스키마 — Location with its sectors."""

    id: str  # 병원 ID (Location id)
    name: str  # 병원 이름 (Location name)
    slug: str  # URL 식별자 (Slug)
    created_at: datetime | None = None  # 생성 일시 (Creation time)
    sectors: list[SectorResponse] = []  # 소속 부서 (Sectors of the location)
