"""관리자 API 라우터 패키지 — 모든 관리자 엔드포인트 통합.

Admin API Router package — Aggregates all manager-facing endpoints
into a single router for inclusion in the FastAPI application.

Included routers:
    - shifts: 근무 조회 (Derived shift views for any worker)
    - justifications: 소명 조회 및 승인/거절 (Justification queue and decisions)
    - punches: 수동 타각, 퇴근 기록, 삭제 (Manual punches, exits, deletes)
    - maintenance: 일관성 스윕 (Consistency sweep)
    - directory: 작업자/병원 조회 (Worker and location lookups)
"""

from fastapi import APIRouter

from timeclock.api.admin.directory import router as directory_router
from timeclock.api.admin.justifications import router as justifications_router
from timeclock.api.admin.maintenance import router as maintenance_router
from timeclock.api.admin.punches import router as punches_router
from timeclock.api.admin.shifts import router as shifts_router

admin_router: APIRouter = APIRouter()

admin_router.include_router(shifts_router, prefix="/shifts", tags=["Admin Shifts"])
admin_router.include_router(justifications_router, prefix="/justifications", tags=["Admin Justifications"])
admin_router.include_router(punches_router, prefix="/punches", tags=["Admin Punches"])
admin_router.include_router(maintenance_router, prefix="/maintenance", tags=["Admin Maintenance"])
admin_router.include_router(directory_router, prefix="/directory", tags=["Admin Directory"])
