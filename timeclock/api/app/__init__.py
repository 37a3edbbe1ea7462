"""앱 API 라우터 패키지 — 작업자/키오스크 엔드포인트 통합.

App API Router package — Aggregates the worker- and kiosk-facing endpoints
into a single router for inclusion in the FastAPI application.

Included routers:
    - punches: 생체 타각 (Kiosk / device biometric punches)
    - shifts: 내 근무 (My shifts)
    - justifications: 내 소명 조회 및 제출 (My justifications and submissions)
"""

from fastapi import APIRouter

from timeclock.api.app.justifications import router as justifications_router
from timeclock.api.app.punches import router as punches_router
from timeclock.api.app.shifts import router as shifts_router

app_router: APIRouter = APIRouter()

app_router.include_router(punches_router, prefix="/punches", tags=["App Punches"])
# 내 근무/소명: /my 하위 (Caller-scoped resources)
app_router.include_router(shifts_router, prefix="/my/shifts", tags=["My Shifts"])
app_router.include_router(justifications_router, prefix="/my/justifications", tags=["My Justifications"])
