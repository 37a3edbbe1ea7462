"""FastAPI 애플리케이션 엔트리포인트 — 미들웨어, 예외 처리기, 라우터 등록.

FastAPI application entry point — Middleware, exception handler and router
registration for the time-clock service.
"""

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from timeclock.config import settings
from timeclock.middleware.axiom_logging import AxiomLoggingMiddleware
from timeclock.utils.exceptions import StoreError
from timeclock.utils.log import configure_logging, get_logger

configure_logging()
logger = get_logger("app")

app: FastAPI = FastAPI(
    title=settings.APP_NAME,
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

# Axiom API 로깅 미들웨어 — Axiom API request/response logging
# CORS보다 먼저 등록하여 모든 요청을 캡처 (Registered before CORS to capture all requests)
app.add_middleware(AxiomLoggingMiddleware)

# CORS 미들웨어 — Cross-Origin Resource Sharing middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(SQLAlchemyError)
async def store_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    """저장소 장애를 503으로 변환 — Render persistence failures as StoreError (503)."""
    logger.error("store failure on %s %s: %s", request.method, request.url.path, exc)
    error = StoreError()
    return JSONResponse(status_code=error.status_code, content={"detail": error.detail})


@app.get("/health")
async def health_check() -> dict[str, str]:
    """서버 상태 확인 엔드포인트.

    Health check endpoint for load balancers and monitoring.
    """
    return {"status": "ok"}


# ---------------------------------------------------------------------------
# 라우터 등록 — Router registration
# admin_router: 관리자 (manager role), app_router: 작업자/키오스크 (worker, kiosk roles)
# ---------------------------------------------------------------------------
from timeclock.api.admin import admin_router  # noqa: E402
from timeclock.api.app import app_router  # noqa: E402

app.include_router(admin_router, prefix="/api/v1/admin")
app.include_router(app_router, prefix="/api/v1/app")
