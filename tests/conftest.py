"""테스트 인프라 — 인메모리 SQLite DB, 세션, httpx 클라이언트 픽스처.

Test infrastructure — In-memory SQLite DB (aiosqlite), session, and httpx
client fixtures. Each test gets a fresh schema on its own engine, so no
cleanup between tests is needed.
"""

from collections.abc import AsyncGenerator
from datetime import datetime, timezone

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from timeclock.database import Base, get_db
from timeclock.main import app
from timeclock.models import *  # noqa: F401,F403 — register all models with metadata
from timeclock.models.punch import PunchKind, PunchOrigin, PunchRecord, PunchStatus, new_id
from timeclock.utils.jwt import create_access_token

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


# ---------------------------------------------------------------------------
# Function-scoped: 엔진, 세션, 클라이언트
# ---------------------------------------------------------------------------
@pytest_asyncio.fixture
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    """테스트용 async 엔진. 테스트마다 스키마를 새로 생성합니다."""
    eng = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with eng.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield eng
    await eng.dispose()


@pytest_asyncio.fixture
async def db(engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    """각 테스트에 격리된 DB 세션을 제공합니다."""
    factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    async with factory() as session:
        yield session


@pytest_asyncio.fixture
async def client(db: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """FastAPI 테스트 클라이언트 — DB 세션을 오버라이드합니다."""
    async def _override_get_db() -> AsyncGenerator[AsyncSession, None]:
        yield db

    app.dependency_overrides[get_db] = _override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# 헬퍼: 테스트용 데이터 생성
# ---------------------------------------------------------------------------
def at(hour: int, minute: int = 0, day: int = 10) -> datetime:
    """2026-03-{day} {hour}:{minute} UTC."""
    return datetime(2026, 3, day, hour, minute, tzinfo=timezone.utc)


def make_punch(
    kind: PunchKind,
    timestamp: datetime,
    worker_id: str = "w1",
    punch_id: str | None = None,
    origin: PunchOrigin = PunchOrigin.BIOMETRIC,
    status: PunchStatus | str = PunchStatus.OPEN,
    **fields,
) -> PunchRecord:
    """세션에 추가되지 않은 타각 — Detached punch for pure pairing/status tests."""
    return PunchRecord(
        id=punch_id or new_id(),
        worker_id=worker_id,
        worker_name=fields.pop("worker_name", f"Worker {worker_id}"),
        timestamp=timestamp,
        kind=kind.value,
        origin=origin.value,
        status=status.value if isinstance(status, PunchStatus) else status,
        **fields,
    )


async def add_punch(db: AsyncSession, *args, **kwargs) -> PunchRecord:
    """타각을 DB에 저장합니다 — Store a punch directly, bypassing the services."""
    punch = make_punch(*args, **kwargs)
    db.add(punch)
    await db.flush()
    return punch


def make_token(subject: str, role: str, name: str | None = None) -> str:
    """테스트용 JWT 액세스 토큰을 생성합니다."""
    return create_access_token(subject, role, name)


@pytest.fixture
def manager_token() -> str:
    return make_token("m1", "manager", "Dr. Ana")


@pytest.fixture
def worker_token() -> str:
    return make_token("w1", "worker", "Worker w1")


@pytest.fixture
def other_worker_token() -> str:
    return make_token("w2", "worker", "Worker w2")


@pytest.fixture
def kiosk_token() -> str:
    return make_token("kiosk-1", "kiosk", "Kiosk 1")


def auth_header(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}
