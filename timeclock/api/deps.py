"""FastAPI 의존성 주입 모듈 — 인증 및 역할 검사.

FastAPI dependency injection module — Authentication and authorization.
The caller's identity comes from a bearer JWT issued by the identity
service; no user table is consulted. Routers pick a role guard and decide
what that role may see (workers only ever see their own records).

Authentication Flow:
    1. 클라이언트가 Authorization: Bearer <token> 헤더를 전송
       (Client sends Authorization: Bearer <token> header)
    2. decode_token()이 JWT를 검증하고 페이로드를 반환
       (decode_token verifies the JWT and returns its payload)
    3. 페이로드의 sub/name/role로 Actor 구성 (Actor built from sub/name/role)
"""

import enum
from dataclasses import dataclass
from typing import Annotated, Awaitable, Callable

import jwt
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from timeclock.utils.exceptions import ForbiddenError, UnauthorizedError
from timeclock.utils.jwt import TOKEN_TYPE, decode_token

# HTTP Bearer 토큰 추출기 — Extracts the JWT from the Authorization header
# auto_error=False: 헤더 누락도 401로 통일 (Missing header also yields 401)
security: HTTPBearer = HTTPBearer(auto_error=False)


class Role(str, enum.Enum):
    """호출자 역할 — Caller role carried in the token."""

    MANAGER = "manager"
    WORKER = "worker"
    KIOSK = "kiosk"


@dataclass(frozen=True)
class Actor:
    """인증된 호출자 — Authenticated caller.

    Attributes:
        id: 주체 ID (worker id for workers, manager id for managers)
        name: 표시 이름 (Display name stamped on decisions)
        role: 역할 (Caller role)
    """

    id: str
    name: str
    role: Role


async def get_current_actor(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
) -> Actor:
    """JWT 토큰에서 현재 호출자를 추출합니다.

    Decode the bearer JWT and return the caller.

    Raises:
        UnauthorizedError: 토큰 누락/만료/위조 또는 필수 클레임 누락
                           (Missing, expired or invalid token, or missing claims)
    """
    if credentials is None:
        raise UnauthorizedError()
    try:
        payload: dict = decode_token(credentials.credentials)
    except jwt.InvalidTokenError:
        raise UnauthorizedError("Invalid or expired token")

    # 토큰 타입 검증 — Reject non-access tokens
    if payload.get("type") != TOKEN_TYPE:
        raise UnauthorizedError("Invalid token type")

    subject: str | None = payload.get("sub")
    try:
        role = Role(payload.get("role"))
    except ValueError:
        raise UnauthorizedError("Invalid token role")
    if not subject:
        raise UnauthorizedError("Invalid token")

    return Actor(id=subject, name=payload.get("name") or subject, role=role)


def require_roles(*roles: Role) -> Callable[..., Awaitable[Actor]]:
    """역할 기반 권한 검사 의존성 팩토리.

    Dependency factory allowing only the given roles.

    Returns:
        FastAPI 의존성 함수 — Actor 반환 또는 403 발생
        (Dependency returning the Actor or raising 403)
    """
    async def _check(
        actor: Annotated[Actor, Depends(get_current_actor)],
    ) -> Actor:
        if actor.role not in roles:
            raise ForbiddenError()
        return actor
    return _check


# 편의 의존성 — Pre-configured role guards
require_manager = require_roles(Role.MANAGER)
require_worker = require_roles(Role.WORKER)
require_kiosk_or_worker = require_roles(Role.KIOSK, Role.WORKER)
