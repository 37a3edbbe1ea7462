"""JWT 액세스 토큰 유틸리티 — 발급(운영/테스트용)과 검증.

Access token helpers. Tokens are issued by the cooperative's identity
service; this service verifies them and reads the actor from the claims.
`create_access_token` exists for operators and tests.

Claims:
    sub   주체 ID (worker, manager or kiosk id)
    name  표시 이름, 결정 기록에 사용 (Display name stamped on decisions)
    role  manager | worker | kiosk
    type  "access"
    exp   만료 시각 (Expiry, UNIX time)
"""

from datetime import timedelta
from typing import Any

import jwt

from timeclock.config import settings
from timeclock.utils.clock import utcnow

TOKEN_TYPE = "access"


def create_access_token(subject: str, role: str, name: str | None = None) -> str:
    """액세스 토큰을 발급합니다.

    Args:
        subject: 주체 ID (Worker, manager or kiosk id)
        role: 역할 (manager, worker or kiosk)
        name: 표시 이름, 없으면 subject (Display name, defaults to the subject)

    Returns:
        str: 서명된 JWT (Signed JWT)
    """
    claims: dict[str, Any] = {
        "sub": subject,
        "name": name or subject,
        "role": role,
        "type": TOKEN_TYPE,
        "exp": utcnow() + timedelta(minutes=settings.JWT_ACCESS_TOKEN_EXPIRE_MINUTES),
    }
    return jwt.encode(claims, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def decode_token(token: str) -> dict[str, Any]:
    """서명과 만료를 검증하고 클레임을 반환합니다.

    Raises:
        jwt.InvalidTokenError: 서명 오류 또는 만료 (Bad signature or expired token)
    """
    return jwt.decode(token, settings.JWT_SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
