"""원격 동기화 서비스 — 결정/타각을 원격 기록 시스템으로 전송 (httpx).

Remote sync service. Pushes committed decisions and punches to the remote
system of record as fire-and-forget background work: disabled when
REMOTE_SYNC_URL is empty, and a failed push is logged, never raised.
"""

from typing import Any

import httpx

from timeclock.config import settings
from timeclock.utils.log import get_logger

logger = get_logger("remote_sync")


class RemoteSyncService:
    """원격 동기화 서비스 — Remote system-of-record sync."""

    async def push(self, kind: str, payload: dict[str, Any]) -> bool:
        """원격으로 전송합니다.

        Args:
            kind: 이벤트 종류, 예: "decision", "punch" (Event kind)
            payload: JSON 직렬화 가능한 본문 (JSON-serializable body)

        Returns:
            bool: 전송 성공 여부 (True when the remote accepted the push)
        """
        if not settings.REMOTE_SYNC_URL:
            return False

        try:
            async with httpx.AsyncClient(timeout=settings.REMOTE_SYNC_TIMEOUT_SECONDS) as client:
                response = await client.post(settings.REMOTE_SYNC_URL, json={"kind": kind, "data": payload})
                response.raise_for_status()
        except httpx.HTTPError as exc:
            # 동기화 실패는 로컬 커밋에 영향 없음 — the local commit stands
            logger.warning("remote sync of %s failed: %s", kind, exc)
            return False
        return True


# 싱글턴 인스턴스 — Singleton instance
remote_sync_service: RemoteSyncService = RemoteSyncService()
