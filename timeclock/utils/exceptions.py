"""커스텀 HTTP 예외 클래스 모듈.

Custom HTTP exception classes module.
Provides pre-configured HTTPException subclasses for the error taxonomy of
the time-clock core. Services raise them directly; FastAPI renders them.

Usage:
    from timeclock.utils.exceptions import NotFoundError, ValidationError
    raise NotFoundError("Justification not found")
    raise ValidationError("Description is required when reason is OTHER")
"""

from fastapi import HTTPException, status


class NotFoundError(HTTPException):
    """404 Not Found 예외 — 요청한 리소스를 찾을 수 없을 때 사용.

    Raised only when the *primary* target of an operation is missing
    (the justification being decided, the punch being paired against).
    Secondary lookups log a warning instead.

    Args:
        detail: 오류 메시지 (Error message, default: "Resource not found")
    """

    def __init__(self, detail: str = "Resource not found") -> None:
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


class ValidationError(HTTPException):
    """422 Unprocessable Entity 예외 — 쓰기 입력 검증 실패.

    Malformed input to a write operation. Always raised before any store
    mutation, so nothing is partially applied.

    Args:
        detail: 오류 메시지 (Error message, default: "Invalid input")
    """

    def __init__(self, detail: str = "Invalid input") -> None:
        super().__init__(status_code=422, detail=detail)


class ConflictError(HTTPException):
    """409 Conflict 예외 — 요청한 최종 상태가 현재 상태와 다를 때 사용.

    Raised when closing a record that is already closed through a different
    path and the caller's intended end-state differs from the current one.

    Args:
        detail: 오류 메시지 (Error message, default: "Conflicting state")
    """

    def __init__(self, detail: str = "Conflicting state") -> None:
        super().__init__(status_code=status.HTTP_409_CONFLICT, detail=detail)


class ForbiddenError(HTTPException):
    """403 Forbidden 예외 — 권한 부족 시 사용.

    Args:
        detail: 오류 메시지 (Error message, default: "Insufficient permissions")
    """

    def __init__(self, detail: str = "Insufficient permissions") -> None:
        super().__init__(status_code=status.HTTP_403_FORBIDDEN, detail=detail)


class UnauthorizedError(HTTPException):
    """401 Unauthorized 예외 — 인증 실패 시 사용.

    Args:
        detail: 오류 메시지 (Error message, default: "Authentication required")
    """

    def __init__(self, detail: str = "Authentication required") -> None:
        super().__init__(status_code=status.HTTP_401_UNAUTHORIZED, detail=detail)


class StoreError(HTTPException):
    """503 Service Unavailable 예외 — 저장소 장애.

    Underlying persistence failure. Built by the application-level handler
    from the original SQLAlchemy error; the core never retries.

    Args:
        detail: 오류 메시지 (Error message, default: "Storage unavailable")
    """

    def __init__(self, detail: str = "Storage unavailable") -> None:
        super().__init__(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=detail)
