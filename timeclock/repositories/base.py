"""기본 CRUD 레포지토리 — 모든 레포지토리의 부모 클래스.

Base CRUD Repository — Parent class for all stores and directories.
Provides generic keyed get/list/upsert operations over string ids.

Usage:
    class PunchRepository(BaseRepository[PunchRecord]):
        def __init__(self) -> None:
            super().__init__(PunchRecord)
"""

from typing import Any, Generic, Sequence, TypeVar

from sqlalchemy import Select, select
from sqlalchemy.ext.asyncio import AsyncSession

from timeclock.database import Base

# 제네릭 타입 변수 — SQLAlchemy 모델을 나타냄
# Generic type variable representing a SQLAlchemy model
ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """제네릭 CRUD 레포지토리.

    Generic keyed repository. Writes only flush; committing is the caller's
    decision, so several repository writes can share one transaction.

    Attributes:
        model: SQLAlchemy 모델 클래스 (The SQLAlchemy model class)
    """

    def __init__(self, model: type[ModelType]) -> None:
        self.model: type[ModelType] = model

    async def get_by_id(
        self,
        db: AsyncSession,
        record_id: str,
    ) -> ModelType | None:
        """ID로 단일 레코드를 조회합니다.

        Retrieve a single record by its id.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            record_id: 조회할 레코드 ID (Id of the record to retrieve)

        Returns:
            ModelType | None: 조회된 레코드 또는 None (Found record or None)
        """
        result = await db.execute(select(self.model).where(self.model.id == record_id))
        return result.scalar_one_or_none()

    async def get_all(
        self,
        db: AsyncSession,
        order_by: Any | None = None,
    ) -> Sequence[ModelType]:
        """모든 레코드를 조회합니다 — Every record, optionally ordered."""
        query: Select = select(self.model)
        if order_by is not None:
            query = query.order_by(order_by)

        result = await db.execute(query)
        return result.scalars().all()

    async def upsert(
        self,
        db: AsyncSession,
        db_obj: ModelType,
    ) -> ModelType:
        """레코드를 삽입하거나 같은 ID의 기존 레코드를 덮어씁니다.

        Insert the record, or overwrite the stored record with the same id.

        Returns:
            ModelType: 세션에 연결된 레코드 (Session-attached record)
        """
        merged: ModelType = await db.merge(db_obj)
        await db.flush()
        return merged

