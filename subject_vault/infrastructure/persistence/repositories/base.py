"""Base repository: lookup by primary key and create, bound to one session."""

from typing import Any, Generic, TypeVar

from sqlalchemy.ext.asyncio import AsyncSession

from subject_vault.infrastructure.persistence.database import Base

ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """Base repository with get_by_id and create.

    Every repository of one logical operation shares the same AsyncSession,
    so all of their statements run in the caller's transaction.
    """

    def __init__(self, db: AsyncSession, model: type[ModelType]) -> None:
        self.db = db
        self.model = model

    async def get_by_id(self, entity_id: Any) -> ModelType | None:
        """Return a single record by primary key, or None."""
        return await self.db.get(self.model, entity_id)

    async def create(self, obj: ModelType) -> ModelType:
        """Persist a new record; flush so constraint violations surface here."""
        self.db.add(obj)
        await self.db.flush()
        await self.db.refresh(obj)
        return obj
