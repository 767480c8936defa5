"""Base repository with business-scoped queries."""

from typing import Generic, TypeVar, Type

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from cloudgreet.persistence.database import Base

ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """Base repository with business-scoped query methods."""

    def __init__(self, model: Type[ModelType], session: AsyncSession):
        """Initialize repository with model and session."""
        self.model = model
        self.session = session

    async def get_by_id(self, business_id: int | None, id: int) -> ModelType | None:
        """Get entity by ID, scoped to business."""
        if business_id is None:
            stmt = select(self.model).where(self.model.id == id)
        else:
            stmt = select(self.model).where(
                self.model.id == id,
                self.model.business_id == business_id
            )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def create(self, business_id: int | None, **data) -> ModelType:
        """Create new entity with business_id."""
        if business_id is not None:
            data["business_id"] = business_id
        instance = self.model(**data)
        self.session.add(instance)
        await self.session.commit()
        await self.session.refresh(instance)
        return instance
