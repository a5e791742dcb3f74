"""Category service — CRUD for resource categories.

Learn: The slug is always derived from the name (see models.slugify), both
on create and whenever the name changes, so clients never send it.
"""

import uuid

import structlog
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from contenthub.db.models import Category, slugify
from contenthub.errors import ConflictError, NotFoundError

logger = structlog.get_logger()

_EDITABLE = ("name", "color", "description")


class CategoryService:
    """Business logic for categories."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_categories(self) -> list[Category]:
        result = await self.db.execute(select(Category).order_by(Category.name))
        return list(result.scalars().all())

    async def get_category(self, category_id: uuid.UUID) -> Category:
        category = await self.db.get(Category, category_id)
        if category is None:
            raise NotFoundError("Category not found")
        return category

    async def create_category(
        self, name: str, color: str, description: str | None = None
    ) -> Category:
        category = Category(
            name=name,
            slug=slugify(name),
            color=color,
            description=description,
        )
        self.db.add(category)
        await self._commit()
        logger.info("category.created", name=name)
        return category

    async def update_category(self, category_id: uuid.UUID, **changes) -> Category:
        """Apply a partial update. Unknown or None-valued fields are ignored."""
        category = await self.get_category(category_id)
        for field in _EDITABLE:
            value = changes.get(field)
            if value is not None:
                setattr(category, field, value)
        if changes.get("name") is not None:
            category.slug = slugify(category.name)
        await self._commit()
        logger.info("category.updated", name=category.name)
        return category

    async def delete_category(self, category_id: uuid.UUID) -> None:
        category = await self.get_category(category_id)
        await self.db.delete(category)
        await self.db.commit()
        logger.info("category.deleted", name=category.name)

    async def _commit(self) -> None:
        try:
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            raise ConflictError("Category already exists")
