"""Resource service — listing, search, featured picks, and admin CRUD.

Learn: All heavy lifting is delegated to Postgres:
- Pagination → COUNT(*) + LIMIT/OFFSET
- Search → to_tsvector/plainto_tsquery with ts_rank ordering (GIN-indexed)
- View counting → a single UPDATE ... SET view_count = view_count + 1
  RETURNING, so concurrent readers never lose an increment
"""

import math
import uuid
from dataclasses import dataclass
from typing import Any, Optional

import structlog
from sqlalchemy import func, literal_column, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from contenthub.db.models import SEARCH_VECTOR_SQL, Resource
from contenthub.errors import BadRequestError, NotFoundError

logger = structlog.get_logger()

FEATURED_LIMIT = 10

SORTABLE_FIELDS = {
    "created_at": Resource.created_at,
    "updated_at": Resource.updated_at,
    "title": Resource.title,
    "view_count": Resource.view_count,
}

_EDITABLE = (
    "title",
    "description",
    "image_url",
    "external_link",
    "category",
    "featured",
)


@dataclass
class ResourcePage:
    """One page of resources plus the numbers needed to navigate."""

    items: list[Resource]
    total: int
    page: int
    limit: int

    @property
    def pages(self) -> int:
        return math.ceil(self.total / self.limit) if self.limit else 0

    @property
    def has_next(self) -> bool:
        return self.page < self.pages

    @property
    def has_prev(self) -> bool:
        return self.page > 1


class ResourceService:
    """Business logic for resources."""

    def __init__(self, db: AsyncSession):
        self.db = db

    # ─── Reads ──────────────────────────────────────────

    async def list_resources(
        self,
        page: int = 1,
        limit: int = 10,
        category: Optional[str] = None,
        sort: str = "created_at",
        order: str = "desc",
    ) -> ResourcePage:
        column = SORTABLE_FIELDS.get(sort)
        if column is None:
            raise BadRequestError(
                f"sort must be one of: {', '.join(SORTABLE_FIELDS)}"
            )

        q = select(Resource).options(selectinload(Resource.author))
        count_q = select(func.count()).select_from(Resource)
        if category:
            q = q.where(Resource.category == category)
            count_q = count_q.where(Resource.category == category)

        total = (await self.db.execute(count_q)).scalar_one()

        q = (
            q.order_by(column.desc() if order == "desc" else column.asc(), Resource.id)
            .offset((page - 1) * limit)
            .limit(limit)
        )
        result = await self.db.execute(q)
        return ResourcePage(
            items=list(result.scalars().all()), total=total, page=page, limit=limit
        )

    async def list_by_category(
        self, category: str, page: int = 1, limit: int = 10
    ) -> ResourcePage:
        return await self.list_resources(page=page, limit=limit, category=category)

    async def list_featured(self) -> list[Resource]:
        result = await self.db.execute(
            select(Resource)
            .options(selectinload(Resource.author))
            .where(Resource.featured.is_(True))
            .order_by(Resource.created_at.desc())
            .limit(FEATURED_LIMIT)
        )
        return list(result.scalars().all())

    async def search(self, query: str) -> list[Resource]:
        """Full-text search over title and description, best match first."""
        if not query or not query.strip():
            raise BadRequestError("Search query required")

        vector = literal_column(SEARCH_VECTOR_SQL)
        ts_query = func.plainto_tsquery("english", query)
        result = await self.db.execute(
            select(Resource)
            .options(selectinload(Resource.author))
            .where(vector.op("@@")(ts_query))
            .order_by(func.ts_rank(vector, ts_query).desc())
        )
        return list(result.scalars().all())

    async def view_resource(self, resource_id: uuid.UUID) -> Resource:
        """Fetch a resource and count the view."""
        result = await self.db.execute(
            update(Resource)
            .where(Resource.id == resource_id)
            .values(view_count=Resource.view_count + 1)
            .returning(Resource.id)
        )
        if result.scalar_one_or_none() is None:
            raise NotFoundError("Resource not found")
        await self.db.commit()
        return await self._get(resource_id)

    # ─── Writes (admin) ─────────────────────────────────

    async def create_resource(self, author_id: uuid.UUID, **fields: Any) -> Resource:
        resource = Resource(
            author_id=author_id,
            **{k: v for k, v in fields.items() if k in _EDITABLE},
        )
        self.db.add(resource)
        await self.db.commit()
        logger.info("resource.created", title=resource.title)
        return await self._get(resource.id)

    async def update_resource(self, resource_id: uuid.UUID, **changes: Any) -> Resource:
        """Apply a partial update. None-valued fields are left alone."""
        resource = await self._get(resource_id)
        for field in _EDITABLE:
            value = changes.get(field)
            if value is not None:
                setattr(resource, field, value)
        await self.db.commit()
        logger.info("resource.updated", title=resource.title)
        return await self._get(resource_id)

    async def delete_resource(self, resource_id: uuid.UUID) -> None:
        resource = await self._get(resource_id)
        await self.db.delete(resource)
        await self.db.commit()
        logger.info("resource.deleted", title=resource.title)

    async def _get(self, resource_id: uuid.UUID) -> Resource:
        # Reloads even when the row is already in the session, so counters and
        # the author are current after an UPDATE or commit.
        result = await self.db.execute(
            select(Resource)
            .options(selectinload(Resource.author))
            .where(Resource.id == resource_id)
            .execution_options(populate_existing=True)
        )
        resource = result.scalar_one_or_none()
        if resource is None:
            raise NotFoundError("Resource not found")
        return resource
