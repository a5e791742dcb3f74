"""Resource API routes.

Learn: Public reads (paginated list, featured, by category, search, detail)
and admin-only writes. Literal paths (/featured, /search, /category/...)
are registered before /{resource_id}.
"""

import uuid
from typing import Literal, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from contenthub.auth.dependencies import require_admin
from contenthub.auth.session import Identity
from contenthub.db.engine import get_db
from contenthub.schemas.auth import MessageResponse
from contenthub.schemas.resource import (
    ResourceCategory,
    ResourceCreate,
    ResourcePageRead,
    ResourceRead,
    ResourceUpdate,
)
from contenthub.services.resource_service import ResourceService

router = APIRouter(prefix="/resources")


def _svc(db: AsyncSession = Depends(get_db)) -> ResourceService:
    return ResourceService(db)


# ─── Public ─────────────────────────────────────────────

@router.get("", response_model=ResourcePageRead)
async def list_resources(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    category: Optional[ResourceCategory] = None,
    sort: Literal["created_at", "updated_at", "title", "view_count"] = "created_at",
    order: Literal["asc", "desc"] = "desc",
    svc: ResourceService = Depends(_svc),
):
    result = await svc.list_resources(
        page=page, limit=limit, category=category, sort=sort, order=order
    )
    return ResourcePageRead.model_validate(result)


@router.get("/featured", response_model=list[ResourceRead])
async def list_featured(svc: ResourceService = Depends(_svc)):
    """Up to 10 featured resources, newest first."""
    return await svc.list_featured()


@router.get("/search", response_model=list[ResourceRead])
async def search_resources(
    q: Optional[str] = None,
    svc: ResourceService = Depends(_svc),
):
    """Full-text search over title and description, ranked by relevance."""
    return await svc.search(q or "")


@router.get("/category/{category}", response_model=ResourcePageRead)
async def list_by_category(
    category: ResourceCategory,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    svc: ResourceService = Depends(_svc),
):
    result = await svc.list_by_category(category, page=page, limit=limit)
    return ResourcePageRead.model_validate(result)


@router.get("/{resource_id}", response_model=ResourceRead)
async def get_resource(resource_id: uuid.UUID, svc: ResourceService = Depends(_svc)):
    """Return a resource and count the view."""
    return await svc.view_resource(resource_id)


# ─── Admin ──────────────────────────────────────────────

@router.post("", response_model=ResourceRead, status_code=201)
async def create_resource(
    body: ResourceCreate,
    identity: Identity = Depends(require_admin),
    svc: ResourceService = Depends(_svc),
):
    return await svc.create_resource(
        author_id=identity.account_id, **body.model_dump(mode="json")
    )


@router.put(
    "/{resource_id}", response_model=ResourceRead, dependencies=[Depends(require_admin)]
)
async def update_resource(
    resource_id: uuid.UUID,
    body: ResourceUpdate,
    svc: ResourceService = Depends(_svc),
):
    return await svc.update_resource(
        resource_id, **body.model_dump(mode="json", exclude_unset=True)
    )


@router.delete(
    "/{resource_id}",
    response_model=MessageResponse,
    dependencies=[Depends(require_admin)],
)
async def delete_resource(resource_id: uuid.UUID, svc: ResourceService = Depends(_svc)):
    await svc.delete_resource(resource_id)
    return MessageResponse(message="Resource deleted")
