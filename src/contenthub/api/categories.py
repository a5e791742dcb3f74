"""Category API routes.

Learn: Reads are public (and HTTP-cached by CacheControlMiddleware);
writes require an admin. Routes handle HTTP concerns, CategoryService
handles the rules.
"""

import uuid

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from contenthub.auth.dependencies import require_admin
from contenthub.db.engine import get_db
from contenthub.schemas.auth import MessageResponse
from contenthub.schemas.category import CategoryCreate, CategoryRead, CategoryUpdate
from contenthub.services.category_service import CategoryService

router = APIRouter(prefix="/categories")


def _svc(db: AsyncSession = Depends(get_db)) -> CategoryService:
    return CategoryService(db)


@router.get("", response_model=list[CategoryRead])
async def list_categories(svc: CategoryService = Depends(_svc)):
    return await svc.list_categories()


@router.get("/{category_id}", response_model=CategoryRead)
async def get_category(category_id: uuid.UUID, svc: CategoryService = Depends(_svc)):
    return await svc.get_category(category_id)


@router.post(
    "",
    response_model=CategoryRead,
    status_code=201,
    dependencies=[Depends(require_admin)],
)
async def create_category(body: CategoryCreate, svc: CategoryService = Depends(_svc)):
    return await svc.create_category(
        name=body.name, color=body.color, description=body.description
    )


@router.put(
    "/{category_id}", response_model=CategoryRead, dependencies=[Depends(require_admin)]
)
async def update_category(
    category_id: uuid.UUID,
    body: CategoryUpdate,
    svc: CategoryService = Depends(_svc),
):
    return await svc.update_category(category_id, **body.model_dump(exclude_unset=True))


@router.delete(
    "/{category_id}",
    response_model=MessageResponse,
    dependencies=[Depends(require_admin)],
)
async def delete_category(category_id: uuid.UUID, svc: CategoryService = Depends(_svc)):
    await svc.delete_category(category_id)
    return MessageResponse(message="Category deleted")
