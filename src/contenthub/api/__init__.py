"""API route aggregation.

All routers registered here get mounted in main.py.

Learn: Unlike a blanket router-level auth dependency, access here is mixed
per route: category and resource reads are public, their writes and all of
/users (except /users/profile) require an admin, and /auth is open apart
from logout and me. Each route declares its own gate.
"""

from fastapi import APIRouter

from contenthub.api.auth import router as auth_router
from contenthub.api.categories import router as categories_router
from contenthub.api.health import router as health_router
from contenthub.api.resources import router as resources_router
from contenthub.api.users import router as users_router

api_router = APIRouter(prefix="/api/v1")

api_router.include_router(health_router, tags=["health"])
api_router.include_router(auth_router, tags=["auth"])
api_router.include_router(users_router, tags=["users"])
api_router.include_router(categories_router, tags=["categories"])
api_router.include_router(resources_router, tags=["resources"])
