"""API v1 router configuration."""

from fastapi import APIRouter

from api.v1.routes.dm import router as dm_router
from api.v1.routes.friends import router as friends_router
from api.v1.routes.invites import invites_router, project_invites_router
from api.v1.routes.projects import router as projects_router

router = APIRouter()
router.include_router(friends_router)
router.include_router(projects_router)
router.include_router(project_invites_router)
router.include_router(invites_router)
router.include_router(dm_router)
