"""HTTP API: teams, players, articles and the admin console."""

from fastapi import APIRouter

from .admin import router as admin_router
from .articles import router as articles_router
from .players import router as players_router
from .teams import router as teams_router

router = APIRouter(prefix="/api")
router.include_router(teams_router)
router.include_router(players_router)
router.include_router(articles_router)
router.include_router(admin_router)

api_router = router
