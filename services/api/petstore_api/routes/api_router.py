"""Central API router composition.

This module mounts the individual route modules on the `/api` router and
provides a single import point for `FastAPI.include_router(...)`.
"""

from fastapi import APIRouter

from .infos import router as infos_router
from .pets import router as pets_router

router = APIRouter(prefix="/api", tags=["api"])

router.include_router(infos_router)
router.include_router(pets_router)
