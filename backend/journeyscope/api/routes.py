from __future__ import annotations

from fastapi import APIRouter

from journeyscope.api.routes_analytics import router as analytics_router
from journeyscope.api.routes_wizard import router as wizard_router

router = APIRouter(prefix='/api', tags=['api'])
router.include_router(analytics_router)
router.include_router(wizard_router)
