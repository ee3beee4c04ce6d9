"""Status API Routes - Route registration only."""

from fastapi import APIRouter

from courier.api.v1.status import api

router = APIRouter()
router.include_router(api.router, tags=["status"])
