"""Probe API Routes - Route registration only."""

from fastapi import APIRouter

from courier.api.probez import api

# Probes don't need a prefix (they're at root level)
router = APIRouter()
router.include_router(api.router, tags=["probes"], include_in_schema=False)
