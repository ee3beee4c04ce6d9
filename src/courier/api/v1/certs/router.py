"""Certificate API Routes - Route registration only."""

from fastapi import APIRouter

from courier.api.v1.certs import api

# Prefix lives on the endpoint router so route templates are complete
router = APIRouter()
router.include_router(api.router, tags=["certificates"])
