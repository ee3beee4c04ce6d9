"""Service status endpoint."""

from fastapi import APIRouter

from courier import __version__
from courier.api.v1 import API_V1_PREFIX
from courier.di import ServerStateDep
from courier.middleware.availability import SERVER_STATUS_OK
from courier.models import StatusReply

router = APIRouter(prefix=API_V1_PREFIX)


@router.get("/status", response_model=StatusReply)
async def status(state: ServerStateDep) -> StatusReply:
    """
    Report that the server is up.

    Unavailable states (maintenance, stopping) are answered by the
    availability middleware before this handler is reached.
    """
    return StatusReply(
        status=SERVER_STATUS_OK,
        uptime=state.uptime(),
        version=__version__,
    )
