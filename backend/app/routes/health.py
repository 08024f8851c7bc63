"""
Contacts API - Health Check Route
===================================

What:  Store connectivity check for monitoring and load balancer probes.
How:   Runs SELECT 1 through the repository and reports the outcome.
Who:   Called by Docker health checks, load balancers and the front-end.

Because a failed schema-ensure at startup does not stop the server, this
endpoint is where an unreachable store becomes visible.

    healthy:   200 {"status": "ok", "db": true}
    unhealthy: 500 {"status": "error", "message": "<driver message>"}
"""

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from app.exceptions import ContactsAPIError
from app.repositories.contact_repository import ContactRepository
from app.routes.contacts import get_repository
from app.schemas.contact import HealthErrorResponse, HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Health"])


@router.get(
    "/health",
    response_model=HealthResponse,
    responses={500: {"description": "Store unreachable", "model": HealthErrorResponse}},
    summary="Store connectivity check",
)
async def health_check(
    repository: ContactRepository = Depends(get_repository),
):
    try:
        db_ok = await repository.ping()
    except ContactsAPIError as e:
        logger.warning("Health check: database unreachable: %s", e.message)
        return JSONResponse(
            status_code=500,
            content=HealthErrorResponse(message=e.message).model_dump(),
        )
    return HealthResponse(status="ok", db=db_ok)
