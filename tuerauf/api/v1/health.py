"""Health check endpoint with database connectivity and serial id capacity."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from tuerauf.core.config import Settings, get_settings
from tuerauf.core.database import check_db_connected, get_db
from tuerauf.repositories import UserRepository
from tuerauf.schemas.health import HealthResponse

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/", response_model=HealthResponse)
def get_health(
    db: Annotated[Session, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> HealthResponse:
    """
    Return service health status, database connectivity and how many serial ids are left.
    Used by load balancers and monitoring; free_serial_ids == 0 means new devices cannot register.
    """
    if not check_db_connected(db):
        return HealthResponse(status="ok", environment=settings.APP_ENV, database="disconnected")

    try:
        used = len({s for s in UserRepository(db).occupied_serial_ids() if 0 <= s < settings.MAX_SERIAL_ID})
    except SQLAlchemyError as e:
        logger.warning("Could not count serial ids: %s", e)
        free = None
    else:
        free = settings.MAX_SERIAL_ID - used

    return HealthResponse(
        status="ok",
        environment=settings.APP_ENV,
        database="connected",
        free_serial_ids=free,
    )
