"""Database connectivity check."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.database import fetch_db_time, get_db
from app.core.errors import InternalError
from app.schemas.health import DbCheckResponse

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/db-check", response_model=DbCheckResponse)
def db_check(db: Annotated[Session, Depends(get_db)]) -> DbCheckResponse:
    """Return the database's current time; 500 when it cannot be reached."""
    try:
        db_time = fetch_db_time(db)
    except SQLAlchemyError as e:
        logger.exception("DB check failed: %s", e)
        raise InternalError("Database not reachable") from e
    return DbCheckResponse(db_time=db_time)
