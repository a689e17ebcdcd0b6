"""Pydantic schemas for health check responses."""

from datetime import datetime

from pydantic import BaseModel, Field


class DbCheckResponse(BaseModel):
    """Response body for GET /db-check."""

    db_time: datetime = Field(description="Current time as reported by the database")
