"""Schemas for the health endpoint."""

from pydantic import BaseModel
from typing import Optional


class HealthResponse(BaseModel):
    """Response model for registry health."""

    status: str
    aircraft: Optional[int] = None
    companies: Optional[int] = None
