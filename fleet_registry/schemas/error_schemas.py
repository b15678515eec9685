"""Schemas for error responses."""

from pydantic import BaseModel, Field
from typing import Any, Dict


class ErrorResponse(BaseModel):
    """Body returned for every typed failure."""

    detail: str
    error: str = Field(..., description="Failure kind, e.g. Conflict or NotFound")
    details: Dict[str, Any] = Field(default_factory=dict)
