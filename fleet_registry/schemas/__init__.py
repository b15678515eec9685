"""API schemas for request/response models."""

from .error_schemas import ErrorResponse
from .health_schemas import HealthResponse

__all__ = [
    "ErrorResponse",
    "HealthResponse",
]
