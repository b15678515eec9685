"""Routes for health endpoint."""

from fastapi import APIRouter, Depends

from ..schemas.health_schemas import HealthResponse
from ..services.registry_service import RegistryService
from ..services.singleton import get_registry

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse)
def get_health(registry: RegistryService = Depends(get_registry)):
    """
    Report whether the record files can be read.

    Returns:
        Status and collection sizes
    """
    return HealthResponse(**registry.health())
