"""Routes for the aircraft catalog."""

import logging
from typing import List, Optional
from fastapi import APIRouter, Depends, Query, Response

from ..models.aircraft import Aircraft, AircraftPayload
from ..schemas.error_schemas import ErrorResponse
from ..services.registry_service import RegistryService
from ..services.singleton import get_registry

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/avions", tags=["aircraft"])


@router.get("", response_model=List[Aircraft], responses={400: {"model": ErrorResponse}})
def get_avions(
    constructor: Optional[str] = None,
    capacity: List[str] = Query(default=[]),
    range_: List[str] = Query(default=[], alias="range"),
    sort: List[str] = Query(default=[]),
    registry: RegistryService = Depends(get_registry),
):
    """
    Query the catalog.

    Args:
        constructor: Constructor filter (case-insensitive)
        capacity: Repeatable maxCapacity thresholds, "-" prefix for "at most"
        range_: Repeatable range thresholds, same convention
        sort: Repeatable sort keys (constructor, range, icao), "-" for descending

    Returns:
        Matching aircraft
    """
    return registry.aircraft.query(
        constructor=constructor, capacity=capacity, range_=range_, sort=sort
    )


@router.post(
    "",
    response_model=Aircraft,
    status_code=201,
    responses={400: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
def post_avion(payload: AircraftPayload, registry: RegistryService = Depends(get_registry)):
    """
    Add an aircraft to the catalog.

    Returns:
        Stored aircraft
    """
    return registry.aircraft.insert(payload)


@router.delete("", response_model=List[Aircraft], responses={400: {"model": ErrorResponse}})
def delete_avions(
    constructor: Optional[str] = None,
    registry: RegistryService = Depends(get_registry),
):
    """
    Delete every aircraft of a constructor.

    Returns:
        Removed aircraft
    """
    return registry.aircraft.delete_by_constructor(constructor)


@router.put(
    "",
    response_model=Aircraft,
    status_code=202,
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
    },
)
def put_avion(
    payload: AircraftPayload,
    response: Response,
    icao: Optional[str] = None,
    registry: RegistryService = Depends(get_registry),
):
    """
    Partially update an aircraft; omitted fields keep their value.

    If the ICAO changed but company fleets could not be renamed, the update
    is still applied and a Warning header describes the stale fleets.

    Returns:
        Updated aircraft
    """
    result = registry.aircraft.update(icao, payload)

    if result.has_warning:
        response.headers["Warning"] = f'199 - "{result.cascade_failure.message}"'

    return result.aircraft
