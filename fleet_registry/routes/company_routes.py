"""Routes for companies and their fleets."""

import logging
from typing import List, Optional
from fastapi import APIRouter, Depends, Query

from ..models.company import Company, CompanyPayload
from ..schemas.error_schemas import ErrorResponse
from ..services.registry_service import RegistryService
from ..services.singleton import get_registry

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/company", tags=["company"])


@router.get("", response_model=List[Company], responses={400: {"model": ErrorResponse}})
def get_company(
    country: Optional[str] = None,
    fleet_size: List[str] = Query(default=[], alias="fleetSize"),
    sort: List[str] = Query(default=[]),
    registry: RegistryService = Depends(get_registry),
):
    """
    Query the companies.

    Args:
        country: Country filter (case-insensitive)
        fleet_size: Repeatable fleet size thresholds, "-" prefix for "at most"
        sort: Repeatable sort keys (companyICAO, name, country, fleetSize)

    Returns:
        Matching companies
    """
    return registry.companies.query(country=country, fleet_size=fleet_size, sort=sort)


@router.post(
    "",
    response_model=Company,
    status_code=201,
    responses={400: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
def post_company(payload: CompanyPayload, registry: RegistryService = Depends(get_registry)):
    """
    Add a company with its initial fleet.

    Returns:
        Stored company
    """
    return registry.companies.insert(payload)


@router.delete(
    "",
    response_model=Company,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
def delete_company(
    company_icao: Optional[str] = Query(default=None, alias="companyICAO"),
    registry: RegistryService = Depends(get_registry),
):
    """
    Delete a company.

    Returns:
        Removed company
    """
    return registry.companies.delete_by_icao(company_icao)


@router.put(
    "/{cmp_icao}/buy",
    response_model=Company,
    status_code=202,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
def buy_aircraft(
    cmp_icao: str,
    aircraft_icao: Optional[str] = Query(default=None, alias="aircraftICAO"),
    quantity: Optional[str] = None,
    registry: RegistryService = Depends(get_registry),
):
    """
    Buy aircraft for a company (quantity defaults to 1).

    Returns:
        Updated company
    """
    return registry.companies.buy(cmp_icao, aircraft_icao, quantity)


@router.put(
    "/{cmp_icao}/sell",
    response_model=int,
    status_code=202,
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
        424: {"model": ErrorResponse},
    },
)
def sell_aircraft(
    cmp_icao: str,
    aircraft_icao: Optional[str] = Query(default=None, alias="aircraftICAO"),
    quantity: Optional[str] = None,
    registry: RegistryService = Depends(get_registry),
):
    """
    Sell aircraft of a company (quantity defaults to 1).

    Returns:
        Quantity of that model left in the fleet
    """
    return registry.companies.sell(cmp_icao, aircraft_icao, quantity)
