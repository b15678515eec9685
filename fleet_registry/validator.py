"""Validator module for candidate records before they reach a collection."""

import logging
from typing import Collection, List, Optional

from pydantic import BaseModel, Field

from .errors import Conflict, InvalidArgument
from .models.aircraft import Aircraft, AircraftPayload
from .models.company import Company, CompanyPayload, FleetEntry, FleetEntryPayload
from .utils import is_blank

logger = logging.getLogger(__name__)


class ValidationReport(BaseModel):
    """Validation report listing every field-level error found."""

    errors: List[str] = Field(default_factory=list)

    def is_valid(self) -> bool:
        """Check if validation passed (no errors)."""
        return len(self.errors) == 0

    def raise_for_errors(self, message: str) -> None:
        """Raise InvalidArgument carrying every error, if there is any."""
        if not self.is_valid():
            logger.debug(f"{message}: {self.errors}")
            raise InvalidArgument(message, details={"errors": self.errors})


def _check_positive(report: ValidationReport, name: str, value: Optional[int]) -> None:
    if value is None or value <= 0:
        report.errors.append(f"{name} must be a positive number")


def validate_new_aircraft(candidate: AircraftPayload) -> Aircraft:
    """
    Validate an aircraft candidate for insertion.

    Args:
        candidate: Aircraft record sent by the caller

    Returns:
        Complete Aircraft built from the candidate

    Raises:
        InvalidArgument: If ICAO/constructor are blank or range/maxCapacity
            are not positive
    """
    report = ValidationReport()

    if is_blank(candidate.icao):
        report.errors.append("ICAO is required")
    if is_blank(candidate.constructor):
        report.errors.append("constructor is required")
    _check_positive(report, "range", candidate.range)
    _check_positive(report, "maxCapacity", candidate.max_capacity)

    report.raise_for_errors("Missing/invalid fields (constructor, ICAO, range>0, maxCapacity>0)")

    return Aircraft(
        icao=candidate.icao,
        constructor=candidate.constructor,
        range=candidate.range,
        max_capacity=candidate.max_capacity,
    )


def merge_aircraft(current: Aircraft, partial: AircraftPayload) -> Aircraft:
    """
    Apply a partial update on top of an existing aircraft.

    Omitted fields keep their current value.

    Raises:
        InvalidArgument: If a given field is blank or not positive
    """
    if partial.icao is not None and is_blank(partial.icao):
        raise InvalidArgument("Invalid ICAO, it must not be blank")
    if partial.constructor is not None and is_blank(partial.constructor):
        raise InvalidArgument("Invalid constructor, it must not be blank")
    if partial.range is not None and partial.range <= 0:
        raise InvalidArgument("Invalid range, it must be a positive number")
    if partial.max_capacity is not None and partial.max_capacity <= 0:
        raise InvalidArgument("Invalid maximum airplane capacity, it must be a positive number")

    return Aircraft(
        icao=partial.icao if partial.icao is not None else current.icao,
        constructor=partial.constructor if partial.constructor is not None else current.constructor,
        range=partial.range if partial.range is not None else current.range,
        max_capacity=partial.max_capacity if partial.max_capacity is not None else current.max_capacity,
    )


def validate_new_company(candidate: CompanyPayload) -> None:
    """
    Check the scalar fields of a company candidate.

    The fleet is checked separately by :func:`validate_fleet` since it needs
    the aircraft catalog.

    Raises:
        InvalidArgument: If name/companyICAO/country are blank or the fleet
            is missing
    """
    report = ValidationReport()

    if is_blank(candidate.name):
        report.errors.append("name is required")
    if is_blank(candidate.company_icao):
        report.errors.append("companyICAO is required")
    if is_blank(candidate.country):
        report.errors.append("country is required")
    if candidate.fleet is None:
        report.errors.append("fleet is required (may be empty)")

    report.raise_for_errors("Invalid JSON body")


def validate_fleet(entries: List[FleetEntryPayload], known_icaos: Collection[str]) -> List[FleetEntry]:
    """
    Check an initial fleet against the aircraft catalog.

    Entries naming the same aircraft are merged into one, quantities summed,
    at the position of the first one.

    Args:
        entries: Fleet entries sent by the caller
        known_icaos: ICAO identifiers present in the catalog (exact match)

    Returns:
        Fleet with one entry per aircraft

    Raises:
        Conflict: If an entry references an aircraft missing from the catalog
        InvalidArgument: If a quantity is missing or not positive
    """
    merged = {}

    for entry in entries:
        if entry.aircraft_icao is None or entry.aircraft_icao not in known_icaos:
            raise Conflict(
                f"The aircraft {entry.aircraft_icao} use an ICAO that does not exist",
                details={"aircraftICAO": entry.aircraft_icao},
            )
        if entry.quantity is None or entry.quantity <= 0:
            raise InvalidArgument(
                "Invalid JSON body, quantity must be greater than 0",
                details={"aircraftICAO": entry.aircraft_icao, "quantity": entry.quantity},
            )
        merged[entry.aircraft_icao] = merged.get(entry.aircraft_icao, 0) + entry.quantity

    return [FleetEntry(aircraft_icao=icao, quantity=quantity) for icao, quantity in merged.items()]


def build_company(candidate: CompanyPayload, fleet: List[FleetEntry]) -> Company:
    """Build the stored company from a validated candidate."""
    return Company(
        company_icao=candidate.company_icao,
        name=candidate.name,
        country=candidate.country,
        fleet=fleet,
    )
