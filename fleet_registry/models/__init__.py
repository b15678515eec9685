"""Registry models package."""

from .aircraft import Aircraft, AircraftPayload
from .company import Company, CompanyPayload, FleetEntry, FleetEntryPayload

__all__ = [
    "Aircraft",
    "AircraftPayload",
    "Company",
    "CompanyPayload",
    "FleetEntry",
    "FleetEntryPayload",
]
