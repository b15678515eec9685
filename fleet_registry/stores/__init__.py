"""Record stores for the aircraft catalog and the companies."""

from .aircraft_store import AircraftStore, AircraftUpdate
from .company_store import CompanyStore

__all__ = ["AircraftStore", "AircraftUpdate", "CompanyStore"]
