"""Company and fleet models."""

from typing import List, Optional
from pydantic import BaseModel, Field


class FleetEntry(BaseModel):
    """Quantity of one aircraft model owned by a company.

    ``aircraft_icao`` is a reference into the aircraft catalog, not an
    ownership link: it is kept in sync when the aircraft is renamed.
    """

    aircraft_icao: str = Field(..., alias="aircraftICAO")
    quantity: int

    model_config = {"populate_by_name": True}


class Company(BaseModel):
    """Represents an airline company and its fleet."""

    company_icao: str = Field(..., alias="companyICAO")
    name: str
    country: str
    fleet: List[FleetEntry] = Field(default_factory=list)

    @property
    def fleet_size(self) -> int:
        """Total number of aircraft owned, all models together."""
        return sum(entry.quantity for entry in self.fleet)

    def find_entry(self, aircraft_icao: str, ignore_case: bool = False) -> Optional[FleetEntry]:
        """Return the fleet entry referencing ``aircraft_icao``, if any."""
        for entry in self.fleet:
            if entry.aircraft_icao == aircraft_icao:
                return entry
            if ignore_case and entry.aircraft_icao.lower() == aircraft_icao.lower():
                return entry
        return None

    model_config = {
        "populate_by_name": True,
        "json_schema_extra": {
            "example": {
                "companyICAO": "SWR",
                "name": "Swiss International Air Lines",
                "country": "Switzerland",
                "fleet": [
                    {"aircraftICAO": "A320", "quantity": 12},
                    {"aircraftICAO": "BCS3", "quantity": 20},
                ],
            }
        },
    }


class FleetEntryPayload(BaseModel):
    """Fleet entry as sent by a caller."""

    aircraft_icao: Optional[str] = Field(None, alias="aircraftICAO")
    quantity: Optional[int] = None

    model_config = {"populate_by_name": True}


class CompanyPayload(BaseModel):
    """Company record as sent by a caller: every field may be omitted."""

    company_icao: Optional[str] = Field(None, alias="companyICAO")
    name: Optional[str] = None
    country: Optional[str] = None
    fleet: Optional[List[FleetEntryPayload]] = None

    model_config = {"populate_by_name": True}
