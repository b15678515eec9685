"""Aircraft model."""

from typing import Optional
from pydantic import BaseModel, Field


class Aircraft(BaseModel):
    """Represents an aircraft model of the catalog, keyed by its ICAO code."""

    icao: str = Field(..., alias="ICAO")
    constructor: str
    range: int  # distance units
    max_capacity: int = Field(..., alias="maxCapacity")

    model_config = {
        "populate_by_name": True,
        "json_schema_extra": {
            "example": {
                "ICAO": "A320",
                "constructor": "Airbus",
                "range": 6000,
                "maxCapacity": 180,
            }
        },
    }


class AircraftPayload(BaseModel):
    """Aircraft record as sent by a caller: every field may be omitted."""

    icao: Optional[str] = Field(None, alias="ICAO")
    constructor: Optional[str] = None
    range: Optional[int] = None
    max_capacity: Optional[int] = Field(None, alias="maxCapacity")

    model_config = {"populate_by_name": True}
