from pydantic import BaseModel, Field, ConfigDict, field_validator
from typing import Optional, Dict, Any
from datetime import datetime
from app.constants.tracking import DEFAULT_BUFFER_METERS
from app.services.geofence import parse_boundary

class SiteBase(BaseModel):
    name: str = Field(..., description="Name of the site")
    address_from: Optional[str] = Field(None, description="Street address of the corridor start")
    address_to: Optional[str] = Field(None, description="Street address of the corridor end")
    lat_from: float = Field(..., ge=-90, le=90)
    lng_from: float = Field(..., ge=-180, le=180)
    lat_to: float = Field(..., ge=-90, le=90)
    lng_to: float = Field(..., ge=-180, le=180)

class SiteCreate(SiteBase):
    buffer_meters: int = Field(DEFAULT_BUFFER_METERS, gt=0, description="Corridor half-width in meters")

class SiteInDB(SiteBase):
    model_config = ConfigDict(from_attributes=True)
    id: int
    buffer_meters: int
    boundary_geojson: Optional[Dict[str, Any]] = None
    created_at: datetime

    @field_validator("boundary_geojson", mode="before")
    @classmethod
    def parse_boundary_text(cls, value):
        # Stored as text; unparseable boundaries are reported as absent
        if isinstance(value, str):
            return parse_boundary(value)
        return value

class Site(SiteInDB):
    pass
