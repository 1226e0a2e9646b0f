from pydantic import BaseModel, Field, ConfigDict
from typing import Optional, List
from datetime import datetime
from app.constants.tracking import GuardStatus
from .alert import Alert

class LocationSampleIn(BaseModel):
    latitude: float = Field(..., ge=-90, le=90, description="Latitude in decimal degrees")
    longitude: float = Field(..., ge=-180, le=180, description="Longitude in decimal degrees")
    accuracy: Optional[float] = Field(None, description="Reported accuracy in meters")
    speed: Optional[float] = None
    heading: Optional[float] = None
    recorded_at: Optional[datetime] = Field(None, description="Device timestamp, server time when omitted")

class LocationBatchCreate(BaseModel):
    shift_id: int
    locations: List[LocationSampleIn] = Field(..., min_length=1)

class GuardLocationInDB(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: int
    guard_id: int
    shift_id: int
    latitude: float
    longitude: float
    accuracy: Optional[float] = None
    speed: Optional[float] = None
    heading: Optional[float] = None
    recorded_at: datetime

class RoutePoint(BaseModel):
    lat: float
    lng: float
    accuracy: Optional[float] = None
    speed: Optional[float] = None
    heading: Optional[float] = None
    recorded_at: datetime

    @classmethod
    def from_location(cls, location) -> "RoutePoint":
        return cls(
            lat=location.latitude,
            lng=location.longitude,
            accuracy=location.accuracy,
            speed=location.speed,
            heading=location.heading,
            recorded_at=location.recorded_at,
        )

class IngestResponse(BaseModel):
    inserted_count: int
    alerts: List[Alert]

class LivePosition(BaseModel):
    lat: float
    lng: float
    recorded_at: datetime

class GuardStatusEntry(BaseModel):
    guard_id: int
    guard_name: str
    shift_id: int
    site_name: str
    status: GuardStatus
    location: Optional[LivePosition] = None
