from pydantic import BaseModel, ConfigDict
from typing import Optional, List
from datetime import datetime
from app.constants.tracking import ShiftStatus
from .alert import Alert
from .location import RoutePoint

class ShiftStart(BaseModel):
    site_id: Optional[int] = None

class ShiftInDB(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: int
    guard_id: int
    site_id: Optional[int] = None
    status: ShiftStatus
    start_time: datetime
    end_time: Optional[datetime] = None

class Shift(ShiftInDB):
    pass

class GuardSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: int
    name: str
    badge_id: Optional[str] = None

class SiteSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: int
    name: str
    address_from: Optional[str] = None
    address_to: Optional[str] = None

class ShiftDetail(Shift):
    guard: GuardSummary
    site: Optional[SiteSummary] = None
    location_log: List[RoutePoint] = []
    alerts: List[Alert] = []

class ShiftReport(BaseModel):
    text: str
    data: ShiftDetail
