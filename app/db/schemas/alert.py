from pydantic import BaseModel, Field, ConfigDict
from typing import Optional
from datetime import datetime
from app.constants.tracking import AlertType, UNKNOWN_SITE_NAME

class AlertBase(BaseModel):
    shift_id: int
    type: AlertType
    message: str

class AlertCreate(AlertBase):
    pass

class AlertInDB(AlertBase):
    model_config = ConfigDict(from_attributes=True)
    id: int
    created_at: datetime
    resolved_at: Optional[datetime] = None

class Alert(AlertInDB):
    pass

class AlertShiftSummary(BaseModel):
    id: int
    guard_name: str
    site_name: str

class AlertWithShift(Alert):
    shift: AlertShiftSummary

    @classmethod
    def from_alert(cls, alert) -> "AlertWithShift":
        """Build the display form of an alert row, joined to its shift's guard and site."""
        shift = alert.shift
        return cls(
            id=alert.id,
            shift_id=alert.shift_id,
            type=alert.type,
            message=alert.message,
            created_at=alert.created_at,
            resolved_at=alert.resolved_at,
            shift=AlertShiftSummary(
                id=shift.id,
                guard_name=shift.guard.name,
                site_name=shift.site.name if shift.site else UNKNOWN_SITE_NAME,
            ),
        )

class AlertCount(BaseModel):
    count: int

class SosRequest(BaseModel):
    latitude: Optional[float] = Field(None, ge=-90, le=90)
    longitude: Optional[float] = Field(None, ge=-180, le=180)
