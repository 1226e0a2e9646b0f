from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from typing import List, Optional
import logging
from app.database import get_db
from app.dependencies import get_current_user_id, get_notifier
from app.constants.tracking import AlertType
from app.db.crud import alert as alert_crud
from app.db.crud import shift as shift_crud
from app.db.schemas.alert import AlertWithShift, AlertCount, SosRequest
from app.services.notifier import Notifier

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/v1/alerts",
    tags=["alerts"]
)

@router.get("/", response_model=List[AlertWithShift])
def list_alerts(
    type: Optional[AlertType] = None,
    resolved: Optional[bool] = None,
    db: Session = Depends(get_db)
):
    """List the most recent alerts, optionally filtered by type and resolution"""
    return alert_crud.list_alerts(db, alert_type=type, resolved=resolved)

@router.get("/count", response_model=AlertCount)
def count_unresolved_alerts(db: Session = Depends(get_db)):
    """Number of open alerts"""
    return AlertCount(count=alert_crud.count_unresolved_alerts(db))

@router.patch("/{alert_id}/resolve", response_model=AlertWithShift)
def resolve_alert(
    alert_id: int,
    db: Session = Depends(get_db),
    notifier: Notifier = Depends(get_notifier)
):
    """Mark an alert resolved"""
    db_alert = alert_crud.resolve_alert(db, alert_id)
    if not db_alert:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Alert not found"
        )
    alert = AlertWithShift.from_alert(db_alert)
    notifier.broadcast_to_dashboards("alert:resolved", alert)
    return alert

@router.post("/sos", response_model=AlertWithShift, status_code=status.HTTP_201_CREATED)
def trigger_sos(
    sos: SosRequest,
    guard_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
    notifier: Notifier = Depends(get_notifier)
):
    """Panic button: raise an SOS alert on the caller's active shift"""
    shift = shift_crud.get_active_shift_for_guard(db, guard_id)
    if not shift:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="No active shift found to attach SOS to"
        )

    if sos.latitude is not None and sos.longitude is not None:
        message = f"SOS Triggered at Lat: {sos.latitude}, Lng: {sos.longitude}"
    else:
        message = "SOS Triggered (Location Unavailable)"

    db_alert = alert_crud.create_alert(db, shift.id, AlertType.SOS, message)
    alert = AlertWithShift.from_alert(db_alert)
    logger.warning("SOS from guard %s on shift %s", guard_id, shift.id)

    notifier.broadcast_to_dashboards("alert:new", alert)
    notifier.broadcast_to_dashboards("notification:new", {
        "title": "SOS ALERT",
        "message": f"Guard {alert.shift.guard_name} triggered SOS!",
        "type": "error",
    })
    notifier.broadcast_to_dashboards("dashboard:refresh")
    notifier.send_to_user(guard_id, "alert:new", alert)
    return alert
