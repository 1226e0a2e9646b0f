from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from typing import List
import logging
from app.database import get_db, utcnow
from app.dependencies import get_current_user_id, get_notifier
from app.db.schemas.alert import Alert, AlertWithShift
from app.db.schemas.location import LocationBatchCreate, IngestResponse, RoutePoint, GuardStatusEntry
from app.services import location as location_service
from app.services import live_status
from app.services.notifier import Notifier

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/v1/locations",
    tags=["locations"]
)

@router.post("/", response_model=IngestResponse)
def record_locations(
    batch: LocationBatchCreate,
    guard_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
    notifier: Notifier = Depends(get_notifier)
):
    """Store a batch of GPS fixes for the caller's shift and run geofence/idle checks"""
    received_at = utcnow()
    result = location_service.ingest_location_batch(
        db, guard_id, batch.shift_id, batch.locations, received_at=received_at
    )

    if result.inserted_count:
        latest = batch.locations[-1]
        notifier.broadcast_to_dashboards("guard:location", {
            "guard_id": guard_id,
            "shift_id": batch.shift_id,
            "lat": latest.latitude,
            "lng": latest.longitude,
            "accuracy": latest.accuracy,
            "speed": latest.speed,
            "recorded_at": latest.recorded_at or received_at,
        })
        for alert in result.alerts:
            notifier.broadcast_to_dashboards("alert:new", AlertWithShift.from_alert(alert))

    return IngestResponse(
        inserted_count=result.inserted_count,
        alerts=[Alert.model_validate(a) for a in result.alerts],
    )

@router.get("/active", response_model=List[GuardStatusEntry])
def get_active_guard_locations(db: Session = Depends(get_db)):
    """Latest position and status of every guard on an active shift (live map)"""
    return live_status.get_active_guard_statuses(db)

@router.get("/route/{shift_id}", response_model=List[RoutePoint])
def get_shift_route(
    shift_id: int,
    db: Session = Depends(get_db)
):
    """Full route of a shift in recording order (playback)"""
    locations = location_service.get_shift_route(db, shift_id)
    if locations is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Shift not found"
        )
    return [RoutePoint.from_location(l) for l in locations]
