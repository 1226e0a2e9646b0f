"""
Location ingest and anomaly checks.

A batch of GPS fixes for an active shift is persisted first; boundary and
idle checks then run against what was stored and open alerts through the
alert ledger. Both checks read only persisted data, so a batch whose
evaluation failed half-way can simply be re-submitted.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional, Sequence

from sqlalchemy.orm import Session

from app.constants.tracking import (
    AlertType,
    ShiftStatus,
    IDLE_WINDOW_SIZE,
    IDLE_MIN_SAMPLES,
    IDLE_MIN_SPAN_MS,
    IDLE_DISTANCE_METERS,
    UNKNOWN_SITE_NAME,
)
from app.db.crud import alert as alert_crud
from app.db.crud import location as location_crud
from app.db.crud import shift as shift_crud
from app.db.models.alert import Alert
from app.db.models.guard_location import GuardLocation
from app.db.models.shift import Shift
from app.db.schemas.location import LocationSampleIn
from app.services.geofence import LatLng, is_point_in_polygon, parse_boundary, path_length

logger = logging.getLogger(__name__)

@dataclass
class IngestResult:
    inserted_count: int = 0
    # Alerts opened by this batch or already open for the same condition
    alerts: List[Alert] = field(default_factory=list)

def _site_name(shift: Shift) -> str:
    return shift.site.name if shift.site else UNKNOWN_SITE_NAME

def check_boundary(db: Session, shift: Shift, latest: LocationSampleIn) -> Optional[Alert]:
    """Open an out_of_bounds alert when ``latest`` lies outside the site boundary."""
    boundary = parse_boundary(shift.site.boundary_geojson) if shift.site else None
    if boundary is None:
        return None
    if is_point_in_polygon(LatLng(latest.latitude, latest.longitude), boundary):
        return None
    return alert_crud.create_alert(
        db,
        shift.id,
        AlertType.OUT_OF_BOUNDS,
        f"Guard left the boundary of {_site_name(shift)}",
    )

def is_idle(recent: Sequence[GuardLocation]) -> bool:
    """
    ``recent`` is newest first. Idle means enough samples spanning at least
    the minimum window whose path, walked oldest to newest, stays under the
    distance threshold.
    """
    if len(recent) < IDLE_MIN_SAMPLES:
        return False
    span_ms = (recent[0].recorded_at - recent[-1].recorded_at).total_seconds() * 1000
    if span_ms < IDLE_MIN_SPAN_MS:
        return False
    travelled = path_length(LatLng(s.latitude, s.longitude) for s in reversed(recent))
    return travelled < IDLE_DISTANCE_METERS

def check_idle(db: Session, shift: Shift) -> Optional[Alert]:
    recent = location_crud.get_recent_samples(db, shift.id, IDLE_WINDOW_SIZE)
    if not is_idle(recent):
        return None
    return alert_crud.create_alert(
        db,
        shift.id,
        AlertType.IDLE,
        f"Guard has been stationary at {_site_name(shift)} for over {IDLE_MIN_SPAN_MS // 60_000} minutes",
    )

def ingest_location_batch(
    db: Session,
    guard_id: int,
    shift_id: int,
    samples: Sequence[LocationSampleIn],
    received_at: Optional[datetime] = None
) -> IngestResult:
    """
    Persist a batch of fixes for ``shift_id`` and evaluate boundary and idle
    conditions.

    Telemetry for an unknown shift, a shift owned by another guard, or a
    shift that is no longer active is dropped without writing anything.
    """
    if not samples:
        return IngestResult()

    shift = shift_crud.get_shift(db, shift_id)
    if shift is None or shift.guard_id != guard_id or shift.status != ShiftStatus.ACTIVE.value:
        logger.info("Dropping %d location(s) from guard %s for shift %s: no matching active shift", len(samples), guard_id, shift_id)
        return IngestResult()

    inserted = location_crud.append_location_samples(db, guard_id, shift_id, samples, received_at=received_at)
    logger.debug("Stored %d location(s) for shift %s", inserted, shift_id)

    alerts = []
    for alert in (check_boundary(db, shift, samples[-1]), check_idle(db, shift)):
        if alert is not None:
            alerts.append(alert)

    return IngestResult(inserted_count=inserted, alerts=alerts)

def get_shift_route(db: Session, shift_id: int) -> Optional[List[GuardLocation]]:
    """All samples for the shift, oldest first, or None when the shift does not exist."""
    if shift_crud.get_shift(db, shift_id) is None:
        return None
    return location_crud.get_all_samples(db, shift_id)
