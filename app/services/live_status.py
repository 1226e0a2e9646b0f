"""
Live map status for every active shift.

Freshness of the latest fix gives normal/offline; open alerts override it
with precedence out_of_bounds > idle > offline > normal.
"""

from datetime import datetime
from typing import Iterable, List, Optional, Tuple

from sqlalchemy.orm import Session

from app.constants.tracking import AlertType, GuardStatus, OFFLINE_AFTER_MS, UNKNOWN_SITE_NAME
from app.database import utcnow
from app.db.crud import alert as alert_crud
from app.db.crud import location as location_crud
from app.db.crud import shift as shift_crud
from app.db.models.guard_location import GuardLocation
from app.db.models.shift import Shift
from app.db.models.site import Site
from app.db.schemas.location import GuardStatusEntry, LivePosition

def freshness_status(
    latest: Optional[GuardLocation],
    site: Optional[Site],
    now: datetime
) -> Tuple[GuardStatus, Optional[LivePosition]]:
    if latest is None:
        # No fix yet: park the marker on the site's start anchor
        if site is not None and site.lat_from is not None and site.lng_from is not None:
            return GuardStatus.NORMAL, LivePosition(lat=site.lat_from, lng=site.lng_from, recorded_at=now)
        return GuardStatus.OFFLINE, None

    position = LivePosition(lat=latest.latitude, lng=latest.longitude, recorded_at=latest.recorded_at)
    since_update_ms = (now - latest.recorded_at).total_seconds() * 1000
    if since_update_ms > OFFLINE_AFTER_MS:
        return GuardStatus.OFFLINE, position
    return GuardStatus.NORMAL, position

def overlay_alerts(status: GuardStatus, open_alert_types: Iterable[str]) -> GuardStatus:
    types = set(open_alert_types)
    if AlertType.OUT_OF_BOUNDS.value in types:
        return GuardStatus.OUT_OF_BOUNDS
    if AlertType.IDLE.value in types:
        return GuardStatus.IDLE
    return status

def build_status_entry(db: Session, shift: Shift, now: datetime) -> GuardStatusEntry:
    latest = location_crud.get_latest_sample(db, shift.id)
    status, position = freshness_status(latest, shift.site, now)
    open_alerts = alert_crud.get_open_alerts_for_shift(db, shift.id)
    status = overlay_alerts(status, (a.type for a in open_alerts))

    return GuardStatusEntry(
        guard_id=shift.guard.id,
        guard_name=shift.guard.name,
        shift_id=shift.id,
        site_name=shift.site.name if shift.site else UNKNOWN_SITE_NAME,
        status=status,
        location=position,
    )

def get_active_guard_statuses(db: Session, now: Optional[datetime] = None) -> List[GuardStatusEntry]:
    now = now or utcnow()
    return [build_status_entry(db, shift, now) for shift in shift_crud.get_active_shifts(db)]
