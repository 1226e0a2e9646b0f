"""
Plain-text shift report for supervisors.
"""

from typing import List, Optional

from sqlalchemy.orm import Session

from app.constants.tracking import UNKNOWN_SITE_NAME
from app.db.crud import location as location_crud
from app.db.crud import shift as shift_crud
from app.db.models.alert import Alert
from app.db.schemas.alert import Alert as AlertSchema
from app.db.schemas.location import RoutePoint
from app.db.schemas.shift import GuardSummary, ShiftDetail, ShiftReport, SiteSummary

def get_shift_detail(db: Session, shift_id: int) -> Optional[ShiftDetail]:
    shift = shift_crud.get_shift(db, shift_id)
    if shift is None:
        return None
    alerts: List[Alert] = sorted(shift.alerts, key=lambda a: (a.created_at, a.id))
    return ShiftDetail(
        id=shift.id,
        guard_id=shift.guard_id,
        site_id=shift.site_id,
        status=shift.status,
        start_time=shift.start_time,
        end_time=shift.end_time,
        guard=GuardSummary.model_validate(shift.guard),
        site=SiteSummary.model_validate(shift.site) if shift.site else None,
        location_log=[RoutePoint.from_location(l) for l in location_crud.get_all_samples(db, shift_id)],
        alerts=[AlertSchema.model_validate(a) for a in alerts],
    )

def render_report(detail: ShiftDetail) -> str:
    lines = ["SHIFT REPORT"]
    lines.append(f"Guard: {detail.guard.name} (Badge: {detail.guard.badge_id or 'N/A'})")
    site = detail.site
    lines.append(f"Site: {site.name if site else UNKNOWN_SITE_NAME}")
    lines.append(f"Route: {(site and site.address_from) or 'N/A'} -> {(site and site.address_to) or 'N/A'}")
    lines.append(f"Date: {detail.start_time:%Y-%m-%d}")
    lines.append("")
    lines.append(f"Time-in: {detail.start_time:%H:%M}")

    # One line per minute with a fix
    if detail.location_log:
        lines.append("")
        last_minute = None
        for point in detail.location_log:
            minute = f"{point.recorded_at:%H:%M}"
            if minute != last_minute:
                lines.append(f"{minute} - {point.lat:.5f}, {point.lng:.5f}")
                last_minute = minute

    lines.append("")
    if detail.end_time:
        lines.append(f"Time-out: {detail.end_time:%H:%M}")
        total_minutes = int((detail.end_time - detail.start_time).total_seconds() // 60)
        lines.append(f"Total Hours: {total_minutes // 60}h {total_minutes % 60}m")
    else:
        lines.append("Status: Active (ongoing)")

    if detail.alerts:
        lines.append("")
        lines.append(f"ALERTS ({len(detail.alerts)}):")
        for alert in detail.alerts:
            state = "resolved" if alert.resolved_at else "open"
            lines.append(f"  {alert.created_at:%H:%M} - {alert.type.value}: {alert.message} ({state})")

    return "\n".join(lines)

def generate_shift_report(db: Session, shift_id: int) -> Optional[ShiftReport]:
    detail = get_shift_detail(db, shift_id)
    if detail is None:
        return None
    return ShiftReport(text=render_report(detail), data=detail)
