from sqlalchemy.orm import Session
from typing import List, Optional, Sequence
from datetime import datetime, timezone
from app.database import utcnow
from app.db.models.guard_location import GuardLocation
from app.db.schemas.location import LocationSampleIn

def _to_naive_utc(value: Optional[datetime], fallback: datetime) -> datetime:
    if value is None:
        return fallback
    if value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value

def append_location_samples(
    db: Session,
    guard_id: int,
    shift_id: int,
    samples: Sequence[LocationSampleIn],
    received_at: Optional[datetime] = None
) -> int:
    """Insert the batch in order. Samples without a device timestamp get ``received_at``."""
    received_at = received_at or utcnow()
    rows = [
        GuardLocation(
            guard_id=guard_id,
            shift_id=shift_id,
            latitude=s.latitude,
            longitude=s.longitude,
            accuracy=s.accuracy,
            speed=s.speed,
            heading=s.heading,
            recorded_at=_to_naive_utc(s.recorded_at, received_at),
        )
        for s in samples
    ]
    db.add_all(rows)
    db.commit()
    return len(rows)

def get_recent_samples(db: Session, shift_id: int, limit: int) -> List[GuardLocation]:
    """Newest first."""
    return db.query(GuardLocation).filter(
        GuardLocation.shift_id == shift_id
    ).order_by(GuardLocation.recorded_at.desc(), GuardLocation.id.desc()).limit(limit).all()

def get_latest_sample(db: Session, shift_id: int) -> Optional[GuardLocation]:
    samples = get_recent_samples(db, shift_id, limit=1)
    return samples[0] if samples else None

def get_all_samples(db: Session, shift_id: int) -> List[GuardLocation]:
    """Oldest first."""
    return db.query(GuardLocation).filter(
        GuardLocation.shift_id == shift_id
    ).order_by(GuardLocation.recorded_at.asc(), GuardLocation.id.asc()).all()
