from sqlalchemy.orm import Session, joinedload
from typing import List, Optional
from app.database import utcnow
from app.db.models.shift import Shift
from app.constants.tracking import ShiftStatus

def get_shift(db: Session, shift_id: int) -> Optional[Shift]:
    return db.query(Shift).options(
        joinedload(Shift.guard), joinedload(Shift.site)
    ).filter(Shift.id == shift_id).first()

def get_active_shift_for_guard(db: Session, guard_id: int) -> Optional[Shift]:
    return db.query(Shift).options(
        joinedload(Shift.guard), joinedload(Shift.site)
    ).filter(
        Shift.guard_id == guard_id,
        Shift.status == ShiftStatus.ACTIVE.value
    ).first()

def get_active_shifts(db: Session) -> List[Shift]:
    return db.query(Shift).options(
        joinedload(Shift.guard), joinedload(Shift.site)
    ).filter(
        Shift.status == ShiftStatus.ACTIVE.value
    ).order_by(Shift.start_time.desc(), Shift.id.desc()).all()

def start_shift(db: Session, guard_id: int, site_id: Optional[int] = None) -> Shift:
    db_shift = Shift(
        guard_id=guard_id,
        site_id=site_id,
        status=ShiftStatus.ACTIVE.value,
        start_time=utcnow(),
    )
    db.add(db_shift)
    db.commit()
    db.refresh(db_shift)
    return db_shift

def end_shift(db: Session, shift_id: int) -> Optional[Shift]:
    db_shift = get_shift(db, shift_id)
    if db_shift:
        db_shift.status = ShiftStatus.COMPLETED.value
        db_shift.end_time = utcnow()
        db.commit()
        db.refresh(db_shift)
    return db_shift
