from sqlalchemy.orm import Session, joinedload
from sqlalchemy.exc import IntegrityError
from sqlalchemy import func
from typing import List, Optional, Union
from datetime import datetime
import logging
from app.database import utcnow
from app.db.models.alert import Alert
from app.db.models.shift import Shift
from app.db.schemas.alert import AlertCreate, AlertWithShift
from app.constants.tracking import AlertType, ALERT_PAGE_SIZE

logger = logging.getLogger(__name__)

def _type_value(alert_type: Union[AlertType, str]) -> str:
    return alert_type.value if isinstance(alert_type, AlertType) else alert_type

def get_alert(db: Session, alert_id: int) -> Optional[Alert]:
    return db.query(Alert).filter(Alert.id == alert_id).first()

def get_open_alert(db: Session, shift_id: int, alert_type: Union[AlertType, str]) -> Optional[Alert]:
    return db.query(Alert).filter(
        Alert.shift_id == shift_id,
        Alert.type == _type_value(alert_type),
        Alert.resolved_at == None
    ).first()

def get_open_alerts_for_shift(db: Session, shift_id: int) -> List[Alert]:
    return db.query(Alert).filter(
        Alert.shift_id == shift_id,
        Alert.resolved_at == None
    ).all()

def insert_alert(db: Session, alert: AlertCreate) -> Alert:
    db_alert = Alert(
        shift_id=alert.shift_id,
        type=_type_value(alert.type),
        message=alert.message,
    )
    db.add(db_alert)
    db.commit()
    db.refresh(db_alert)
    return db_alert

def create_alert(db: Session, shift_id: int, alert_type: Union[AlertType, str], message: str) -> Alert:
    """
    Open an alert for (shift, type), or return the one already open.

    An existing open alert is returned untouched, message included. A
    concurrent insert that wins the race trips the partial unique index;
    the loser rolls back and returns the winner's row.
    """
    existing = get_open_alert(db, shift_id, alert_type)
    if existing:
        return existing

    try:
        db_alert = insert_alert(db, AlertCreate(shift_id=shift_id, type=alert_type, message=message))
    except IntegrityError:
        db.rollback()
        existing = get_open_alert(db, shift_id, alert_type)
        if existing is None:
            raise
        logger.info("Lost race opening %s alert for shift %s, reusing alert %s", _type_value(alert_type), shift_id, existing.id)
        return existing

    logger.info("Opened %s alert %s for shift %s", db_alert.type, db_alert.id, shift_id)
    return db_alert

def mark_alert_resolved(db: Session, alert_id: int, resolved_at: datetime) -> Optional[Alert]:
    db_alert = get_alert(db, alert_id)
    if db_alert:
        db_alert.resolved_at = resolved_at
        db.commit()
        db.refresh(db_alert)
    return db_alert

def resolve_alert(db: Session, alert_id: int) -> Optional[Alert]:
    """Stamp the alert resolved now. Returns None when the id is unknown."""
    return mark_alert_resolved(db, alert_id, utcnow())

def query_alerts(
    db: Session,
    alert_type: Optional[Union[AlertType, str]] = None,
    resolved: Optional[bool] = None,
    limit: int = ALERT_PAGE_SIZE
) -> List[Alert]:
    query = db.query(Alert).options(
        joinedload(Alert.shift).joinedload(Shift.guard),
        joinedload(Alert.shift).joinedload(Shift.site),
    )
    if alert_type:
        query = query.filter(Alert.type == _type_value(alert_type))
    if resolved is False:
        query = query.filter(Alert.resolved_at == None)
    elif resolved is True:
        query = query.filter(Alert.resolved_at != None)
    return query.order_by(Alert.created_at.desc(), Alert.id.desc()).limit(limit).all()

def list_alerts(
    db: Session,
    alert_type: Optional[Union[AlertType, str]] = None,
    resolved: Optional[bool] = None
) -> List[AlertWithShift]:
    """Newest-first page of alerts with the owning shift's guard and site names."""
    return [AlertWithShift.from_alert(a) for a in query_alerts(db, alert_type=alert_type, resolved=resolved)]

def count_unresolved_alerts(db: Session) -> int:
    return db.query(func.count(Alert.id)).filter(Alert.resolved_at == None).scalar() or 0
