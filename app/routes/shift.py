from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from app.database import get_db
from app.dependencies import get_current_user_id, get_notifier
from app.constants.tracking import ShiftStatus
from app.db.crud import shift as shift_crud
from app.db.crud import site as site_crud
from app.db.schemas.shift import ShiftStart, Shift, ShiftReport
from app.services import shift_report
from app.services.notifier import Notifier

router = APIRouter(
    prefix="/api/v1/shifts",
    tags=["shifts"]
)

@router.post("/start", response_model=Shift, status_code=status.HTTP_201_CREATED)
def start_shift(
    body: ShiftStart,
    guard_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
    notifier: Notifier = Depends(get_notifier)
):
    """Start a patrol for the caller"""
    if body.site_id is not None and not site_crud.get_site(db, body.site_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Site not found"
        )
    if shift_crud.get_active_shift_for_guard(db, guard_id):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="You already have an active shift. End it before starting a new one."
        )
    db_shift = shift_crud.start_shift(db, guard_id, body.site_id)
    notifier.broadcast_to_dashboards("dashboard:refresh")
    return db_shift

@router.post("/{shift_id}/end", response_model=Shift)
def end_shift(
    shift_id: int,
    guard_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
    notifier: Notifier = Depends(get_notifier)
):
    """End the caller's shift"""
    db_shift = shift_crud.get_shift(db, shift_id)
    if not db_shift or db_shift.guard_id != guard_id:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Shift not found"
        )
    if db_shift.status != ShiftStatus.ACTIVE.value:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Shift is not active"
        )
    db_shift = shift_crud.end_shift(db, shift_id)
    notifier.broadcast_to_dashboards("dashboard:refresh")
    return db_shift

@router.get("/active", response_model=Shift)
def get_active_shift(
    guard_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    """The caller's active shift"""
    db_shift = shift_crud.get_active_shift_for_guard(db, guard_id)
    if not db_shift:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="No active shift"
        )
    return db_shift

@router.get("/{shift_id}/report", response_model=ShiftReport)
def get_shift_report(
    shift_id: int,
    db: Session = Depends(get_db)
):
    """Text report with location log and alerts"""
    report = shift_report.generate_shift_report(db, shift_id)
    if report is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Shift not found"
        )
    return report
