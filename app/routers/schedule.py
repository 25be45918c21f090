# app/routers/schedule.py

from fastapi import APIRouter, Depends, Path, Query, status
from sqlalchemy.orm import Session
from typing import List, Optional
from datetime import date
from app.core.database import get_db
from app.dependencies import require_permission, get_today, CommonQueryParams
from app.schemas.schedule import ScheduleResponse, AvailabilityResponse, BookedDatesResponse
from app.schemas.token import Caller
from app.services.authorization import Operation
from app.services.availability import availability_service
from app.services.schedule import schedule_service

router = APIRouter(prefix="/schedules", tags=["Schedules"])

@router.get("", response_model=List[ScheduleResponse])
def list_schedules(
    commons: CommonQueryParams = Depends(),
    on_date: Optional[date] = Query(None, alias="date", description="Date used for isReserved (default today)"),
    today: date = Depends(get_today),
    db: Session = Depends(get_db),
    caller: Caller = Depends(require_permission(Operation.VIEW_ROOMS))
):
    return schedule_service.list_schedules(db, caller, on_date or today, commons.skip, commons.limit)

@router.get("/{schedule_id}", response_model=ScheduleResponse)
def get_schedule(
    schedule_id: int = Path(..., description="Schedule ID"),
    on_date: Optional[date] = Query(None, alias="date"),
    today: date = Depends(get_today),
    db: Session = Depends(get_db),
    caller: Caller = Depends(require_permission(Operation.VIEW_ROOMS))
):
    return schedule_service.get_schedule(db, caller, schedule_id, on_date or today)

@router.delete("/{schedule_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_schedule(
    schedule_id: int = Path(..., description="Schedule ID"),
    db: Session = Depends(get_db),
    caller: Caller = Depends(require_permission(Operation.MANAGE_ROOMS))
):
    """Rejected with 409 while active reservations reference the schedule"""
    schedule_service.delete_schedule(db, caller, schedule_id)

@router.get("/{schedule_id}/availability", response_model=AvailabilityResponse)
def check_availability(
    schedule_id: int = Path(..., description="Schedule ID"),
    on_date: date = Query(..., alias="date", description="YYYY-MM-DD"),
    today: date = Depends(get_today),
    db: Session = Depends(get_db),
    caller: Caller = Depends(require_permission(Operation.VIEW_ROOMS))
):
    return availability_service.check(db, schedule_id, on_date, today=today)

@router.get("/{schedule_id}/booked-dates", response_model=BookedDatesResponse)
def get_booked_dates(
    start: date = Query(..., description="First day of the range (YYYY-MM-DD)"),
    end: date = Query(..., description="Last day of the range (YYYY-MM-DD)"),
    schedule_id: int = Path(..., description="Schedule ID"),
    db: Session = Depends(get_db),
    caller: Caller = Depends(require_permission(Operation.VIEW_ROOMS))
):
    """Days with an active reservation, for disabling calendar cells"""
    return availability_service.booked_dates(db, schedule_id, start, end)

# END OF app/routers/schedule.py
