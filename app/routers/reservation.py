from fastapi import APIRouter, Depends, Path, Query, status
from sqlalchemy.orm import Session
from typing import Optional
from datetime import date
from app.core.database import get_db
from app.dependencies import require_permission, get_today, CommonQueryParams
from app.models.reservation import ReservationStatus
from app.schemas.reservation import (
    ReservationCreate, ReservationStatusUpdate, ReservationResponse, ReservationListResponse
)
from app.schemas.token import Caller
from app.services.authorization import Operation
from app.services.reservation import reservation_service

router = APIRouter(prefix="/reservations", tags=["Reservations"])

@router.post("", response_model=ReservationResponse, status_code=status.HTTP_201_CREATED)
def create_reservation(
    data: ReservationCreate,
    today: date = Depends(get_today),
    db: Session = Depends(get_db),
    caller: Caller = Depends(require_permission(Operation.CREATE_RESERVATION))
):
    """Request a slot-instance; starts in `waiting`, 409 if the slot is taken or the room is closed"""
    return reservation_service.create(
        db, caller, data.sched_id, data.reservation_date, data.description, today=today
    )

@router.get("/me", response_model=ReservationListResponse)
def list_my_reservations(
    commons: CommonQueryParams = Depends(),
    reservation_status: Optional[ReservationStatus] = Query(None, alias="status"),
    db: Session = Depends(get_db),
    caller: Caller = Depends(require_permission(Operation.VIEW_OWN_RESERVATIONS))
):
    return reservation_service.list_mine(db, caller, reservation_status, commons.skip, commons.limit)

@router.get("", response_model=ReservationListResponse)
def list_all_reservations(
    commons: CommonQueryParams = Depends(),
    reservation_status: Optional[ReservationStatus] = Query(None, alias="status"),
    sched_id: Optional[int] = Query(None, alias="schedId"),
    user_id: Optional[int] = Query(None, alias="userId"),
    on_date: Optional[date] = Query(None, alias="date"),
    db: Session = Depends(get_db),
    caller: Caller = Depends(require_permission(Operation.VIEW_ALL_RESERVATIONS))
):
    """Global registry (admin only)"""
    return reservation_service.list_all(
        db, caller, status=reservation_status, sched_id=sched_id, user_id=user_id,
        on_date=on_date, skip=commons.skip, limit=commons.limit
    )

@router.get("/{reservation_id}", response_model=ReservationResponse)
def get_reservation(
    reservation_id: int = Path(..., description="Reservation ID"),
    db: Session = Depends(get_db),
    caller: Caller = Depends(require_permission(Operation.VIEW_OWN_RESERVATIONS))
):
    return reservation_service.get(db, caller, reservation_id)

@router.put("/{reservation_id}/status", response_model=ReservationResponse)
def update_reservation_status(
    data: ReservationStatusUpdate,
    reservation_id: int = Path(..., description="Reservation ID"),
    db: Session = Depends(get_db),
    caller: Caller = Depends(require_permission(Operation.DECIDE_RESERVATION))
):
    """Accept or deny a waiting reservation (admin only)"""
    return reservation_service.update_status(db, caller, reservation_id, data.status)

@router.post("/{reservation_id}/cancel", response_model=ReservationResponse)
def cancel_reservation(
    reservation_id: int = Path(..., description="Reservation ID"),
    db: Session = Depends(get_db),
    caller: Caller = Depends(require_permission(Operation.CANCEL_OWN_RESERVATION))
):
    return reservation_service.cancel(db, caller, reservation_id)
