# app/services/reservation.py
from sqlalchemy.orm import Session
from typing import Any, Dict, Optional, Union
from datetime import date, datetime
import logging

from app.core.exceptions import Conflict, Forbidden, InvalidArgument, InvalidState
from app.core.locks import slot_locks
from app.models.reservation import Reservation, ReservationStatus, ACTIVE_STATUSES
from app.repositories.reservation import reservation_repository
from app.schemas.token import Caller
from app.services.authorization import Operation, authorization_gate
from app.services.availability import UnavailableReason, availability_service

logger = logging.getLogger(__name__)

DECISION_STATUSES = (ReservationStatus.ACCEPTED, ReservationStatus.DENIED)


def parse_reservation_date(value: Union[date, str]) -> date:
    """Accept a date or an ISO 'YYYY-MM-DD' string; datetimes are cut to their day."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return date.fromisoformat(value.strip())
        except ValueError:
            pass
    raise InvalidArgument(f"Invalid date {value!r}, expected YYYY-MM-DD")


class ReservationService:
    def __init__(self, reservation_repo, availability, gate, locks):
        self.reservation_repo = reservation_repo
        self.availability = availability
        self.gate = gate
        self.locks = locks

    # =========================================================================
    # CREATE
    # =========================================================================

    def create(
        self,
        db: Session,
        caller: Caller,
        sched_id: int,
        reservation_date: Union[date, str],
        description: Optional[str] = None,
        today: Optional[date] = None
    ) -> Reservation:
        """
        Book the slot-instance (sched_id, reservation_date) for the caller.
        The availability check and the insert happen under the per-slot lock;
        the partial unique index catches anything that slips past it.
        """
        self.gate.authorize(caller, Operation.CREATE_RESERVATION)
        on_date = parse_reservation_date(reservation_date)
        today = today or date.today()

        if description is not None:
            description = description.strip() or None

        with self.locks.hold(sched_id, on_date):
            result = self.availability.check(db, sched_id, on_date, today=today)
            if not result.available:
                if result.reason == UnavailableReason.PAST_DATE.value:
                    raise InvalidArgument("Cannot reserve a date in the past")
                raise Conflict("Slot is not available for this date")

            reservation = self.reservation_repo.create(db, obj_in={
                "sched_id": sched_id,
                "user_id": caller.id,
                "reservation_date": on_date,
                "description": description,
                "status": ReservationStatus.WAITING,
            })

        logger.info(f"Reservation {reservation.id} created by user {caller.id} for schedule {sched_id} on {on_date}")
        return reservation

    # =========================================================================
    # READ
    # =========================================================================

    def get(self, db: Session, caller: Caller, reservation_id: int) -> Reservation:
        self.gate.authorize(caller, Operation.VIEW_OWN_RESERVATIONS)
        reservation = self.reservation_repo.get_or_raise(db, reservation_id)
        if reservation.user_id != caller.id and not self.gate.is_allowed(caller, Operation.VIEW_ALL_RESERVATIONS):
            raise Forbidden("Not enough permissions")
        return reservation

    def list_mine(
        self,
        db: Session,
        caller: Caller,
        status: Optional[ReservationStatus] = None,
        skip: int = 0,
        limit: int = 100
    ) -> Dict[str, Any]:
        self.gate.authorize(caller, Operation.VIEW_OWN_RESERVATIONS)
        return self.reservation_repo.list_reservations(
            db, user_id=caller.id, status=status, skip=skip, limit=limit
        )

    def list_all(
        self,
        db: Session,
        caller: Caller,
        status: Optional[ReservationStatus] = None,
        sched_id: Optional[int] = None,
        user_id: Optional[int] = None,
        on_date: Optional[date] = None,
        skip: int = 0,
        limit: int = 100
    ) -> Dict[str, Any]:
        self.gate.authorize(caller, Operation.VIEW_ALL_RESERVATIONS)
        return self.reservation_repo.list_reservations(
            db, user_id=user_id, status=status, sched_id=sched_id,
            on_date=on_date, skip=skip, limit=limit
        )

    # =========================================================================
    # STATE TRANSITIONS
    # =========================================================================

    def update_status(
        self,
        db: Session,
        caller: Caller,
        reservation_id: int,
        new_status: Union[ReservationStatus, str]
    ) -> Reservation:
        """Admin decision: waiting -> accepted | denied."""
        self.gate.authorize(caller, Operation.DECIDE_RESERVATION)
        reservation = self.reservation_repo.get_or_raise(db, reservation_id)

        if reservation.status != ReservationStatus.WAITING:
            raise InvalidState(
                f"Reservation {reservation_id} is {reservation.status.value}; only waiting reservations can be decided"
            )

        target = self._parse_status(new_status)
        if target not in DECISION_STATUSES:
            raise InvalidArgument("Status must be 'accepted' or 'denied'")

        if not self.reservation_repo.transition_status(db, reservation_id, [ReservationStatus.WAITING], target):
            # Another decision or a cancellation got there first
            raise InvalidState(f"Reservation {reservation_id} is no longer waiting")

        db.refresh(reservation)
        logger.info(f"Reservation {reservation_id} {target.value} by admin {caller.id}")
        return reservation

    def cancel(self, db: Session, caller: Caller, reservation_id: int) -> Reservation:
        """Owner cancellation (waiting or accepted). Frees the slot-instance."""
        self.gate.authorize(caller, Operation.CANCEL_OWN_RESERVATION)
        reservation = self.reservation_repo.get_or_raise(db, reservation_id)

        if reservation.user_id != caller.id and not self.gate.is_allowed(caller, Operation.CANCEL_ANY_RESERVATION):
            raise Forbidden("You can only cancel your own reservations")

        if not reservation.is_active:
            raise InvalidState(f"Reservation {reservation_id} is {reservation.status.value} and cannot be cancelled")

        if not self.reservation_repo.transition_status(db, reservation_id, ACTIVE_STATUSES, ReservationStatus.CANCELLED):
            raise InvalidState(f"Reservation {reservation_id} can no longer be cancelled")

        db.refresh(reservation)
        logger.info(f"Reservation {reservation_id} cancelled by user {caller.id}")
        return reservation

    # =========================================================================
    # HELPER
    # =========================================================================

    def _parse_status(self, value: Union[ReservationStatus, str]) -> ReservationStatus:
        if isinstance(value, ReservationStatus):
            return value
        try:
            return ReservationStatus(value)
        except ValueError:
            raise InvalidArgument(f"Unknown reservation status {value!r}")


reservation_service = ReservationService(
    reservation_repo=reservation_repository,
    availability=availability_service,
    gate=authorization_gate,
    locks=slot_locks
)
