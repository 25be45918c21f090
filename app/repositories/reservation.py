from app.repositories.base import CRUDBase
from app.repositories.schedule import schedule_repository
from app.models.reservation import Reservation, ReservationStatus, ACTIVE_STATUSES
from app.core.exceptions import Conflict
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
from datetime import date
from typing import Any, Dict, Iterable, List, Optional, Set
import logging

logger = logging.getLogger(__name__)

class ReservationRepository(CRUDBase):
    def __init__(self):
        super().__init__(Reservation)

    def create(self, db: Session, *, obj_in: Dict[str, Any]) -> Reservation:
        # Referential integrity: the schedule must exist
        schedule_repository.get_or_raise(db, obj_in["sched_id"])
        try:
            return super().create(db, obj_in=obj_in)
        except Conflict:
            # Only the active-slot index can reject a fresh reservation
            logger.warning(
                f"Active reservation already exists for schedule {obj_in['sched_id']} "
                f"on {obj_in['reservation_date']}"
            )
            raise Conflict("Slot is not available for this date")

    def get_active_for_slot(self, db: Session, sched_id: int, on_date: date) -> Optional[Reservation]:
        return db.query(Reservation).filter(
            Reservation.sched_id == sched_id,
            Reservation.reservation_date == on_date,
            Reservation.status.in_(ACTIVE_STATUSES)
        ).first()

    def get_active_dates(self, db: Session, sched_id: int, start: date, end: date) -> List[date]:
        rows = db.query(Reservation.reservation_date).filter(
            Reservation.sched_id == sched_id,
            Reservation.reservation_date >= start,
            Reservation.reservation_date <= end,
            Reservation.status.in_(ACTIVE_STATUSES)
        ).distinct().order_by(Reservation.reservation_date).all()
        return [row[0] for row in rows]

    def get_reserved_schedule_ids(self, db: Session, schedule_ids: Iterable[int], on_date: date) -> Set[int]:
        schedule_ids = list(schedule_ids)
        if not schedule_ids:
            return set()
        rows = db.query(Reservation.sched_id).filter(
            Reservation.sched_id.in_(schedule_ids),
            Reservation.reservation_date == on_date,
            Reservation.status.in_(ACTIVE_STATUSES)
        ).distinct().all()
        return {row[0] for row in rows}

    def list_reservations(
        self,
        db: Session,
        *,
        user_id: Optional[int] = None,
        status: Optional[ReservationStatus] = None,
        sched_id: Optional[int] = None,
        on_date: Optional[date] = None,
        skip: int = 0,
        limit: int = 100
    ) -> Dict[str, Any]:
        """Paginated listing, newest first."""
        filters = {
            "user_id": user_id,
            "status": status,
            "sched_id": sched_id,
            "reservation_date": on_date,
        }
        return self.get_multi(
            db, skip=skip, limit=limit, filters=filters,
            sort_by="created_at", sort_order="desc"
        )

    def transition_status(
        self,
        db: Session,
        reservation_id: int,
        from_statuses: Iterable[ReservationStatus],
        to_status: ReservationStatus
    ) -> bool:
        """Conditional single-row update; False when the row left `from_statuses` meanwhile."""
        try:
            updated = db.query(Reservation).filter(
                Reservation.id == reservation_id,
                Reservation.status.in_(list(from_statuses))
            ).update({Reservation.status: to_status}, synchronize_session=False)
            db.commit()
        except IntegrityError as e:
            db.rollback()
            logger.warning(f"Integrity violation moving reservation {reservation_id} to {to_status.value}: {e.orig}")
            raise Conflict("Slot is not available for this date")
        return updated == 1

reservation_repository = ReservationRepository()
