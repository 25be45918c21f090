# app/services/availability.py
from sqlalchemy.orm import Session
from typing import Iterable, Optional, Set
from datetime import date
import enum

from app.core.config import settings
from app.core.exceptions import InvalidArgument
from app.models.facility import RoomStatus
from app.repositories.schedule import schedule_repository
from app.repositories.reservation import reservation_repository
from app.schemas.schedule import AvailabilityResponse, BookedDatesResponse


class UnavailableReason(enum.Enum):
    ROOM_CLOSED = "room_closed"
    PAST_DATE = "past_date"
    ALREADY_RESERVED = "already_reserved"


class AvailabilityService:
    def __init__(self, schedule_repo, reservation_repo):
        self.schedule_repo = schedule_repo
        self.reservation_repo = reservation_repo

    def check(
        self,
        db: Session,
        sched_id: int,
        on_date: date,
        today: Optional[date] = None
    ) -> AvailabilityResponse:
        """
        Whether the slot-instance (sched_id, on_date) can be booked.
        Read-only. Raises NotFound for an unknown schedule.
        """
        today = today or date.today()
        schedule = self.schedule_repo.get_or_raise(db, sched_id)

        reason = None
        if schedule.room.status == RoomStatus.CLOSED:
            reason = UnavailableReason.ROOM_CLOSED
        elif on_date < today:
            reason = UnavailableReason.PAST_DATE
        elif self.reservation_repo.get_active_for_slot(db, sched_id, on_date) is not None:
            reason = UnavailableReason.ALREADY_RESERVED

        return AvailabilityResponse(
            sched_id=sched_id,
            slot_date=on_date,
            available=reason is None,
            reason=reason.value if reason else None
        )

    def booked_dates(self, db: Session, sched_id: int, start: date, end: date) -> BookedDatesResponse:
        """Dates within [start, end] that carry an active reservation (calendar highlighting)."""
        if end < start:
            raise InvalidArgument("end must not be before start")
        # Both ends count: start == end is a one-day range
        if (end - start).days + 1 > settings.BOOKED_DATES_MAX_RANGE_DAYS:
            raise InvalidArgument(f"Range cannot exceed {settings.BOOKED_DATES_MAX_RANGE_DAYS} days")

        self.schedule_repo.get_or_raise(db, sched_id)
        dates = self.reservation_repo.get_active_dates(db, sched_id, start, end)
        return BookedDatesResponse(sched_id=sched_id, start=start, end=end, dates=dates)

    def reserved_schedule_ids(self, db: Session, schedule_ids: Iterable[int], on_date: date) -> Set[int]:
        return self.reservation_repo.get_reserved_schedule_ids(db, schedule_ids, on_date)


availability_service = AvailabilityService(
    schedule_repo=schedule_repository,
    reservation_repo=reservation_repository
)
