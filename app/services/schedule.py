# app/services/schedule.py
from sqlalchemy.orm import Session
from typing import List, Optional, Union
from datetime import date, time
import logging

from app.core.exceptions import InvalidArgument
from app.models.facility import Schedule
from app.repositories.room import room_repository
from app.repositories.schedule import schedule_repository
from app.schemas.schedule import ScheduleResponse
from app.schemas.token import Caller
from app.services.authorization import Operation, authorization_gate
from app.services.availability import availability_service

logger = logging.getLogger(__name__)


def parse_time_of_day(value: Union[time, str], field_name: str) -> time:
    """Accept a time or an 'HH:mm:ss' / 'HH:mm' string."""
    if isinstance(value, time):
        return value.replace(microsecond=0, tzinfo=None)
    if isinstance(value, str):
        try:
            return time.fromisoformat(value.strip()).replace(microsecond=0)
        except ValueError:
            pass
    raise InvalidArgument(f"Invalid {field_name} {value!r}, expected HH:mm:ss")


class ScheduleService:
    def __init__(self, schedule_repo, room_repo, availability, gate):
        self.schedule_repo = schedule_repo
        self.room_repo = room_repo
        self.availability = availability
        self.gate = gate

    # =========================================================================
    # SLOT DEFINITIONS (admin)
    # =========================================================================

    def create_schedule(
        self,
        db: Session,
        caller: Caller,
        room_id: int,
        start_time: Union[time, str],
        end_time: Union[time, str]
    ) -> ScheduleResponse:
        self.gate.authorize(caller, Operation.MANAGE_ROOMS)
        start = parse_time_of_day(start_time, "startTime")
        end = parse_time_of_day(end_time, "endTime")
        if start >= end:
            raise InvalidArgument("startTime must be before endTime")

        schedule = self.schedule_repo.create(db, obj_in={
            "room_id": room_id,
            "start_time": start,
            "end_time": end,
        })
        logger.info(f"Schedule {schedule.id} ({start}-{end}) created on room {room_id}")
        return self._to_response(schedule, is_reserved=False)

    def delete_schedule(self, db: Session, caller: Caller, schedule_id: int) -> None:
        self.gate.authorize(caller, Operation.MANAGE_ROOMS)
        self.schedule_repo.delete(db, id=schedule_id)
        logger.info(f"Schedule {schedule_id} deleted by admin {caller.id}")

    # =========================================================================
    # VIEWS (isReserved derived for the inspected date)
    # =========================================================================

    def get_schedule(
        self,
        db: Session,
        caller: Caller,
        schedule_id: int,
        on_date: Optional[date] = None
    ) -> ScheduleResponse:
        self.gate.authorize(caller, Operation.VIEW_ROOMS)
        schedule = self.schedule_repo.get_or_raise(db, schedule_id)
        return self._describe(db, [schedule], on_date)[0]

    def list_schedules(
        self,
        db: Session,
        caller: Caller,
        on_date: Optional[date] = None,
        skip: int = 0,
        limit: int = 100
    ) -> List[ScheduleResponse]:
        self.gate.authorize(caller, Operation.VIEW_ROOMS)
        schedules = self.schedule_repo.list_all(db, skip=skip, limit=limit)
        return self._describe(db, schedules, on_date)

    def list_room_schedules(
        self,
        db: Session,
        caller: Caller,
        room_id: int,
        on_date: Optional[date] = None
    ) -> List[ScheduleResponse]:
        self.gate.authorize(caller, Operation.VIEW_ROOMS)
        self.room_repo.get_or_raise(db, room_id)
        schedules = self.schedule_repo.list_by_room(db, room_id)
        return self._describe(db, schedules, on_date)

    # =========================================================================
    # HELPER
    # =========================================================================

    def _describe(self, db: Session, schedules: List[Schedule], on_date: Optional[date]) -> List[ScheduleResponse]:
        on_date = on_date or date.today()
        reserved = self.availability.reserved_schedule_ids(db, [s.id for s in schedules], on_date)
        return [self._to_response(s, is_reserved=s.id in reserved) for s in schedules]

    def _to_response(self, schedule: Schedule, is_reserved: bool) -> ScheduleResponse:
        return ScheduleResponse(
            id=schedule.id,
            room_id=schedule.room_id,
            start_time=schedule.start_time,
            end_time=schedule.end_time,
            is_reserved=is_reserved
        )


schedule_service = ScheduleService(
    schedule_repo=schedule_repository,
    room_repo=room_repository,
    availability=availability_service,
    gate=authorization_gate
)
