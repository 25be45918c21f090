from app.repositories.base import CRUDBase
from app.repositories.room import room_repository
from app.models.facility import Schedule
from app.models.reservation import Reservation, ACTIVE_STATUSES, INACTIVE_STATUSES
from app.core.exceptions import Conflict
from sqlalchemy.orm import Session
from typing import Any, Dict, List, Union

class ScheduleRepository(CRUDBase):
    def __init__(self):
        super().__init__(Schedule)

    def create(self, db: Session, *, obj_in: Union[Dict[str, Any], Any]) -> Schedule:
        data = obj_in if isinstance(obj_in, dict) else obj_in.model_dump()
        # Referential integrity: the owning room must exist
        room_repository.get_or_raise(db, data["room_id"])
        return super().create(db, obj_in=data)

    def list_by_room(self, db: Session, room_id: int) -> List[Schedule]:
        return (
            db.query(Schedule)
            .filter(Schedule.room_id == room_id)
            .order_by(Schedule.start_time, Schedule.id)
            .all()
        )

    def list_all(self, db: Session, skip: int = 0, limit: int = 100) -> List[Schedule]:
        return (
            db.query(Schedule)
            .order_by(Schedule.room_id, Schedule.start_time, Schedule.id)
            .offset(skip)
            .limit(limit)
            .all()
        )

    def has_active_reservations(self, db: Session, schedule_id: int) -> bool:
        query = db.query(Reservation).filter(
            Reservation.sched_id == schedule_id,
            Reservation.status.in_(ACTIVE_STATUSES)
        )
        return db.query(query.exists()).scalar()

    def delete(self, db: Session, *, id: int) -> Schedule:
        """
        Schedules referenced by active reservations cannot be deleted.
        Denied/cancelled history goes in the same transaction as the schedule;
        an active row committed after the check trips the RESTRICT foreign key.
        """
        schedule = self.get_or_raise(db, id)
        if self.has_active_reservations(db, id):
            raise Conflict(f"Schedule {id} has active reservations")

        db.query(Reservation).filter(
            Reservation.sched_id == id,
            Reservation.status.in_(INACTIVE_STATUSES)
        ).delete(synchronize_session=False)
        db.delete(schedule)
        self._commit(db, "deleting", f"Schedule {id} has active reservations")
        return schedule

schedule_repository = ScheduleRepository()
