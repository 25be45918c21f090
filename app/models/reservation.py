from sqlalchemy import Column, Integer, Text, Enum, Date, ForeignKey, Index, text
from sqlalchemy.orm import relationship

from app.models.base import BaseModel
import enum


class ReservationStatus(enum.Enum):
    WAITING = "waiting"
    ACCEPTED = "accepted"
    DENIED = "denied"
    CANCELLED = "cancelled"

# Statuses that occupy a slot-instance
ACTIVE_STATUSES = (ReservationStatus.WAITING, ReservationStatus.ACCEPTED)
INACTIVE_STATUSES = (ReservationStatus.DENIED, ReservationStatus.CANCELLED)

_ACTIVE_PREDICATE = text("status IN ('waiting', 'accepted')")


class Reservation(BaseModel):
    __tablename__ = "reservations"

    sched_id = Column(Integer, ForeignKey("schedules.id", ondelete="RESTRICT"), nullable=False)
    user_id = Column(Integer, nullable=False, index=True)
    reservation_date = Column("date", Date, nullable=False)
    description = Column(Text)
    status = Column(Enum(ReservationStatus, values_callable=lambda obj: [e.value for e in obj],
        native_enum=False, name='reservation_status'), default=ReservationStatus.WAITING, nullable=False)

    __table_args__ = (
        # At most one active reservation per (schedule, date)
        Index(
            'uq_reservations_active_slot', 'sched_id', 'date',
            unique=True,
            sqlite_where=_ACTIVE_PREDICATE,
            postgresql_where=_ACTIVE_PREDICATE,
        ),
        Index('ix_reservations_sched_date', 'sched_id', 'date'),
    )

    schedule = relationship("Schedule", back_populates="reservations")

    @property
    def is_active(self) -> bool:
        return self.status in ACTIVE_STATUSES
