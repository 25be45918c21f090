from sqlalchemy import Column, String, Integer, Text, Enum, Time, ForeignKey, JSON, CheckConstraint
from sqlalchemy.orm import relationship

from app.models.base import BaseModel
import enum

# --- ENUMERATIONS ---

class RoomType(enum.Enum):
    CLASS = "class"
    LABORATORY = "laboratory"
    THEATER = "theater"

class RoomStatus(enum.Enum):
    OPEN = "open"
    RESERVED = "reserved"
    CLOSED = "closed"

# --- MODELS ---

class Room(BaseModel):
    __tablename__ = "rooms"

    name = Column(String(100), nullable=False)
    room_type = Column(Enum(RoomType, values_callable=lambda obj: [e.value for e in obj],
        native_enum=False, name='room_type'), default=RoomType.CLASS, nullable=False)
    status = Column(Enum(RoomStatus, values_callable=lambda obj: [e.value for e in obj],
        native_enum=False, name='room_status'), default=RoomStatus.OPEN, nullable=False, index=True)
    # Tags are external metadata referenced by id only
    tag_ids = Column(JSON, nullable=False, default=list)

    # Relationships
    schedules = relationship("Schedule", back_populates="room", order_by="Schedule.start_time")
    images = relationship("RoomImage", back_populates="room", order_by="RoomImage.id",
        cascade="all, delete-orphan")

    @property
    def photo_urls(self):
        return [image.url for image in self.images]


class RoomImage(BaseModel):
    __tablename__ = "room_images"

    room_id = Column(Integer, ForeignKey("rooms.id", ondelete="CASCADE"), nullable=False, index=True)
    url = Column(Text, nullable=False)
    description = Column(Text)

    room = relationship("Room", back_populates="images")


class Tag(BaseModel):
    __tablename__ = "tags"

    name = Column(String(50), nullable=False, unique=True)


# Recurring daily slot; never edited once created
class Schedule(BaseModel):
    __tablename__ = "schedules"

    room_id = Column(Integer, ForeignKey("rooms.id", ondelete="RESTRICT"), nullable=False, index=True)
    start_time = Column(Time, nullable=False)
    end_time = Column(Time, nullable=False)

    __table_args__ = (
        CheckConstraint('start_time < end_time', name='schedules_time_range_check'),
    )

    room = relationship("Room", back_populates="schedules")
    # Rows are never touched by the ORM on delete; the RESTRICT FK guards active ones
    reservations = relationship("Reservation", back_populates="schedule", passive_deletes="all")
