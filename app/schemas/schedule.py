from pydantic import Field, field_serializer
from typing import Optional, List
from datetime import date, time
from app.schemas.base import CamelModel

# --- Slot definitions ---
class ScheduleCreate(CamelModel):
    """Recurring daily slot, e.g. {"startTime": "08:00:00", "endTime": "10:00:00"}"""
    start_time: time
    end_time: time

    model_config = {
        "json_schema_extra": {
            "example": {
                "startTime": "08:00:00",
                "endTime": "10:00:00"
            }
        }
    }

class ScheduleResponse(CamelModel):
    id: int
    room_id: int
    start_time: time
    end_time: time
    # Derived per read for the inspected date
    is_reserved: bool = False

    @field_serializer('start_time', 'end_time')
    def serialize_time(self, value: time) -> str:
        return value.strftime("%H:%M:%S")

# --- Availability views ---
class AvailabilityResponse(CamelModel):
    sched_id: int
    slot_date: date = Field(..., alias="date")
    available: bool
    reason: Optional[str] = None

class BookedDatesResponse(CamelModel):
    sched_id: int
    start: date
    end: date
    dates: List[date] = Field(default_factory=list)
