from pydantic import Field
from typing import List, Optional
from datetime import date, datetime
from app.models.reservation import ReservationStatus
from app.schemas.base import CamelModel, PaginatedResponse

class ReservationCreate(CamelModel):
    sched_id: int
    reservation_date: date = Field(..., alias="date", description="YYYY-MM-DD")
    description: Optional[str] = Field(None, max_length=1000)

class ReservationStatusUpdate(CamelModel):
    """Admin decision on a waiting reservation (accepted or denied)."""
    status: ReservationStatus

class ReservationResponse(CamelModel):
    id: int
    sched_id: int
    user_id: int
    reservation_date: date = Field(..., alias="date")
    description: Optional[str] = None
    status: ReservationStatus
    created_at: Optional[datetime] = None

class ReservationListResponse(PaginatedResponse):
    items: List[ReservationResponse]
