from pydantic import Field, field_validator
from typing import Optional, List, Dict
from datetime import datetime
from app.models.facility import RoomType, RoomStatus
from app.schemas.base import CamelModel

class RoomBase(CamelModel):
    name: str = Field(..., min_length=1, max_length=100)
    room_type: RoomType = RoomType.CLASS
    tag_ids: List[int] = Field(default_factory=list)

    @field_validator('name')
    def validate_name(cls, v):
        if not v.strip():
            raise ValueError('Room name cannot be empty')
        return v.strip()

class RoomCreate(RoomBase):
    pass

class RoomUpdate(CamelModel):
    name: Optional[str] = Field(None, max_length=100)
    status: Optional[RoomStatus] = None
    room_type: Optional[RoomType] = None
    tag_ids: Optional[List[int]] = None

class RoomResponse(RoomBase):
    id: int
    status: RoomStatus
    photo_urls: List[str] = Field(default_factory=list)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

class RoomStatistics(CamelModel):
    """Dashboard counters: totals per status and per room type."""
    total: int = 0
    by_status: Dict[str, int] = Field(default_factory=dict)
    by_type: Dict[str, int] = Field(default_factory=dict)
