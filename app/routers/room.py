from fastapi import APIRouter, Depends, Query, Path, File, Form, UploadFile, status
from sqlalchemy.orm import Session
from typing import List, Optional
from datetime import date
from app.core.database import get_db
from app.dependencies import require_permission, get_today, CommonQueryParams
from app.models.facility import RoomStatus, RoomType
from app.schemas.room import RoomCreate, RoomUpdate, RoomResponse, RoomStatistics
from app.schemas.schedule import ScheduleCreate, ScheduleResponse
from app.schemas.token import Caller
from app.services.authorization import Operation
from app.services.room import room_service
from app.services.schedule import schedule_service
from app.services.cloudinary import upload_room_image, delete_cloudinary_file
import logging

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/rooms", tags=["Rooms"])

@router.get("", response_model=List[RoomResponse])
def list_rooms(
    commons: CommonQueryParams = Depends(),
    room_status: Optional[RoomStatus] = Query(None, alias="status"),
    room_type: Optional[RoomType] = Query(None, alias="roomType"),
    tag_id: Optional[int] = Query(None, alias="tagId"),
    search: Optional[str] = Query(None, description="Search in room name"),
    db: Session = Depends(get_db),
    caller: Caller = Depends(require_permission(Operation.VIEW_ROOMS))
):
    """List rooms with optional status / type / tag filters"""
    return room_service.list_rooms(
        db, caller, status=room_status, room_type=room_type, tag_id=tag_id,
        search=search, skip=commons.skip, limit=commons.limit
    )

@router.get("/statistics", response_model=RoomStatistics)
def get_room_statistics(
    db: Session = Depends(get_db),
    caller: Caller = Depends(require_permission(Operation.VIEW_ROOMS))
):
    """Room counts per status and per type (dashboard)"""
    return room_service.get_statistics(db, caller)

@router.get("/{room_id}", response_model=RoomResponse)
def get_room(
    room_id: int = Path(..., description="Room ID"),
    db: Session = Depends(get_db),
    caller: Caller = Depends(require_permission(Operation.VIEW_ROOMS))
):
    return room_service.get_room(db, caller, room_id)

@router.post("", response_model=RoomResponse, status_code=status.HTTP_201_CREATED)
def create_room(
    data: RoomCreate,
    db: Session = Depends(get_db),
    caller: Caller = Depends(require_permission(Operation.MANAGE_ROOMS))
):
    return room_service.create_room(db, caller, data.name, data.room_type, data.tag_ids)

@router.put("/{room_id}", response_model=RoomResponse)
def update_room(
    data: RoomUpdate,
    room_id: int = Path(..., description="Room ID"),
    db: Session = Depends(get_db),
    caller: Caller = Depends(require_permission(Operation.MANAGE_ROOMS))
):
    """Partial update: only the fields present in the body change"""
    return room_service.update_room(db, caller, room_id, data.model_dump(exclude_unset=True))

@router.delete("/{room_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_room(
    room_id: int = Path(..., description="Room ID"),
    db: Session = Depends(get_db),
    caller: Caller = Depends(require_permission(Operation.MANAGE_ROOMS))
):
    room_service.delete_room(db, caller, room_id)

@router.post("/{room_id}/images", response_model=RoomResponse, status_code=status.HTTP_201_CREATED)
async def upload_image(
    room_id: int = Path(..., description="Room ID"),
    file: UploadFile = File(...),
    description: Optional[str] = Form(None),
    db: Session = Depends(get_db),
    caller: Caller = Depends(require_permission(Operation.MANAGE_ROOMS))
):
    """Upload a photo to blob storage and attach its reference to the room"""
    # Fail on a missing room before anything is uploaded
    room_service.get_room(db, caller, room_id)
    upload_info = await upload_room_image(file, room_id)
    try:
        return room_service.attach_image(db, caller, room_id, upload_info["file_url"], description)
    except Exception:
        logger.warning(
            f"Attaching image to room {room_id} failed; removing orphaned upload {upload_info['public_id']}"
        )
        delete_cloudinary_file(upload_info["public_id"])
        raise

# --- Schedules of a room ---

@router.get("/{room_id}/schedules", response_model=List[ScheduleResponse])
def list_room_schedules(
    room_id: int = Path(..., description="Room ID"),
    on_date: Optional[date] = Query(None, alias="date", description="Date used for isReserved (default today)"),
    today: date = Depends(get_today),
    db: Session = Depends(get_db),
    caller: Caller = Depends(require_permission(Operation.VIEW_ROOMS))
):
    return schedule_service.list_room_schedules(db, caller, room_id, on_date or today)

@router.post("/{room_id}/schedules", response_model=ScheduleResponse, status_code=status.HTTP_201_CREATED)
def create_schedule(
    data: ScheduleCreate,
    room_id: int = Path(..., description="Room ID"),
    db: Session = Depends(get_db),
    caller: Caller = Depends(require_permission(Operation.MANAGE_ROOMS))
):
    return schedule_service.create_schedule(db, caller, room_id, data.start_time, data.end_time)
