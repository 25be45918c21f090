from app.repositories.base import CRUDBase
from app.models.facility import Room, RoomImage, Schedule, RoomStatus, RoomType
from app.core.exceptions import Conflict
from sqlalchemy.orm import Session
from sqlalchemy import func
from typing import Dict, List, Optional

class RoomRepository(CRUDBase):
    def __init__(self):
        super().__init__(Room)

    def list_rooms(
        self,
        db: Session,
        *,
        status: Optional[RoomStatus] = None,
        room_type: Optional[RoomType] = None,
        tag_id: Optional[int] = None,
        search: Optional[str] = None,
        skip: int = 0,
        limit: int = 100
    ) -> List[Room]:
        """Rooms filtered by status, type and name search, ordered by id."""
        query = self._build_query(db, filters={"status": status, "room_type": room_type}, search=search)
        rooms = query.order_by(Room.id).all()

        # tag_ids is a JSON list; filter in Python to stay dialect-neutral
        if tag_id is not None:
            rooms = [room for room in rooms if tag_id in (room.tag_ids or [])]

        return rooms[skip:skip + limit]

    def count_by_status(self, db: Session) -> Dict[RoomStatus, int]:
        rows = db.query(Room.status, func.count(Room.id)).group_by(Room.status).all()
        return {status: count for status, count in rows}

    def count_by_type(self, db: Session) -> Dict[RoomType, int]:
        rows = db.query(Room.room_type, func.count(Room.id)).group_by(Room.room_type).all()
        return {room_type: count for room_type, count in rows}

    def add_image(self, db: Session, room: Room, url: str, description: Optional[str] = None) -> RoomImage:
        image = RoomImage(room_id=room.id, url=url, description=description)
        db.add(image)
        db.commit()
        db.refresh(room)
        return image

    def delete(self, db: Session, *, id: int) -> Room:
        """Rooms that still own schedules cannot be deleted."""
        self.get_or_raise(db, id)
        has_schedules = db.query(
            db.query(Schedule).filter(Schedule.room_id == id).exists()
        ).scalar()
        if has_schedules:
            raise Conflict(f"Room {id} still has schedules")
        return super().delete(db, id=id)

room_repository = RoomRepository()
