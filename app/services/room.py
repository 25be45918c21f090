from sqlalchemy.orm import Session
from typing import Any, Dict, List, Optional, Union
import logging

from app.core.exceptions import InvalidArgument
from app.models.facility import Room, RoomStatus, RoomType
from app.repositories.room import room_repository
from app.schemas.room import RoomStatistics
from app.schemas.token import Caller
from app.services.authorization import Operation, authorization_gate

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = {"name", "status", "room_type", "tag_ids"}


def _parse_enum(enum_cls, value, field_name: str):
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError:
        allowed = ", ".join(e.value for e in enum_cls)
        raise InvalidArgument(f"Invalid {field_name} {value!r}; expected one of: {allowed}")


def _clean_name(name: Any) -> str:
    if not isinstance(name, str) or not name.strip():
        raise InvalidArgument("Room name cannot be empty")
    return name.strip()


def _clean_tag_ids(tag_ids: Any) -> List[int]:
    if tag_ids is None:
        return []
    try:
        # Keep first-seen order, drop duplicates
        return list(dict.fromkeys(int(tag_id) for tag_id in tag_ids))
    except (TypeError, ValueError):
        raise InvalidArgument("tagIds must be a list of integers")


class RoomService:
    def __init__(self, room_repo, gate):
        self.repository = room_repo
        self.gate = gate

    def list_rooms(
        self,
        db: Session,
        caller: Caller,
        *,
        status: Optional[RoomStatus] = None,
        room_type: Optional[RoomType] = None,
        tag_id: Optional[int] = None,
        search: Optional[str] = None,
        skip: int = 0,
        limit: int = 100
    ) -> List[Room]:
        self.gate.authorize(caller, Operation.VIEW_ROOMS)
        return self.repository.list_rooms(
            db, status=status, room_type=room_type, tag_id=tag_id,
            search=search, skip=skip, limit=limit
        )

    def get_room(self, db: Session, caller: Caller, room_id: int) -> Room:
        self.gate.authorize(caller, Operation.VIEW_ROOMS)
        return self.repository.get_or_raise(db, room_id)

    def create_room(
        self,
        db: Session,
        caller: Caller,
        name: str,
        room_type: Union[RoomType, str],
        tag_ids: Optional[List[int]] = None
    ) -> Room:
        self.gate.authorize(caller, Operation.MANAGE_ROOMS)
        room = self.repository.create(db, obj_in={
            "name": _clean_name(name),
            "room_type": _parse_enum(RoomType, room_type, "roomType"),
            "status": RoomStatus.OPEN,
            "tag_ids": _clean_tag_ids(tag_ids),
        })
        logger.info(f"Room {room.id} ({room.name}) created by admin {caller.id}")
        return room

    def update_room(self, db: Session, caller: Caller, room_id: int, patch: Dict[str, Any]) -> Room:
        """
        Partial update of name, status, roomType and tagIds.
        Closing a room leaves existing reservations alone; availability
        checks refuse new bookings from then on.
        """
        self.gate.authorize(caller, Operation.MANAGE_ROOMS)
        room = self.repository.get_or_raise(db, room_id)

        unknown = set(patch) - UPDATABLE_FIELDS
        if unknown:
            raise InvalidArgument(f"Cannot update field(s): {', '.join(sorted(unknown))}")

        update_data = {}
        if patch.get("name") is not None:
            update_data["name"] = _clean_name(patch["name"])
        if patch.get("status") is not None:
            update_data["status"] = _parse_enum(RoomStatus, patch["status"], "status")
        if patch.get("room_type") is not None:
            update_data["room_type"] = _parse_enum(RoomType, patch["room_type"], "roomType")
        if patch.get("tag_ids") is not None:
            update_data["tag_ids"] = _clean_tag_ids(patch["tag_ids"])

        previous_status = room.status
        room = self.repository.update(db, db_obj=room, obj_in=update_data)

        if room.status != previous_status:
            logger.info(f"Room {room.id} status {previous_status.value} -> {room.status.value}")
        return room

    def delete_room(self, db: Session, caller: Caller, room_id: int) -> None:
        self.gate.authorize(caller, Operation.MANAGE_ROOMS)
        self.repository.delete(db, id=room_id)
        logger.info(f"Room {room_id} deleted by admin {caller.id}")

    def attach_image(
        self,
        db: Session,
        caller: Caller,
        room_id: int,
        image_ref: str,
        description: Optional[str] = None
    ) -> Room:
        """Append an already-stored blob reference to the room's photos."""
        self.gate.authorize(caller, Operation.MANAGE_ROOMS)
        if not image_ref or not image_ref.strip():
            raise InvalidArgument("Image reference cannot be empty")
        room = self.repository.get_or_raise(db, room_id)
        self.repository.add_image(db, room, image_ref.strip(), description)
        return room

    def get_statistics(self, db: Session, caller: Caller) -> RoomStatistics:
        self.gate.authorize(caller, Operation.VIEW_ROOMS)
        by_status = self.repository.count_by_status(db)
        by_type = self.repository.count_by_type(db)
        return RoomStatistics(
            total=sum(by_status.values()),
            by_status={s.value: by_status.get(s, 0) for s in RoomStatus},
            by_type={t.value: by_type.get(t, 0) for t in RoomType},
        )


room_service = RoomService(room_repo=room_repository, gate=authorization_gate)
