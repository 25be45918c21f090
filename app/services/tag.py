from sqlalchemy.orm import Session
from typing import List
import logging

from app.core.exceptions import Conflict, InvalidArgument
from app.models.facility import Tag
from app.repositories.tag import tag_repository
from app.schemas.token import Caller
from app.services.authorization import Operation, authorization_gate

logger = logging.getLogger(__name__)

class TagService:
    def __init__(self, gate):
        self.repository = tag_repository
        self.gate = gate

    def list_tags(self, db: Session, caller: Caller) -> List[Tag]:
        self.gate.authorize(caller, Operation.VIEW_ROOMS)
        return self.repository.list_tags(db)

    def create_tag(self, db: Session, caller: Caller, name: str) -> Tag:
        self.gate.authorize(caller, Operation.MANAGE_ROOMS)
        if not name or not name.strip():
            raise InvalidArgument("Tag name cannot be empty")
        name = name.strip()
        if self.repository.get_by_field(db, "name", name):
            raise Conflict(f"Tag {name!r} already exists")
        tag = self.repository.create(db, obj_in={"name": name})
        logger.info(f"Tag {tag.id} ({tag.name}) created by admin {caller.id}")
        return tag

tag_service = TagService(gate=authorization_gate)
