from app.repositories.base import CRUDBase
from app.models.facility import Tag
from sqlalchemy.orm import Session
from typing import List

class TagRepository(CRUDBase):
    def __init__(self):
        super().__init__(Tag)

    def list_tags(self, db: Session) -> List[Tag]:
        return db.query(Tag).order_by(Tag.name).all()

tag_repository = TagRepository()
