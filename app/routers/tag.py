from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List
from app.core.database import get_db
from app.dependencies import require_permission
from app.schemas.tag import TagCreate, TagResponse
from app.schemas.token import Caller
from app.services.authorization import Operation
from app.services.tag import tag_service

router = APIRouter(prefix="/tags", tags=["Tags"])

@router.get("", response_model=List[TagResponse])
def list_tags(
    db: Session = Depends(get_db),
    caller: Caller = Depends(require_permission(Operation.VIEW_ROOMS))
):
    return tag_service.list_tags(db, caller)

@router.post("", response_model=TagResponse, status_code=status.HTTP_201_CREATED)
def create_tag(
    data: TagCreate,
    db: Session = Depends(get_db),
    caller: Caller = Depends(require_permission(Operation.MANAGE_ROOMS))
):
    return tag_service.create_tag(db, caller, data.name)
