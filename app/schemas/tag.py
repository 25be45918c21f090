from pydantic import Field
from app.schemas.base import CamelModel

class TagCreate(CamelModel):
    name: str = Field(..., min_length=1, max_length=50)

class TagResponse(CamelModel):
    id: int
    name: str
