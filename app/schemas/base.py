from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Wire schemas use camelCase field names (schedId, roomType, tagIds...)."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class PaginatedResponse(CamelModel):
    total: int = 0
    page: int = 1
    size: int = 100
    pages: int = 1
    has_next: bool = False
    has_prev: bool = False
