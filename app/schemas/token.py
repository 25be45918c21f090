from pydantic import BaseModel
from typing import Optional
from app.models.user import UserRole

class TokenData(BaseModel):
    sub: Optional[str] = None
    role: Optional[str] = None

class Caller(BaseModel):
    """Identity of the request issuer, as resolved outside the booking core."""
    id: Optional[int] = None
    role: Optional[UserRole] = None

    @property
    def is_authenticated(self) -> bool:
        return self.id is not None and self.role is not None

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMINISTRATOR

    @classmethod
    def anonymous(cls) -> "Caller":
        return cls()
