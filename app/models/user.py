import enum
from typing import Optional


class UserRole(enum.Enum):
    ADMINISTRATOR = "Administrator"
    LECTURER = "Lecturer"
    STUDENT = "Student"

    @classmethod
    def parse(cls, value) -> Optional["UserRole"]:
        """Match a role name case-insensitively; unknown names resolve to None."""
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            return None
        for role in cls:
            if role.value.lower() == value.strip().lower():
                return role
        return None
