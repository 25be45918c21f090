import enum
import logging
from typing import Dict, FrozenSet, Optional

from app.core.config import settings
from app.core.exceptions import Forbidden
from app.models.user import UserRole
from app.schemas.token import Caller

logger = logging.getLogger(__name__)


class Operation(enum.Enum):
    VIEW_ROOMS = "view_rooms"
    MANAGE_ROOMS = "manage_rooms"
    CREATE_RESERVATION = "create_reservation"
    DECIDE_RESERVATION = "decide_reservation"
    CANCEL_OWN_RESERVATION = "cancel_own_reservation"
    CANCEL_ANY_RESERVATION = "cancel_any_reservation"
    VIEW_OWN_RESERVATIONS = "view_own_reservations"
    VIEW_ALL_RESERVATIONS = "view_all_reservations"


_EVERYONE = frozenset(UserRole)
_ADMIN_ONLY = frozenset({UserRole.ADMINISTRATOR})

POLICY: Dict[Operation, FrozenSet[UserRole]] = {
    Operation.VIEW_ROOMS: _EVERYONE,
    Operation.MANAGE_ROOMS: _ADMIN_ONLY,
    Operation.CREATE_RESERVATION: _EVERYONE,
    Operation.DECIDE_RESERVATION: _ADMIN_ONLY,
    Operation.CANCEL_OWN_RESERVATION: _EVERYONE,
    Operation.CANCEL_ANY_RESERVATION: _ADMIN_ONLY,
    Operation.VIEW_OWN_RESERVATIONS: _EVERYONE,
    Operation.VIEW_ALL_RESERVATIONS: _ADMIN_ONLY,
}


class AuthorizationGate:
    """Static role -> operation table. Anything not granted is denied."""

    def __init__(self, policy: Dict[Operation, FrozenSet[UserRole]] = None, allow_admin_cancel: Optional[bool] = None):
        self.policy = policy if policy is not None else POLICY
        self._allow_admin_cancel = allow_admin_cancel

    @property
    def allow_admin_cancel(self) -> bool:
        if self._allow_admin_cancel is not None:
            return self._allow_admin_cancel
        return settings.ALLOW_ADMIN_CANCEL

    def is_allowed(self, caller: Optional[Caller], operation: Operation) -> bool:
        if caller is None or not caller.is_authenticated:
            return False
        if operation == Operation.CANCEL_ANY_RESERVATION and not self.allow_admin_cancel:
            return False
        return caller.role in self.policy.get(operation, frozenset())

    def authorize(self, caller: Optional[Caller], operation: Operation) -> Caller:
        if not self.is_allowed(caller, operation):
            role = caller.role.value if caller and caller.role else None
            logger.info(f"Denied {operation.value} for caller {caller.id if caller else None} (role={role})")
            raise Forbidden("Not enough permissions")
        return caller


authorization_gate = AuthorizationGate()
