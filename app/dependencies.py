from typing import Optional
from datetime import date
from fastapi import Depends, Query
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from app.core.security import resolve_caller
from app.schemas.token import Caller
from app.services.authorization import Operation, authorization_gate

security = HTTPBearer(auto_error=False)

def get_current_caller(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security)
) -> Caller:
    # No token: anonymous caller, denied by every permission check
    if credentials is None:
        return Caller.anonymous()
    return resolve_caller(credentials.credentials)

def require_permission(operation: Operation):
    """Dependency factory: fail with 403 before the endpoint body runs."""
    def dependency(caller: Caller = Depends(get_current_caller)) -> Caller:
        return authorization_gate.authorize(caller, operation)
    return dependency

def get_today() -> date:
    return date.today()

# Common query parameters
class CommonQueryParams:
    def __init__(
        self,
        skip: int = Query(0, ge=0, description="Number of records to skip"),
        limit: int = Query(100, ge=1, le=100, description="Number of records to return"),
    ):
        self.skip = skip
        self.limit = limit
