from datetime import datetime, timedelta, timezone
from typing import Any, Union, Optional
from jose import jwt, JWTError
from fastapi import HTTPException, status
from app.core.config import settings
from app.models.user import UserRole
from app.schemas.token import Caller, TokenData


def create_access_token(
    subject: Union[str, Any], role: Union[UserRole, str], expires_delta: Optional[timedelta] = None
) -> str:
    """Issue a token in the shape the identity provider uses (dev tooling and tests)."""
    if expires_delta:
        expire = datetime.now(timezone.utc) + expires_delta
    else:
        expire = datetime.now(timezone.utc) + timedelta(
            minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES
        )
    role_name = role.value if isinstance(role, UserRole) else str(role)
    to_encode = {"exp": expire, "sub": str(subject), settings.ROLE_CLAIM: role_name}
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_token(token: str) -> TokenData:
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError:
        raise credentials_exception

    subject = payload.get("sub")
    if subject is None:
        raise credentials_exception

    role = payload.get(settings.ROLE_CLAIM) or payload.get("role")
    return TokenData(sub=str(subject), role=role)


def resolve_caller(token: str) -> Caller:
    """
    Turn a bearer token into the request's Caller.
    An unknown role yields a caller without a role, which the gate denies.
    """
    token_data = decode_token(token)
    try:
        caller_id = int(token_data.sub)
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return Caller(id=caller_id, role=UserRole.parse(token_data.role))
