from datetime import timedelta

import pytest
from fastapi import HTTPException
from jose import jwt

from app.core.config import settings
from app.core.security import create_access_token, decode_token, resolve_caller
from app.models.user import UserRole

def test_token_round_trip_resolves_caller():
    token = create_access_token(42, UserRole.LECTURER)
    caller = resolve_caller(token)
    assert caller.id == 42
    assert caller.role == UserRole.LECTURER
    assert caller.is_authenticated
    assert not caller.is_admin

def test_role_claim_uses_identity_provider_uri():
    token = create_access_token(1, "Administrator")
    payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    assert payload[settings.ROLE_CLAIM] == "Administrator"
    assert payload["sub"] == "1"

def test_plain_role_claim_is_accepted():
    token = jwt.encode({"sub": "5", "role": "student"}, settings.SECRET_KEY, algorithm=settings.ALGORITHM)
    caller = resolve_caller(token)
    assert caller.role == UserRole.STUDENT

def test_unknown_role_resolves_to_roleless_caller():
    token = create_access_token(9, "Janitor")
    caller = resolve_caller(token)
    assert caller.id == 9
    assert caller.role is None
    assert not caller.is_authenticated

def test_expired_token_is_rejected():
    token = create_access_token(1, UserRole.STUDENT, expires_delta=timedelta(minutes=-5))
    with pytest.raises(HTTPException) as exc:
        decode_token(token)
    assert exc.value.status_code == 401

def test_wrong_signature_is_rejected():
    token = jwt.encode({"sub": "1", "role": "Student"}, "other-secret", algorithm=settings.ALGORITHM)
    with pytest.raises(HTTPException) as exc:
        resolve_caller(token)
    assert exc.value.status_code == 401

def test_non_numeric_subject_is_rejected():
    token = create_access_token("alice", UserRole.STUDENT)
    with pytest.raises(HTTPException) as exc:
        resolve_caller(token)
    assert exc.value.status_code == 401

def test_missing_subject_is_rejected():
    token = jwt.encode({"role": "Student"}, settings.SECRET_KEY, algorithm=settings.ALGORITHM)
    with pytest.raises(HTTPException) as exc:
        decode_token(token)
    assert exc.value.status_code == 401
