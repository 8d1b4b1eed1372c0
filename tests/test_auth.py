import pytest
from fastapi import HTTPException
from fastapi.security import HTTPAuthorizationCredentials

from closet.auth.deps import get_current_user_id
from closet.auth.jwt import decode_token, mint_access


def test_mint_and_decode():
    tok = mint_access("user-123")
    assert decode_token(tok)["sub"] == "user-123"


def test_bearer_token_resolves_user():
    creds = HTTPAuthorizationCredentials(scheme="Bearer", credentials=mint_access("user-123"))
    assert get_current_user_id(creds) == "user-123"


def test_missing_token_is_unauthorized():
    with pytest.raises(HTTPException) as exc:
        get_current_user_id(None)
    assert exc.value.status_code == 401


def test_expired_token_is_unauthorized():
    creds = HTTPAuthorizationCredentials(scheme="Bearer", credentials=mint_access("user-123", ttl=-60))
    with pytest.raises(HTTPException) as exc:
        get_current_user_id(creds)
    assert exc.value.detail == "unauthorized"
