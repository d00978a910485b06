from datetime import datetime, timedelta, timezone

import jwt
import pytest

from exceptions import UnauthenticatedError
from infrastructure import JWTAuthProvider

SECRET = "test-secret-with-enough-length-for-hs256"


def _token(secret=SECRET, **claims):
    claims.setdefault("sub", "user-1")
    claims.setdefault("exp", datetime.now(timezone.utc) + timedelta(hours=1))
    return jwt.encode(claims, secret, algorithm="HS256")


def test_bearer_token_resolves_user_id():
    assert JWTAuthProvider(SECRET).authenticate(f"Bearer {_token()}") == "user-1"


def test_raw_token_is_accepted():
    assert JWTAuthProvider(SECRET).authenticate(_token()) == "user-1"


@pytest.mark.parametrize(
    "authorization",
    [
        None,
        "",
        "Bearer garbage",
        f"Bearer {_token(secret='another-secret-with-enough-length-too')}",
        f"Bearer {_token(exp=datetime.now(timezone.utc) - timedelta(minutes=1))}",
        f"Bearer {jwt.encode({'exp': datetime.now(timezone.utc) + timedelta(hours=1)}, SECRET, algorithm='HS256')}",
    ],
    ids=["missing", "empty", "malformed", "wrong-secret", "expired", "no-subject"],
)
def test_invalid_tokens_are_rejected(authorization):
    with pytest.raises(UnauthenticatedError):
        JWTAuthProvider(SECRET).authenticate(authorization)
