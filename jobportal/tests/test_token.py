from datetime import datetime, timedelta, timezone

import jwt
import pytest

from jobportal.config import settings
from jobportal.token import create_access_token, decode_access_token


def test_create_access_token_carries_identity_claims():
    tok = create_access_token("42", "employer", "Asha")
    decoded = jwt.decode(tok, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    assert decoded["sub"] == "42"
    assert decoded["role"] == "employer"
    assert decoded["name"] == "Asha"
    assert "exp" in decoded
    assert "iat" in decoded


def test_decode_roundtrip():
    assert decode_access_token(create_access_token("7", "worker"))["sub"] == "7"


def test_decode_rejects_expired_token():
    past = datetime.now(timezone.utc) - timedelta(hours=1)
    tok = jwt.encode(
        {"sub": "7", "role": "worker", "exp": int(past.timestamp())},
        settings.SECRET_KEY,
        algorithm=settings.ALGORITHM,
    )
    with pytest.raises(jwt.ExpiredSignatureError):
        decode_access_token(tok)


def test_decode_rejects_foreign_signature():
    tok = jwt.encode({"sub": "7"}, "some-other-secret-key-that-is-long-enough", algorithm="HS256")
    with pytest.raises(jwt.InvalidSignatureError):
        decode_access_token(tok)
