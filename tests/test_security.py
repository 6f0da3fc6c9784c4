import pytest

from backend.app.core.security import (
    create_access_token,
    decode_access_token,
    get_password_hash,
    parse_subject,
    verify_password,
)


def test_password_hashing_not_plain():
    plain = "password123"
    hashed = get_password_hash(plain)
    assert hashed and hashed != plain


def test_verify_password():
    hashed = get_password_hash("secret")
    assert verify_password("secret", hashed)
    assert not verify_password("wrong", hashed)


def test_create_and_decode_access_token():
    token = create_access_token("user:123")
    assert isinstance(token, str) and token
    decoded = decode_access_token(token)
    assert decoded.get("sub") == "user:123"
    assert "exp" in decoded


def test_access_token_expiration():
    token = create_access_token("user:1", expires_minutes=-1)
    with pytest.raises(ValueError):
        decode_access_token(token)


def test_invalid_token_raises_value_error():
    with pytest.raises(ValueError):
        decode_access_token("invalid.token.value")


def test_parse_subject():
    assert parse_subject("user:7") == ("user", 7)
    assert parse_subject("member:12") == ("member", 12)
    for bad in (None, "", "7", "admin:1", "user:abc"):
        with pytest.raises(ValueError):
            parse_subject(bad)
