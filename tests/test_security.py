import base64
from datetime import timedelta

from jose import jwt

from app.cli.generate_jwt_key import main as generate_jwt_key
from app.core.config import settings
from app.utils.security import (
    create_access_token,
    decode_token,
    generate_secret_key,
    get_password_hash,
    verify_password,
)


def test_password_hash_roundtrip():
    hashed = get_password_hash("password123")

    assert hashed != "password123"
    assert hashed.startswith("$2")
    assert verify_password("password123", hashed)
    assert not verify_password("password124", hashed)


def test_long_passwords_are_truncated_to_72_bytes():
    base = "a" * 72
    hashed = get_password_hash(base + "tail-one")

    assert verify_password(base + "tail-two", hashed)


def test_verify_password_with_malformed_hash():
    assert verify_password("password123", "not-a-bcrypt-hash") is False


def test_access_token_claims():
    token = create_access_token("alice", ["ROLE_USER"])

    claims = decode_token(token)

    assert claims["sub"] == "alice"
    assert claims["roles"] == ["ROLE_USER"]
    assert claims["exp"] - claims["iat"] == settings.JWT_EXPIRATION_MINUTES * 60


def test_expired_token_is_rejected():
    token = create_access_token("alice", ["ROLE_USER"], expires_delta=timedelta(seconds=-10))

    assert decode_token(token) is None


def test_token_signed_with_other_key_is_rejected():
    token = jwt.encode({"sub": "mallory"}, "another-secret", algorithm="HS256")

    assert decode_token(token) is None


def test_generate_secret_key_is_256_bits():
    key = generate_secret_key()

    assert len(base64.b64decode(key)) == 32
    assert generate_secret_key() != key


def test_generate_jwt_key_cli(capsys):
    generate_jwt_key(["--bytes", "64"])

    out = capsys.readouterr().out
    line = next(l for l in out.splitlines() if l.startswith("JWT_SECRET="))
    assert len(base64.b64decode(line.split("=", 1)[1])) == 64
