"""Token codec and password hasher tests."""

from datetime import timedelta

import jwt
import pytest

from contenthub.auth.jwt import ACCESS, REFRESH, JwtCodec, TokenError, sign_token, verify_token
from contenthub.auth.password import BcryptHasher, hash_password, verify_password

SECRET = "unit-test-secret"


def test_sign_and_verify_claims():
    token = sign_token({"sub": "42", "type": ACCESS}, SECRET, timedelta(minutes=1))
    claims = verify_token(token, SECRET, expected_type=ACCESS)
    assert claims["sub"] == "42"
    assert claims["exp"] > claims["iat"]
    assert claims["jti"]


def test_tokens_issued_together_differ():
    a = sign_token({"sub": "42"}, SECRET, timedelta(minutes=1))
    b = sign_token({"sub": "42"}, SECRET, timedelta(minutes=1))
    assert a != b


def test_verify_expired():
    token = sign_token({"sub": "42"}, SECRET, timedelta(seconds=-1))
    with pytest.raises(TokenError, match="expired"):
        verify_token(token, SECRET)


def test_verify_wrong_secret():
    token = sign_token({"sub": "42"}, SECRET, timedelta(minutes=1))
    with pytest.raises(TokenError):
        verify_token(token, "another-secret")


def test_verify_wrong_type():
    token = sign_token({"sub": "42", "type": REFRESH}, SECRET, timedelta(minutes=1))
    with pytest.raises(TokenError, match="type"):
        verify_token(token, SECRET, expected_type=ACCESS)


def test_verify_requires_subject():
    token = jwt.encode({"exp": 9999999999, "iat": 0}, SECRET, algorithm="HS256")
    with pytest.raises(TokenError):
        verify_token(token, SECRET)


def test_codec_rejects_other_algorithm():
    token = JwtCodec("HS512").sign({"sub": "42"}, SECRET, timedelta(minutes=1))
    with pytest.raises(TokenError):
        JwtCodec("HS256").verify(token, SECRET)


def test_hash_is_salted_and_verifies():
    first = hash_password("hunter22", rounds=4)
    second = hash_password("hunter22", rounds=4)
    assert first != second != "hunter22"
    assert verify_password("hunter22", first)
    assert verify_password("hunter22", second)
    assert not verify_password("hunter23", first)


def test_verify_malformed_hash_is_false():
    assert verify_password("anything", "not-a-bcrypt-hash") is False


def test_hasher_uses_configured_rounds():
    digest = BcryptHasher(rounds=5).hash("hunter22")
    assert digest.startswith("$2b$05$")
