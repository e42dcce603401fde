from __future__ import annotations

import jwt
import pytest

from auth import security


def test_password_hash_round_trip():
    hashed = security.hash_password("correct-horse")

    assert security.verify_password("correct-horse", hashed)
    assert not security.verify_password("wrong-horse", hashed)
    assert not security.verify_password("correct-horse", "not-a-real-hash")


def test_access_token_carries_user_id():
    token = security.build_access_token(user_id=7, username="ada")

    assert security.user_id_from_access_token(token) == 7


def test_tampered_token_is_rejected():
    token = security.build_access_token(user_id=7, username="ada")

    with pytest.raises(security.AuthSecurityError, match="Invalid access token."):
        security.user_id_from_access_token(token + "x")


def test_non_access_token_is_rejected():
    token = jwt.encode(
        {"sub": "7", "type": "refresh"},
        security.jwt_secret(),
        algorithm=security.jwt_algorithm(),
    )

    with pytest.raises(security.AuthSecurityError, match="not an access token"):
        security.user_id_from_access_token(token)


def test_token_subject_must_be_a_user_id():
    token = jwt.encode(
        {"sub": "ada", "type": "access"},
        security.jwt_secret(),
        algorithm=security.jwt_algorithm(),
    )

    with pytest.raises(security.AuthSecurityError, match="subject"):
        security.user_id_from_access_token(token)
