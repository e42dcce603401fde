"""
Password hashing and access tokens for forum accounts.
"""

from __future__ import annotations

import os
from datetime import timedelta

import bcrypt
import jwt

from core.db import utc_now

ACCESS_TOKEN_TYPE = "access"


class AuthSecurityError(RuntimeError):
    pass


def jwt_secret() -> str:
    # Set JWT_SECRET outside local development.
    return os.environ.get("JWT_SECRET", "").strip() or "dev-change-this-secret"


def jwt_algorithm() -> str:
    return os.environ.get("JWT_ALG", "").strip() or "HS256"


def access_token_ttl() -> timedelta:
    return timedelta(minutes=int(os.environ.get("ACCESS_TOKEN_EXPIRE_MIN", "60")))


def hash_password(plain_password: str) -> str:
    return bcrypt.hashpw(plain_password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(plain_password: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(plain_password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        # Stored value is not a bcrypt hash.
        return False


def build_access_token(*, user_id: int, username: str) -> str:
    issued_at = utc_now()
    claims = {
        "sub": str(user_id),
        "username": username,
        "type": ACCESS_TOKEN_TYPE,
        "iat": issued_at,
        "exp": issued_at + access_token_ttl(),
    }
    return jwt.encode(claims, jwt_secret(), algorithm=jwt_algorithm())


def user_id_from_access_token(token: str) -> int:
    """
    Validate a bearer token and return the id of the user it was issued to.
    """
    try:
        claims = jwt.decode(token, jwt_secret(), algorithms=[jwt_algorithm()])
    except jwt.InvalidTokenError as exc:
        raise AuthSecurityError("Invalid access token.") from exc

    if claims.get("type") != ACCESS_TOKEN_TYPE:
        raise AuthSecurityError("Token is not an access token.")

    subject = str(claims.get("sub") or "")
    if not subject.isdigit():
        raise AuthSecurityError("Invalid access token subject.")
    return int(subject)
