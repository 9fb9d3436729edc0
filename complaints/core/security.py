# complaints/core/security.py
"""Password hashing, bearer tokens and the authenticated principal."""
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

import jwt
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session
from werkzeug.security import check_password_hash, generate_password_hash

from complaints.core.config import Settings, get_settings
from complaints.core.database import get_db
from complaints.core.errors import UnauthenticatedError
from complaints.user.models import Role, User

bearer_scheme = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class Principal:
    user_id: int
    role: Role

    @classmethod
    def from_user(cls, user: User) -> "Principal":
        return cls(user_id=user.id, role=Role(user.role))


def hash_password(password: str) -> str:
    return generate_password_hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    return check_password_hash(password_hash, password)


def create_access_token(user: User, settings: Settings | None = None) -> str:
    settings = settings or get_settings()
    expires = datetime.now(timezone.utc) + timedelta(minutes=settings.JWT_EXPIRES_MINUTES)
    payload = {
        "sub": str(user.id),
        "email": user.email,
        "role": user.role,
        "exp": expires,
    }
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def decode_access_token(token: str, settings: Settings | None = None) -> dict:
    settings = settings or get_settings()
    try:
        return jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
    except jwt.ExpiredSignatureError:
        raise UnauthenticatedError("Token has expired")
    except jwt.InvalidTokenError:
        raise UnauthenticatedError("Invalid or expired token")


def get_current_principal(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> Principal:
    if credentials is None or credentials.scheme.lower() != "bearer":
        raise UnauthenticatedError("No token provided")

    payload = decode_access_token(credentials.credentials, settings)
    try:
        user_id = int(payload["sub"])
    except (KeyError, TypeError, ValueError):
        raise UnauthenticatedError("Invalid or expired token")

    # role comes from the store so a role change applies on the next request
    user = db.get(User, user_id)
    if user is None:
        raise UnauthenticatedError("User no longer exists")
    return Principal.from_user(user)


__all__ = [
    "Principal",
    "hash_password",
    "verify_password",
    "create_access_token",
    "decode_access_token",
    "get_current_principal",
]
