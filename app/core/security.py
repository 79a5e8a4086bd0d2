"""
Security Core - password hashing, JWT tokens, role permissions.
"""

import hashlib
import hmac
import os
from datetime import datetime, timedelta
from enum import Enum
from typing import Optional

from jose import JWTError, jwt

from app.core import config
from app.domain.value_objects import UserRole

PBKDF2_ITERATIONS = 100000


class Permission(str, Enum):
    LEDGER_EDIT = "LEDGER_EDIT"
    PROFIT_DISTRIBUTE = "PROFIT_DISTRIBUTE"


ROLE_PERMISSIONS: dict[UserRole, list[Permission]] = {
    UserRole.ADMIN: list(Permission),
    UserRole.READONLY: [],
}


def hash_password(password: str, salt: Optional[bytes] = None) -> tuple[str, bytes]:
    if salt is None:
        salt = os.urandom(16)
    pw_hash = hashlib.pbkdf2_hmac("sha256", password.encode(), salt, PBKDF2_ITERATIONS)
    return pw_hash.hex(), salt


def verify_password(password: str, password_hash: str, salt: bytes) -> bool:
    candidate, _ = hash_password(password, salt)
    return hmac.compare_digest(candidate, password_hash)


def create_access_token(
    user_id: int,
    username: str,
    role: str,
    expires_in: timedelta | None = None,
) -> str:
    expire = datetime.utcnow() + (expires_in or timedelta(hours=config.JWT_EXPIRE_HOURS))
    payload = {
        "sub": str(user_id),
        "username": username,
        "role": role,
        "exp": expire,
    }
    return jwt.encode(payload, config.JWT_SECRET, algorithm=config.JWT_ALGORITHM)


def decode_access_token(token: str) -> dict | None:
    """Return the token claims, or None when the token is invalid or expired."""
    try:
        return jwt.decode(token, config.JWT_SECRET, algorithms=[config.JWT_ALGORITHM])
    except JWTError:
        return None


class RBACService:
    def has_permission(self, role: UserRole, permission: Permission) -> bool:
        return permission in ROLE_PERMISSIONS.get(role, [])

    def get_user_permissions(self, role: UserRole) -> list[Permission]:
        return ROLE_PERMISSIONS.get(role, [])

    def can_distribute_profit(self, role: UserRole) -> bool:
        return self.has_permission(role, Permission.PROFIT_DISTRIBUTE)
