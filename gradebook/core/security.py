from datetime import datetime, timedelta
from typing import Optional

import bcrypt
from jose import jwt, JWTError

from gradebook.core.config import get_settings
from gradebook.core.errors import AuthError


def hash_password(password: str) -> str:
    pw = password.encode("utf-8")
    salt = bcrypt.gensalt()
    return bcrypt.hashpw(pw, salt).decode("utf-8")

def verify_password(plain_password: str, hashed_password: str) -> bool:
    return bcrypt.checkpw(
        plain_password.encode("utf-8"),
        hashed_password.encode("utf-8"),
    )

def create_access_token(user_id: int, role: str, expires_delta: Optional[timedelta] = None) -> str:
    settings = get_settings()
    expire = datetime.utcnow() + (expires_delta or timedelta(minutes=settings.access_token_expire_minutes))
    payload = {"sub": str(user_id), "role": role, "exp": expire}
    return jwt.encode(payload, settings.secret_key, algorithm=settings.algorithm)

def decode_access_token(token: str) -> int:
    """Return the user id carried by a bearer token."""
    settings = get_settings()
    try:
        payload = jwt.decode(token, settings.secret_key, algorithms=[settings.algorithm])
    except JWTError as exc:
        raise AuthError("Could not validate credentials") from exc

    subject = payload.get("sub")
    if not subject or not payload.get("role"):
        raise AuthError("Could not validate credentials")
    try:
        return int(subject)
    except ValueError as exc:
        raise AuthError("Could not validate credentials") from exc
