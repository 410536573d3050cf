from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import jwt, JWTError, ExpiredSignatureError
import bcrypt

from smartauto.core.config import settings

# bcrypt only looks at the first 72 bytes of a password
BCRYPT_MAX_BYTES = 72


def _password_bytes(password: str) -> bytes:
    return password.encode("utf-8")[:BCRYPT_MAX_BYTES]


def verify_password(plain_password: str, hashed_password: str) -> bool:
    try:
        return bcrypt.checkpw(_password_bytes(plain_password), hashed_password.encode("utf-8"))
    except ValueError:
        # Malformed stored hash
        return False


def get_password_hash(password: str) -> str:
    return bcrypt.hashpw(_password_bytes(password), bcrypt.gensalt()).decode("utf-8")


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """Sign `data` as an HS256 JWT. `sub` is stored as a string; expiry defaults to the configured lifetime."""
    issued_at = datetime.now(timezone.utc)
    lifetime = expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    claims = {**data, "sub": str(data["sub"]), "iat": issued_at, "exp": issued_at + lifetime}
    return jwt.encode(claims, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def create_user_token(user) -> str:
    """Issue a bearer token carrying the user's id, role and login name."""
    return create_access_token({"sub": user.id, "role": user.role, "username": user.username})


def decode_access_token(token: str) -> Optional[dict]:
    """
    Return the token payload, or None when the token is malformed or signed with another key.
    ExpiredSignatureError is left to the caller so it can report expiry separately.
    """
    try:
        return jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except ExpiredSignatureError:
        raise
    except JWTError:
        return None
