import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import JWTError, jwt
from passlib.context import CryptContext

from meeting_scheduler.core import config
from meeting_scheduler.core.errors import ServerMisconfiguredError

logger = logging.getLogger(__name__)

# -----------------------------
# Configuration
# -----------------------------
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=config.BCRYPT_ROUNDS)

BEARER_PREFIX = "bearer "


# -----------------------------
# Password utils
# -----------------------------
def truncate_password(password: str) -> str:
    return password.encode("utf-8")[:config.MAX_PASSWORD_BYTES].decode("utf-8", "ignore")


def get_password_hash(password: str) -> str:
    return pwd_context.hash(truncate_password(password))


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(truncate_password(plain_password), hashed_password)


def is_password_too_long(password: str) -> bool:
    return len(password.encode("utf-8")) > config.MAX_PASSWORD_BYTES


# -----------------------------
# JWT utils
# -----------------------------
def token_lifetime() -> timedelta:
    return timedelta(days=config.ACCESS_TOKEN_EXPIRE_DAYS)


def create_access_token(user_id: str, expires_delta: timedelta = None) -> str:
    if not config.JWT_SECRET:
        raise ServerMisconfiguredError()
    expire = datetime.now(timezone.utc) + (expires_delta or token_lifetime())
    to_encode = {"sub": str(user_id), "exp": expire}
    return jwt.encode(to_encode, config.JWT_SECRET, algorithm=config.JWT_ALGORITHM)


def authenticate(token: Optional[str]) -> Optional[str]:
    """Return the user id a valid token was issued for, else None.

    Missing, malformed, expired and badly signed tokens all look the same to
    the caller.
    """
    if not token or not config.JWT_SECRET:
        return None
    try:
        payload = jwt.decode(token, config.JWT_SECRET, algorithms=[config.JWT_ALGORITHM])
    except JWTError:
        return None
    user_id = payload.get("sub")
    if not isinstance(user_id, str) or not user_id:
        return None
    return user_id


def bearer_token(authorization: Optional[str]) -> Optional[str]:
    if not authorization or not authorization.lower().startswith(BEARER_PREFIX):
        return None
    return authorization[len(BEARER_PREFIX):].strip() or None
