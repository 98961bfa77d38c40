from datetime import datetime, timedelta, timezone
import logging
import uuid

from jose import JWTError, jwt

from app.core.config import settings

logger = logging.getLogger(__name__)

# --- Token Creation ---
def create_access_token(user_id: uuid.UUID, expires_delta: timedelta | None = None) -> str:
    """Sign a bearer token for ``user_id``. Tokens normally come from the identity provider."""
    if expires_delta:
        expire = datetime.now(timezone.utc) + expires_delta
    else:
        expire = datetime.now(timezone.utc) + timedelta(
            minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES
        )
    to_encode = {
        "sub": str(user_id),
        "user_id": str(user_id),
        "exp": expire,
        "iat": datetime.now(timezone.utc),
    }
    return jwt.encode(
        to_encode, settings.SECRET_KEY.get_secret_value(), algorithm=settings.ALGORITHM
    )

def decode_access_token(token: str) -> dict:
    """Decodes the access token and returns the payload."""
    try:
        return jwt.decode(
            token, settings.SECRET_KEY.get_secret_value(), algorithms=[settings.ALGORITHM]
        )
    except JWTError as e:
        logger.warning(f"JWTError during token decoding: {e}")
        raise
