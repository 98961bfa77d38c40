import logging

from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError
from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from app import crud, models, schemas, security
from app.core.config import settings
from app.core.errors import AuthenticationRequired
from app.db.session import get_db

logger = logging.getLogger(__name__)

# Tokens are issued by the identity provider; this app only verifies them.
oauth2_scheme = OAuth2PasswordBearer(
    tokenUrl=f"{settings.API_V1_STR}/auth/login", auto_error=False
)

async def get_current_user(
    db: AsyncSession = Depends(get_db), token: str | None = Depends(oauth2_scheme)
) -> models.User:
    if not token:
        raise AuthenticationRequired()
    try:
        payload = security.decode_access_token(token)
        token_data = schemas.TokenPayload(**payload)
    except (JWTError, ValidationError):
        raise AuthenticationRequired("Could not validate credentials")
    if token_data.user_id is None:
        raise AuthenticationRequired("Could not validate credentials")

    user = await crud.crud_user.get_user_by_id(db, user_id=token_data.user_id)
    if user is None:
        logger.warning(f"Token presented for unknown user {token_data.user_id}")
        raise AuthenticationRequired("Could not validate credentials")
    return user
