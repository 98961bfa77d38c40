import logging
import uuid
from typing import Any, Dict, List, Optional

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy.exc import SQLAlchemyError

from app.core.errors import QueryFailure
from app.models.user import User

logger = logging.getLogger(__name__)

async def get_user_by_id(db: AsyncSession, *, user_id: uuid.UUID) -> User | None:
    logger.debug(f"Fetching user by ID: {user_id}")
    try:
        result = await db.execute(select(User).filter(User.id == user_id))
    except SQLAlchemyError as e:
        logger.error(f"Database error fetching user by ID {user_id}: {e}", exc_info=True)
        raise QueryFailure(f"Failed to fetch user {user_id}") from e
    user = result.scalars().first()
    if not user:
        logger.warning(f"User with ID {user_id} not found.")
    return user

async def get_candidates(db: AsyncSession, *, exclude_user_id: uuid.UUID, limit: int = 50) -> List[User]:
    """Every user except ``exclude_user_id``, capped at ``limit`` rows."""
    logger.debug(f"Fetching up to {limit} candidates for user ID: {exclude_user_id}")
    try:
        result = await db.execute(
            select(User).filter(User.id != exclude_user_id).limit(limit)
        )
    except SQLAlchemyError as e:
        logger.error(f"Database error fetching candidates for user {exclude_user_id}: {e}", exc_info=True)
        raise QueryFailure("Failed to fetch potential matches") from e
    candidates = result.scalars().all()
    logger.debug(f"Found {len(candidates)} candidates for user ID: {exclude_user_id}")
    return list(candidates)

async def get_preferences(db: AsyncSession, *, user_id: uuid.UUID) -> Dict[str, Any]:
    """Stored preferences of ``user_id``. The user row must exist."""
    try:
        result = await db.execute(select(User.preferences).filter(User.id == user_id))
        row = result.one_or_none()
    except SQLAlchemyError as e:
        logger.error(f"Database error fetching preferences for user {user_id}: {e}", exc_info=True)
        raise QueryFailure("Failed to get user preferences") from e
    if row is None:
        logger.warning(f"Preferences requested for missing user {user_id}.")
        raise QueryFailure("Failed to get user preferences")
    return row.preferences or {}
