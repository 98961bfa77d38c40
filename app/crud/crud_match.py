import logging
import uuid
from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy.exc import SQLAlchemyError

from app.core.errors import QueryFailure, WriteFailure
from app.crud.upsert import insert_for
from app.models.match import Match, ordered_pair

logger = logging.getLogger(__name__)

async def get_match_between_users(db: AsyncSession, *, user1_id: uuid.UUID, user2_id: uuid.UUID) -> Optional[Match]:
    low_id, high_id = ordered_pair(user1_id, user2_id)
    logger.debug(f"Fetching match between user ID: {low_id} and user ID: {high_id}")
    try:
        result = await db.execute(
            select(Match).filter(Match.user1_id == low_id, Match.user2_id == high_id)
        )
    except SQLAlchemyError as e:
        logger.error(f"Database error fetching match between {low_id} and {high_id}: {e}", exc_info=True)
        raise QueryFailure("Failed to fetch match") from e
    return result.scalars().first()

async def create_match(db: AsyncSession, *, user1_id: uuid.UUID, user2_id: uuid.UUID) -> Match:
    """Create the active match for the pair, or return the one already stored."""
    if user1_id == user2_id:
        raise WriteFailure("Failed to create match: cannot match a user with themselves")

    low_id, high_id = ordered_pair(user1_id, user2_id)
    logger.info(f"Creating match between user {low_id} and user {high_id}")
    stmt = (
        insert_for(db)(Match)
        .values(user1_id=low_id, user2_id=high_id, is_active=True)
        .on_conflict_do_nothing(index_elements=[Match.user1_id, Match.user2_id])
        .returning(Match.id)
    )
    try:
        result = await db.execute(stmt)
        match_id = result.scalar_one_or_none()
        await db.commit()
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"Error creating match between {low_id} and {high_id}: {e}", exc_info=True)
        raise WriteFailure(f"Failed to create match: {e}") from e

    if match_id is None:
        logger.info(f"Match between {low_id} and {high_id} already exists.")

    match = await get_match_between_users(db, user1_id=low_id, user2_id=high_id)
    if not match:
        logger.error(f"Critical error: Failed to re-fetch match between {low_id} and {high_id} after upsert.")
        raise WriteFailure("Failed to create match: row missing after insert")
    return match

async def get_active_matches_for_user(db: AsyncSession, *, user_id: uuid.UUID) -> List[Match]:
    logger.debug(f"Fetching active matches for user ID: {user_id}")
    query = select(Match).filter(
        ((Match.user1_id == user_id) | (Match.user2_id == user_id)),
        Match.is_active.is_(True)
    ).order_by(Match.created_at.desc())
    try:
        result = await db.execute(query)
    except SQLAlchemyError as e:
        logger.error(f"Database error fetching matches for user {user_id}: {e}", exc_info=True)
        raise QueryFailure("Failed to fetch matches") from e
    matches = result.scalars().all()
    logger.debug(f"Found {len(matches)} active matches for user ID: {user_id}")
    return list(matches)
