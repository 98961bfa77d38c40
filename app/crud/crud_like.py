import logging
import uuid
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy.exc import SQLAlchemyError

from app.core.errors import LookupFailure, WriteFailure
from app.crud.upsert import insert_for
from app.models.like import Like

logger = logging.getLogger(__name__)

async def get_like(db: AsyncSession, *, from_user_id: uuid.UUID, to_user_id: uuid.UUID) -> Optional[Like]:
    logger.debug(f"Checking like {from_user_id} -> {to_user_id}")
    try:
        result = await db.execute(
            select(Like).filter(Like.from_user_id == from_user_id, Like.to_user_id == to_user_id)
        )
    except SQLAlchemyError as e:
        logger.error(f"Database error checking like {from_user_id} -> {to_user_id}: {e}", exc_info=True)
        raise LookupFailure("Failed to check for match") from e
    return result.scalars().first()

async def create_like(db: AsyncSession, *, from_user_id: uuid.UUID, to_user_id: uuid.UUID) -> Optional[int]:
    """Insert the edge unless it already exists.

    Returns the new row id, or ``None`` when the edge was already there.
    The insert is committed before returning.
    """
    logger.info(f"User {from_user_id} liking user {to_user_id}")
    stmt = (
        insert_for(db)(Like)
        .values(from_user_id=from_user_id, to_user_id=to_user_id)
        .on_conflict_do_nothing(index_elements=[Like.from_user_id, Like.to_user_id])
        .returning(Like.id)
    )
    try:
        result = await db.execute(stmt)
        like_id = result.scalar_one_or_none()
        await db.commit()
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"Error creating like {from_user_id} -> {to_user_id}: {e}", exc_info=True)
        raise WriteFailure(f"Failed to create like: {e}") from e

    if like_id is None:
        logger.info(f"Like {from_user_id} -> {to_user_id} already exists.")
    else:
        logger.info(f"Created like id {like_id} from user {from_user_id} to user {to_user_id}")
    return like_id
