import logging
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from fastapi import HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from app import crud, models, schemas
from app.core.config import settings
from app.core.errors import QueryFailure, WriteFailure
from app.socket_instance import sio

logger = logging.getLogger(__name__)

GENDER_PREFERENCE_KEY = "gender_preference"


def _now() -> datetime:
    return datetime.now(timezone.utc)


def project_profile(
    user: models.User, *, keep_email: bool, timestamp: Optional[datetime] = None
) -> schemas.ProfileProjection:
    """Shape a stored user into what another user gets to see.

    Location is dropped and presence is synthesized. ``timestamp`` stands in
    for both created_at and updated_at; it defaults to now.
    """
    now = _now()
    stamp = timestamp or now
    if stamp.tzinfo is None:
        # Stores without timezone support hand back naive UTC values
        stamp = stamp.replace(tzinfo=timezone.utc)
    return schemas.ProfileProjection(
        id=user.id,
        full_name=user.full_name,
        username=user.username,
        email=(user.email or "") if keep_email else "",
        gender=user.gender,
        birthdate=user.birthdate,
        bio=user.bio,
        avatar_url=user.avatar_url,
        preferences=user.preferences,
        location_lat=None,
        location_lng=None,
        last_active=now,
        is_verified=True,
        is_online=False,
        created_at=stamp,
        updated_at=stamp,
    )


def matches_gender_preference(candidate: models.User, preferences: Dict[str, Any]) -> bool:
    wanted = (preferences or {}).get(GENDER_PREFERENCE_KEY) or []
    if not wanted:
        return True
    return candidate.gender in wanted


async def get_potential_matches(
    db: AsyncSession, *, current_user: models.User
) -> List[schemas.ProfileProjection]:
    candidates = await crud.crud_user.get_candidates(
        db, exclude_user_id=current_user.id, limit=settings.CANDIDATE_POOL_LIMIT
    )
    preferences = await crud.crud_user.get_preferences(db, user_id=current_user.id)

    results = [
        project_profile(candidate, keep_email=False)
        for candidate in candidates
        if matches_gender_preference(candidate, preferences)
    ]
    logger.info(f"User {current_user.id}: {len(results)} of {len(candidates)} candidates pass preferences")
    return results


async def like_user(
    db: AsyncSession, *, current_user: models.User, to_user_id: uuid.UUID
) -> schemas.LikeResult:
    if current_user.id == to_user_id:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Cannot like yourself.")

    like_id = await crud.crud_like.create_like(db, from_user_id=current_user.id, to_user_id=to_user_id)
    if like_id is None:
        # Already liked, nothing changes
        return schemas.LikeResult(success=True, is_match=False)

    reciprocal = await crud.crud_like.get_like(db, from_user_id=to_user_id, to_user_id=current_user.id)
    if not reciprocal:
        return schemas.LikeResult(success=True, is_match=False)

    warnings: List[str] = []
    try:
        match = await crud.crud_match.create_match(db, user1_id=current_user.id, user2_id=to_user_id)
        logger.info(f"Users {current_user.id} and {to_user_id} matched (match id {match.id})")
    except WriteFailure as e:
        # The like itself stands even if the match row could not be written
        logger.error(f"Error creating match between {current_user.id} and {to_user_id}: {e.detail}")
        warnings.append(e.detail)

    try:
        matched_user = await crud.crud_user.get_user_by_id(db, user_id=to_user_id)
    except QueryFailure as e:
        raise QueryFailure("Failed to fetch matched user") from e
    if matched_user is None:
        raise QueryFailure("Failed to fetch matched user")

    if not warnings:
        # Only tell the other side about a match that was actually stored
        await sio.emit(
            "new_match",
            data=project_profile(current_user, keep_email=True).model_dump(mode="json"),
            room=str(to_user_id),
        )

    return schemas.LikeResult(
        success=True,
        is_match=True,
        matched_user=project_profile(matched_user, keep_email=True),
        warnings=warnings,
    )


async def get_user_matches(db: AsyncSession, *, current_user: models.User) -> schemas.MatchList:
    matches = await crud.crud_match.get_active_matches_for_user(db, user_id=current_user.id)

    listing = schemas.MatchList()
    for match in matches:
        other_user_id = match.other_user_id(current_user.id)
        try:
            other_user = await crud.crud_user.get_user_by_id(db, user_id=other_user_id)
        except QueryFailure:
            other_user = None
        if other_user is None:
            listing.skipped_user_ids.append(other_user_id)
            continue
        listing.profiles.append(
            project_profile(other_user, keep_email=True, timestamp=match.created_at)
        )
    return listing
