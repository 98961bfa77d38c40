from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List

from app import models, schemas, services
from app.db.session import get_db
from app.dependencies import get_current_user

router = APIRouter()

@router.get("/potential", response_model=List[schemas.ProfileProjection])
async def get_potential_matches(
    db: AsyncSession = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
):
    """Candidates for the discovery deck, filtered by the caller's gender preference."""
    return await services.matching_service.get_potential_matches(db=db, current_user=current_user)

@router.post("/like", response_model=schemas.LikeResult)
async def like_user(
    like_in: schemas.LikeCreate,
    db: AsyncSession = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
):
    """Like another user. Reports a match when the like is mutual."""
    return await services.matching_service.like_user(
        db=db, current_user=current_user, to_user_id=like_in.to_user_id
    )

@router.get("/", response_model=List[schemas.ProfileProjection])
async def get_user_matches(
    db: AsyncSession = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
):
    """Active matches of the current user, as the other person's profile."""
    listing = await services.matching_service.get_user_matches(db=db, current_user=current_user)
    return listing.profiles
