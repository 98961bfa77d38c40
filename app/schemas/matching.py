import uuid
from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional

from .profile import ProfileProjection


class LikeCreate(BaseModel):
    to_user_id: uuid.UUID


class LikeResult(BaseModel):
    success: bool = True
    is_match: bool = Field(False, alias="isMatch")
    matched_user: Optional[ProfileProjection] = Field(None, alias="matchedUser")
    # Non-fatal problems, e.g. the match row could not be written
    warnings: List[str] = []

    model_config = ConfigDict(
        populate_by_name=True
    )


class MatchList(BaseModel):
    profiles: List[ProfileProjection] = []
    # Counterparts whose profile could not be loaded
    skipped_user_ids: List[uuid.UUID] = []
