import uuid
from datetime import date, datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict


class ProfileProjection(BaseModel):
    """Profile as shown to another user.

    Location is never exposed and presence flags are synthesized, so
    ``location_lat``/``location_lng`` are always ``None``, ``is_verified`` is
    ``True`` and ``is_online`` is ``False``.
    """
    id: uuid.UUID
    full_name: Optional[str] = None
    username: Optional[str] = None
    email: str = ""
    gender: Optional[str] = None
    birthdate: Optional[date] = None
    bio: Optional[str] = None
    avatar_url: Optional[str] = None
    preferences: Optional[Dict[str, Any]] = None
    location_lat: Optional[float] = None
    location_lng: Optional[float] = None
    last_active: datetime
    is_verified: bool = True
    is_online: bool = False
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(
        from_attributes=True
    )
