import uuid
from pydantic import BaseModel
from typing import Optional

class TokenPayload(BaseModel):
    sub: Optional[str] = None # 'sub' is the standard JWT field for subject (usually user identifier)
    user_id: Optional[uuid.UUID] = None
