# Import the Base class to make it accessible for models
# and for Alembic discovery via Base.metadata
from app.db.base_class import Base  # noqa: F401

from .user import User
from .like import Like
from .match import Match

__all__ = [
    "User",
    "Like",
    "Match",
]
