import uuid
from typing import Tuple

from sqlalchemy import Boolean, CheckConstraint, Column, Integer, DateTime, ForeignKey, UniqueConstraint, Uuid, func
from sqlalchemy.orm import relationship

from app.db.base_class import Base


def ordered_pair(user_a_id: uuid.UUID, user_b_id: uuid.UUID) -> Tuple[uuid.UUID, uuid.UUID]:
    """Return the pair in the order it is stored on a Match row (user1_id < user2_id)."""
    return (user_a_id, user_b_id) if user_a_id < user_b_id else (user_b_id, user_a_id)


class Match(Base):
    __tablename__ = "matches"

    id = Column(Integer, primary_key=True, index=True)
    user1_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    user2_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    is_active = Column(Boolean, nullable=False, default=True, index=True)
    created_at = Column(DateTime(timezone=True), default=func.now())

    user1 = relationship("User", foreign_keys=[user1_id])
    user2 = relationship("User", foreign_keys=[user2_id])

    # Pairs are stored order-normalized, so this is unique per unordered pair
    __table_args__ = (
        UniqueConstraint('user1_id', 'user2_id', name='_match_pair_uc'),
        CheckConstraint('user1_id <> user2_id', name='chk_match_no_self'),
    )

    def other_user_id(self, user_id: uuid.UUID) -> uuid.UUID:
        return self.user2_id if self.user1_id == user_id else self.user1_id

    def __repr__(self):
        return f"<Match(id={self.id}, user1_id={self.user1_id}, user2_id={self.user2_id}, is_active={self.is_active})>"
