from sqlalchemy import Column, Integer, DateTime, ForeignKey, UniqueConstraint, Uuid, func
from sqlalchemy.orm import relationship

from app.db.base_class import Base

class Like(Base):
    __tablename__ = "likes"

    id = Column(Integer, primary_key=True, index=True)
    from_user_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    to_user_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), default=func.now())

    from_user = relationship("User", foreign_keys=[from_user_id], back_populates="likes_given")
    to_user = relationship("User", foreign_keys=[to_user_id], back_populates="likes_received")

    # One directed edge per ordered pair
    __table_args__ = (UniqueConstraint('from_user_id', 'to_user_id', name='_from_to_user_uc'),)

    def __repr__(self):
        return f"<Like {self.from_user_id}->{self.to_user_id}>"
