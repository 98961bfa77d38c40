import uuid

from sqlalchemy import Column, String, Text, Date, DateTime, JSON, Uuid, func
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import relationship
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .like import Like

from app.db.base_class import Base

class User(Base):
    __tablename__ = "users"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    full_name = Column(String, nullable=True)
    username = Column(String, unique=True, index=True, nullable=True)
    email = Column(String, unique=True, index=True, nullable=True)
    gender = Column(String, index=True, nullable=True)
    birthdate = Column(Date, nullable=True)
    bio = Column(Text, nullable=True)
    avatar_url = Column(String, nullable=True)
    # Free-form; discovery reads "gender_preference" (a list of genders)
    preferences = Column(JSON().with_variant(JSONB(), "postgresql"), nullable=True)
    created_at = Column(DateTime(timezone=True), default=func.now())
    updated_at = Column(DateTime(timezone=True), default=func.now(), onupdate=func.now())

    likes_given = relationship("Like", foreign_keys="app.models.like.Like.from_user_id", back_populates="from_user", cascade="all, delete-orphan")
    likes_received = relationship("Like", foreign_keys="app.models.like.Like.to_user_id", back_populates="to_user", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<User(id={self.id}, username='{self.username}')>"
