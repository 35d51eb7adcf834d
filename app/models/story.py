"""Community story model"""

import uuid
from datetime import datetime
from sqlalchemy import Column, String, Boolean, DateTime, ForeignKey, Integer, Text, Index
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship

from app.database import Base

EXCERPT_LENGTH = 200


def make_excerpt(content: str) -> str:
    if len(content) <= EXCERPT_LENGTH:
        return content
    return content[:EXCERPT_LENGTH].rstrip() + "..."


class Story(Base):
    """Story shared by the community, optionally anonymous"""
    __tablename__ = "stories"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    # NULL for anonymous stories
    author_id = Column(UUID(as_uuid=True), ForeignKey("users.id"))

    title = Column(String(200), nullable=False)
    slug = Column(String(120), unique=True, nullable=False)
    content = Column(Text, nullable=False)
    excerpt = Column(String(210), nullable=False)
    category = Column(String(50), nullable=False)
    region = Column(String(20), nullable=False, default="general")

    views = Column(Integer, default=0, nullable=False)

    # Unpublishing is how stories are removed
    is_published = Column(Boolean, default=True, nullable=False)
    published_at = Column(DateTime, default=datetime.utcnow)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    author = relationship("User", back_populates="stories")

    __table_args__ = (
        Index("ix_stories_region", "region"),
    )
