"""Community story schemas"""

from datetime import datetime
from typing import Optional, List
from uuid import UUID
from pydantic import BaseModel, Field

from app.schemas.restaurant import Region


class StoryCreate(BaseModel):
    """Share a story (signed in or anonymous)"""
    title: str = Field(..., min_length=3, max_length=200)
    content: str = Field(..., min_length=10, max_length=20000)
    category: str = Field(..., min_length=2, max_length=50)
    region: Optional[Region] = None


class StoryResponse(BaseModel):
    """Story response"""
    id: UUID
    author_id: Optional[UUID]
    title: str
    slug: str
    content: str
    excerpt: str
    category: str
    region: str
    views: int
    published_at: Optional[datetime]
    created_at: datetime

    class Config:
        from_attributes = True


class StoryListResponse(BaseModel):
    """Paginated story list"""
    items: List[StoryResponse]
    total: int
    page: int
    page_size: int
    total_pages: int
