"""User profile and administration schemas"""

from typing import Optional, List
from uuid import UUID
from pydantic import BaseModel, Field, field_validator

from app.models.user import UserRole
from app.schemas.auth import UserResponse
from app.schemas.restaurant import Region
from app.schemas.reservation import ReservationResponse
from app.schemas.review import ReviewResponse
from app.schemas.story import StoryResponse


class ProfileUpdate(BaseModel):
    """Update own profile"""
    full_name: Optional[str] = Field(None, min_length=2, max_length=50)
    phone: Optional[str] = Field(None, min_length=9, max_length=15)
    region: Optional[Region] = None

    @field_validator("full_name")
    @classmethod
    def name_required(cls, value):
        if value is None:
            raise ValueError("full_name cannot be empty")
        return value.strip()


class AdminUserUpdate(BaseModel):
    """Update any account (admin only)"""
    full_name: Optional[str] = Field(None, min_length=2, max_length=50)
    role: Optional[UserRole] = None
    is_active: Optional[bool] = None

    @field_validator("role", "is_active")
    @classmethod
    def not_null(cls, value):
        if value is None:
            raise ValueError("cannot be empty")
        return value


class PublicUser(BaseModel):
    """What anyone may see about an account"""
    id: UUID
    full_name: Optional[str]
    region: Optional[str]

    class Config:
        from_attributes = True


class UserListResponse(BaseModel):
    """Paginated user list"""
    items: List[UserResponse]
    total: int
    page: int
    page_size: int
    total_pages: int


class PublicUserListResponse(BaseModel):
    """Paginated public user list"""
    items: List[PublicUser]
    total: int
    page: int
    page_size: int
    total_pages: int


class ActivityCounts(BaseModel):
    favorites: int
    reviews: int
    stories: int
    reservations: int


class UserStats(BaseModel):
    """Activity summary for the current user"""
    counts: ActivityCounts
    recent_reviews: List[ReviewResponse]
    recent_stories: List[StoryResponse]
    upcoming_reservations: List[ReservationResponse]
