"""Pydantic schemas for request/response validation"""

from app.schemas.auth import (
    Token,
    RefreshRequest,
    UserCreate,
    UserResponse,
)
from app.schemas.restaurant import (
    RestaurantCreate,
    RestaurantUpdate,
    RestaurantResponse,
    RestaurantListResponse,
    FavoriteToggle,
)
from app.schemas.review import (
    ReviewCreate,
    ReviewUpdate,
    ReviewResponse,
)
from app.schemas.reservation import (
    ReservationCreate,
    ReservationUpdate,
    ReservationCancel,
    ReservationResponse,
    ReservationListResponse,
    ReservationStats,
)
from app.schemas.event import (
    EventCreate,
    EventUpdate,
    EventResponse,
    EventListResponse,
)
from app.schemas.story import (
    StoryCreate,
    StoryResponse,
    StoryListResponse,
)
from app.schemas.user import (
    ProfileUpdate,
    AdminUserUpdate,
    PublicUser,
    UserListResponse,
    PublicUserListResponse,
    UserStats,
)
from app.schemas.discovery import (
    SearchResults,
    Suggestion,
    RegionSummary,
    RegionContent,
)

__all__ = [
    "Token",
    "RefreshRequest",
    "UserCreate",
    "UserResponse",
    "RestaurantCreate",
    "RestaurantUpdate",
    "RestaurantResponse",
    "RestaurantListResponse",
    "FavoriteToggle",
    "ReviewCreate",
    "ReviewUpdate",
    "ReviewResponse",
    "ReservationCreate",
    "ReservationUpdate",
    "ReservationCancel",
    "ReservationResponse",
    "ReservationListResponse",
    "ReservationStats",
    "EventCreate",
    "EventUpdate",
    "EventResponse",
    "EventListResponse",
    "StoryCreate",
    "StoryResponse",
    "StoryListResponse",
    "ProfileUpdate",
    "AdminUserUpdate",
    "PublicUser",
    "UserListResponse",
    "PublicUserListResponse",
    "UserStats",
    "SearchResults",
    "Suggestion",
    "RegionSummary",
    "RegionContent",
]
