"""User profile and account administration endpoints"""

import math
from typing import List, Optional, Literal
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy import select, func, or_
from sqlalchemy.ext.asyncio import AsyncSession
import structlog

from app.database import get_db
from app.errors import NotFoundError, PolicyError
from app.models.favorite import user_favorites
from app.models.reservation import Reservation, ACTIVE_STATUSES
from app.models.restaurant import Restaurant
from app.models.review import Review
from app.models.story import Story
from app.models.user import User, UserRole
from app.schemas.auth import UserResponse
from app.schemas.restaurant import RestaurantListResponse
from app.schemas.review import ReviewResponse
from app.schemas.story import StoryResponse
from app.schemas.user import (
    ProfileUpdate,
    AdminUserUpdate,
    UserListResponse,
    PublicUserListResponse,
    UserStats,
    ActivityCounts,
)
from app.services.reservations import ReservationService
from app.api.auth import get_current_active_user, require_role

logger = structlog.get_logger()

router = APIRouter()

RECENT_LIMIT = 3


def _count(query):
    return select(func.count()).select_from(query.subquery())


@router.get("/profile", response_model=UserResponse)
async def get_profile(
    current_user: User = Depends(get_current_active_user),
):
    """Get own profile"""
    return current_user


@router.put("/profile", response_model=UserResponse)
async def update_profile(
    profile_data: ProfileUpdate,
    current_user: User = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db),
):
    """Update own name, phone or region"""
    for field, value in profile_data.model_dump(exclude_unset=True).items():
        setattr(current_user, field, value)

    await db.commit()
    await db.refresh(current_user)

    return current_user


@router.get("/favorites", response_model=RestaurantListResponse)
async def list_favorites(
    page: int = Query(1, ge=1),
    page_size: int = Query(12, ge=1, le=50),
    current_user: User = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db),
):
    """Favorite restaurants, most recently added first"""
    query = (
        select(Restaurant)
        .join(user_favorites, user_favorites.c.restaurant_id == Restaurant.id)
        .where(user_favorites.c.user_id == current_user.id, Restaurant.is_active == True)  # noqa: E712
    )
    total = (await db.execute(_count(query))).scalar()
    result = await db.execute(
        query.order_by(user_favorites.c.created_at.desc())
        .offset((page - 1) * page_size)
        .limit(page_size)
    )

    return RestaurantListResponse(
        items=result.scalars().all(),
        total=total,
        page=page,
        page_size=page_size,
        total_pages=math.ceil(total / page_size) if total else 0,
    )


@router.get("/reviews", response_model=List[ReviewResponse])
async def list_my_reviews(
    page: int = Query(1, ge=1),
    page_size: int = Query(12, ge=1, le=50),
    sort: Literal["newest", "oldest", "rating"] = "newest",
    current_user: User = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db),
):
    """Reviews written by the current user"""
    if sort == "oldest":
        order = (Review.created_at,)
    elif sort == "rating":
        order = (Review.rating.desc(), Review.created_at.desc())
    else:
        order = (Review.created_at.desc(),)

    result = await db.execute(
        select(Review)
        .where(Review.user_id == current_user.id, Review.is_active == True)  # noqa: E712
        .order_by(*order)
        .offset((page - 1) * page_size)
        .limit(page_size)
    )
    return result.scalars().all()


@router.get("/stories", response_model=List[StoryResponse])
async def list_my_stories(
    page: int = Query(1, ge=1),
    page_size: int = Query(12, ge=1, le=50),
    current_user: User = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db),
):
    """Published stories written by the current user"""
    result = await db.execute(
        select(Story)
        .where(Story.author_id == current_user.id, Story.is_published == True)  # noqa: E712
        .order_by(Story.created_at.desc())
        .offset((page - 1) * page_size)
        .limit(page_size)
    )
    return result.scalars().all()


@router.get("/stats", response_model=UserStats)
async def get_my_stats(
    current_user: User = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db),
):
    """Activity counts, recent reviews and stories, next reservations"""
    favorites = select(user_favorites.c.restaurant_id).where(user_favorites.c.user_id == current_user.id)
    reviews = select(Review).where(Review.user_id == current_user.id, Review.is_active == True)  # noqa: E712
    stories = select(Story).where(Story.author_id == current_user.id, Story.is_published == True)  # noqa: E712
    reservations = select(Reservation).where(
        Reservation.user_id == current_user.id, Reservation.is_active == True  # noqa: E712
    )

    counts = ActivityCounts(
        favorites=(await db.execute(_count(favorites))).scalar(),
        reviews=(await db.execute(_count(reviews))).scalar(),
        stories=(await db.execute(_count(stories))).scalar(),
        reservations=(await db.execute(_count(reservations))).scalar(),
    )

    recent_reviews = await db.execute(reviews.order_by(Review.created_at.desc()).limit(RECENT_LIMIT))
    recent_stories = await db.execute(stories.order_by(Story.created_at.desc()).limit(RECENT_LIMIT))
    upcoming = await db.execute(
        reservations.where(
            Reservation.date > ReservationService.today(),
            Reservation.status.in_(ACTIVE_STATUSES),
        )
        .order_by(Reservation.date, Reservation.time)
        .limit(RECENT_LIMIT)
    )

    return UserStats(
        counts=counts,
        recent_reviews=recent_reviews.scalars().all(),
        recent_stories=recent_stories.scalars().all(),
        upcoming_reservations=upcoming.scalars().all(),
    )


@router.get("/restaurant-owners", response_model=PublicUserListResponse)
async def list_restaurant_owners(
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
    db: AsyncSession = Depends(get_db),
):
    """Public directory of active restaurant operators"""
    query = select(User).where(
        User.role == UserRole.RESTAURANT_OWNER, User.is_active == True  # noqa: E712
    )
    total = (await db.execute(_count(query))).scalar()
    result = await db.execute(
        query.order_by(User.created_at.desc()).offset((page - 1) * page_size).limit(page_size)
    )

    return PublicUserListResponse(
        items=result.scalars().all(),
        total=total,
        page=page,
        page_size=page_size,
        total_pages=math.ceil(total / page_size) if total else 0,
    )


# Administration

async def _get_user(user_id: UUID, db: AsyncSession) -> User:
    user = await db.get(User, user_id)
    if user is None:
        raise NotFoundError("User not found")
    return user


@router.get("", response_model=UserListResponse)
async def list_users(
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
    role: Optional[UserRole] = None,
    search: Optional[str] = None,
    current_user: User = Depends(require_role(UserRole.ADMIN)),
    db: AsyncSession = Depends(get_db),
):
    """List active accounts (admin only)"""
    query = select(User).where(User.is_active == True)  # noqa: E712
    if role:
        query = query.where(User.role == role)
    if search:
        pattern = f"%{search.strip()}%"
        query = query.where(or_(User.email.ilike(pattern), User.full_name.ilike(pattern)))

    total = (await db.execute(_count(query))).scalar()
    result = await db.execute(
        query.order_by(User.created_at.desc()).offset((page - 1) * page_size).limit(page_size)
    )

    return UserListResponse(
        items=result.scalars().all(),
        total=total,
        page=page,
        page_size=page_size,
        total_pages=math.ceil(total / page_size) if total else 0,
    )


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(
    user_id: UUID,
    current_user: User = Depends(require_role(UserRole.ADMIN)),
    db: AsyncSession = Depends(get_db),
):
    """Get any account (admin only)"""
    return await _get_user(user_id, db)


@router.put("/{user_id}", response_model=UserResponse)
async def update_user(
    user_id: UUID,
    user_data: AdminUserUpdate,
    current_user: User = Depends(require_role(UserRole.ADMIN)),
    db: AsyncSession = Depends(get_db),
):
    """Change name, role or active flag of an account (admin only)"""
    user = await _get_user(user_id, db)
    changes = user_data.model_dump(exclude_unset=True)

    if user.id == current_user.id and (
        changes.get("is_active") is False or changes.get("role", UserRole.ADMIN) != UserRole.ADMIN
    ):
        raise PolicyError("Administrators cannot demote or deactivate themselves")

    for field, value in changes.items():
        setattr(user, field, value)
    if user.is_active is False:
        user.refresh_token = None

    await db.commit()
    await db.refresh(user)

    logger.info("User updated by admin", user_id=str(user.id), fields=sorted(changes))
    return user


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_user(
    user_id: UUID,
    current_user: User = Depends(require_role(UserRole.ADMIN)),
    db: AsyncSession = Depends(get_db),
):
    """Deactivate an account (soft delete - admin only)"""
    user = await _get_user(user_id, db)
    if user.id == current_user.id:
        raise PolicyError("You cannot delete your own account")

    user.is_active = False
    user.refresh_token = None
    await db.commit()

    logger.info("User deactivated", user_id=str(user.id))
    return Response(status_code=status.HTTP_204_NO_CONTENT)
