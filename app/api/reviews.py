"""Review API endpoints"""

from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db
from app.errors import AuthorizationError, ConflictError, NotFoundError
from app.models.restaurant import Restaurant
from app.models.review import Review
from app.models.user import User
from app.schemas.review import ReviewCreate, ReviewUpdate, ReviewResponse
from app.services.ratings import refresh_restaurant_rating
from app.api.auth import get_current_active_user
from app.api.restaurants import get_restaurant_by_slug

# Mounted under /restaurants/{slug}/reviews
restaurant_reviews = APIRouter()

# Mounted under /reviews
router = APIRouter()


async def _get_review(review_id: UUID, current_user: User, db: AsyncSession) -> Review:
    result = await db.execute(
        select(Review).where(Review.id == review_id, Review.is_active == True)  # noqa: E712
    )
    review = result.scalar_one_or_none()
    if not review:
        raise NotFoundError("Review not found")
    if review.user_id != current_user.id and not current_user.is_admin:
        raise AuthorizationError("Not authorized to modify this review")
    return review


@restaurant_reviews.get("", response_model=List[ReviewResponse])
async def list_reviews(
    slug: str,
    db: AsyncSession = Depends(get_db),
):
    """List active reviews of a restaurant, newest first"""
    restaurant = await get_restaurant_by_slug(slug, db)
    result = await db.execute(
        select(Review)
        .where(Review.restaurant_id == restaurant.id, Review.is_active == True)  # noqa: E712
        .order_by(Review.created_at.desc())
    )
    return result.scalars().all()


@restaurant_reviews.post("", response_model=ReviewResponse, status_code=status.HTTP_201_CREATED)
async def create_review(
    slug: str,
    review_data: ReviewCreate,
    current_user: User = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db),
):
    """Review a restaurant (one active review per user)"""
    restaurant = await get_restaurant_by_slug(slug, db)

    existing = await db.execute(
        select(Review.id).where(
            Review.restaurant_id == restaurant.id,
            Review.user_id == current_user.id,
            Review.is_active == True,  # noqa: E712
        )
    )
    if existing.first():
        raise ConflictError("You have already reviewed this restaurant")

    review = Review(
        user_id=current_user.id,
        restaurant_id=restaurant.id,
        **review_data.model_dump(),
    )
    db.add(review)
    await refresh_restaurant_rating(db, restaurant)
    await db.commit()
    await db.refresh(review)

    return review


@router.put("/{review_id}", response_model=ReviewResponse)
async def update_review(
    review_id: UUID,
    review_data: ReviewUpdate,
    current_user: User = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db),
):
    """Update a review (author or admin)"""
    review = await _get_review(review_id, current_user, db)

    for field, value in review_data.model_dump(exclude_unset=True).items():
        setattr(review, field, value)

    restaurant = await db.get(Restaurant, review.restaurant_id)
    await refresh_restaurant_rating(db, restaurant)
    await db.commit()
    await db.refresh(review)

    return review


@router.delete("/{review_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_review(
    review_id: UUID,
    current_user: User = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db),
):
    """Delete a review (soft delete - author or admin)"""
    review = await _get_review(review_id, current_user, db)
    review.is_active = False

    restaurant = await db.get(Restaurant, review.restaurant_id)
    await refresh_restaurant_rating(db, restaurant)
    await db.commit()
    return Response(status_code=status.HTTP_204_NO_CONTENT)
