"""Restaurant API endpoints"""

import math
from typing import List, Optional, Literal

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy import select, func, or_, delete, insert
from sqlalchemy.ext.asyncio import AsyncSession
import structlog

from app.database import get_db
from app.errors import AuthorizationError, NotFoundError
from app.models.favorite import user_favorites
from app.models.restaurant import Restaurant
from app.models.user import User, UserRole
from app.schemas.restaurant import (
    RestaurantCreate,
    RestaurantUpdate,
    RestaurantResponse,
    RestaurantListResponse,
    FavoriteToggle,
    Region,
    CuisineType,
    PriceRange,
)
from app.services.permissions import ensure_can_operate
from app.services.slugs import unique_slug
from app.api.auth import get_current_active_user, require_role

logger = structlog.get_logger()

router = APIRouter()

FEATURED_LIMIT = 6


async def get_restaurant_by_slug(slug: str, db: AsyncSession) -> Restaurant:
    result = await db.execute(
        select(Restaurant).where(Restaurant.slug == slug, Restaurant.is_active == True)  # noqa: E712
    )
    restaurant = result.scalar_one_or_none()
    if not restaurant:
        raise NotFoundError("Restaurant not found")
    return restaurant


async def paginate_restaurants(
    db: AsyncSession, filters: list, order: tuple, page: int, page_size: int
) -> RestaurantListResponse:
    total = (await db.execute(select(func.count(Restaurant.id)).where(*filters))).scalar()
    result = await db.execute(
        select(Restaurant)
        .where(*filters)
        .order_by(*order)
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


BY_RATING = (Restaurant.rating_average.desc(), Restaurant.rating_count.desc(), Restaurant.name)


@router.get("", response_model=RestaurantListResponse)
async def list_restaurants(
    page: int = Query(1, ge=1),
    page_size: int = Query(12, ge=1, le=100),
    region: Optional[Region] = None,
    cuisine: Optional[CuisineType] = None,
    price_range: Optional[PriceRange] = None,
    min_rating: Optional[float] = Query(None, ge=0, le=5),
    accepts_reservations: Optional[bool] = None,
    search: Optional[str] = None,
    sort: Literal["relevance", "rating", "newest"] = "relevance",
    db: AsyncSession = Depends(get_db),
):
    """List active restaurants with filters"""
    filters = [Restaurant.is_active == True]  # noqa: E712
    if region:
        filters.append(Restaurant.region == region)
    if cuisine:
        filters.append(Restaurant.cuisine_type == cuisine)
    if price_range:
        filters.append(Restaurant.price_range == price_range)
    if min_rating is not None:
        filters.append(Restaurant.rating_average >= min_rating)
    if accepts_reservations is not None:
        filters.append(Restaurant.accepts_reservations == accepts_reservations)
    if search:
        pattern = f"%{search.strip()}%"
        filters.append(or_(Restaurant.name.ilike(pattern), Restaurant.description.ilike(pattern)))

    if sort == "newest":
        order = (Restaurant.created_at.desc(),)
    elif sort == "relevance":
        order = (Restaurant.is_featured.desc(), *BY_RATING)
    else:
        order = BY_RATING

    return await paginate_restaurants(db, filters, order, page, page_size)


@router.get("/featured", response_model=List[RestaurantResponse])
async def featured_restaurants(
    db: AsyncSession = Depends(get_db),
):
    """Featured restaurants, best rated first"""
    result = await db.execute(
        select(Restaurant)
        .where(Restaurant.is_featured == True, Restaurant.is_active == True)  # noqa: E712
        .order_by(*BY_RATING)
        .limit(FEATURED_LIMIT)
    )
    return result.scalars().all()


@router.get("/region/{region}", response_model=RestaurantListResponse)
async def restaurants_by_region(
    region: Region,
    page: int = Query(1, ge=1),
    page_size: int = Query(12, ge=1, le=100),
    db: AsyncSession = Depends(get_db),
):
    """Active restaurants of one region, best rated first"""
    filters = [Restaurant.region == region, Restaurant.is_active == True]  # noqa: E712
    return await paginate_restaurants(db, filters, BY_RATING, page, page_size)


@router.post("", response_model=RestaurantResponse, status_code=status.HTTP_201_CREATED)
async def create_restaurant(
    restaurant_data: RestaurantCreate,
    current_user: User = Depends(require_role(UserRole.RESTAURANT_OWNER)),
    db: AsyncSession = Depends(get_db),
):
    """Create a restaurant operated by the current user"""
    restaurant = Restaurant(
        owner_id=current_user.id,
        slug=await unique_slug(db, Restaurant, restaurant_data.name, "restaurant"),
        **restaurant_data.model_dump(),
    )
    db.add(restaurant)
    await db.commit()
    await db.refresh(restaurant)

    return restaurant


@router.get("/{slug}", response_model=RestaurantResponse)
async def get_restaurant(
    slug: str,
    db: AsyncSession = Depends(get_db),
):
    """Get restaurant details"""
    return await get_restaurant_by_slug(slug, db)


@router.put("/{slug}", response_model=RestaurantResponse)
async def update_restaurant(
    slug: str,
    restaurant_data: RestaurantUpdate,
    current_user: User = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db),
):
    """Update restaurant (operator or admin; featuring is admin only)"""
    restaurant = await get_restaurant_by_slug(slug, db)
    ensure_can_operate(current_user, restaurant)

    changes = restaurant_data.model_dump(exclude_unset=True)
    if "is_featured" in changes and not current_user.is_admin:
        raise AuthorizationError("Only administrators may feature restaurants")
    if "name" in changes and changes["name"] != restaurant.name:
        restaurant.slug = await unique_slug(db, Restaurant, changes["name"], "restaurant")

    for field, value in changes.items():
        setattr(restaurant, field, value)

    await db.commit()
    await db.refresh(restaurant)

    return restaurant


@router.delete("/{slug}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_restaurant(
    slug: str,
    current_user: User = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db),
):
    """Delete restaurant (soft delete - operator or admin)"""
    restaurant = await get_restaurant_by_slug(slug, db)
    ensure_can_operate(current_user, restaurant)

    restaurant.is_active = False
    await db.commit()
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{slug}/favorite", response_model=FavoriteToggle)
async def toggle_favorite(
    slug: str,
    current_user: User = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db),
):
    """Add the restaurant to the user's favorites, or remove it if already there"""
    restaurant = await get_restaurant_by_slug(slug, db)

    removed = await db.execute(
        delete(user_favorites).where(
            user_favorites.c.user_id == current_user.id,
            user_favorites.c.restaurant_id == restaurant.id,
        )
    )
    is_favorite = removed.rowcount == 0
    if is_favorite:
        await db.execute(
            insert(user_favorites).values(user_id=current_user.id, restaurant_id=restaurant.id)
        )
    await db.commit()

    logger.info(
        "Favorite toggled",
        user_id=str(current_user.id),
        restaurant_id=str(restaurant.id),
        is_favorite=is_favorite,
    )
    return FavoriteToggle(restaurant_id=restaurant.id, is_favorite=is_favorite)
