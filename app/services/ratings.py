"""Restaurant rating aggregation"""

from dataclasses import dataclass
from typing import Iterable

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
import structlog

from app.models.restaurant import Restaurant
from app.models.review import Review

logger = structlog.get_logger()


@dataclass(frozen=True)
class RatingSummary:
    average: float
    count: int


def compute_rating(ratings: Iterable[int]) -> RatingSummary:
    """Average (one decimal) and count over a set of review ratings"""
    values = list(ratings)
    if not values:
        return RatingSummary(average=0.0, count=0)
    return RatingSummary(average=round(sum(values) / len(values), 1), count=len(values))


async def refresh_restaurant_rating(db: AsyncSession, restaurant: Restaurant) -> RatingSummary:
    """Recompute the restaurant's rating from its active reviews.

    Does not commit; the caller commits together with the review write.
    """
    await db.flush()
    result = await db.execute(
        select(Review.rating).where(
            Review.restaurant_id == restaurant.id,
            Review.is_active == True,  # noqa: E712
        )
    )
    summary = compute_rating(result.scalars().all())

    restaurant.rating_average = summary.average
    restaurant.rating_count = summary.count

    logger.info(
        "Restaurant rating refreshed",
        restaurant_id=str(restaurant.id),
        average=summary.average,
        count=summary.count,
    )
    return summary
