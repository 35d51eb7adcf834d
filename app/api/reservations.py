"""Reservation management API endpoints"""

import math
from typing import List, Optional, Literal
from uuid import UUID
from datetime import date, timedelta

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.database import get_db
from app.errors import NotFoundError
from app.models.reservation import ACTIVE_STATUSES, Reservation, ReservationStatus
from app.models.restaurant import Restaurant
from app.models.user import User, UserRole
from app.schemas.reservation import (
    ReservationCreate,
    ReservationUpdate,
    ReservationCancel,
    ReservationResponse,
    ReservationListResponse,
    ReservationStats,
)
from app.services.permissions import ensure_can_operate, reservation_scope
from app.services.reservations import ReservationService
from app.api.auth import get_current_active_user, require_role

router = APIRouter()

SORT_ORDERS = {
    "date": (Reservation.date.asc(), Reservation.time.asc()),
    "time": (Reservation.time.asc(), Reservation.date.asc()),
    "status": (Reservation.status.asc(), Reservation.date.asc()),
    "newest": (Reservation.created_at.desc(),),
}


def _scoped(query, current_user: User):
    scope = reservation_scope(current_user)
    if scope is not None:
        query = query.where(scope)
    return query


@router.get("", response_model=ReservationListResponse)
async def list_reservations(
    page: int = Query(1, ge=1),
    page_size: int = Query(12, ge=1, le=100),
    status: Optional[ReservationStatus] = None,
    date: Optional[date] = None,
    restaurant_id: Optional[UUID] = None,
    sort: Literal["date", "time", "status", "newest"] = "date",
    current_user: User = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db),
):
    """List reservations visible to the current user"""
    filters = [Reservation.is_active == True]  # noqa: E712
    if status:
        filters.append(Reservation.status == status.value)
    if date:
        filters.append(Reservation.date == date)
    if restaurant_id:
        filters.append(Reservation.restaurant_id == restaurant_id)

    query = _scoped(select(Reservation).where(*filters), current_user)
    count_query = _scoped(select(func.count(Reservation.id)).where(*filters), current_user)

    # Get total
    total_result = await db.execute(count_query)
    total = total_result.scalar()

    # Get paginated results
    offset = (page - 1) * page_size
    query = query.order_by(*SORT_ORDERS[sort]).offset(offset).limit(page_size)

    result = await db.execute(query)
    reservations = result.scalars().all()

    return ReservationListResponse(
        items=reservations,
        total=total,
        page=page,
        page_size=page_size,
        total_pages=math.ceil(total / page_size) if total else 0,
    )


@router.post("", response_model=ReservationResponse, status_code=201)
async def create_reservation(
    reservation_data: ReservationCreate,
    current_user: User = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db),
):
    """Create a new reservation; the response carries the confirmation code"""
    return await ReservationService(db).create(current_user, reservation_data)


@router.get("/upcoming", response_model=List[ReservationResponse])
async def upcoming_reservations(
    current_user: User = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db),
):
    """Next open reservations visible to the current user"""
    query = select(Reservation).where(
        Reservation.is_active == True,  # noqa: E712
        Reservation.date > ReservationService.today(),
        Reservation.status.in_(ACTIVE_STATUSES),
    )
    query = _scoped(query, current_user)
    query = query.order_by(Reservation.date.asc(), Reservation.time.asc()).limit(
        settings.upcoming_reservations_limit
    )

    result = await db.execute(query)
    return result.scalars().all()


@router.get("/stats", response_model=ReservationStats)
async def reservation_stats(
    restaurant_id: Optional[UUID] = None,
    period: Literal["week", "month", "year"] = "month",
    current_user: User = Depends(require_role(UserRole.RESTAURANT_OWNER)),
    db: AsyncSession = Depends(get_db),
):
    """Reservation counts per status over a period (operators and admins)"""
    today = ReservationService.today()
    if period == "week":
        start = today - timedelta(days=7)
    elif period == "year":
        start = today.replace(month=1, day=1)
    else:
        start = today.replace(day=1)

    filters = [
        Reservation.is_active == True,  # noqa: E712
        Reservation.date >= start,
        Reservation.date <= today,
    ]
    if restaurant_id:
        restaurant = await db.get(Restaurant, restaurant_id)
        if restaurant is None:
            raise NotFoundError("Restaurant not found")
        ensure_can_operate(current_user, restaurant)
        filters.append(Reservation.restaurant_id == restaurant_id)

    query = _scoped(
        select(Reservation.status, func.count(Reservation.id)).where(*filters),
        current_user,
    ).group_by(Reservation.status)

    result = await db.execute(query)
    stats = ReservationStats(period=period)
    for status, count in result.all():
        setattr(stats, status, count)
        stats.total += count

    return stats


@router.get("/code/{code}", response_model=ReservationResponse)
async def get_reservation_by_code(
    code: str,
    db: AsyncSession = Depends(get_db),
):
    """Public lookup by confirmation code"""
    return await ReservationService(db).get_by_confirmation_code(code)


@router.get("/{reservation_id}", response_model=ReservationResponse)
async def get_reservation(
    reservation_id: UUID,
    current_user: User = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db),
):
    """Get reservation details"""
    return await ReservationService(db).get_for(current_user, reservation_id)


@router.put("/{reservation_id}", response_model=ReservationResponse)
async def update_reservation(
    reservation_id: UUID,
    reservation_data: ReservationUpdate,
    current_user: User = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db),
):
    """Update date, time, party size or preferences"""
    service = ReservationService(db)
    reservation = await service.get(reservation_id)
    return await service.update(current_user, reservation, reservation_data)


@router.put("/{reservation_id}/cancel", response_model=ReservationResponse)
async def cancel_reservation(
    reservation_id: UUID,
    cancel_data: Optional[ReservationCancel] = None,
    current_user: User = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db),
):
    """Cancel a reservation"""
    service = ReservationService(db)
    reservation = await service.get(reservation_id)
    reason = cancel_data.reason if cancel_data else None
    return await service.cancel(current_user, reservation, reason)


@router.put("/{reservation_id}/confirm", response_model=ReservationResponse)
async def confirm_reservation(
    reservation_id: UUID,
    current_user: User = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db),
):
    """Confirm a pending reservation (restaurant operator or admin)"""
    service = ReservationService(db)
    reservation = await service.get(reservation_id)
    return await service.confirm(current_user, reservation)


@router.put("/{reservation_id}/complete", response_model=ReservationResponse)
async def complete_reservation(
    reservation_id: UUID,
    current_user: User = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db),
):
    """Mark a reservation as completed (restaurant operator or admin)"""
    service = ReservationService(db)
    reservation = await service.get(reservation_id)
    return await service.complete(current_user, reservation)


@router.put("/{reservation_id}/no-show", response_model=ReservationResponse)
async def mark_no_show(
    reservation_id: UUID,
    current_user: User = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db),
):
    """Mark a reservation as a no-show (restaurant operator or admin)"""
    service = ReservationService(db)
    reservation = await service.get(reservation_id)
    return await service.mark_no_show(current_user, reservation)


@router.delete("/{reservation_id}", status_code=204)
async def delete_reservation(
    reservation_id: UUID,
    current_user: User = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db),
):
    """Withdraw a reservation (soft delete)"""
    service = ReservationService(db)
    reservation = await service.get(reservation_id)
    await service.delete(current_user, reservation)
    return Response(status_code=204)
