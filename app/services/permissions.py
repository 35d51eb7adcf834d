"""Authorization capabilities for reservations, restaurants and events"""

from typing import Optional

from sqlalchemy import select

from app.errors import AuthorizationError
from app.models.event import Event
from app.models.reservation import Reservation
from app.models.restaurant import Restaurant
from app.models.user import User, UserRole


def operates(actor: User, restaurant: Restaurant) -> bool:
    """True if the actor is the restaurant's operator"""
    return restaurant.owner_id == actor.id


def can_operate(actor: User, restaurant: Restaurant) -> bool:
    """Admins and the restaurant's operator may run restaurant-side operations"""
    if actor.is_admin:
        return True
    return actor.role == UserRole.RESTAURANT_OWNER and operates(actor, restaurant)


def can_manage(actor: User, reservation: Reservation, restaurant: Restaurant) -> bool:
    """Admins, the requesting user and the restaurant's operator may manage a reservation"""
    if actor.is_admin:
        return True
    if reservation.user_id == actor.id:
        return True
    return operates(actor, restaurant)


def ensure_can_operate(actor: Optional[User], restaurant: Restaurant) -> None:
    if actor is not None and not can_operate(actor, restaurant):
        raise AuthorizationError("Not authorized to manage this restaurant")


def ensure_can_manage(actor: Optional[User], reservation: Reservation, restaurant: Restaurant) -> None:
    if actor is not None and not can_manage(actor, reservation, restaurant):
        raise AuthorizationError("Not authorized to access this reservation")


def cancelled_by_for(actor: Optional[User], reservation: Reservation) -> str:
    """Who a cancellation is attributed to"""
    if actor is None:
        return "system"
    if actor.id == reservation.user_id:
        return "user"
    return "restaurant"


def reservation_scope(actor: User):
    """Listing filter: users see their own, operators their restaurants', admins all"""
    if actor.is_admin:
        return None
    if actor.role == UserRole.RESTAURANT_OWNER:
        owned = select(Restaurant.id).where(Restaurant.owner_id == actor.id)
        return Reservation.restaurant_id.in_(owned)
    return Reservation.user_id == actor.id


def can_edit_event(actor: User, event: Event, restaurant: Optional[Restaurant]) -> bool:
    """Admins, the event's creator and the operator of its restaurant may edit an event"""
    if actor.is_admin or event.created_by == actor.id:
        return True
    return restaurant is not None and operates(actor, restaurant)


def ensure_can_edit_event(actor: User, event: Event, restaurant: Optional[Restaurant]) -> None:
    if not can_edit_event(actor, event, restaurant):
        raise AuthorizationError("Not authorized to manage this event")
