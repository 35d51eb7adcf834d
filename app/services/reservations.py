"""
Reservation lifecycle: slot conflicts, confirmation codes and status transitions.

The (restaurant, date, time) slot invariant is owned by the partial unique
index ``uq_reservations_active_slot``. ``has_conflict`` is only the fast path
that produces a friendly error; an ``IntegrityError`` raised by the index on
flush is translated into the same ``ConflictError``.
"""

import secrets
import string
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Dict, FrozenSet, Iterable, Optional
from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
import structlog

from app.config import settings
from app.errors import (
    AuthorizationError,
    ConflictError,
    InvalidTransitionError,
    NotFoundError,
    PolicyError,
    ValidationError,
)
from app.models.audit import AuditLog
from app.models.reservation import ACTIVE_STATUSES, Reservation, ReservationStatus
from app.models.restaurant import Restaurant
from app.models.user import User
from app.schemas.reservation import ReservationCreate, ReservationUpdate
from app.services.permissions import (
    can_operate,
    cancelled_by_for,
    ensure_can_manage,
    ensure_can_operate,
)

logger = structlog.get_logger()

CODE_ALPHABET = string.ascii_uppercase + string.digits

PENDING = ReservationStatus.PENDING.value
CONFIRMED = ReservationStatus.CONFIRMED.value
CANCELLED = ReservationStatus.CANCELLED.value
COMPLETED = ReservationStatus.COMPLETED.value
NO_SHOW = ReservationStatus.NO_SHOW.value


def generate_confirmation_code(length: int = 6) -> str:
    """Random code over [A-Z0-9]; uniqueness is checked by the caller"""
    return "".join(secrets.choice(CODE_ALPHABET) for _ in range(length))


async def has_conflict(
    db: AsyncSession,
    restaurant_id: UUID,
    slot_date: date,
    slot_time: str,
    exclude_id: Optional[UUID] = None,
) -> bool:
    """True if an active reservation already holds this exact slot"""
    query = select(Reservation.id).where(
        Reservation.restaurant_id == restaurant_id,
        Reservation.date == slot_date,
        Reservation.time == slot_time,
        Reservation.status.in_(ACTIVE_STATUSES),
    )
    if exclude_id is not None:
        query = query.where(Reservation.id != exclude_id)

    result = await db.execute(query.limit(1))
    return result.first() is not None


@dataclass(frozen=True)
class Transition:
    target: str
    sources: FrozenSet[str]
    blocked: FrozenSet[str]


TRANSITIONS: Dict[str, Transition] = {
    "confirm": Transition(
        target=CONFIRMED,
        sources=frozenset({PENDING}),
        blocked=frozenset({CONFIRMED, CANCELLED}),
    ),
    "cancel": Transition(
        target=CANCELLED,
        sources=frozenset({PENDING, CONFIRMED}),
        blocked=frozenset({CANCELLED, COMPLETED}),
    ),
    "complete": Transition(
        target=COMPLETED,
        sources=frozenset({PENDING, CONFIRMED}),
        blocked=frozenset({COMPLETED, CANCELLED}),
    ),
    "no_show": Transition(
        target=NO_SHOW,
        sources=frozenset({PENDING, CONFIRMED}),
        blocked=frozenset({NO_SHOW, CANCELLED}),
    ),
}


def check_transition(status: str, operation: str) -> Transition:
    """Validate that ``operation`` may be applied to a reservation in ``status``"""
    transition = TRANSITIONS[operation]

    if status == transition.target:
        raise ConflictError(f"Reservation is already {status}")

    if status in transition.blocked:
        if status == CANCELLED:
            raise InvalidTransitionError(f"Cannot {operation} a cancelled reservation")
        raise ConflictError(f"Cannot {operation} a reservation that is already {status}")

    if status not in transition.sources:
        raise InvalidTransitionError(f"Cannot {operation} a reservation in status {status}")

    return transition


def _snapshot(reservation: Reservation) -> Dict[str, Any]:
    return {
        "status": reservation.status,
        "date": reservation.date.isoformat() if reservation.date else None,
        "time": reservation.time,
        "party_size": reservation.party_size,
        "is_active": reservation.is_active,
    }


class ReservationService:
    """Reservation store operations and lifecycle controller"""

    def __init__(self, db: AsyncSession):
        self.db = db

    @staticmethod
    def today() -> date:
        return datetime.utcnow().date()

    def _ensure_future(self, value: date) -> None:
        if value <= self.today():
            raise ValidationError.for_field("date", "Reservation date must be in the future")

    # Lookups

    async def get_restaurant(self, restaurant_id: UUID) -> Restaurant:
        result = await self.db.execute(
            select(Restaurant).where(
                Restaurant.id == restaurant_id,
                Restaurant.is_active == True,  # noqa: E712
            )
        )
        restaurant = result.scalar_one_or_none()
        if restaurant is None:
            raise NotFoundError("Restaurant not found")
        return restaurant

    async def get(self, reservation_id: UUID) -> Reservation:
        result = await self.db.execute(
            select(Reservation).where(
                Reservation.id == reservation_id,
                Reservation.is_active == True,  # noqa: E712
            )
        )
        reservation = result.scalar_one_or_none()
        if reservation is None:
            raise NotFoundError("Reservation not found")
        return reservation

    async def get_for(self, actor: User, reservation_id: UUID) -> Reservation:
        """Load a reservation the actor is allowed to see"""
        reservation = await self.get(reservation_id)
        restaurant = await self.db.get(Restaurant, reservation.restaurant_id)
        ensure_can_manage(actor, reservation, restaurant)
        return reservation

    async def get_by_confirmation_code(self, code: str) -> Reservation:
        result = await self.db.execute(
            select(Reservation).where(
                Reservation.confirmation_code == code.strip().upper(),
                Reservation.is_active == True,  # noqa: E712
            )
        )
        reservation = result.scalar_one_or_none()
        if reservation is None:
            raise NotFoundError("Reservation not found")
        return reservation

    async def _unique_confirmation_code(self) -> str:
        for _ in range(settings.confirmation_code_max_attempts):
            code = generate_confirmation_code(settings.confirmation_code_length)
            result = await self.db.execute(
                select(Reservation.id).where(Reservation.confirmation_code == code)
            )
            if result.first() is None:
                return code
            logger.warning("Confirmation code already taken", code=code)
        raise ConflictError("Could not allocate a unique confirmation code")

    # Creation and update

    async def create(self, actor: User, data: ReservationCreate) -> Reservation:
        """Book a slot; the returned record carries the confirmation code"""
        if not settings.reservation_min_party_size <= data.party_size <= settings.reservation_max_party_size:
            raise ValidationError.for_field(
                "party_size",
                f"Party size must be between {settings.reservation_min_party_size} "
                f"and {settings.reservation_max_party_size}",
            )
        self._ensure_future(data.date)

        actor_id, actor_type = actor.id, actor.role.value

        restaurant = await self.get_restaurant(data.restaurant_id)
        if not restaurant.accepts_reservations:
            raise PolicyError("This restaurant does not accept reservations")

        if await has_conflict(self.db, data.restaurant_id, data.date, data.time):
            logger.info(
                "Slot already booked",
                restaurant_id=str(data.restaurant_id),
                date=data.date.isoformat(),
                time=data.time,
            )
            raise ConflictError("Slot already booked")

        fields = data.model_dump()
        fields["dietary_restrictions"] = fields.get("dietary_restrictions") or []

        for attempt in range(1, settings.confirmation_code_max_attempts + 1):
            reservation = Reservation(
                user_id=actor_id,
                status=PENDING,
                confirmation_code=await self._unique_confirmation_code(),
                **fields,
            )
            self.db.add(reservation)
            try:
                await self.db.flush()
            except IntegrityError as exc:
                await self.db.rollback()
                if await has_conflict(self.db, data.restaurant_id, data.date, data.time):
                    logger.info(
                        "Slot taken by a concurrent booking",
                        restaurant_id=str(data.restaurant_id),
                        date=data.date.isoformat(),
                        time=data.time,
                    )
                    raise ConflictError("Slot already booked") from exc
                logger.warning("Confirmation code collision on insert", attempt=attempt)
                continue

            self._audit(actor_id, actor_type, reservation, "reservation.create", None)
            await self.db.commit()
            await self.db.refresh(reservation)

            logger.info(
                "Reservation created",
                reservation_id=str(reservation.id),
                restaurant_id=str(reservation.restaurant_id),
                confirmation_code=reservation.confirmation_code,
            )
            return reservation

        raise ConflictError("Could not allocate a unique confirmation code")

    async def update(self, actor: User, reservation: Reservation, data: ReservationUpdate) -> Reservation:
        """Change non-lifecycle fields of a pending or confirmed reservation"""
        restaurant = await self.db.get(Restaurant, reservation.restaurant_id)
        ensure_can_manage(actor, reservation, restaurant)

        if not reservation.is_open:
            raise InvalidTransitionError(f"Cannot modify a {reservation.status} reservation")

        changes = data.model_dump(exclude_unset=True)
        if "restaurant_notes" in changes and not can_operate(actor, restaurant):
            raise AuthorizationError("Only the restaurant may edit restaurant notes")

        for field in ("date", "time", "party_size"):
            if field in changes and changes[field] is None:
                raise ValidationError.for_field(field, f"{field} cannot be empty")
        if "dietary_restrictions" in changes and changes["dietary_restrictions"] is None:
            changes["dietary_restrictions"] = []
        if not changes:
            return reservation

        new_date = changes.get("date", reservation.date)
        new_time = changes.get("time", reservation.time)
        slot_changed = new_date != reservation.date or new_time != reservation.time

        if "date" in changes:
            self._ensure_future(new_date)
        if slot_changed and await has_conflict(
            self.db, reservation.restaurant_id, new_date, new_time, exclude_id=reservation.id
        ):
            raise ConflictError("Slot already booked")

        actor_id, actor_type = actor.id, actor.role.value
        reservation_id = reservation.id
        before = _snapshot(reservation)

        try:
            applied = await self._compare_and_set(reservation, ACTIVE_STATUSES, **changes)
        except IntegrityError as exc:
            await self.db.rollback()
            logger.info("Slot taken by a concurrent update", reservation_id=str(reservation_id))
            raise ConflictError("Slot already booked") from exc

        if not applied:
            await self._reload_current(reservation)
            raise InvalidTransitionError(f"Cannot modify a {reservation.status} reservation")

        self._audit(actor_id, actor_type, reservation, "reservation.update", before)
        await self.db.commit()
        await self.db.refresh(reservation)

        logger.info("Reservation updated", reservation_id=str(reservation.id), fields=sorted(changes))
        return reservation

    # Lifecycle transitions

    async def confirm(self, actor: Optional[User], reservation: Reservation) -> Reservation:
        restaurant = await self.db.get(Restaurant, reservation.restaurant_id)
        ensure_can_operate(actor, restaurant)
        return await self._transition(actor, reservation, "confirm", confirmed_at=datetime.utcnow())

    async def cancel(
        self,
        actor: Optional[User],
        reservation: Reservation,
        reason: Optional[str] = None,
    ) -> Reservation:
        restaurant = await self.db.get(Restaurant, reservation.restaurant_id)
        ensure_can_manage(actor, reservation, restaurant)
        cancelled_by = cancelled_by_for(actor, reservation)
        return await self._transition(
            actor,
            reservation,
            "cancel",
            cancelled_at=datetime.utcnow(),
            cancelled_by=cancelled_by,
            cancellation_reason=reason or f"Cancelled by {cancelled_by}",
        )

    async def complete(self, actor: Optional[User], reservation: Reservation) -> Reservation:
        restaurant = await self.db.get(Restaurant, reservation.restaurant_id)
        ensure_can_operate(actor, restaurant)
        return await self._transition(actor, reservation, "complete")

    async def mark_no_show(self, actor: Optional[User], reservation: Reservation) -> Reservation:
        restaurant = await self.db.get(Restaurant, reservation.restaurant_id)
        ensure_can_operate(actor, restaurant)
        return await self._transition(actor, reservation, "no_show")

    async def delete(self, actor: User, reservation: Reservation) -> None:
        """Soft delete; an open reservation is cancelled in the same write"""
        restaurant = await self.db.get(Restaurant, reservation.restaurant_id)
        ensure_can_manage(actor, reservation, restaurant)

        actor_id, actor_type = actor.id, actor.role.value
        before = _snapshot(reservation)

        withdrawn = await self._compare_and_set(
            reservation,
            ACTIVE_STATUSES,
            status=CANCELLED,
            cancelled_at=datetime.utcnow(),
            cancelled_by=cancelled_by_for(actor, reservation),
            cancellation_reason="Reservation withdrawn",
            is_active=False,
        )
        # Already terminal: only hide it
        if not withdrawn and not await self._compare_and_set(reservation, None, is_active=False):
            raise NotFoundError("Reservation not found")

        self._audit(actor_id, actor_type, reservation, "reservation.delete", before)
        await self.db.commit()

        logger.info("Reservation deleted", reservation_id=str(reservation.id), withdrawn=withdrawn)

    async def _transition(
        self,
        actor: Optional[User],
        reservation: Reservation,
        operation: str,
        **changes: Any,
    ) -> Reservation:
        transition = check_transition(reservation.status, operation)

        actor_id = actor.id if actor is not None else None
        actor_type = actor.role.value if actor is not None else "system"
        before = _snapshot(reservation)

        applied = await self._compare_and_set(
            reservation, transition.sources, status=transition.target, **changes
        )
        if not applied:
            # Another request changed the row since it was loaded
            await self._reload_current(reservation)
            logger.warning(
                "Stale reservation transition",
                reservation_id=str(reservation.id),
                operation=operation,
                expected_status=before["status"],
                current_status=reservation.status,
            )
            check_transition(reservation.status, operation)
            raise ConflictError("Reservation was modified by another request")

        self._audit(actor_id, actor_type, reservation, f"reservation.{operation}", before)
        await self.db.commit()

        logger.info(
            "Reservation status changed",
            reservation_id=str(reservation.id),
            operation=operation,
            from_status=before["status"],
            to_status=reservation.status,
        )
        return reservation

    async def _compare_and_set(
        self,
        reservation: Reservation,
        statuses: Optional[Iterable[str]],
        **values: Any,
    ) -> bool:
        """Write ``values`` only if the stored row is still active and in one of ``statuses``.

        The status guard lives in the UPDATE itself, so of two overlapping
        requests only the first one to write matches the row.
        """
        query = update(Reservation).where(
            Reservation.id == reservation.id,
            Reservation.is_active == True,  # noqa: E712
        )
        if statuses is not None:
            query = query.where(Reservation.status.in_(sorted(statuses)))

        result = await self.db.execute(
            query.values(**values).execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            return False

        await self.db.refresh(reservation)
        return True

    async def _reload_current(self, reservation: Reservation) -> None:
        await self.db.refresh(reservation)
        if not reservation.is_active:
            raise NotFoundError("Reservation not found")

    def _audit(
        self,
        actor_id: Optional[UUID],
        actor_type: str,
        reservation: Reservation,
        action: str,
        before: Optional[Dict[str, Any]],
    ) -> None:
        self.db.add(
            AuditLog(
                restaurant_id=reservation.restaurant_id,
                actor_id=actor_id,
                actor_type=actor_type,
                action=action,
                resource_type="reservation",
                resource_id=reservation.id,
                data_json={"before": before, "after": _snapshot(reservation)},
            )
        )
