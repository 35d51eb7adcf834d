"""Background job tasks"""

from datetime import datetime, timedelta
import asyncio
import structlog

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.jobs.celery_app import celery_app
from app.config import settings
from app.models.reservation import Reservation, ReservationStatus
from app.models.restaurant import Restaurant

logger = structlog.get_logger()


def run_async(coro):
    """Helper to run async functions in sync context"""
    return asyncio.run(coro)


def reminder_message(restaurant_name: str, reservation: Reservation) -> str:
    return (
        f"Reminder: your reservation at {restaurant_name} on "
        f"{reservation.date.strftime('%d/%m/%Y')} at {reservation.time} "
        f"for {reservation.party_size} guests. "
        f"Confirmation code: {reservation.confirmation_code}."
    )


async def send_due_reminders(db: AsyncSession, sms_client, now: datetime = None) -> int:
    """Text every confirmed reservation inside the reminder window once.

    Returns the number of reminders sent.
    """
    now = now or datetime.utcnow()
    window_end = now + timedelta(hours=settings.reminder_window_hours)

    result = await db.execute(
        select(Reservation, Restaurant.name)
        .join(Restaurant, Restaurant.id == Reservation.restaurant_id)
        .where(
            Reservation.status == ReservationStatus.CONFIRMED.value,
            Reservation.is_active == True,  # noqa: E712
            Reservation.reminder_sent_at.is_(None),
            Reservation.date >= now.date(),
            Reservation.date <= window_end.date(),
        )
    )

    sent = 0
    for reservation, restaurant_name in result.all():
        try:
            sms_client.messages.create(
                body=reminder_message(restaurant_name, reservation),
                from_=settings.twilio_phone_number,
                to=reservation.contact_phone,
            )
        except Exception as e:
            logger.error(
                "Failed to send reservation reminder",
                reservation_id=str(reservation.id),
                error=str(e),
            )
            continue

        reservation.reminder_sent_at = datetime.utcnow()
        await db.commit()
        sent += 1

        logger.info(
            "Sent reservation reminder",
            reservation_id=str(reservation.id),
        )

    return sent


@celery_app.task(name="send_reservation_reminders")
def send_reservation_reminders():
    """Send reminders for upcoming reservations"""
    logger.info("Sending reservation reminders")

    async def _send_reminders():
        from app.database import SessionLocal
        from twilio.rest import Client as TwilioClient

        client = TwilioClient(settings.twilio_account_sid, settings.twilio_auth_token)
        async with SessionLocal() as db:
            sent = await send_due_reminders(db, client)

        logger.info("Reservation reminders done", sent=sent)

    run_async(_send_reminders())
