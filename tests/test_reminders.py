"""Tests for the reservation reminder job"""

from datetime import datetime, time, timedelta

import pytest

from app.jobs.tasks import reminder_message, send_due_reminders
from app.schemas.reservation import ReservationCreate
from app.services.reservations import ReservationService

from conftest import future_date


class FakeMessages:
    def __init__(self, fail_for=()):
        self.sent = []
        self.fail_for = set(fail_for)

    def create(self, body, from_, to):
        if to in self.fail_for:
            raise RuntimeError("carrier rejected the message")
        self.sent.append({"body": body, "to": to})


class FakeSMSClient:
    def __init__(self, fail_for=()):
        self.messages = FakeMessages(fail_for)


async def confirmed_booking(db, user, owner, restaurant, days, slot="19:00", phone="+351912345678"):
    service = ReservationService(db)
    reservation = await service.create(
        user,
        ReservationCreate(
            restaurant_id=restaurant.id,
            date=future_date(days),
            time=slot,
            party_size=2,
            contact_name="Ana Costa",
            contact_phone=phone,
            contact_email="ana@example.com",
        ),
    )
    return await service.confirm(owner, reservation)


def morning_before(days: int) -> datetime:
    return datetime.combine(future_date(days) - timedelta(days=1), time(9, 0))


@pytest.mark.asyncio
async def test_reminds_confirmed_reservations_once(test_db, test_user, test_owner, test_restaurant):
    tomorrow = await confirmed_booking(test_db, test_user, test_owner, test_restaurant, days=2)
    await confirmed_booking(test_db, test_user, test_owner, test_restaurant, days=9)
    sms = FakeSMSClient()

    sent = await send_due_reminders(test_db, sms, now=morning_before(2))

    assert sent == 1
    assert sms.messages.sent[0]["to"] == "+351912345678"
    assert tomorrow.confirmation_code in sms.messages.sent[0]["body"]
    assert tomorrow.reminder_sent_at is not None

    again = await send_due_reminders(test_db, sms, now=morning_before(2))
    assert again == 0


@pytest.mark.asyncio
async def test_skips_pending_reservations(test_db, test_user, test_restaurant):
    await ReservationService(test_db).create(
        test_user,
        ReservationCreate(
            restaurant_id=test_restaurant.id,
            date=future_date(2),
            time="19:00",
            party_size=2,
            contact_name="Ana Costa",
            contact_phone="+351912345678",
            contact_email="ana@example.com",
        ),
    )

    sent = await send_due_reminders(test_db, FakeSMSClient(), now=morning_before(2))

    assert sent == 0


@pytest.mark.asyncio
async def test_failed_sms_is_retried_later(test_db, test_user, test_owner, test_restaurant):
    failing = await confirmed_booking(
        test_db, test_user, test_owner, test_restaurant, days=2, slot="19:00", phone="+351900000000"
    )
    await confirmed_booking(test_db, test_user, test_owner, test_restaurant, days=2, slot="21:00")

    sent = await send_due_reminders(
        test_db, FakeSMSClient(fail_for={"+351900000000"}), now=morning_before(2)
    )

    assert sent == 1
    assert failing.reminder_sent_at is None


def test_reminder_message():
    class Booking:
        date = datetime(2030, 6, 13).date()
        time = "20:30"
        party_size = 4
        confirmation_code = "AB12CD"

    message = reminder_message("Tasca do Chico", Booking())

    assert "13/06/2030" in message
    assert "20:30" in message
    assert "AB12CD" in message
