# services/bookings.py
# Mock reservation provider: validates, waits like a real booking round trip, always confirms.

import asyncio
import logging
import random
from typing import List, Optional

from errors import ValidationError
from models import Booking
from store import EntityStore
from utils import confirmation_code, new_id, now_iso

log = logging.getLogger("selene.bookings")

# simulated provider latency (seconds)
SIMULATED_DELAY_S = (1.0, 2.0)


async def simulate_delay() -> None:
    low, high = SIMULATED_DELAY_S
    await asyncio.sleep(random.uniform(low, high))


async def create_booking(
    store: EntityStore,
    venue_id: str,
    party_size: int,
    date_time: str,
    guest_ids: Optional[List[str]],
    current_user_id: str,
) -> Booking:
    if not venue_id or not date_time or party_size is None or party_size <= 0:
        raise ValidationError("Missing required fields: venueId, partySize, dateTime")

    # suspends only this request; no lock is held while waiting
    await simulate_delay()

    booking = Booking(
        id=new_id(),
        venueId=venue_id,
        userId=current_user_id,
        guests=list(guest_ids or []),
        partySize=party_size,
        dateTime=date_time,
        status="confirmed",
        confirmationCode=confirmation_code(),
        createdAt=now_iso(),
    )

    async with store.lock("bookings"):
        bookings = store.load_bookings()
        bookings.append(booking)
        store.save_bookings(bookings)

    log.info("booking %s confirmed: venue=%s party=%d code=%s",
             booking.id, venue_id, party_size, booking.confirmationCode)
    return booking


async def list_bookings(store: EntityStore, current_user_id: str) -> List[Booking]:
    """Bookings the user owns or is a guest on."""
    return [
        b for b in store.load_bookings()
        if b.userId == current_user_id or current_user_id in b.guests
    ]
