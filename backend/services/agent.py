# services/agent.py
# Tool surface for the external concierge chat agent; the HTTP app does not route here.
# Results are tool payloads, not HTTP responses.

from typing import List

from models import Venue
from services.bookings import create_booking
from services.invites import create_invite
from store import EntityStore


def _find_venue(store: EntityStore, venue_id: str) -> Venue | None:
    return next((v for v in store.load_venues() if v.id == venue_id), None)


async def book_table(
    store: EntityStore,
    venue_id: str,
    party_size: int,
    date_time: str,
    guest_ids: List[str],
    current_user_id: str,
) -> dict:
    venue = _find_venue(store, venue_id)
    if not venue:
        return {"success": False, "error": "Venue not found"}

    booking = await create_booking(store, venue_id, party_size, date_time, guest_ids, current_user_id)
    return {
        "success": True,
        "message": f"Booking confirmed at {venue.name}!",
        "confirmationCode": booking.confirmationCode,
        "booking": booking.model_dump(),
    }


async def send_invites(
    store: EntityStore,
    venue_id: str,
    to_user_ids: List[str],
    proposed_time: str,
    current_user_id: str,
) -> dict:
    venue = _find_venue(store, venue_id)
    if not venue:
        return {"success": False, "error": "Venue not found"}

    invites = await create_invite(store, venue_id, to_user_ids, proposed_time, current_user_id)
    users_by_id = {u.id: u for u in store.load_users()}
    invited = ", ".join(users_by_id[inv.toUserId].name for inv in invites if inv.toUserId in users_by_id)
    return {
        "success": True,
        "message": f"Invites sent to {invited} for {venue.name}!",
        "inviteCount": len(invites),
        "invites": [inv.model_dump() for inv in invites],
    }
