# services/suggestions.py
# Proactive "go with your friends" suggestion for a venue, based on overlapping venue types.

from typing import List, Optional

from errors import NotFound
from models import Suggestion, Venue
from store import EntityStore
from utils import join_names, tonight_at

SUGGESTED_HOUR = 21


def _types_for(user_ids: set[str], interests, venues_by_id: dict[str, Venue]) -> List[str]:
    """Venue types a set of users hearted, first-seen order."""
    out: List[str] = []
    for i in interests:
        if i.userId not in user_ids:
            continue
        venue = venues_by_id.get(i.venueId)
        if venue and venue.type not in out:
            out.append(venue.type)
    return out


def build_reasoning(venue: Venue, friend_names: List[str], shared_types: List[str]) -> str:
    """
    Three tiers, first that applies:
      1. the venue's own type is one the user shares with these friends
      2. some other type is shared
      3. fall back to the venue's vibe
    """
    names = join_names(friend_names)
    verb = "is" if len(friend_names) == 1 else "are"

    if venue.type in shared_types:
        return (f"{names} {verb} interested in {venue.name}, and you all love "
                f"{venue.type} spots. Perfect match!")
    if shared_types:
        return (f"{names} {verb} interested in {venue.name}. You share a taste "
                f"for {shared_types[0]} venues, so this could be a great night out.")
    return (f"{names} {verb} interested in {venue.name}. Its {venue.vibe} vibe "
            f"looks like a good fit for your group.")


async def get_suggestion(store: EntityStore, venue_id: str, current_user_id: str) -> Optional[Suggestion]:
    venues = store.load_venues()
    venues_by_id = {v.id: v for v in venues}
    venue = venues_by_id.get(venue_id)
    if not venue:
        raise NotFound("Venue not found")

    users_by_id = {u.id: u for u in store.load_users()}
    interests = store.load_interests()

    me = users_by_id.get(current_user_id)
    friend_ids = set(me.friends) if me else set()
    friends = [
        users_by_id[i.userId]
        for i in interests
        if i.venueId == venue_id and i.userId in friend_ids and i.userId in users_by_id
    ]
    if not friends:
        return None

    my_types = _types_for({current_user_id}, interests, venues_by_id)
    friend_types = set(_types_for({f.id for f in friends}, interests, venues_by_id))
    shared_types = [t for t in my_types if t in friend_types]

    friend_names = [f.name for f in friends]
    return Suggestion(
        venueId=venue.id,
        venueName=venue.name,
        friendNames=friend_names,
        friendIds=[f.id for f in friends],
        partySize=len(friends) + 1,
        suggestedTime=tonight_at(SUGGESTED_HOUR),
        reasoning=build_reasoning(venue, friend_names, shared_types),
        sharedInterests=shared_types,
    )
