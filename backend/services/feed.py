# services/feed.py
# Feed enrichment: venues joined with interests, invites and the current user's friends.
# Also the heart/unheart actions and the small social read endpoints.

import logging
from typing import List, Optional

from errors import NotFound
from models import EnrichedVenue, Interest, Invite, User
from store import EntityStore
from utils import new_id, now_iso

log = logging.getLogger("selene.feed")


def _friend_ids(users_by_id: dict[str, User], current_user_id: str) -> set[str]:
    me = users_by_id.get(current_user_id)
    return set(me.friends) if me else set()


def _latest_pending(invites: List[Invite], venue_id: str, current_user_id: str) -> Optional[Invite]:
    """
    The current user's pending invite at a venue, sent or received.
    Several can exist (one sent, one received); the most recently created wins,
    ties go to the later one in load order.
    """
    best = None
    best_key = None
    for idx, inv in enumerate(invites):
        if inv.venueId != venue_id or inv.status != "pending":
            continue
        if inv.fromUserId != current_user_id and inv.toUserId != current_user_id:
            continue
        key = (inv.createdAt, idx)
        if best_key is None or key > best_key:
            best, best_key = inv, key
    return best


async def build_enriched_feed(store: EntityStore, current_user_id: str) -> List[EnrichedVenue]:
    """
    Every venue with social state for the current user:
      interestedFriends - friends holding an interest, in interest order
      mutualCount       - interests from users who are neither self nor a friend
      inviteState       - the user's pending invite at this venue, if any
      isSaved           - the user hearted it
    """
    venues = store.load_venues()
    users = store.load_users()
    interests = store.load_interests()
    invites = store.load_invites()

    users_by_id = {u.id: u for u in users}
    friend_ids = _friend_ids(users_by_id, current_user_id)

    feed: List[EnrichedVenue] = []
    for venue in venues:
        venue_interests = [i for i in interests if i.venueId == venue.id]

        interested_friends = [
            users_by_id[i.userId]
            for i in venue_interests
            if i.userId in friend_ids and i.userId in users_by_id
        ]
        mutual_count = sum(
            1 for i in venue_interests
            if i.userId not in friend_ids and i.userId != current_user_id
        )
        is_saved = any(i.userId == current_user_id for i in venue_interests)

        feed.append(EnrichedVenue(
            **venue.model_dump(),
            interestedFriends=interested_friends,
            mutualCount=mutual_count,
            inviteState=_latest_pending(invites, venue.id, current_user_id),
            isSaved=is_saved,
        ))
    return feed


async def get_enriched_venue(store: EntityStore, venue_id: str, current_user_id: str) -> Optional[EnrichedVenue]:
    # small datasets: build the whole feed and pick one
    for venue in await build_enriched_feed(store, current_user_id):
        if venue.id == venue_id:
            return venue
    return None


async def heart_venue(store: EntityStore, venue_id: str, current_user_id: str) -> tuple[Interest, bool]:
    """
    Record that the current user is interested in a venue.
    Returns (interest, created); hearting twice returns the existing interest.
    """
    if not any(v.id == venue_id for v in store.load_venues()):
        raise NotFound("Venue not found")

    async with store.lock("interests"):
        interests = store.load_interests()
        for existing in interests:
            if existing.userId == current_user_id and existing.venueId == venue_id:
                return existing, False

        interest = Interest(
            id=new_id(),
            userId=current_user_id,
            venueId=venue_id,
            createdAt=now_iso(),
        )
        interests.append(interest)
        store.save_interests(interests)

    log.info("interest added: user=%s venue=%s", current_user_id, venue_id)
    return interest, True


async def unheart_venue(store: EntityStore, venue_id: str, current_user_id: str) -> None:
    async with store.lock("interests"):
        interests = store.load_interests()
        kept = [i for i in interests if not (i.userId == current_user_id and i.venueId == venue_id)]
        if len(kept) == len(interests):
            raise NotFound("Interest not found")
        store.save_interests(kept)

    log.info("interest removed: user=%s venue=%s", current_user_id, venue_id)


async def get_current_user(store: EntityStore, current_user_id: str) -> User:
    for user in store.load_users():
        if user.id == current_user_id:
            return user
    raise NotFound("User not found")


async def list_friends(store: EntityStore, current_user_id: str) -> List[User]:
    users = store.load_users()
    users_by_id = {u.id: u for u in users}
    me = users_by_id.get(current_user_id)
    if not me:
        raise NotFound("User not found")
    return [users_by_id[fid] for fid in me.friends if fid in users_by_id]


async def list_interested_friends(store: EntityStore, venue_id: str, current_user_id: str) -> List[User]:
    users = store.load_users()
    users_by_id = {u.id: u for u in users}
    if current_user_id not in users_by_id:
        raise NotFound("User not found")
    friend_ids = _friend_ids(users_by_id, current_user_id)
    return [
        users_by_id[i.userId]
        for i in store.load_interests()
        if i.venueId == venue_id and i.userId in friend_ids and i.userId in users_by_id
    ]
