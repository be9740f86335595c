import pytest

from conftest import ME, make_interest, make_invite
from errors import NotFound
from services import feed
from store import MemoryStore


def _by_id(venues):
    return {v.id: v for v in venues}


@pytest.mark.asyncio
async def test_interested_friends_are_friends_with_an_interest(store):
    venues = _by_id(await feed.build_enriched_feed(store, ME))

    assert [u.id for u in venues["v1"].interestedFriends] == ["bob", "cara"]
    assert venues["v2"].interestedFriends == []
    assert venues["v3"].interestedFriends == []


@pytest.mark.asyncio
async def test_mutual_count_excludes_self_and_friends(seed):
    seed["interests"].append(make_interest("i5", "eve", "v1"))
    seed["interests"].append(make_interest("i6", ME, "v1"))
    venues = _by_id(await feed.build_enriched_feed(MemoryStore(seed), ME))

    # dan + eve; bob/cara are friends, alex is self
    assert venues["v1"].mutualCount == 2
    assert venues["v2"].mutualCount == 0


@pytest.mark.asyncio
async def test_interested_friends_keep_interest_order(seed):
    seed["interests"] = [
        make_interest("a", "cara", "v3"),
        make_interest("b", "bob", "v3"),
    ]
    venues = _by_id(await feed.build_enriched_feed(MemoryStore(seed), ME))
    assert [u.name for u in venues["v3"].interestedFriends] == ["Cara", "Bob"]


@pytest.mark.asyncio
async def test_is_saved_reflects_own_interest(store):
    venues = _by_id(await feed.build_enriched_feed(store, ME))
    assert venues["v2"].isSaved is True
    assert venues["v1"].isSaved is False


@pytest.mark.asyncio
async def test_invite_state_only_pending_and_touching_me(seed):
    seed["invites"] = [
        make_invite("x1", "v1", "bob", ME, status="accepted"),
        make_invite("x2", "v1", "bob", "cara"),
        make_invite("x3", "v3", ME, "bob"),
    ]
    venues = _by_id(await feed.build_enriched_feed(MemoryStore(seed), ME))

    assert venues["v1"].inviteState is None
    assert venues["v3"].inviteState.id == "x3"
    assert venues["v2"].inviteState is None


@pytest.mark.asyncio
async def test_invite_state_picks_most_recent_pending(seed):
    seed["invites"] = [
        make_invite("old", "v1", ME, "bob", created="2026-10-01T10:00:00.000Z"),
        make_invite("new", "v1", "cara", ME, created="2026-10-02T10:00:00.000Z"),
        make_invite("mid", "v1", ME, "cara", created="2026-10-01T12:00:00.000Z"),
    ]
    venue = await feed.get_enriched_venue(MemoryStore(seed), "v1", ME)
    assert venue.inviteState.id == "new"


@pytest.mark.asyncio
async def test_get_enriched_venue_matches_feed_entry(store):
    full = _by_id(await feed.build_enriched_feed(store, ME))
    single = await feed.get_enriched_venue(store, "v1", ME)
    assert single == full["v1"]
    assert await feed.get_enriched_venue(store, "nope", ME) is None


@pytest.mark.asyncio
async def test_unknown_current_user_has_no_friends(store):
    venues = _by_id(await feed.build_enriched_feed(store, "ghost"))
    assert venues["v1"].interestedFriends == []
    assert venues["v1"].mutualCount == 3


@pytest.mark.asyncio
async def test_heart_is_idempotent(store):
    first, created = await feed.heart_venue(store, "v3", ME)
    second, created_again = await feed.heart_venue(store, "v3", ME)

    assert created is True
    assert created_again is False
    assert second.id == first.id
    assert sum(1 for i in store.load_interests() if i.userId == ME and i.venueId == "v3") == 1


@pytest.mark.asyncio
async def test_heart_unknown_venue(store):
    with pytest.raises(NotFound):
        await feed.heart_venue(store, "missing", ME)


@pytest.mark.asyncio
async def test_unheart_removes_interest(store):
    await feed.unheart_venue(store, "v2", ME)
    assert not any(i.userId == ME and i.venueId == "v2" for i in store.load_interests())

    with pytest.raises(NotFound):
        await feed.unheart_venue(store, "v2", ME)


@pytest.mark.asyncio
async def test_social_reads(store):
    me = await feed.get_current_user(store, ME)
    assert me.name == "Alex"

    friends = await feed.list_friends(store, ME)
    assert [f.id for f in friends] == ["bob", "cara"]

    interested = await feed.list_interested_friends(store, "v1", ME)
    assert [f.id for f in interested] == ["bob", "cara"]

    with pytest.raises(NotFound):
        await feed.get_current_user(store, "ghost")
