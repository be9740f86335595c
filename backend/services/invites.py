# services/invites.py
# Invite lifecycle: listing (sent / received / related / pending), bulk creation, accept/decline.

import logging
from typing import Iterable, List, Optional

from errors import Forbidden, InvalidState, NotFound, ValidationError
from models import EnrichedInvite, Invite, InviteGroups, User
from store import EntityStore
from utils import new_id, now_iso

log = logging.getLogger("selene.invites")

RESPONSE_STATUSES = ("accepted", "declined")


def _enrich(invites: Iterable[Invite], users_by_id: dict[str, User]) -> List[EnrichedInvite]:
    out: List[EnrichedInvite] = []
    for inv in invites:
        from_user = users_by_id.get(inv.fromUserId)
        to_user = users_by_id.get(inv.toUserId)
        if not from_user or not to_user:
            log.warning("invite %s references unknown user, omitted", inv.id)
            continue
        out.append(EnrichedInvite(
            id=inv.id,
            venueId=inv.venueId,
            fromUser=from_user,
            toUser=to_user,
            status=inv.status,
            proposedTime=inv.proposedTime,
            createdAt=inv.createdAt,
        ))
    return out


def _resolve_user(identifier: str, users: List[User]) -> Optional[User]:
    """Exact id first, then case-insensitive name."""
    for u in users:
        if u.id == identifier:
            return u
    wanted = identifier.strip().lower()
    for u in users:
        if u.name.lower() == wanted:
            return u
    return None


async def list_invites(store: EntityStore, current_user_id: str) -> InviteGroups:
    invites = store.load_invites()
    users_by_id = {u.id: u for u in store.load_users()}

    def touches_me(inv: Invite) -> bool:
        return inv.fromUserId == current_user_id or inv.toUserId == current_user_id

    mine = [inv for inv in invites if touches_me(inv)]
    sent = [inv for inv in mine if inv.fromUserId == current_user_id]
    received = [inv for inv in mine if inv.toUserId == current_user_id]

    # venue -> hosts of my invites there. sent: me; received: whoever invited me
    hosts: dict[str, set[str]] = {}
    for inv in mine:
        hosts.setdefault(inv.venueId, set()).add(inv.fromUserId)

    related: List[Invite] = []
    seen: set[str] = set()
    for inv in invites:
        if touches_me(inv) or inv.id in seen:
            continue
        if inv.fromUserId in hosts.get(inv.venueId, ()):
            seen.add(inv.id)
            related.append(inv)

    return InviteGroups(
        sent=_enrich(sent, users_by_id),
        received=_enrich(received, users_by_id),
        related=_enrich(related, users_by_id),
        pending=_enrich([inv for inv in received if inv.status == "pending"], users_by_id),
    )


async def create_invite(
    store: EntityStore,
    venue_id: str,
    to_user_ids: List[str],
    proposed_time: str,
    current_user_id: str,
) -> List[Invite]:
    """
    Invite each target (id or display name) to a venue.

    Unknown targets are skipped rather than failing the batch, as is any
    target that already holds a pending invite from the current user for
    this venue. Returns only the invites created by this call.
    """
    if not venue_id or not proposed_time or to_user_ids is None:
        raise ValidationError("Missing required fields: venueId, toUserIds, proposedTime")

    users = store.load_users()
    created: List[Invite] = []

    async with store.lock("invites"):
        invites = store.load_invites()
        for ident in to_user_ids:
            target = _resolve_user(ident, users)
            if not target:
                log.warning("invite target %r not found, skipped", ident)
                continue

            duplicate = any(
                inv.venueId == venue_id
                and inv.fromUserId == current_user_id
                and inv.toUserId == target.id
                and inv.status == "pending"
                for inv in invites
            )
            if duplicate:
                continue

            invite = Invite(
                id=new_id(),
                venueId=venue_id,
                fromUserId=current_user_id,
                toUserId=target.id,
                status="pending",
                proposedTime=proposed_time,
                createdAt=now_iso(),
            )
            invites.append(invite)
            created.append(invite)

        store.save_invites(invites)

    log.info("created %d invite(s) for venue=%s", len(created), venue_id)
    return created


async def update_invite_status(
    store: EntityStore,
    invite_id: str,
    new_status: str,
    current_user_id: str,
) -> Invite:
    if new_status not in RESPONSE_STATUSES:
        raise ValidationError("Invalid status. Must be 'accepted' or 'declined'")

    async with store.lock("invites"):
        invites = store.load_invites()
        invite = next((inv for inv in invites if inv.id == invite_id), None)
        if invite is None:
            raise NotFound("Invite not found")
        if invite.toUserId != current_user_id:
            raise Forbidden("Only the recipient can update this invite")
        if invite.status != "pending":
            raise InvalidState(f"Invite already {invite.status}")

        invite.status = new_status
        store.save_invites(invites)

    log.info("invite %s %s by %s", invite_id, new_status, current_user_id)
    return invite
