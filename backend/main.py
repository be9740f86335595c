# main.py
# FastAPI app for the Selene venue feed: enriched venues, hearts, invites, bookings, agent suggestions

import os
import logging
from typing import List, Optional
from pathlib import Path
from dotenv import load_dotenv
from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from errors import SeleneError, NotFound, ValidationError
from models import (
    BookingsResponse,
    CreateBookingRequest,
    CreateBookingResponse,
    CreateInviteRequest,
    CreateInviteResponse,
    EnrichedVenue,
    FriendsResponse,
    HealthResponse,
    HeartResponse,
    InterestedFriendsResponse,
    InviteGroups,
    Suggestion,
    UnheartResponse,
    UpdateInviteRequest,
    UpdateInviteResponse,
    User,
)
from store import EntityStore, JsonFileStore
from utils import now_iso
from services import bookings, feed, invites, suggestions

load_dotenv()

app = FastAPI(title="Selene API", version="0.1.0")

# the iOS client and local tools call from anywhere
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
    max_age=86400,
)

# logging
logging.basicConfig(level=logging.INFO)
log = logging.getLogger("selene")

# config / env
DEFAULT_USER_ID = "550e8400-e29b-41d4-a716-446655440000"
CURRENT_USER_ID = os.getenv("CURRENT_USER_ID", DEFAULT_USER_ID)
DATA_DIR = os.getenv("DATA_DIR", str(Path(__file__).resolve().parent / "data"))
CACHE_TTL_S = float(os.getenv("CACHE_TTL_S", "5"))
PORT = int(os.getenv("PORT", "3000"))



def check_data_dir(data_dir: str) -> bool:
    # a missing directory reads as empty collections, so say so once at startup
    if Path(data_dir).is_dir():
        return True
    log.warning("DATA_DIR %s does not exist; all collections will read as empty", data_dir)
    return False


check_data_dir(DATA_DIR)
_store = JsonFileStore(DATA_DIR, ttl_seconds=CACHE_TTL_S)


def get_store() -> EntityStore:
    return _store


def get_current_user_id() -> str:
    # simulated auth: one fixed user per process
    return CURRENT_USER_ID


# global JSON error handling
# - service errors -> their status, { "error": <message> }
# - HTTPException (unknown route, bad method) -> { "error": <detail> }
# - bad body/query -> 400
# - any other exception -> { "error": "Server error" }
@app.exception_handler(SeleneError)
async def service_error_handler(request: Request, exc: SeleneError):
    if exc.status_code >= 500:
        log.error("%s %s -> %s: %s", request.method, request.url.path, exc.status_code, exc.message)
    else:
        log.warning("%s %s -> %s: %s", request.method, request.url.path, exc.status_code, exc.message)
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    log.warning("HTTP %s: %s", exc.status_code, exc.detail)
    return JSONResponse(status_code=exc.status_code, content={"error": str(exc.detail)})


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    if request.method == "PATCH" and any(e.get("loc", ())[-1:] == ("status",) for e in errors):
        msg = "Invalid status. Must be 'accepted' or 'declined'"
    else:
        parts = []
        for e in errors:
            field = ".".join(str(p) for p in e.get("loc", ()) if p not in ("body", "query", "path"))
            parts.append(f"{field}: {e.get('msg')}" if field else str(e.get("msg")))
        msg = "Invalid request: " + "; ".join(parts)
    log.warning("HTTP 400: %s", msg)
    return JSONResponse(status_code=400, content={"error": msg})


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    # log stack once. do not leak details to client
    log.exception("Unhandled exception")
    # runs outside CORSMiddleware, so the header is set here
    return JSONResponse(status_code=500, content={"error": "Server error"}, headers={"Access-Control-Allow-Origin": "*"})


# ---- venues ----

@app.get("/venues", response_model=List[EnrichedVenue])
async def list_venues(store: EntityStore = Depends(get_store), user_id: str = Depends(get_current_user_id)):
    return await feed.build_enriched_feed(store, user_id)


@app.get("/venues/{venue_id}", response_model=EnrichedVenue)
async def get_venue(venue_id: str, store: EntityStore = Depends(get_store), user_id: str = Depends(get_current_user_id)):
    venue = await feed.get_enriched_venue(store, venue_id, user_id)
    if not venue:
        raise NotFound("Venue not found")
    return venue


@app.post("/venues/{venue_id}/heart", response_model=HeartResponse, status_code=201)
async def heart_venue(venue_id: str, store: EntityStore = Depends(get_store), user_id: str = Depends(get_current_user_id)):
    interest, created = await feed.heart_venue(store, venue_id, user_id)
    if not created:
        return JSONResponse(status_code=200, content={"message": "Already interested", "interest": interest.model_dump()})
    venue = await feed.get_enriched_venue(store, venue_id, user_id)
    return HeartResponse(message="Interest added", interest=interest, venue=venue)


@app.delete("/venues/{venue_id}/heart", response_model=UnheartResponse)
async def unheart_venue(venue_id: str, store: EntityStore = Depends(get_store), user_id: str = Depends(get_current_user_id)):
    await feed.unheart_venue(store, venue_id, user_id)
    venue = await feed.get_enriched_venue(store, venue_id, user_id)
    return UnheartResponse(message="Interest removed", venue=venue)


# ---- social ----

@app.get("/social/friends", response_model=FriendsResponse)
async def get_friends(store: EntityStore = Depends(get_store), user_id: str = Depends(get_current_user_id)):
    friends = await feed.list_friends(store, user_id)
    return FriendsResponse(friends=friends, count=len(friends))


@app.get("/social/interested/{venue_id}", response_model=InterestedFriendsResponse)
async def get_interested_friends(venue_id: str, store: EntityStore = Depends(get_store), user_id: str = Depends(get_current_user_id)):
    friends = await feed.list_interested_friends(store, venue_id, user_id)
    return InterestedFriendsResponse(venueId=venue_id, interestedFriends=friends, count=len(friends))


@app.get("/users/me", response_model=User)
async def get_me(store: EntityStore = Depends(get_store), user_id: str = Depends(get_current_user_id)):
    return await feed.get_current_user(store, user_id)


# ---- invites ----

@app.get("/invites", response_model=InviteGroups)
async def list_invites(store: EntityStore = Depends(get_store), user_id: str = Depends(get_current_user_id)):
    return await invites.list_invites(store, user_id)


@app.post("/invites", response_model=CreateInviteResponse, status_code=201)
async def create_invite(req: CreateInviteRequest, store: EntityStore = Depends(get_store), user_id: str = Depends(get_current_user_id)):
    created = await invites.create_invite(store, req.venueId, req.toUserIds, req.proposedTime, user_id)
    return CreateInviteResponse(message=f"Created {len(created)} invite(s)", invites=created)


@app.patch("/invites/{invite_id}", response_model=UpdateInviteResponse)
async def update_invite(
    invite_id: str,
    req: UpdateInviteRequest,
    store: EntityStore = Depends(get_store),
    user_id: str = Depends(get_current_user_id),
):
    invite = await invites.update_invite_status(store, invite_id, req.status, user_id)
    return UpdateInviteResponse(message=f"Invite {invite.status}", invite=invite)


# ---- bookings ----

@app.get("/bookings", response_model=BookingsResponse)
async def list_bookings(store: EntityStore = Depends(get_store), user_id: str = Depends(get_current_user_id)):
    items = await bookings.list_bookings(store, user_id)
    return BookingsResponse(bookings=items, count=len(items))


@app.post("/bookings", response_model=CreateBookingResponse, status_code=201)
async def create_booking(req: CreateBookingRequest, store: EntityStore = Depends(get_store), user_id: str = Depends(get_current_user_id)):
    """
    Book a table. Takes 1-2s on purpose: the mock provider mimics a real
    reservation round trip.
    """
    booking = await bookings.create_booking(store, req.venueId, req.partySize, req.dateTime, req.guestIds, user_id)
    return CreateBookingResponse(message="Booking confirmed!", booking=booking)


# ---- agent ----

@app.get("/agent/suggestion", response_model=Optional[Suggestion])
async def get_agent_suggestion(
    venueId: Optional[str] = None,
    store: EntityStore = Depends(get_store),
    user_id: str = Depends(get_current_user_id),
):
    if not venueId:
        raise ValidationError("Missing required query parameter: venueId")
    return await suggestions.get_suggestion(store, venueId, user_id)


@app.get("/health", response_model=HealthResponse)
def health():
    return HealthResponse(status="ok", timestamp=now_iso())


if __name__ == "__main__":
    import uvicorn

    log.info("Selene API on port %s, current user %s", PORT, CURRENT_USER_ID)
    uvicorn.run(app, host="0.0.0.0", port=PORT)
