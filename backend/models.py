# models.py
# typed entity, request and response models. field names match the mobile client (camelCase)

from pydantic import BaseModel, Field
from typing import List, Literal, Optional

VibeStatus = Literal["ready_to_mingle", "chilling", "exploring"]
InviteStatus = Literal["pending", "accepted", "declined"]
BookingStatus = Literal["confirmed", "pending", "cancelled"]


class User(BaseModel):
    id: str
    name: str
    avatarUrl: str = ""
    vibeStatus: VibeStatus = "exploring"
    friends: List[str] = Field(default_factory=list)


class VenueLocation(BaseModel):
    address: str
    distance: str
    lat: float
    lng: float


class Venue(BaseModel):
    id: str
    name: str
    type: str
    vibe: str
    description: str
    location: VenueLocation
    mediaUrl: str = ""
    thumbnailUrl: str = ""


class Interest(BaseModel):
    id: str
    userId: str
    venueId: str
    createdAt: str


class Invite(BaseModel):
    id: str
    venueId: str
    fromUserId: str
    toUserId: str
    status: InviteStatus
    proposedTime: str
    createdAt: str


class Booking(BaseModel):
    id: str
    venueId: str
    userId: str
    guests: List[str] = Field(default_factory=list)
    partySize: int
    dateTime: str
    status: BookingStatus = "confirmed"
    confirmationCode: str
    createdAt: str


# ---- derived views (never persisted) ----

class EnrichedVenue(Venue):
    interestedFriends: List[User]
    mutualCount: int
    inviteState: Optional[Invite] = None
    isSaved: bool = False


class EnrichedInvite(BaseModel):
    id: str
    venueId: str
    fromUser: User
    toUser: User
    status: InviteStatus
    proposedTime: str
    createdAt: str


class InviteGroups(BaseModel):
    sent: List[EnrichedInvite]
    received: List[EnrichedInvite]
    related: List[EnrichedInvite]
    pending: List[EnrichedInvite]


class Suggestion(BaseModel):
    venueId: str
    venueName: str
    friendNames: List[str]
    friendIds: List[str]
    partySize: int
    suggestedTime: str
    reasoning: str
    sharedInterests: List[str]


# ---- request bodies ----

class CreateInviteRequest(BaseModel):
    venueId: str = Field(..., min_length=1)
    # ids or display names
    toUserIds: List[str]
    proposedTime: str = Field(..., min_length=1)


class UpdateInviteRequest(BaseModel):
    status: Literal["accepted", "declined"]


class CreateBookingRequest(BaseModel):
    venueId: str = Field(..., min_length=1)
    partySize: int = Field(..., gt=0)
    dateTime: str = Field(..., min_length=1)
    guestIds: Optional[List[str]] = None


# ---- response wrappers ----

class HeartResponse(BaseModel):
    message: str
    interest: Interest
    venue: Optional[EnrichedVenue] = None


class UnheartResponse(BaseModel):
    message: str
    venue: Optional[EnrichedVenue] = None


class FriendsResponse(BaseModel):
    friends: List[User]
    count: int


class InterestedFriendsResponse(BaseModel):
    venueId: str
    interestedFriends: List[User]
    count: int


class CreateInviteResponse(BaseModel):
    message: str
    invites: List[Invite]


class UpdateInviteResponse(BaseModel):
    message: str
    invite: Invite


class BookingsResponse(BaseModel):
    bookings: List[Booking]
    count: int


class CreateBookingResponse(BaseModel):
    message: str
    booking: Booking


class HealthResponse(BaseModel):
    status: str
    timestamp: str
