"""Room, participant and access grant data models."""

from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model serialized with camelCase keys, as browser clients expect."""

    model_config = ConfigDict(populate_by_name=True, alias_generator=to_camel)


# ========== Room Directory records ==========

class DirectoryRoom(BaseModel):
    """Room record as reported by the conferencing backend."""

    name: str
    num_participants: int = 0
    creation_time: int = 0  # Epoch seconds, 0 when unknown


class DirectoryParticipant(BaseModel):
    """Participant record as reported by the conferencing backend."""

    identity: str
    name: str = ""
    state: str = ""
    joined_at: int = 0  # Epoch seconds
    is_publisher: bool = False


# ========== Access grants ==========

class AccessGrantRequest(CamelModel):
    """Request body for issuing an access token."""

    room_name: str = ""
    participant_name: str = ""
    is_host: bool = False  # Advisory only


class AccessGrant(CamelModel):
    """Signed token plus the values the issuer resolved."""

    token: str
    url: str
    room_name: str
    is_host: bool


# ========== Rooms ==========

class RoomSummary(CamelModel):
    """Room information returned to clients."""

    name: str
    display_name: str
    participants: int
    created_at: datetime

    @classmethod
    def from_directory(cls, room: DirectoryRoom) -> "RoomSummary":
        if room.creation_time:
            created_at = datetime.fromtimestamp(room.creation_time, tz=timezone.utc)
        else:
            created_at = datetime.now(timezone.utc)
        return cls(
            name=room.name,
            display_name=room.name,
            participants=room.num_participants,
            created_at=created_at,
        )


class CreateRoomRequest(CamelModel):
    """Request body for creating a room."""

    name: str = ""


class ParticipantSummary(CamelModel):
    """Participant information returned to clients."""

    identity: str
    name: str
    state: str
    joined_at: datetime | None = None
    is_publisher: bool = False

    @classmethod
    def from_directory(cls, participant: DirectoryParticipant) -> "ParticipantSummary":
        joined_at = None
        if participant.joined_at:
            joined_at = datetime.fromtimestamp(participant.joined_at, tz=timezone.utc)
        return cls(
            identity=participant.identity,
            name=participant.name,
            state=participant.state,
            joined_at=joined_at,
            is_publisher=participant.is_publisher,
        )


class ParticipantList(CamelModel):
    """Participants currently in a room."""

    participants: list[ParticipantSummary] = Field(default_factory=list)


# ========== Teardown ==========

class RemovalFailure(CamelModel):
    """A participant that could not be removed while ending a meeting."""

    identity: str
    error: str


class EndMeetingResult(CamelModel):
    """Outcome of ending a meeting, including partial failures."""

    room: str
    ended: bool = True
    removed: list[str] = Field(default_factory=list)
    failures: list[RemovalFailure] = Field(default_factory=list)
    room_deleted: bool = False
    delete_error: str | None = None


# ========== Responses ==========

class MessageResponse(CamelModel):
    """Generic message response."""

    message: str
    identity: str | None = None


class EndMeetingResponse(CamelModel):
    """Response for the end meeting endpoint."""

    message: str
    removed: int
    failed: int
    room_deleted: bool


class ErrorResponse(BaseModel):
    """Single-field error payload."""

    error: str


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    time: str
