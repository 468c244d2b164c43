"""API routes for access tokens, room management and health checks."""

from datetime import datetime, timezone

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse

from signaling.api.deps import get_grant_issuer, get_orchestrator
from signaling.models.rooms import (
    AccessGrant,
    AccessGrantRequest,
    CreateRoomRequest,
    EndMeetingResponse,
    ErrorResponse,
    HealthResponse,
    MessageResponse,
    ParticipantList,
    RoomSummary,
)
from signaling.services.livekit import GrantIssuer
from signaling.services.room_directory import RoomDirectoryError
from signaling.services.rooms import RoomOrchestrator

router = APIRouter()

ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
}


# ========== Health ==========

@router.get("/health", response_model=HealthResponse)
async def health_check():
    """Health check endpoint."""
    return HealthResponse(status="ok", time=datetime.now(timezone.utc).isoformat())


@router.get("/health/ready")
async def readiness_check(req: Request):
    """Readiness check for Kubernetes."""
    checks = {
        "grants": getattr(req.app.state, "grant_issuer", None) is not None,
        "rooms": getattr(req.app.state, "orchestrator", None) is not None,
    }

    return {
        "ready": all(checks.values()),
        "checks": checks,
    }


# ========== Tokens ==========

@router.post("/token", response_model=AccessGrant, responses=ERROR_RESPONSES)
async def get_token(
    request: AccessGrantRequest,
    issuer: GrantIssuer = Depends(get_grant_issuer),
):
    """Issue a LiveKit access token, electing the first joiner as host."""
    return await issuer.issue(request)


# ========== Rooms ==========

@router.get("/rooms", response_model=list[RoomSummary], responses=ERROR_RESPONSES)
async def list_rooms(orchestrator: RoomOrchestrator = Depends(get_orchestrator)):
    """List all active rooms."""
    return await orchestrator.list_rooms()


@router.post(
    "/rooms",
    response_model=RoomSummary,
    status_code=status.HTTP_201_CREATED,
    responses=ERROR_RESPONSES,
)
async def create_room(
    request: CreateRoomRequest,
    orchestrator: RoomOrchestrator = Depends(get_orchestrator),
):
    """Create a new room."""
    return await orchestrator.create_room(request.name)


@router.delete("/rooms/{room_name}", response_model=MessageResponse,
               response_model_exclude_none=True, responses=ERROR_RESPONSES)
async def delete_room(room_name: str, orchestrator: RoomOrchestrator = Depends(get_orchestrator)):
    """Delete a room."""
    await orchestrator.delete_room(room_name)
    return MessageResponse(message="Room deleted")


@router.get("/rooms/{room_name}/participants", response_model=ParticipantList,
            responses=ERROR_RESPONSES)
async def list_participants(
    room_name: str,
    orchestrator: RoomOrchestrator = Depends(get_orchestrator),
):
    """List participants in a room."""
    participants = await orchestrator.list_participants(room_name)
    return ParticipantList(participants=participants)


@router.delete("/rooms/{room_name}/participants/{identity}", response_model=MessageResponse,
               responses=ERROR_RESPONSES)
async def kick_participant(
    room_name: str,
    identity: str,
    orchestrator: RoomOrchestrator = Depends(get_orchestrator),
):
    """Kick a participant from a room."""
    try:
        await orchestrator.kick_participant(room_name, identity)
    except RoomDirectoryError as e:
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": str(e)},
        )
    return MessageResponse(message="Participant removed", identity=identity)


@router.post("/rooms/{room_name}/end", response_model=EndMeetingResponse,
             responses=ERROR_RESPONSES)
async def end_meeting(room_name: str, orchestrator: RoomOrchestrator = Depends(get_orchestrator)):
    """End a meeting: kick all participants and delete the room."""
    try:
        result = await orchestrator.end_meeting(room_name)
    except RoomDirectoryError as e:
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": f"Failed to end meeting: {e.detail}"},
        )

    return EndMeetingResponse(
        message="Meeting ended",
        removed=len(result.removed),
        failed=len(result.failures),
        room_deleted=result.room_deleted,
    )
