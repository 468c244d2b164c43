"""Room lifecycle orchestration against the Room Directory."""

from signaling.core.config import Settings
from signaling.core.logging import get_logger
from signaling.core.naming import generate_name
from signaling.models.rooms import (
    EndMeetingResult,
    ParticipantSummary,
    RemovalFailure,
    RoomSummary,
)
from signaling.services.room_directory import RoomDirectory, RoomDirectoryError

logger = get_logger(__name__)


class RoomOrchestrator:
    """
    Creates, lists and tears down rooms.

    Directory failures propagate as RoomDirectoryError, except inside
    end_meeting where only the initial participant listing is fatal.
    """

    def __init__(self, settings: Settings, directory: RoomDirectory):
        self.settings = settings
        self.directory = directory

    async def list_rooms(self) -> list[RoomSummary]:
        """List active rooms in backend order."""
        rooms = await self.directory.list_rooms()
        return [RoomSummary.from_directory(room) for room in rooms]

    async def create_room(self, name: str = "") -> RoomSummary:
        """
        Create a room with the fixed auto-close and capacity policy.

        @param name - Room name; a unique placeholder is used when empty
        """
        room_name = name.strip() or generate_name("room")
        room = await self.directory.create_room(
            room_name,
            empty_timeout=self.settings.room_empty_timeout,
            max_participants=self.settings.room_max_participants,
        )
        return RoomSummary.from_directory(room)

    async def delete_room(self, room_name: str) -> None:
        await self.directory.delete_room(room_name)

    async def list_participants(self, room_name: str) -> list[ParticipantSummary]:
        participants = await self.directory.list_participants(room_name)
        return [ParticipantSummary.from_directory(p) for p in participants]

    async def kick_participant(self, room_name: str, identity: str) -> None:
        await self.directory.remove_participant(room_name, identity)

    async def end_meeting(self, room_name: str) -> EndMeetingResult:
        """
        Remove every participant, then delete the room.

        Only the participant listing can fail the operation. Removal and
        deletion failures are collected on the result and logged, and the
        remaining steps still run.

        @raises RoomDirectoryError - When the participants cannot be listed
        """
        participants = await self.directory.list_participants(room_name)

        result = EndMeetingResult(room=room_name)

        for participant in participants:
            try:
                await self.directory.remove_participant(room_name, participant.identity)
            except RoomDirectoryError as e:
                logger.error(
                    f"Failed to remove participant '{participant.identity}': {e}",
                    extra={"room": room_name, "identity": participant.identity},
                )
                result.failures.append(
                    RemovalFailure(identity=participant.identity, error=str(e))
                )
            else:
                result.removed.append(participant.identity)

        try:
            await self.directory.delete_room(room_name)
        except RoomDirectoryError as e:
            logger.error(f"Failed to delete room: {e}", extra={"room": room_name})
            result.delete_error = str(e)
        else:
            result.room_deleted = True

        logger.info(
            f"Meeting '{room_name}' ended: {len(result.removed)} removed, "
            f"{len(result.failures)} failed",
            extra={"room": room_name},
        )
        return result
