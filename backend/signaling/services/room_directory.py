"""Room Directory client over the LiveKit administrative API."""

from abc import ABC, abstractmethod

from livekit import api
from livekit.protocol.models import ParticipantInfo, Room

from signaling.core.config import Settings
from signaling.core.logging import get_logger
from signaling.models.rooms import DirectoryParticipant, DirectoryRoom

logger = get_logger(__name__)


class RoomDirectoryError(Exception):
    """A Room Directory call failed or was rejected by the backend."""

    def __init__(self, operation: str, detail: str):
        self.operation = operation
        self.detail = detail
        super().__init__(f"Failed to {operation}: {detail}")


class RoomDirectory(ABC):
    """Administrative view of the rooms hosted by the conferencing backend."""

    @abstractmethod
    async def list_rooms(self) -> list[DirectoryRoom]:
        """Gets every active room, in backend order."""
        ...

    @abstractmethod
    async def list_participants(self, room_name: str) -> list[DirectoryParticipant]:
        """Gets the participants currently in a room."""
        ...

    @abstractmethod
    async def create_room(
        self, room_name: str, empty_timeout: int, max_participants: int
    ) -> DirectoryRoom:
        """Creates a room and returns the backend's record of it."""
        ...

    @abstractmethod
    async def delete_room(self, room_name: str) -> None:
        """Deletes a room, disconnecting anyone still in it."""
        ...

    @abstractmethod
    async def remove_participant(self, room_name: str, identity: str) -> None:
        """Removes a single participant from a room."""
        ...

    async def aclose(self) -> None:
        """Release any underlying connections."""


def _room_record(room: Room) -> DirectoryRoom:
    return DirectoryRoom(
        name=room.name,
        num_participants=room.num_participants,
        creation_time=room.creation_time,
    )


def _participant_record(participant: ParticipantInfo) -> DirectoryParticipant:
    return DirectoryParticipant(
        identity=participant.identity,
        name=participant.name,
        state=ParticipantInfo.State.Name(participant.state),
        joined_at=participant.joined_at,
        is_publisher=participant.is_publisher,
    )


class LiveKitRoomDirectory(RoomDirectory):
    """
    RoomDirectory backed by the LiveKit server API.

    Every backend failure is re-raised as RoomDirectoryError; cancellation
    is left to propagate so in-flight calls stop with the inbound request.
    """

    def __init__(self, settings: Settings, client: api.LiveKitAPI | None = None):
        """
        @param settings - Application settings carrying URL and credentials
        @param client - Pre-built LiveKitAPI, mainly for tests
        """
        self._client = client or api.LiveKitAPI(
            settings.livekit_url,
            settings.livekit_api_key,
            settings.livekit_api_secret,
        )

    async def list_rooms(self) -> list[DirectoryRoom]:
        try:
            response = await self._client.room.list_rooms(api.ListRoomsRequest())
        except Exception as e:
            logger.error(f"Failed to list rooms: {e}")
            raise RoomDirectoryError("list rooms", str(e)) from e
        return [_room_record(room) for room in response.rooms]

    async def list_participants(self, room_name: str) -> list[DirectoryParticipant]:
        try:
            response = await self._client.room.list_participants(
                api.ListParticipantsRequest(room=room_name)
            )
        except Exception as e:
            # Expected when the room does not exist yet
            logger.warning(
                f"List participants failed (room may not exist): {e}",
                extra={"room": room_name},
            )
            raise RoomDirectoryError("list participants", str(e)) from e
        return [_participant_record(p) for p in response.participants]

    async def create_room(
        self, room_name: str, empty_timeout: int, max_participants: int
    ) -> DirectoryRoom:
        try:
            room = await self._client.room.create_room(
                api.CreateRoomRequest(
                    name=room_name,
                    empty_timeout=empty_timeout,
                    max_participants=max_participants,
                )
            )
        except Exception as e:
            logger.error(f"Failed to create room: {e}", extra={"room": room_name})
            raise RoomDirectoryError("create room", str(e)) from e
        logger.info("Room created", extra={"room": room.name})
        return _room_record(room)

    async def delete_room(self, room_name: str) -> None:
        try:
            await self._client.room.delete_room(api.DeleteRoomRequest(room=room_name))
        except Exception as e:
            logger.error(f"Failed to delete room: {e}", extra={"room": room_name})
            raise RoomDirectoryError("delete room", str(e)) from e
        logger.info("Room deleted", extra={"room": room_name})

    async def remove_participant(self, room_name: str, identity: str) -> None:
        try:
            await self._client.room.remove_participant(
                api.RoomParticipantIdentity(room=room_name, identity=identity)
            )
        except Exception as e:
            logger.error(
                f"Failed to remove participant: {e}",
                extra={"room": room_name, "identity": identity},
            )
            raise RoomDirectoryError("remove participant", str(e)) from e
        logger.info("Participant removed", extra={"room": room_name, "identity": identity})

    async def aclose(self) -> None:
        await self._client.aclose()
