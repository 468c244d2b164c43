"""Shared fixtures: settings and an in-memory Room Directory."""

from collections.abc import Sequence

import pytest
from fastapi.testclient import TestClient

from signaling.core.config import Settings
from signaling.main import create_app
from signaling.models.rooms import DirectoryParticipant, DirectoryRoom
from signaling.services.room_directory import RoomDirectory, RoomDirectoryError

API_KEY = "test-key"
API_SECRET = "test-secret-that-is-long-enough-for-hs256"


class FakeRoomDirectory(RoomDirectory):
    """In-memory RoomDirectory that records calls and fails on request."""

    def __init__(self):
        self.rooms: dict[str, DirectoryRoom] = {}
        self.participants: dict[str, list[DirectoryParticipant]] = {}
        self.calls: list[tuple] = []
        self.failing: set[str] = set()  # operation names that raise
        self.failing_identities: set[str] = set()

    def add_room(self, name: str, identities: Sequence[str] = (), creation_time: int = 1_700_000_000):
        self.rooms[name] = DirectoryRoom(
            name=name, num_participants=len(identities), creation_time=creation_time
        )
        self.participants[name] = [DirectoryParticipant(identity=i, name=i) for i in identities]

    def _check(self, operation: str):
        if operation in self.failing:
            raise RoomDirectoryError(operation.replace("_", " "), "backend unavailable")

    async def list_rooms(self):
        self.calls.append(("list_rooms",))
        self._check("list_rooms")
        return list(self.rooms.values())

    async def list_participants(self, room_name):
        self.calls.append(("list_participants", room_name))
        self._check("list_participants")
        if room_name not in self.rooms:
            raise RoomDirectoryError("list participants", "requested room does not exist")
        return list(self.participants[room_name])

    async def create_room(self, room_name, empty_timeout, max_participants):
        self.calls.append(("create_room", room_name, empty_timeout, max_participants))
        self._check("create_room")
        if room_name in self.rooms:
            raise RoomDirectoryError("create room", "room already exists")
        self.add_room(room_name)
        return self.rooms[room_name]

    async def delete_room(self, room_name):
        self.calls.append(("delete_room", room_name))
        self._check("delete_room")
        self.rooms.pop(room_name, None)
        self.participants.pop(room_name, None)

    async def remove_participant(self, room_name, identity):
        self.calls.append(("remove_participant", room_name, identity))
        self._check("remove_participant")
        if identity in self.failing_identities:
            raise RoomDirectoryError("remove participant", f"participant {identity} not found")
        self.participants[room_name] = [
            p for p in self.participants.get(room_name, []) if p.identity != identity
        ]

    def called(self, operation: str) -> list[tuple]:
        return [call for call in self.calls if call[0] == operation]


@pytest.fixture
def settings() -> Settings:
    return Settings(
        _env_file=None,
        livekit_url="http://livekit.test:7880",
        livekit_ws_url="wss://livekit.test",
        livekit_api_key=API_KEY,
        livekit_api_secret=API_SECRET,
    )


@pytest.fixture
def directory() -> FakeRoomDirectory:
    return FakeRoomDirectory()


@pytest.fixture
def client(settings, directory):
    app = create_app(settings, directory=directory)
    with TestClient(app) as test_client:
        yield test_client
