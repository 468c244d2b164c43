"""LiveKit service for access token issuance and host election."""

import json
from datetime import timedelta

from livekit.api import AccessToken, VideoGrants

from signaling.core.config import Settings
from signaling.core.logging import get_logger
from signaling.core.naming import generate_name
from signaling.models.rooms import AccessGrant, AccessGrantRequest
from signaling.services.room_directory import RoomDirectory, RoomDirectoryError

logger = get_logger(__name__)


class GrantSigningError(Exception):
    """The access token could not be built or signed."""


def host_metadata(is_host: bool) -> str:
    """Participant metadata carried in the token, e.g. ``{"isHost":true}``."""
    return json.dumps({"isHost": is_host}, separators=(",", ":"))


class GrantIssuer:
    """
    Issues signed LiveKit access tokens for joining a room.

    The first participant to ask for a token for an empty room is elected
    host. A failed participant lookup counts as an empty room, so every
    joiner becomes host while the backend is unreachable.
    """

    def __init__(self, settings: Settings, directory: RoomDirectory):
        self.settings = settings
        self.directory = directory

    def resolve_request(self, request: AccessGrantRequest) -> tuple[str, str]:
        """
        Trim the room and participant names and substitute defaults.

        @returns (room_name, identity), neither of them empty
        """
        room_name = request.room_name.strip() or self.settings.default_room_name
        identity = request.participant_name.strip() or generate_name("user")
        return room_name, identity

    async def elect_host(self, room_name: str, identity: str, requested: bool = False) -> bool:
        """
        Decide whether the participant hosts the room.

        @param requested - Advisory flag from the client, trusted when set
        @returns True when the participant is the host
        """
        if requested:
            return True

        try:
            participants = await self.directory.list_participants(room_name)
        except RoomDirectoryError:
            # Room doesn't exist or backend unreachable: treat as empty
            logger.info(
                f"User '{identity}' is host of room '{room_name}' (lookup failed)",
                extra={"room": room_name, "identity": identity},
            )
            return True

        if not participants:
            logger.info(
                f"User '{identity}' is host of room '{room_name}'",
                extra={"room": room_name, "identity": identity},
            )
            return True

        return False

    def create_token(self, room_name: str, identity: str, is_host: bool) -> str:
        """
        Sign a join token for a room.

        @param room_name - The room the token is scoped to
        @param identity - Participant identity bound to the token
        @param is_host - Host flag embedded as participant metadata
        @returns JWT access token string
        @raises GrantSigningError - When the token cannot be signed
        """
        try:
            token = (
                AccessToken(self.settings.livekit_api_key, self.settings.livekit_api_secret)
                .with_identity(identity)
                .with_metadata(host_metadata(is_host))
                .with_grants(
                    VideoGrants(
                        room_join=True,
                        room=room_name,
                        can_publish=True,
                        can_subscribe=True,
                    )
                )
                .with_ttl(timedelta(hours=self.settings.token_ttl_hours))
            )
            return token.to_jwt()
        except Exception as e:
            logger.exception(
                "Failed to generate token",
                extra={"room": room_name, "identity": identity},
            )
            raise GrantSigningError(str(e)) from e

    async def issue(self, request: AccessGrantRequest) -> AccessGrant:
        """Resolve names, elect the host once, and sign the grant."""
        room_name, identity = self.resolve_request(request)
        is_host = await self.elect_host(room_name, identity, requested=request.is_host)
        token = self.create_token(room_name, identity, is_host)

        logger.info(
            f"Token generated for user '{identity}' in room '{room_name}' (is_host: {is_host})",
            extra={"room": room_name, "identity": identity},
        )

        return AccessGrant(
            token=token,
            url=self.settings.livekit_ws_url,
            room_name=room_name,
            is_host=is_host,
        )
