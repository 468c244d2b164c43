from fastapi import Request

from signaling.services.livekit import GrantIssuer
from signaling.services.rooms import RoomOrchestrator


def get_grant_issuer(req: Request) -> GrantIssuer:
    return req.app.state.grant_issuer


def get_orchestrator(req: Request) -> RoomOrchestrator:
    return req.app.state.orchestrator
