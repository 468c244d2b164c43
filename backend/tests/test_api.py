def test_health(client):
    response = client.get("/api/health")

    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_readiness(client):
    response = client.get("/api/health/ready")

    assert response.json() == {"ready": True, "checks": {"grants": True, "rooms": True}}


def test_token_uses_camel_case(client, directory):
    directory.add_room("standup", ["bob"])

    response = client.post(
        "/api/token", json={"roomName": "standup", "participantName": "alice", "isHost": False}
    )

    assert response.status_code == 200
    body = response.json()
    assert body["roomName"] == "standup"
    assert body["isHost"] is False
    assert body["url"] == "wss://livekit.test"
    assert body["token"]


def test_token_with_empty_body_uses_defaults(client):
    response = client.post("/api/token", json={})

    assert response.status_code == 200
    assert response.json()["roomName"] == "default-room"
    assert response.json()["isHost"] is True


def test_malformed_body_is_400(client):
    response = client.post(
        "/api/token", content="not json", headers={"content-type": "application/json"}
    )

    assert response.status_code == 400
    assert response.json() == {"error": "Invalid request format"}


def test_signing_failure_is_500(client, monkeypatch):
    def broken_to_jwt(self):
        raise RuntimeError("bad secret")

    monkeypatch.setattr("signaling.services.livekit.AccessToken.to_jwt", broken_to_jwt)

    response = client.post("/api/token", json={"roomName": "r", "participantName": "alice"})

    assert response.status_code == 500
    assert response.json() == {"error": "Failed to generate token"}


def test_room_lifecycle(client, directory):
    created = client.post("/api/rooms", json={"name": "standup"})
    assert created.status_code == 201
    assert created.json()["displayName"] == "standup"
    assert created.json()["participants"] == 0

    listed = client.get("/api/rooms")
    assert [room["name"] for room in listed.json()] == ["standup"]

    deleted = client.delete("/api/rooms/standup")
    assert deleted.status_code == 200
    assert deleted.json() == {"message": "Room deleted"}
    assert client.get("/api/rooms").json() == []


def test_list_rooms_failure_hides_backend_detail(client, directory):
    directory.failing.add("list_rooms")

    response = client.get("/api/rooms")

    assert response.status_code == 500
    assert response.json() == {"error": "Failed to list rooms"}


def test_create_room_failure_hides_backend_detail(client, directory):
    directory.failing.add("create_room")

    response = client.post("/api/rooms", json={"name": "standup"})

    assert response.status_code == 500
    assert response.json() == {"error": "Failed to create room"}


def test_delete_room_failure_hides_backend_detail(client, directory):
    directory.failing.add("delete_room")

    response = client.delete("/api/rooms/standup")

    assert response.status_code == 500
    assert response.json() == {"error": "Failed to delete room"}


def test_list_participants_failure_hides_backend_detail(client, directory):
    directory.add_room("standup", ["alice"])
    directory.failing.add("list_participants")

    response = client.get("/api/rooms/standup/participants")

    assert response.status_code == 500
    assert response.json() == {"error": "Failed to list participants"}


def test_list_participants(client, directory):
    directory.add_room("standup", ["alice", "bob"])

    response = client.get("/api/rooms/standup/participants")

    assert response.status_code == 200
    assert [p["identity"] for p in response.json()["participants"]] == ["alice", "bob"]


def test_kick_participant(client, directory):
    directory.add_room("standup", ["alice"])

    response = client.delete("/api/rooms/standup/participants/alice")

    assert response.status_code == 200
    assert response.json() == {"message": "Participant removed", "identity": "alice"}


def test_kick_failure_includes_backend_detail(client, directory):
    directory.add_room("standup", ["alice"])
    directory.failing_identities.add("alice")

    response = client.delete("/api/rooms/standup/participants/alice")

    assert response.status_code == 500
    assert response.json() == {"error": "Failed to remove participant: participant alice not found"}


def test_end_meeting_reports_partial_failures(client, directory):
    directory.add_room("standup", ["alice", "bob", "carol"])
    directory.failing_identities.add("bob")

    response = client.post("/api/rooms/standup/end")

    assert response.status_code == 200
    assert response.json() == {
        "message": "Meeting ended",
        "removed": 2,
        "failed": 1,
        "roomDeleted": True,
    }


def test_end_meeting_listing_failure(client, directory):
    directory.failing.add("list_participants")

    response = client.post("/api/rooms/standup/end")

    assert response.status_code == 500
    assert response.json()["error"].startswith("Failed to end meeting:")
