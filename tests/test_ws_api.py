"""
tests.test_ws_api
~~~~~~~~~~~~~~~~~

Uçtan uca: ``/wss/room`` protokolü ve ``/api/v1`` REST uçları (TestClient).
"""
from __future__ import annotations

from collections.abc import Iterator

import pytest
from fastapi.testclient import TestClient

from Core import sync_FastAPI

WS_PATH = "/wss/room"


@pytest.fixture()
def client() -> Iterator[TestClient]:
    # Bağlam yöneticisi lifespan'i çalıştırır (kapanışta zamanlayıcılar iptal edilir)
    with TestClient(sync_FastAPI) as test_client:
        yield test_client


def create(ws, name: str = "Ali") -> str:
    ws.send_json({"type": "create-room", "displayName": name, "_ack_id": 1})
    ack = ws.receive_json()
    assert ack["type"] == "ack"
    assert ack["intent"] == "create-room"
    assert ack["success"] is True
    assert ack["_ack_id"] == 1
    return ack["code"]


def join(ws, code: str, name: str) -> dict:
    ws.send_json({"type": "join-room", "code": code, "displayName": name, "_ack_id": 2})
    ack = ws.receive_json()
    assert ack["intent"] == "join-room"
    return ack


def ping(ws) -> dict:
    ws.send_json({"type": "ping", "_ping_id": 7})
    return ws.receive_json()


class TestRoomProtocol:
    """Oda oluşturma, katılma ve yayın hedefleri."""

    def test_create_then_join(self, client: TestClient) -> None:
        with client.websocket_connect(WS_PATH) as a, client.websocket_connect(WS_PATH) as b:
            code = create(a)

            ack = join(b, code.lower(), "Veli")
            assert ack["success"] is True
            assert ack["state"]["code"] == code
            assert ack["state"]["members"] == ["Ali", "Veli"]
            assert ack["state"]["currentIndex"] == -1
            assert ack["state"]["queue"] == []

            joined = a.receive_json()
            assert joined == {"type": "user-joined", "displayName": "Veli", "members": ["Ali", "Veli"]}

    def test_join_unknown_room(self, client: TestClient) -> None:
        with client.websocket_connect(WS_PATH) as ws:
            ack = join(ws, "ZZZZZ0", "Veli")

            assert ack["success"] is False
            assert ack["error"]

    def test_failed_join_keeps_current_room(self, client: TestClient) -> None:
        with client.websocket_connect(WS_PATH) as a, client.websocket_connect(WS_PATH) as b:
            code = create(a)
            join(b, code, "Veli")
            a.receive_json()  # user-joined

            ack = join(b, "ZZZZZ0", "Veli")
            assert ack["success"] is False

            b.send_json({"type": "get-state"})
            state = b.receive_json()
            assert state["type"] == "room-state"
            assert state["code"] == code
            assert state["members"] == ["Ali", "Veli"]

            # a'ya user-left gitmedi
            assert ping(b)["type"] == "pong"
            assert ping(a)["type"] == "pong"

    def test_transport_not_echoed_to_sender(self, client: TestClient) -> None:
        with client.websocket_connect(WS_PATH) as a, client.websocket_connect(WS_PATH) as b:
            code = create(a)
            join(b, code, "Veli")
            a.receive_json()  # user-joined

            b.send_json({"type": "sync-play", "time": 12.5})

            assert a.receive_json() == {"type": "sync-play", "time": 12.5, "by": "Veli"}
            # Yankı olsaydı pong'dan önce gelirdi
            assert ping(b) == {"type": "pong", "_ping_id": 7}

    def test_legacy_time_field(self, client: TestClient) -> None:
        with client.websocket_connect(WS_PATH) as a, client.websocket_connect(WS_PATH) as b:
            code = create(a)
            join(b, code, "Veli")
            a.receive_json()

            b.send_json({"type": "sync-seek", "currentTime": 90})

            assert a.receive_json()["time"] == 90

    def test_queue_and_selection_reach_everyone(self, client: TestClient) -> None:
        with client.websocket_connect(WS_PATH) as a, client.websocket_connect(WS_PATH) as b:
            code = create(a)
            join(b, code, "Veli")
            a.receive_json()

            a.send_json({"type": "add-to-queue", "videoId": "v1", "title": "Bir"})
            for ws in (a, b):
                update = ws.receive_json()
                assert update["type"] == "queue-updated"
                assert update["autoPlay"] is True
                assert update["currentIndex"] == 0
                assert update["queue"] == [{"externalId": "v1", "title": "Bir", "addedBy": "Ali"}]

            b.send_json({"type": "add-to-queue", "externalId": "v2", "title": "İki"})
            for ws in (a, b):
                assert ws.receive_json()["autoPlay"] is False

            b.send_json({"type": "play-song", "index": 1})
            for ws in (a, b):
                assert ws.receive_json() == {"type": "play-song", "index": 1, "by": "Veli"}

    def test_invalid_payload_is_dropped(self, client: TestClient) -> None:
        with client.websocket_connect(WS_PATH) as a, client.websocket_connect(WS_PATH) as b:
            code = create(a)
            join(b, code, "Veli")
            a.receive_json()

            b.send_json({"type": "sync-seek", "time": -5})
            b.send_json({"type": "play-song", "index": 3})

            # b'nin mesajları sırayla işlenir: pong döndüyse olası yayınlar a'ya ulaşmıştır
            assert ping(b)["type"] == "pong"
            assert ping(a)["type"] == "pong"

    def test_intents_outside_room_are_ignored(self, client: TestClient) -> None:
        with client.websocket_connect(WS_PATH) as ws:
            ws.send_json({"type": "sync-play", "time": 1})
            ws.send_json({"type": "get-state"})

            assert ping(ws)["type"] == "pong"

    def test_get_state(self, client: TestClient) -> None:
        with client.websocket_connect(WS_PATH) as ws:
            code = create(ws)

            ws.send_json({"type": "get-state"})
            state = ws.receive_json()

            assert state["type"] == "room-state"
            assert state["code"] == code
            assert state["isPlaying"] is False

    def test_disconnect_notifies_remaining(self, client: TestClient) -> None:
        with client.websocket_connect(WS_PATH) as a:
            code = create(a)
            with client.websocket_connect(WS_PATH) as b:
                join(b, code, "Veli")
                a.receive_json()

            assert a.receive_json() == {"type": "user-left", "displayName": "Veli", "members": ["Ali"]}

    def test_malformed_json(self, client: TestClient) -> None:
        with client.websocket_connect(WS_PATH) as ws:
            ws.send_text("{bozuk")

            assert ws.receive_json() == {"type": "error", "message": "Geçersiz JSON formatı"}


class TestRestApi:
    """``/api/v1`` uçları."""

    def test_health(self, client: TestClient) -> None:
        response = client.get("/api/v1/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_room_lookup(self, client: TestClient) -> None:
        with client.websocket_connect(WS_PATH) as ws:
            code = create(ws)

            response = client.get(f"/api/v1/rooms/{code.lower()}")

        assert response.status_code == 200
        body = response.json()
        assert body["code"] == code
        assert body["members"] == ["Ali"]
        assert body["queue_length"] == 0

    def test_unknown_room_is_404(self, client: TestClient) -> None:
        response = client.get("/api/v1/rooms/nope22")

        assert response.status_code == 404
        assert response.json()["success"] is False
        assert response.json()["code"] == "NOPE22"
