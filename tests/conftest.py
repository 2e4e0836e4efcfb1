"""
tests.conftest
~~~~~~~~~~~~~~

Ortak fixture'lar: sahte saat, soket yerine mesaj kaydeden sahte bağlantı ve
kısa bekleme süreli izole RoomManager.
"""
from __future__ import annotations

import json

import pytest

from Public.WebSocket.Libs import ConnectionHub, RoomManager

# Testlerde boş oda ~50 ms sonra silinir
TEST_GRACE_PERIOD: float = 0.05


class FakeClock:
    """Elle ilerletilen saat (saniye)."""

    def __init__(self, now: float = 1000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeSocket:
    """``send_text`` çağrılarını çözümlenmiş JSON olarak saklar."""

    def __init__(self) -> None:
        self.sent: list[dict] = []

    async def send_text(self, text: str) -> None:
        self.sent.append(json.loads(text))

    def of_type(self, kind: str) -> list[dict]:
        return [msg for msg in self.sent if msg.get("type") == kind]


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def hub() -> ConnectionHub:
    return ConnectionHub(send_timeout=0.5)


@pytest.fixture()
def manager(hub: ConnectionHub, clock: FakeClock) -> RoomManager:
    return RoomManager(hub=hub, grace_period=TEST_GRACE_PERIOD, clock=clock)


@pytest.fixture()
def connect(hub: ConnectionHub):
    """Bağlantı kimliği için sahte soket kaydeder."""

    def _connect(connection_id: str) -> FakeSocket:
        socket = FakeSocket()
        hub.register(connection_id, socket)
        return socket

    return _connect
