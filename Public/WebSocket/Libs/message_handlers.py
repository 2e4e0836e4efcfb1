# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from CLI          import konsol
from fastapi      import WebSocket
from ..Models     import (
    CreateRoomIntent, JoinRoomIntent, AddToQueueIntent, LoadPlaylistIntent,
    TransportIntent, PlaySongIntent, ReorderQueueIntent, ChatMessageIntent
)
from .RoomManager import RoomManager, room_manager
from .exceptions  import RoomNotFound
import json, uuid


class MessageHandler:
    """WebSocket mesaj işleyici sınıfı - bir bağlantı, en fazla bir oda"""

    def __init__(self, websocket: WebSocket, manager: RoomManager | None = None):
        self.websocket     = websocket
        self.manager       = manager or room_manager
        self.connection_id = uuid.uuid4().hex[:12]
        self.room_code     = None

        self.manager.hub.register(self.connection_id, websocket)

    @property
    def in_room(self) -> bool:
        return self.room_code is not None

    async def send_error(self, message: str):
        """Hata mesajı gönder"""
        await self.send_json({"type": "error", "message": message})

    async def send_json(self, data: dict):
        """JSON mesajı gönder"""
        await self.websocket.send_text(json.dumps(data, ensure_ascii=False))

    async def send_ack(self, intent: str, message: dict, **data):
        ack = {"type": "ack", "intent": intent, **data}
        if message.get("_ack_id") is not None:
            ack["_ack_id"] = message["_ack_id"]

        await self.send_json(ack)

    # ============== Membership ==============

    async def handle_create_room(self, message: dict):
        """CREATE-ROOM mesajını işle"""
        intent = CreateRoomIntent.model_validate(message)

        # Aynı bağlantı başka odadaysa önce oradan çık
        await self._leave_current()

        self.room_code = await self.manager.create_room(self.connection_id, intent.display_name)
        await self.send_ack("create-room", message, success=True, code=self.room_code)

    async def handle_join_room(self, message: dict):
        """JOIN-ROOM mesajını işle"""
        intent = JoinRoomIntent.model_validate(message)

        # Hedef yoksa mevcut odaya dokunma
        if not await self.manager.get_room_state(intent.code):
            await self._join_failed(message)
            return

        await self._leave_current()

        try:
            snapshot = await self.manager.join_room(intent.code, self.connection_id, intent.display_name)
        except RoomNotFound:
            # Kontrol ile katılım arasında süresi doldu
            await self._join_failed(message)
            return

        self.room_code = snapshot.code
        await self.send_ack("join-room", message, success=True, state=snapshot.to_dict())

    async def _join_failed(self, message: dict):
        await self.send_ack("join-room", message, success=False, error="Oda bulunamadı. Kodu kontrol edip tekrar deneyin.")

    async def handle_get_state(self):
        """GET-STATE mesajını işle"""
        snapshot = await self.manager.get_room_state(self.room_code)
        if snapshot:
            await self.send_json({"type": "room-state", **snapshot.to_dict()})

    async def _leave_current(self):
        if self.room_code is None:
            return

        await self.manager.leave_room(self.connection_id)
        self.room_code = None

    # ============== Playback ==============

    async def handle_sync_play(self, message: dict):
        intent = TransportIntent.model_validate(message)
        await self.manager.sync_play(self.connection_id, intent.time)

    async def handle_sync_pause(self, message: dict):
        intent = TransportIntent.model_validate(message)
        await self.manager.sync_pause(self.connection_id, intent.time)

    async def handle_sync_seek(self, message: dict):
        intent = TransportIntent.model_validate(message)
        await self.manager.sync_seek(self.connection_id, intent.time)

    async def handle_play_song(self, message: dict):
        intent = PlaySongIntent.model_validate(message)
        await self.manager.play_song(self.connection_id, intent.index)

    async def handle_next_song(self):
        await self.manager.next_song(self.connection_id)

    # ============== Queue ==============

    async def handle_add_to_queue(self, message: dict):
        intent = AddToQueueIntent.model_validate(message)
        await self.manager.add_to_queue(self.connection_id, intent.external_id, intent.title)

    async def handle_load_playlist(self, message: dict):
        intent = LoadPlaylistIntent.model_validate(message)
        await self.manager.load_playlist(
            self.connection_id,
            [(item.external_id, item.title) for item in intent.items]
        )

    async def handle_reorder_queue(self, message: dict):
        intent = ReorderQueueIntent.model_validate(message)
        await self.manager.reorder_queue(self.connection_id, intent.from_index, intent.to_index)

    # ============== Misc ==============

    async def handle_chat_message(self, message: dict):
        intent = ChatMessageIntent.model_validate(message)
        await self.manager.chat_message(self.connection_id, intent.message)

    async def handle_ping(self, message: dict):
        """PING mesajını işle"""
        # Client'tan gelen _ping_id'yi geri döndür (RTT hesabı için)
        pong_response = {"type": "pong"}
        if message.get("_ping_id") is not None:
            pong_response["_ping_id"] = message["_ping_id"]

        await self.send_json(pong_response)

    async def handle_disconnect(self):
        """Kullanıcı bağlantısı koptuğunda çağrılır"""
        try:
            await self._leave_current()
        finally:
            self.manager.hub.unregister(self.connection_id)
            konsol.log(f"[yellow]Bağlantı kapandı:[/] {self.connection_id}")
