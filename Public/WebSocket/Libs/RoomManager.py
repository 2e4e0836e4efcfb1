# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from CLI          import konsol
from typing       import Callable
from Settings     import ROOM_GRACE_PERIOD
from ..Models     import Room, Participant, QueueItem, RoomSnapshot
from .exceptions  import RoomNotFound, InvalidIndex
from .room_code   import generate_room_code, normalize_room_code
from .broadcaster import ConnectionHub, connection_hub
from .            import playback, queue_ops
import asyncio, time

# Kod alanı ~10^9, bu sınıra ulaşmak değişmez ihlali demek
MAX_CODE_ATTEMPTS = 1000

class RoomManager:
    """
    Oda deposu ve yaşam döngüsü.

    Kilit sırası: oda kilidi tutulurken `_lock` alınabilir, tersi yapılmaz.
    `_lock` yalnızca `rooms` ve `memberships` haritalarını korur.
    """

    def __init__(
        self,
        hub          : ConnectionHub | None = None,
        grace_period : float = ROOM_GRACE_PERIOD,
        clock        : Callable[[], float] = time.perf_counter
    ):
        self.rooms       : dict[str, Room] = {}
        self.memberships : dict[str, str]  = {}  # connection_id -> room code
        self.hub          = hub or connection_hub
        self.grace_period = grace_period
        self.clock        = clock
        self._lock        = asyncio.Lock()

    # ==================== STORE ====================

    async def get_room(self, code: str) -> Room | None:
        """Odayı getir (lock protected)"""
        async with self._lock:
            return self.rooms.get(normalize_room_code(code))

    async def _room_of(self, connection_id: str) -> Room | None:
        async with self._lock:
            code = self.memberships.get(connection_id)
            return self.rooms.get(code) if code else None

    def _is_member(self, code: str) -> Callable[[str], bool]:
        return lambda connection_id: self.memberships.get(connection_id) == code

    def _snapshot_locked(self, room: Room) -> RoomSnapshot:
        """Oda kilidi içinde çağrılmalı"""
        return RoomSnapshot(
            code          = room.code,
            queue         = list(room.queue),
            current_index = room.current_index,
            is_playing    = room.is_playing,
            current_time  = playback.true_time(room, self.clock()),
            members       = room.member_names(),
        )

    async def get_room_state(self, code: str) -> RoomSnapshot | None:
        room = await self.get_room(code)
        if not room:
            return None

        async with room.lock:
            if room.closed:
                return None
            return self._snapshot_locked(room)

    # ==================== LIFECYCLE ====================

    async def create_room(self, connection_id: str, display_name: str) -> str:
        """Yeni oda aç, oluşturanı ilk üye yap"""
        async with self._lock:
            for _ in range(MAX_CODE_ATTEMPTS):
                code = generate_room_code()
                if code not in self.rooms:
                    break
            else:
                raise RuntimeError("Boş oda kodu üretilemedi")

            room = Room(code=code, last_sync_timestamp=self.clock())
            room.members[connection_id] = Participant(connection_id=connection_id, display_name=display_name)

            self.rooms[code] = room
            self.memberships[connection_id] = code

        konsol.log(f"[green]🎵 Oda oluşturuldu:[/] {code} « {display_name}")
        return code

    async def join_room(self, code: str, connection_id: str, display_name: str) -> RoomSnapshot:
        """Odaya katıl, bekleyen silmeyi iptal et ve tam durumu döndür"""
        code = normalize_room_code(code)
        room = await self.get_room(code)
        if not room:
            raise RoomNotFound(code)

        async with room.lock:
            # get_room ile kilit arasında süresi dolmuş olabilir
            if room.closed:
                raise RoomNotFound(code)

            self._cancel_expiry_locked(room)
            room.members[connection_id] = Participant(connection_id=connection_id, display_name=display_name)

            async with self._lock:
                self.memberships[connection_id] = code

            snapshot   = self._snapshot_locked(room)
            recipients = [cid for cid in room.members if cid != connection_id]

        await self._publish(code, recipients, {
            "type"        : "user-joined",
            "displayName" : display_name,
            "members"     : snapshot.members,
        })

        konsol.log(f"[green]👋 {display_name}[/] » {code} ({len(snapshot.members)} üye)")
        return snapshot

    async def leave_room(self, connection_id: str) -> bool:
        """Odadan ayrıl; oda boşaldıysa gecikmeli silme planla"""
        room = await self._room_of(connection_id)
        if not room:
            return False

        async with room.lock:
            participant = room.members.pop(connection_id, None)

            async with self._lock:
                if self.memberships.get(connection_id) == room.code:
                    del self.memberships[connection_id]

            if participant is None:
                return False

            members    = room.member_names()
            recipients = list(room.members)

            if not room.members:
                self._schedule_expiry_locked(room)

        await self._publish(room.code, recipients, {
            "type"        : "user-left",
            "displayName" : participant.display_name,
            "members"     : members,
        })

        konsol.log(f"[yellow]🔌 {participant.display_name}[/] « {room.code} ({len(members)} üye)")
        return True

    def _schedule_expiry_locked(self, room: Room) -> None:
        """Oda kilidi içinde çağrılmalı"""
        self._cancel_expiry_locked(room)
        room.expiry_epoch  += 1
        room.pending_expiry = asyncio.create_task(self._expire_later(room, room.expiry_epoch))
        konsol.log(f"[yellow]⏳ Oda boş, {self.grace_period:g} sn sonra silinecek:[/] {room.code}")

    def _cancel_expiry_locked(self, room: Room) -> None:
        """Oda kilidi içinde çağrılmalı; epoch artışı geç uyanan görevi etkisiz kılar"""
        task = room.pending_expiry
        if task is None:
            return

        room.expiry_epoch  += 1
        room.pending_expiry = None
        if not task.done():
            task.cancel()
            konsol.log(f"[green]Silme iptal edildi:[/] {room.code}")

    async def _expire_later(self, room: Room, epoch: int) -> None:
        await asyncio.sleep(self.grace_period)

        async with room.lock:
            # Tetiklenme anında yeniden kontrol: iptal yarışı mümkün
            if room.closed or room.members or epoch != room.expiry_epoch:
                return

            room.closed         = True
            room.pending_expiry = None

            async with self._lock:
                if self.rooms.get(room.code) is room:
                    del self.rooms[room.code]

        konsol.log(f"[red]🗑️ Oda silindi (boş):[/] {room.code}")

    async def shutdown(self) -> None:
        """Bekleyen tüm silme zamanlayıcılarını iptal et"""
        async with self._lock:
            rooms = list(self.rooms.values())

        for room in rooms:
            async with room.lock:
                self._cancel_expiry_locked(room)

    # ==================== FAN-OUT ====================

    async def _publish(self, code: str, recipients: list[str], event: dict) -> int:
        if not recipients:
            return 0
        return await self.hub.publish(recipients, event, accept=self._is_member(code))

    async def broadcast(self, code: str, event: dict, exclude_connection_id: str | None = None) -> int:
        """Odadaki herkese gönder; üye listesi kilit içinde alınır, gönderim kilit dışında"""
        room = await self.get_room(code)
        if not room:
            return 0

        async with room.lock:
            recipients = [cid for cid in room.members if cid != exclude_connection_id]

        return await self._publish(room.code, recipients, event)

    # ==================== PLAYBACK ====================

    async def _transport(self, connection_id: str, event_type: str, transition, position: float) -> bool:
        """play/pause/seek: kaynağa geri gönderilmez (yankı döngüsü)"""
        room = await self._room_of(connection_id)
        if not room:
            return False

        async with room.lock:
            participant = room.members.get(connection_id)
            if room.closed or participant is None:
                return False

            transition(room, position, self.clock())
            recipients = [cid for cid in room.members if cid != connection_id]
            event      = {"type": event_type, "time": position, "by": participant.display_name}

        await self._publish(room.code, recipients, event)
        return True

    async def sync_play(self, connection_id: str, position: float) -> bool:
        return await self._transport(connection_id, "sync-play", playback.apply_play, position)

    async def sync_pause(self, connection_id: str, position: float) -> bool:
        return await self._transport(connection_id, "sync-pause", playback.apply_pause, position)

    async def sync_seek(self, connection_id: str, position: float) -> bool:
        return await self._transport(connection_id, "sync-seek", playback.apply_seek, position)

    async def play_song(self, connection_id: str, index: int) -> bool:
        """Medya seçimi herkese gider, kaynak dahil - yeni öğeyi o da yüklemeli"""
        def _sec(room: Room, now: float) -> bool:
            playback.play_index(room, index, now)
            return True

        return await self._select(connection_id, _sec)

    async def next_song(self, connection_id: str) -> bool:
        return await self._select(connection_id, playback.next_song)

    async def _select(self, connection_id: str, transition) -> bool:
        room = await self._room_of(connection_id)
        if not room:
            return False

        async with room.lock:
            participant = room.members.get(connection_id)
            if room.closed or participant is None:
                return False

            try:
                changed = transition(room, self.clock())
            except InvalidIndex:
                # Eski arayüz yarışı, hata değil
                return False

            if not changed:
                return False

            recipients = list(room.members)
            event      = {"type": "play-song", "index": room.current_index, "by": participant.display_name}

        await self._publish(room.code, recipients, event)
        return True

    # ==================== QUEUE ====================

    async def add_to_queue(self, connection_id: str, external_id: str, title: str) -> bool:
        return await self.load_playlist(connection_id, [(external_id, title)])

    async def load_playlist(self, connection_id: str, items: list[tuple[str, str]]) -> bool:
        """Tek mutasyon, tek yayın"""
        room = await self._room_of(connection_id)
        if not room or not items:
            return False

        async with room.lock:
            participant = room.members.get(connection_id)
            if room.closed or participant is None:
                return False

            new_items = [
                QueueItem(external_id=external_id, title=title, added_by=participant.display_name)
                    for external_id, title in items
            ]
            auto_play  = queue_ops.bulk_load(room, new_items)
            recipients = list(room.members)
            event      = {
                "type"         : "queue-updated",
                "queue"        : room.queue_payload(),
                "currentIndex" : room.current_index,
                "autoPlay"     : auto_play,
            }

        await self._publish(room.code, recipients, event)
        konsol.log(f"[green]🎶 {len(new_items)} öğe eklendi:[/] {room.code}")
        return True

    async def reorder_queue(self, connection_id: str, from_index: int, to_index: int) -> bool:
        room = await self._room_of(connection_id)
        if not room:
            return False

        async with room.lock:
            if room.closed or connection_id not in room.members:
                return False

            try:
                changed = queue_ops.reorder(room, from_index, to_index)
            except InvalidIndex:
                return False

            if not changed:
                return False

            recipients = list(room.members)
            event      = {
                "type"         : "queue-reordered",
                "queue"        : room.queue_payload(),
                "currentIndex" : room.current_index,
            }

        await self._publish(room.code, recipients, event)
        return True

    # ==================== CHAT ====================

    async def chat_message(self, connection_id: str, message: str) -> bool:
        """Saklanmaz, yalnızca herkese iletilir"""
        room = await self._room_of(connection_id)
        if not room:
            return False

        async with room.lock:
            participant = room.members.get(connection_id)
            if room.closed or participant is None:
                return False
            recipients = list(room.members)

        await self._publish(room.code, recipients, {
            "type"      : "chat-message",
            "username"  : participant.display_name,
            "message"   : message,
            "timestamp" : time.time(),
        })
        return True


# Singleton instance
room_manager = RoomManager()
