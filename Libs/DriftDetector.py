# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

"""
Katılımcı tarafı senkron yardımcıları.

Harici oynatıcı "kullanıcı zaman çizelgesinde atladı" bildirimi vermez; bu yüzden
konum düzenli aralıklarla yoklanır ve beklenenden sapma eşiği aşarsa seek
sayılır. 3 saniyeden kısa atlamalar bilinçli olarak görünmezdir.
"""

from __future__ import annotations

from typing import Callable, Protocol
from enum   import IntEnum
import asyncio, time

# ============== Timing Constants (seconds) ==============
POLL_INTERVAL       = 1.0   # Konum yoklama aralığı
SEEK_THRESHOLD      = 3.0   # Bu sapmanın üstü kullanıcı seek'i sayılır
PLAY_PAUSE_COOLDOWN = 0.5   # Uzak play/pause uygulandıktan sonra yerel olayları yut
SEEK_COOLDOWN       = 1.0   # Uzak seek uygulandıktan sonra yerel olayları yut
RESYNC_TOLERANCE    = 2.0   # Uzak play geldiğinde bu farkın altındaysa seek yapma

class PlayerState(IntEnum):
    """Gömülü oynatıcı durum kodları"""
    UNSTARTED = -1
    ENDED     = 0
    PLAYING   = 1
    PAUSED    = 2
    BUFFERING = 3
    CUED      = 5

class Player(Protocol):
    def play(self) -> None: ...
    def pause(self) -> None: ...
    def seek_to(self, seconds: float) -> None: ...
    def load(self, external_id: str) -> None: ...
    def get_current_time(self) -> float: ...
    def get_player_state(self) -> int: ...

Emit = Callable[[str, dict], None]


class EchoGuard:
    """
    Zaman sınırlı "yerel geri bildirimi yok say" modu.
    Bayrak yerine son tarih: üst üste gelen uzak olaylar birbirinin süresini kısaltamaz.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self.clock     = clock
        self._deadline = 0.0

    def arm(self, cooldown: float) -> None:
        self._deadline = max(self._deadline, self.clock() + cooldown)

    @property
    def active(self) -> bool:
        return self.clock() < self._deadline


class DriftDetector:
    """Her tick: beklenen = son bilinen + aralık; fark eşiği aşarsa seek yayınla"""

    def __init__(self, emit_seek: Callable[[float], None], interval: float = POLL_INTERVAL, threshold: float = SEEK_THRESHOLD):
        self.emit_seek       = emit_seek
        self.interval        = interval
        self.threshold       = threshold
        self.last_known_time = 0.0

    def reset(self, position: float) -> None:
        self.last_known_time = position

    def tick(self, actual: float) -> bool:
        expected = self.last_known_time + self.interval
        seeked   = abs(actual - expected) > self.threshold

        # Seek olsun olmasın her tick güncellenir
        self.last_known_time = actual

        if seeked:
            self.emit_seek(actual)

        return seeked


class PlayerSync:
    """
    Protokolün istemci yarısı: yerel oynatıcı olaylarını niyet mesajına,
    gelen senkron olaylarını oynatıcı çağrılarına çevirir.
    """

    def __init__(self, player: Player, emit: Emit, clock: Callable[[], float] = time.monotonic):
        self.player        = player
        self.emit          = emit
        self.guard         = EchoGuard(clock)
        self.detector      = DriftDetector(lambda position: self.emit("sync-seek", {"time": position}))
        self.queue         : list[dict] = []
        self.current_index = -1
        self.loaded_id     : str | None = None

    @property
    def has_next(self) -> bool:
        return self.current_index < len(self.queue) - 1

    # ============== Local → Server ==============

    def on_state_change(self, state: int) -> None:
        if self.guard.active:
            return

        if state == PlayerState.PLAYING:
            position = self.player.get_current_time()
            self.detector.reset(position)
            self.emit("sync-play", {"time": position})
        elif state == PlayerState.PAUSED:
            position = self.player.get_current_time()
            self.detector.reset(position)
            self.emit("sync-pause", {"time": position})
        elif state == PlayerState.ENDED and self.has_next:
            self.emit("next-song", {})

    def poll(self) -> bool:
        """Tek yoklama; seek yayınlandıysa True"""
        if self.guard.active or self.loaded_id is None:
            return False

        position = self.player.get_current_time()
        if self.player.get_player_state() != PlayerState.PLAYING:
            self.detector.reset(position)
            return False

        return self.detector.tick(position)

    async def run(self, stop: asyncio.Event) -> None:
        while not stop.is_set():
            self.poll()
            try:
                await asyncio.wait_for(stop.wait(), timeout=self.detector.interval)
            except asyncio.TimeoutError:
                pass

    # ============== Server → Local ==============

    def apply_snapshot(self, state: dict) -> None:
        """join-room / room-state anlık görüntüsünden yerel durumu kur"""
        self.queue         = list(state.get("queue", []))
        self.current_index = state.get("currentIndex", -1)
        if self.current_index < 0:
            return

        self._load_current()
        self._remote(PLAY_PAUSE_COOLDOWN, state.get("currentTime", 0.0))
        self.player.seek_to(state.get("currentTime", 0.0))
        if state.get("isPlaying"):
            self.player.play()
        else:
            self.player.pause()

    def apply_event(self, event: dict) -> None:
        kind = event.get("type")

        if kind in ("queue-updated", "queue-reordered"):
            self.queue         = list(event.get("queue", []))
            self.current_index = event.get("currentIndex", self.current_index)
            if event.get("autoPlay") and self.current_index >= 0:
                self._load_current()
            return

        if kind == "play-song":
            self.current_index = event["index"]
            self._load_current()
            return

        if kind not in ("sync-play", "sync-pause", "sync-seek") or self.current_index < 0 or self.loaded_id is None:
            return

        position = event.get("time", 0.0)
        if kind == "sync-play":
            self._remote(PLAY_PAUSE_COOLDOWN, position)
            if abs(self.player.get_current_time() - position) > RESYNC_TOLERANCE:
                self.player.seek_to(position)
            self.player.play()
        elif kind == "sync-pause":
            self._remote(PLAY_PAUSE_COOLDOWN, position)
            self.player.seek_to(position)
            self.player.pause()
        else:
            self._remote(SEEK_COOLDOWN, position)
            self.player.seek_to(position)

    def _remote(self, cooldown: float, position: float) -> None:
        self.guard.arm(cooldown)
        self.detector.reset(position)

    def _load_current(self) -> None:
        if not 0 <= self.current_index < len(self.queue):
            return

        self.loaded_id = self.queue[self.current_index]["externalId"]
        self.detector.reset(0.0)
        self.player.load(self.loaded_id)
