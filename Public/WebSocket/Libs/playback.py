# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

"""
Oynatım uzlaştırıcı.

Sunucu oynatıcıyı sürekli sorgulamaz: saklanan (is_playing, current_time,
last_sync_timestamp) üçlüsünden gerçek konum sorgu anında türetilir.
Tüm zamanlar saniye, `now` aynı saat kaynağından gelmeli.
"""

from ..Models    import Room
from .exceptions import InvalidIndex

def true_time(room: Room, now: float) -> float:
    """Çalıyorsa son senkrondan beri geçen süreyi ekle"""
    position = room.current_time
    if room.is_playing:
        position += now - room.last_sync_timestamp

    return max(position, 0.0)

def _sync(room: Room, time: float, now: float) -> None:
    room.current_time        = time
    room.last_sync_timestamp = now

def apply_play(room: Room, time: float, now: float) -> None:
    room.is_playing = True
    _sync(room, time, now)

def apply_pause(room: Room, time: float, now: float) -> None:
    room.is_playing = False
    _sync(room, time, now)

def apply_seek(room: Room, time: float, now: float) -> None:
    """Oynatma durumuna dokunmaz"""
    _sync(room, time, now)

def play_index(room: Room, index: int, now: float) -> None:
    """Yeni öğe seç ve baştan oynat"""
    if not 0 <= index < len(room.queue):
        raise InvalidIndex(index, len(room.queue))

    room.current_index = index
    room.is_playing    = True
    _sync(room, 0.0, now)

def next_song(room: Room, now: float) -> bool:
    """Son öğedeyse ya da kuyruk boşsa hiçbir şey yapmaz - medya bitişi ve atla tıklaması aynı anda gelebilir"""
    if not room.queue or room.current_index >= len(room.queue) - 1:
        return False

    play_index(room, room.current_index + 1, now)
    return True
