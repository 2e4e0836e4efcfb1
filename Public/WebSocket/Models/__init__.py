# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from .RoomModels   import QueueItem, Participant, Room, RoomSnapshot
from .IntentModels import (
    CreateRoomIntent,
    JoinRoomIntent,
    AddToQueueIntent,
    LoadPlaylistIntent,
    TransportIntent,
    PlaySongIntent,
    ReorderQueueIntent,
    ChatMessageIntent,
)
