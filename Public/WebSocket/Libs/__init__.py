# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from .exceptions       import SyncError, RoomNotFound, InvalidIndex
from .broadcaster      import ConnectionHub, connection_hub
from .RoomManager      import RoomManager, room_manager
from .message_handlers import MessageHandler
