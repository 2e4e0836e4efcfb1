# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from Core                            import JSONResponse
from .                               import api_v1_router
from Public.WebSocket.Libs           import room_manager, RoomNotFound
from Public.WebSocket.Libs.room_code import normalize_room_code

@api_v1_router.get("/rooms/{code}")
async def room_info(code: str):
    """Katılmadan önce oda var mı kontrolü - üyelik yan etkisi yok"""
    snapshot = await room_manager.get_room_state(code)
    if not snapshot:
        raise RoomNotFound(normalize_room_code(code))

    return JSONResponse({
        "success"      : True,
        "code"         : snapshot.code,
        "members"      : snapshot.members,
        "queue_length" : len(snapshot.queue),
        "is_playing"   : snapshot.is_playing,
    })
