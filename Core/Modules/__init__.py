# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from CLI                   import konsol
from fastapi               import FastAPI
from contextlib            import asynccontextmanager
from Settings              import ROOM_GRACE_PERIOD
from Public.WebSocket.Libs import room_manager

@asynccontextmanager
async def lifespan(app: FastAPI):
    """FastAPI lifespan events - startup ve shutdown"""
    konsol.log(f"[green]Oda yöneticisi hazır.[/] (boş oda bekleme süresi: {ROOM_GRACE_PERIOD:g} sn)")

    yield

    # ! Kapanırken askıda zamanlayıcı bırakma
    await room_manager.shutdown()
    konsol.log("[yellow]Bekleyen oda zamanlayıcıları iptal edildi.")
