# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from CLI      import konsol
from typing   import Callable, Iterable
from Settings import BROADCAST_SEND_TIMEOUT
import json, asyncio

class ConnectionHub:
    """
    Bağlantı kimliği -> soket eşlemesi ve yayın.
    Oda mantığı bilmez; kime gönderileceğine RoomManager karar verir.
    """

    def __init__(self, send_timeout: float = BROADCAST_SEND_TIMEOUT):
        self.connections: dict[str, object] = {}
        self.send_timeout = send_timeout

    def register(self, connection_id: str, websocket) -> None:
        self.connections[connection_id] = websocket

    def unregister(self, connection_id: str) -> None:
        self.connections.pop(connection_id, None)

    async def _safe_send(self, connection_id: str, payload: str) -> bool:
        websocket = self.connections.get(connection_id)
        if websocket is None:
            return False

        try:
            # Ek görev açmadan, gönderim çağıran görevde çalışır
            async with asyncio.timeout(self.send_timeout):
                await websocket.send_text(payload)
            return True
        except Exception as hata:
            # Yavaş ya da kopmuş istemci diğerlerini etkilemesin
            konsol.log(f"[yellow]Gönderim başarısız:[/] {connection_id} » {type(hata).__name__}")
            return False

    async def send(self, connection_id: str, message: dict) -> bool:
        return await self._safe_send(connection_id, json.dumps(message, ensure_ascii=False))

    async def publish(
        self,
        connection_ids : Iterable[str],
        message        : dict,
        accept         : Callable[[str], bool] | None = None
    ) -> int:
        """Paralel gönderim. `accept` gönderim anında tekrar sorulur (yayın sırasında ayrılan almaz)"""
        payload = json.dumps(message, ensure_ascii=False)

        async def _gonder(connection_id: str) -> bool:
            if accept and not accept(connection_id):
                return False
            return await self._safe_send(connection_id, payload)

        results = await asyncio.gather(*(_gonder(cid) for cid in connection_ids))
        return sum(results)

# Singleton instance
connection_hub = ConnectionHub()
