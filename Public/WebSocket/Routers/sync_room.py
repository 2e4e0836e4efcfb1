# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from CLI      import konsol
from fastapi  import WebSocket, WebSocketDisconnect
from pydantic import ValidationError
from Settings import WS_MAX_PAYLOAD, WS_RATE_GENERAL, WS_RATE_HIGH
from .        import wss_router
from ..Libs   import MessageHandler
import json, time

# Seek tespiti saniyede bir tetiklenebilir, ping de sık gelir
HIGH_FREQ_OPS = {"ping", "sync-seek"}

@wss_router.websocket("/room")
async def sync_room_websocket(websocket: WebSocket):
    await websocket.accept()
    handler = MessageHandler(websocket)

    # (needs_room, takes_msg, fn)
    handlers = {
        "create-room"   : (False, True,  handler.handle_create_room),
        "join-room"     : (False, True,  handler.handle_join_room),
        "ping"          : (False, True,  handler.handle_ping),

        "get-state"     : (True,  False, handler.handle_get_state),
        "next-song"     : (True,  False, handler.handle_next_song),

        "sync-play"     : (True,  True,  handler.handle_sync_play),
        "sync-pause"    : (True,  True,  handler.handle_sync_pause),
        "sync-seek"     : (True,  True,  handler.handle_sync_seek),
        "play-song"     : (True,  True,  handler.handle_play_song),
        "add-to-queue"  : (True,  True,  handler.handle_add_to_queue),
        "load-playlist" : (True,  True,  handler.handle_load_playlist),
        "reorder-queue" : (True,  True,  handler.handle_reorder_queue),
        "chat-message"  : (True,  True,  handler.handle_chat_message),
    }

    # Rate limiting
    general_msg_count = 0
    general_last_time = time.perf_counter()

    high_msg_count = 0
    high_last_time = time.perf_counter()

    try:
        while True:
            raw = await websocket.receive_text()

            # 1. Flood Control: Payload Size
            if len(raw.encode("utf-8")) > WS_MAX_PAYLOAD:
                await handler.send_error("Mesaj boyutu çok büyük")
                continue

            try:
                msg = json.loads(raw)
            except json.JSONDecodeError:
                await handler.send_error("Geçersiz JSON formatı")
                continue

            if not isinstance(msg, dict):
                continue

            t = msg.get("type")
            if not t:
                continue

            # 2. Flood Control: Rate Limit (Dual Bucket)
            now = time.perf_counter()

            if t in HIGH_FREQ_OPS:
                if now - high_last_time > 1.0:
                    high_msg_count = 0
                    high_last_time = now

                high_msg_count += 1
                if high_msg_count > WS_RATE_HIGH:
                    # Sessiz drop: kaçan seek bir sonraki yoklamada tekrar yakalanır
                    continue
            else:
                if now - general_last_time > 1.0:
                    general_msg_count = 0
                    general_last_time = now

                general_msg_count += 1
                if general_msg_count > WS_RATE_GENERAL:
                    await handler.send_error("Çok hızlı işlem yapıyorsunuz")
                    continue

            entry = handlers.get(t)
            if not entry:
                continue

            needs_room, takes_msg, fn = entry

            if needs_room and not handler.in_room:
                continue

            try:
                if takes_msg:
                    await fn(msg)
                else:
                    await fn()
            except ValidationError as hata:
                # Bozuk istemci: etkisiz bırak
                konsol.log(f"[yellow]Geçersiz {t} yükü düşürüldü:[/] {hata.error_count()} hata")

    except WebSocketDisconnect:
        pass
    except Exception as e:
        konsol.log(f"[red]WebSocket Error:[/] {e}")
    finally:
        await handler.handle_disconnect()
