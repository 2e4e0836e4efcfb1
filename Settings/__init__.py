# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from pathlib import Path
from yaml    import load, FullLoader
from dotenv  import load_dotenv
import os

KOK_DIZIN = Path(__file__).resolve().parent.parent

# .env yükleme
load_dotenv(dotenv_path=KOK_DIZIN / ".env")

# AYAR.yml yükleme
with open(KOK_DIZIN / "AYAR.yml", "r", encoding="utf-8") as yaml_dosyasi:
    AYAR = load(yaml_dosyasi, Loader=FullLoader)

# Genel ayarlar
PRODUCTION = os.getenv("PRODUCTION", "false").lower() == "true"

PROJE = AYAR["PROJE"]
HOST  = AYAR["APP"]["HOST"]
PORT  = AYAR["APP"]["PORT"]

# Oda yaşam döngüsü: boş oda silinmeden önce beklenen süre (saniye)
ROOM_GRACE_PERIOD = float(os.getenv("ROOM_GRACE_PERIOD", "1800"))

# WebSocket flood kontrolü
WS_MAX_PAYLOAD  = int(os.getenv("WS_MAX_PAYLOAD", str(512 * 1024)))
WS_RATE_GENERAL = int(os.getenv("WS_RATE_GENERAL", "10"))
WS_RATE_HIGH    = int(os.getenv("WS_RATE_HIGH", "30"))

# Yavaş istemciler yayını bloklamasın
BROADCAST_SEND_TIMEOUT = float(os.getenv("BROADCAST_SEND_TIMEOUT", "1.5"))
