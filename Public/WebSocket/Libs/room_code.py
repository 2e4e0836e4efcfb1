# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

import secrets

# I, O, 0 ve 1 karışıklık yaratmasın diye yok
ROOM_CODE_ALPHABET = "ABCDEFGHJKLMNPQRSTUVWXYZ23456789"
ROOM_CODE_LENGTH   = 6

def generate_room_code() -> str:
    """Tekillik kontrolü çağırana ait"""
    return "".join(secrets.choice(ROOM_CODE_ALPHABET) for _ in range(ROOM_CODE_LENGTH))

def normalize_room_code(code: str) -> str:
    return code.strip().upper()
