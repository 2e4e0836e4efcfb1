# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

class SyncError(Exception):
    """Oda senkronizasyon hatalarının tabanı"""

class RoomNotFound(SyncError):
    def __init__(self, code: str):
        self.code = code
        super().__init__(f"Oda bulunamadı: {code}")

class InvalidIndex(SyncError):
    """Kuyruk sınırları dışında indeks - çağıran tarafından sessizce yutulur"""

    def __init__(self, index: int, length: int):
        self.index  = index
        self.length = length
        super().__init__(f"Geçersiz indeks: {index} (kuyruk uzunluğu {length})")
