# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from dataclasses import dataclass, field
import asyncio

@dataclass(frozen=True)
class QueueItem:
    """Kuyruktaki medya öğesi - oluşturulduktan sonra değişmez"""
    external_id : str
    title       : str
    added_by    : str

    def to_dict(self) -> dict:
        return {
            "externalId" : self.external_id,
            "title"      : self.title,
            "addedBy"    : self.added_by,
        }

@dataclass
class Participant:
    """Odaya bağlı tek bir bağlantı (kişi değil, bağlantı)"""
    connection_id : str
    display_name  : str

@dataclass
class Room:
    """Senkron oda - kuyruk, oynatım durumu ve üyeler"""
    code                : str
    queue               : list[QueueItem] = field(default_factory=list)
    current_index       : int   = -1     # -1: seçili öğe yok
    is_playing          : bool  = False
    current_time        : float = 0.0    # last_sync_timestamp anındaki konum (saniye)
    last_sync_timestamp : float = 0.0
    members             : dict[str, Participant] = field(default_factory=dict)  # connection_id -> Participant (katılım sırası)
    # Boş oda silme zamanlayıcısı
    pending_expiry      : asyncio.Task | None = field(default=None, repr=False)
    expiry_epoch        : int  = 0       # İptal edilen zamanlayıcıların geç tetiklenmesini önler
    closed              : bool = False   # Silinmiş oda nesnesine geç gelen istekler için
    lock                : asyncio.Lock = field(default_factory=asyncio.Lock, repr=False)

    def member_names(self) -> list[str]:
        return [member.display_name for member in self.members.values()]

    def queue_payload(self) -> list[dict]:
        return [item.to_dict() for item in self.queue]

@dataclass
class RoomSnapshot:
    """Yeni katılan için odanın tam durumu - geçmiş tekrar oynatılmadan yeniden kurulur"""
    code          : str
    queue         : list[QueueItem]
    current_index : int
    is_playing    : bool
    current_time  : float
    members       : list[str]

    def to_dict(self) -> dict:
        return {
            "code"         : self.code,
            "queue"        : [item.to_dict() for item in self.queue],
            "currentIndex" : self.current_index,
            "isPlaying"    : self.is_playing,
            "currentTime"  : self.current_time,
            "members"      : self.members,
        }
