# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

from typing   import Annotated
from pydantic import BaseModel, ConfigDict, Field, AliasChoices, AfterValidator

def _dolu_metin(deger: str) -> str:
    deger = deger.strip()
    if not deger:
        raise ValueError("boş olamaz")
    return deger

DoluMetin = Annotated[str, AfterValidator(_dolu_metin)]

class Intent(BaseModel):
    """İstemciden gelen niyet mesajlarının ortak tabanı"""
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

class CreateRoomIntent(Intent):
    display_name : DoluMetin = Field(validation_alias=AliasChoices("displayName", "username"))

class JoinRoomIntent(Intent):
    display_name : DoluMetin = Field(validation_alias=AliasChoices("displayName", "username"))
    code         : DoluMetin

class QueueItemIntent(Intent):
    external_id : DoluMetin = Field(validation_alias=AliasChoices("externalId", "videoId"))
    title       : str       = ""

class AddToQueueIntent(QueueItemIntent):
    pass

class LoadPlaylistIntent(Intent):
    items : list[QueueItemIntent]

class TransportIntent(Intent):
    """sync-play / sync-pause / sync-seek"""
    time : float = Field(ge=0, allow_inf_nan=False, validation_alias=AliasChoices("time", "currentTime"))

class PlaySongIntent(Intent):
    index : int

class ReorderQueueIntent(Intent):
    from_index : int = Field(validation_alias=AliasChoices("fromIndex", "from_index"))
    to_index   : int = Field(validation_alias=AliasChoices("toIndex", "to_index"))

class ChatMessageIntent(Intent):
    message : DoluMetin
