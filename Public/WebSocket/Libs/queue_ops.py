# Bu araç @keyiflerolsun tarafından | @KekikAkademi için yazılmıştır.

"""
Kuyruk geçişleri - saf durum değişiklikleri, kilit ve yayın çağırana ait.

current_index her mutasyondan sonra ya -1 ya da geçerli bir indekstir ve
yeniden sıralamada aynı mantıksal öğeyi göstermeye devam eder.
"""

from ..Models   import Room, QueueItem
from .exceptions import InvalidIndex

def enqueue(room: Room, item: QueueItem) -> bool:
    """Öğeyi sona ekle. Dönüş: autoPlay (oda boştu ve ilk öğe seçildi)"""
    return bulk_load(room, [item])

def bulk_load(room: Room, items: list[QueueItem]) -> bool:
    """Tüm öğeleri tek mutasyonda ekle, autoPlay mutasyon öncesi duruma göre bir kez hesaplanır"""
    if not items:
        return False

    auto_play = room.current_index == -1
    room.queue.extend(items)

    if auto_play:
        room.current_index = 0

    return auto_play

def reorder(room: Room, from_index: int, to_index: int) -> bool:
    """
    from_index'teki öğeyi çıkarıp kısalan dizide to_index'e yerleştir.
    Dönüş: kuyruk değişti mi
    """
    length = len(room.queue)
    if not 0 <= from_index < length:
        raise InvalidIndex(from_index, length)
    if not 0 <= to_index < length:
        raise InvalidIndex(to_index, length)

    if from_index == to_index:
        return False

    item = room.queue.pop(from_index)
    room.queue.insert(to_index, item)

    current = room.current_index
    if current == from_index:
        room.current_index = to_index
    elif from_index < current <= to_index:
        room.current_index = current - 1
    elif to_index <= current < from_index:
        room.current_index = current + 1

    return True
