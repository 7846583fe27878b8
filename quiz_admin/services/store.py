from __future__ import annotations

import logging
from threading import Lock
from typing import Any, Callable, Iterable

from quiz_admin.services.event_bus import COLLECTION_CHANGED, EventBus

logger = logging.getLogger(__name__)

MENUS = "menus"
CATEGORIES = "categories"
MENU_ITEMS = "menu_items"
ITEM_OPTIONS = "item_options"
ROOMS = "rooms"
ROOM_MENU_SETTINGS = "room_menu_settings"
QUESTIONS = "questions"
QUESTION_OPTIONS = "question_options"

COLLECTION_KEYS: dict[str, tuple[str, ...]] = {
    MENUS: ("id",),
    CATEGORIES: ("id",),
    MENU_ITEMS: ("id",),
    ITEM_OPTIONS: ("id",),
    ROOMS: ("id",),
    ROOM_MENU_SETTINGS: ("room_id",),
    QUESTIONS: ("id",),
    QUESTION_OPTIONS: ("question_id", "option_letter"),
}


def key_of(collection: str, record: Any) -> Any:
    fields = COLLECTION_KEYS[collection]
    if len(fields) == 1:
        return getattr(record, fields[0])
    return tuple(getattr(record, field) for field in fields)


class EntityStore:
    """Client-side copies of every entity collection.

    Lists keep server order; ``upsert`` appends new records and replaces
    existing ones in place. Each mutation bumps the collection revision and
    emits ``collection_changed`` on the event bus.
    """

    def __init__(self, event_bus: EventBus | None = None) -> None:
        self.event_bus = event_bus or EventBus()
        self._collections: dict[str, list[Any]] = {name: [] for name in COLLECTION_KEYS}
        self._revisions: dict[str, int] = {name: 0 for name in COLLECTION_KEYS}
        self._lock = Lock()

    def _records(self, collection: str) -> list[Any]:
        try:
            return self._collections[collection]
        except KeyError:
            raise KeyError(f"unknown collection: {collection}") from None

    def _index_of(self, collection: str, key: Any) -> int:
        for index, record in enumerate(self._records(collection)):
            if key_of(collection, record) == key:
                return index
        return -1

    def _bump(self, collection: str) -> int:
        self._revisions[collection] += 1
        return self._revisions[collection]

    def _notify(self, collection: str, revision: int) -> None:
        self.event_bus.emit(COLLECTION_CHANGED, {"collection": collection, "revision": revision})

    def all(self, collection: str) -> list[Any]:
        with self._lock:
            return list(self._records(collection))

    def get(self, collection: str, key: Any) -> Any | None:
        with self._lock:
            index = self._index_of(collection, key)
            return self._collections[collection][index] if index >= 0 else None

    def contains(self, collection: str, key: Any) -> bool:
        return self.get(collection, key) is not None

    def revision(self, collection: str) -> int:
        with self._lock:
            self._records(collection)
            return self._revisions[collection]

    def replace_all(self, collection: str, records: Iterable[Any]) -> None:
        with self._lock:
            self._records(collection)
            self._collections[collection] = list(records)
            revision = self._bump(collection)
        logger.debug("store collection replaced", extra={"collection": collection})
        self._notify(collection, revision)

    def upsert(self, collection: str, record: Any) -> Any:
        key = key_of(collection, record)
        with self._lock:
            records = self._records(collection)
            index = self._index_of(collection, key)
            if index >= 0:
                records[index] = record
            else:
                records.append(record)
            revision = self._bump(collection)
        self._notify(collection, revision)
        return record

    def remove(self, collection: str, key: Any) -> bool:
        with self._lock:
            index = self._index_of(collection, key)
            if index < 0:
                return False
            del self._collections[collection][index]
            revision = self._bump(collection)
        self._notify(collection, revision)
        return True

    def remove_where(self, collection: str, predicate: Callable[[Any], bool]) -> int:
        with self._lock:
            records = self._records(collection)
            kept = [record for record in records if not predicate(record)]
            removed = len(records) - len(kept)
            if not removed:
                return 0
            self._collections[collection] = kept
            revision = self._bump(collection)
        self._notify(collection, revision)
        return removed
