"""Read-only projections over the entity store.

Every function is a single pass over the current collections and is
recomputed on each call.
"""
from __future__ import annotations

from typing import Any, Optional

from quiz_admin.schemas.menu import Category, ItemOption, Menu, MenuItem
from quiz_admin.schemas.questions import Question, QuestionOption
from quiz_admin.schemas.rooms import RoomMenuSetting
from quiz_admin.services.store import (
    CATEGORIES,
    ITEM_OPTIONS,
    MENU_ITEMS,
    MENUS,
    QUESTION_OPTIONS,
    QUESTIONS,
    ROOM_MENU_SETTINGS,
    ROOMS,
    EntityStore,
)

UNKNOWN_NAME = "Unknown"


def _by_display_order(record: Any) -> tuple[int, str]:
    return (int(record.display_order or 0), (record.name or "").lower())


def categories_for_menu(store: EntityStore, menu_id: Optional[int]) -> list[Category]:
    if menu_id is None:
        return []
    categories = [category for category in store.all(CATEGORIES) if category.menu_id == menu_id]
    return sorted(categories, key=_by_display_order)


def items_for_category(store: EntityStore, category_id: Optional[int]) -> list[MenuItem]:
    if category_id is None:
        return []
    items = [item for item in store.all(MENU_ITEMS) if item.category_id == category_id]
    return sorted(items, key=_by_display_order)


def items_for_menu(store: EntityStore, menu_id: Optional[int]) -> list[MenuItem]:
    category_ids = {category.id for category in categories_for_menu(store, menu_id)}
    if not category_ids:
        return []
    return [item for item in store.all(MENU_ITEMS) if item.category_id in category_ids]


def options_for_item(store: EntityStore, menu_item_id: Optional[int]) -> list[ItemOption]:
    if menu_item_id is None:
        return []
    return [option for option in store.all(ITEM_OPTIONS) if option.menu_item_id == menu_item_id]


def options_for_question(store: EntityStore, question_id: Optional[int]) -> list[QuestionOption]:
    if question_id is None:
        return []
    options = [option for option in store.all(QUESTION_OPTIONS) if option.question_id == question_id]
    return sorted(options, key=lambda option: option.option_letter)


def questions_for_room(store: EntityStore, room_id: Optional[str]) -> list[Question]:
    if not room_id:
        return []
    return [question for question in store.all(QUESTIONS) if question.room_id == room_id]


def setting_for_room(store: EntityStore, room_id: Optional[str]) -> Optional[RoomMenuSetting]:
    if not room_id:
        return None
    return store.get(ROOM_MENU_SETTINGS, room_id)


def popular_items(store: EntityStore, menu_id: Optional[int] = None) -> list[MenuItem]:
    items = items_for_menu(store, menu_id) if menu_id is not None else store.all(MENU_ITEMS)
    return [item for item in items if item.is_popular and item.is_available]


def _name_of(store: EntityStore, collection: str, key: Any) -> str:
    if key is None or key == "":
        return UNKNOWN_NAME
    record = store.get(collection, key)
    if record is None and isinstance(key, str) and key.isdigit():
        # Select widgets hand back ids as strings
        record = store.get(collection, int(key))
    return record.name if record is not None else UNKNOWN_NAME


def menu_name(store: EntityStore, menu_id: Any) -> str:
    return _name_of(store, MENUS, menu_id)


def category_name(store: EntityStore, category_id: Any) -> str:
    return _name_of(store, CATEGORIES, category_id)


def room_name(store: EntityStore, room_id: Any) -> str:
    return _name_of(store, ROOMS, room_id)


def menu_for_room(store: EntityStore, room_id: Optional[str]) -> dict[str, Any]:
    """Menu a room shows to players, grouped by category.

    Empty when the room has no setting, the setting hides the menu or the
    menu is inactive. Unavailable items are left out.
    """
    setting = setting_for_room(store, room_id)
    if setting is None or not setting.show_menu or setting.menu_id is None:
        return {}
    menu: Optional[Menu] = store.get(MENUS, setting.menu_id)
    if menu is None or not menu.is_active:
        return {}

    categories = []
    for category in categories_for_menu(store, menu.id):
        items = [item for item in items_for_category(store, category.id) if item.is_available]
        categories.append(
            {
                "category": category,
                "items": [{"item": item, "options": options_for_item(store, item.id)} for item in items],
            }
        )
    return {
        "menu": menu,
        "description": setting.menu_description or menu.description,
        "categories": categories,
    }
