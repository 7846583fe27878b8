from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

from quiz_admin.core.errors import ConflictError
from quiz_admin.services import derived_views
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
    key_of,
)

logger = logging.getLogger(__name__)


@dataclass
class DeletePlan:
    collection: str
    key: Any
    # (collection, key) pairs removed before the parent
    dependents: list[tuple[str, Any]] = field(default_factory=list)


def plan_delete(store: EntityStore, collection: str, key: Any) -> DeletePlan:
    """Work out what deleting ``key`` involves.

    Menus and categories with children are refused with ConflictError.
    Menu items, rooms and questions take their children with them.
    """
    if collection == MENUS:
        count = len(derived_views.categories_for_menu(store, key))
        if count:
            raise ConflictError(
                f"Cannot delete this menu: {count} categories still belong to it. "
                "Delete or move them first.",
                dependent_count=count,
            )
        return DeletePlan(collection, key)

    if collection == CATEGORIES:
        count = len(derived_views.items_for_category(store, key))
        if count:
            raise ConflictError(
                f"Cannot delete this category: {count} menu items still belong to it. "
                "Delete or move them first.",
                dependent_count=count,
            )
        return DeletePlan(collection, key)

    if collection == MENU_ITEMS:
        options = derived_views.options_for_item(store, key)
        return DeletePlan(collection, key, [(ITEM_OPTIONS, option.id) for option in options])

    if collection == ROOMS:
        setting = derived_views.setting_for_room(store, key)
        dependents = [(ROOM_MENU_SETTINGS, setting.room_id)] if setting is not None else []
        return DeletePlan(collection, key, dependents)

    if collection == QUESTIONS:
        options = derived_views.options_for_question(store, key)
        return DeletePlan(
            collection,
            key,
            [(QUESTION_OPTIONS, key_of(QUESTION_OPTIONS, option)) for option in options],
        )

    return DeletePlan(collection, key)


def apply_delete(store: EntityStore, plan: DeletePlan) -> int:
    removed = 0
    for dependent_collection, dependent_key in plan.dependents:
        if store.remove(dependent_collection, dependent_key):
            removed += 1
    if store.remove(plan.collection, plan.key):
        removed += 1
    logger.debug(
        "store delete applied",
        extra={"collection": plan.collection},
    )
    return removed


def delete_local(store: EntityStore, collection: str, key: Any) -> int:
    """Guarded/cascading delete against the store only.

    Raises ConflictError (store untouched) for guarded parents; otherwise
    returns how many records were removed.
    """
    return apply_delete(store, plan_delete(store, collection, key))
