from decimal import Decimal

import pytest

from quiz_admin.core.errors import ConflictError
from quiz_admin.schemas.menu import Category, ItemOption, Menu, MenuItem
from quiz_admin.schemas.questions import QuestionOption
from quiz_admin.schemas.rooms import Room, RoomMenuSetting
from quiz_admin.services.cascade import delete_local, plan_delete
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


def _lunch_store() -> EntityStore:
    store = EntityStore()
    store.replace_all(MENUS, [Menu(id=1, name="Lunch")])
    store.replace_all(CATEGORIES, [Category(id=1, menu_id=1, name="Mains")])
    store.replace_all(
        MENU_ITEMS,
        [MenuItem(id=1, category_id=1, name="Burger", price=Decimal("12.99"))],
    )
    return store


def test_menu_with_categories_is_refused_and_store_unchanged():
    store = _lunch_store()

    with pytest.raises(ConflictError) as exc_info:
        delete_local(store, MENUS, 1)

    assert exc_info.value.dependent_count == 1
    assert "1 categories" in exc_info.value.message
    assert len(store.all(MENUS)) == 1
    assert len(store.all(CATEGORIES)) == 1


def test_empty_menu_is_deleted():
    store = EntityStore()
    store.replace_all(MENUS, [Menu(id=1, name="Lunch"), Menu(id=2, name="Dinner")])

    assert delete_local(store, MENUS, 1) == 1
    assert [menu.id for menu in store.all(MENUS)] == [2]


def test_lunch_mains_burger_scenario():
    store = _lunch_store()

    with pytest.raises(ConflictError) as exc_info:
        delete_local(store, CATEGORIES, 1)
    assert "1 menu items" in exc_info.value.message

    delete_local(store, MENU_ITEMS, 1)
    delete_local(store, CATEGORIES, 1)

    assert [menu.name for menu in store.all(MENUS)] == ["Lunch"]
    assert store.all(CATEGORIES) == []


def test_menu_item_delete_takes_only_its_options():
    store = _lunch_store()
    store.upsert(MENU_ITEMS, MenuItem(id=2, category_id=1, name="Salad", price=Decimal("8")))
    store.replace_all(
        ITEM_OPTIONS,
        [
            ItemOption(id=1, menu_item_id=1, name="Cheese"),
            ItemOption(id=2, menu_item_id=2, name="Croutons"),
            ItemOption(id=3, menu_item_id=1, name="Bacon", price_addition=Decimal("2")),
        ],
    )

    removed = delete_local(store, MENU_ITEMS, 1)

    assert removed == 3
    assert [option.id for option in store.all(ITEM_OPTIONS)] == [2]
    assert [item.id for item in store.all(MENU_ITEMS)] == [2]


def test_room_delete_takes_its_setting():
    store = EntityStore()
    store.replace_all(ROOMS, [Room(id="trivia1", name="Trivia Night"), Room(id="quiz2", name="Quiz")])
    store.replace_all(
        ROOM_MENU_SETTINGS,
        [RoomMenuSetting(room_id="trivia1", menu_id=1), RoomMenuSetting(room_id="quiz2", show_menu=False)],
    )

    delete_local(store, ROOMS, "trivia1")

    assert [room.id for room in store.all(ROOMS)] == ["quiz2"]
    assert [setting.room_id for setting in store.all(ROOM_MENU_SETTINGS)] == ["quiz2"]


def test_question_plan_lists_option_keys():
    store = EntityStore()
    store.replace_all(
        QUESTION_OPTIONS,
        [
            QuestionOption(question_id=5, option_letter="B", option_text="4"),
            QuestionOption(question_id=5, option_letter="A", option_text="3"),
            QuestionOption(question_id=6, option_letter="A", option_text="x"),
        ],
    )

    plan = plan_delete(store, QUESTIONS, 5)

    assert plan.dependents == [(QUESTION_OPTIONS, (5, "A")), (QUESTION_OPTIONS, (5, "B"))]
