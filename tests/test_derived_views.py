from decimal import Decimal

from quiz_admin.schemas.menu import Category, ItemOption, Menu, MenuItem
from quiz_admin.schemas.questions import Question, QuestionOption
from quiz_admin.schemas.rooms import Room, RoomMenuSetting
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
)


def _build_store() -> EntityStore:
    store = EntityStore()
    store.replace_all(
        MENUS,
        [
            Menu(id=1, name="Lunch", description="Midday"),
            Menu(id=2, name="Bar", is_active=False),
        ],
    )
    store.replace_all(
        CATEGORIES,
        [
            Category(id=10, menu_id=1, name="Mains", display_order=2),
            Category(id=11, menu_id=1, name="Starters", display_order=1),
            Category(id=12, menu_id=2, name="Beers"),
        ],
    )
    store.replace_all(
        MENU_ITEMS,
        [
            MenuItem(id=100, category_id=10, name="Burger", price=Decimal("12.99"), is_popular=True),
            MenuItem(id=101, category_id=11, name="Soup", price=Decimal("5"), is_available=False),
            MenuItem(id=102, category_id=12, name="IPA", price=Decimal("6"), is_popular=True),
            MenuItem(id=103, category_id=10, name="Fries", price=Decimal("4"), display_order=1),
        ],
    )
    store.replace_all(
        ITEM_OPTIONS,
        [
            ItemOption(id=1, menu_item_id=100, name="Cheese", price_addition=Decimal("1.5")),
            ItemOption(id=2, menu_item_id=102, name="Pint", price_addition=Decimal("2")),
        ],
    )
    store.replace_all(ROOMS, [Room(id="trivia1", name="Trivia Night"), Room(id="quiz2", name="Quiz")])
    store.replace_all(
        ROOM_MENU_SETTINGS,
        [
            RoomMenuSetting(room_id="trivia1", menu_id=1, menu_description="Tonight's food"),
            RoomMenuSetting(room_id="quiz2", menu_id=2),
        ],
    )
    return store


def test_categories_for_menu_are_sorted_by_display_order():
    store = _build_store()

    categories = derived_views.categories_for_menu(store, 1)

    assert [category.name for category in categories] == ["Starters", "Mains"]
    assert derived_views.categories_for_menu(store, None) == []


def test_items_for_menu_joins_through_categories():
    store = _build_store()

    assert [item.id for item in derived_views.items_for_menu(store, 1)] == [100, 101, 103]
    assert [item.id for item in derived_views.items_for_menu(store, 2)] == [102]
    assert derived_views.items_for_menu(store, 99) == []


def test_items_for_category_and_options():
    store = _build_store()

    assert [item.name for item in derived_views.items_for_category(store, 10)] == ["Burger", "Fries"]
    assert [option.name for option in derived_views.options_for_item(store, 100)] == ["Cheese"]
    assert derived_views.options_for_item(store, 103) == []


def test_options_for_question_sorted_by_letter():
    store = EntityStore()
    store.replace_all(
        QUESTION_OPTIONS,
        [
            QuestionOption(question_id=1, option_letter="C", option_text="5"),
            QuestionOption(question_id=1, option_letter="A", option_text="3"),
            QuestionOption(question_id=2, option_letter="A", option_text="x"),
        ],
    )

    letters = [option.option_letter for option in derived_views.options_for_question(store, 1)]

    assert letters == ["A", "C"]


def test_questions_for_room():
    store = _build_store()
    store.replace_all(
        QUESTIONS,
        [
            Question(id=1, room_id="trivia1", text="2+2?", correct_answer="4"),
            Question(id=2, room_id="quiz2", text="Capital?", correct_answer="Paris"),
        ],
    )

    assert [question.id for question in derived_views.questions_for_room(store, "trivia1")] == [1]
    assert derived_views.questions_for_room(store, None) == []


def test_name_lookups_fall_back_to_unknown():
    store = _build_store()

    assert derived_views.menu_name(store, 1) == "Lunch"
    assert derived_views.menu_name(store, "2") == "Bar"
    assert derived_views.category_name(store, 11) == "Starters"
    assert derived_views.room_name(store, "trivia1") == "Trivia Night"
    assert derived_views.menu_name(store, 42) == "Unknown"
    assert derived_views.room_name(store, None) == "Unknown"


def test_popular_items_skip_unavailable():
    store = _build_store()

    assert [item.name for item in derived_views.popular_items(store)] == ["Burger", "IPA"]
    assert [item.name for item in derived_views.popular_items(store, 1)] == ["Burger"]


def test_menu_for_room_groups_available_items():
    store = _build_store()

    view = derived_views.menu_for_room(store, "trivia1")

    assert view["menu"].name == "Lunch"
    assert view["description"] == "Tonight's food"
    assert [group["category"].name for group in view["categories"]] == ["Starters", "Mains"]
    assert view["categories"][0]["items"] == []
    mains = view["categories"][1]["items"]
    assert [entry["item"].name for entry in mains] == ["Burger", "Fries"]
    assert [option.name for option in mains[0]["options"]] == ["Cheese"]


def test_menu_for_room_is_empty_when_hidden_or_inactive():
    store = _build_store()

    assert derived_views.menu_for_room(store, "quiz2") == {}

    store.upsert(ROOM_MENU_SETTINGS, RoomMenuSetting(room_id="trivia1", show_menu=False, menu_id=1))
    assert derived_views.menu_for_room(store, "trivia1") == {}
    assert derived_views.menu_for_room(store, "missing") == {}
