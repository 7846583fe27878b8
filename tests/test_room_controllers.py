from quiz_admin.dashboard import Dashboard
from quiz_admin.services.store import ROOM_MENU_SETTINGS, ROOMS
from tests.fake_quiz_api import (
    FakeQuizDb,
    build_fake_api,
    build_remote_client,
    seed_lunch_menu,
    seed_trivia_room,
)


def _build_dashboard() -> tuple[Dashboard, FakeQuizDb]:
    db = FakeQuizDb()
    seed_lunch_menu(db)
    seed_trivia_room(db)
    dashboard = Dashboard(build_remote_client(build_fake_api(db)))
    assert dashboard.load_all()
    return dashboard, db


def test_create_room():
    dashboard, db = _build_dashboard()

    dashboard.rooms.set_field("id", "quiz2")
    dashboard.rooms.set_field("name", "  Quiz Night ")
    room = dashboard.rooms.submit()

    assert room.id == "quiz2"
    assert room.name == "Quiz Night"
    assert [r.id for r in dashboard.store.all(ROOMS)] == ["trivia1", "quiz2"]
    assert "quiz2" in db.rooms


def test_duplicate_room_id_rejected_locally():
    dashboard, db = _build_dashboard()
    before = len(db.requests)

    dashboard.rooms.set_field("id", "trivia1")
    dashboard.rooms.set_field("name", "Another")

    assert dashboard.rooms.submit() is None
    assert dashboard.banner.message == "A room with this ID already exists"
    assert len(db.requests) == before


def test_duplicate_room_id_reported_by_server():
    dashboard, db = _build_dashboard()
    db.rooms["ghost"] = {"id": "ghost", "name": "Ghost", "is_active": True, "created_at": None}

    dashboard.rooms.set_field("id", "ghost")
    dashboard.rooms.set_field("name", "Ghost again")

    assert dashboard.rooms.submit() is None
    assert dashboard.banner.message == "Room ID already exists"
    assert dashboard.banner.current.status_code == 409


def test_room_id_is_immutable_when_editing():
    dashboard, db = _build_dashboard()

    dashboard.rooms.edit(dashboard.store.get(ROOMS, "trivia1"))
    dashboard.rooms.set_field("id", "renamed")

    assert dashboard.rooms.submit() is None
    assert dashboard.banner.message == "Room ID cannot be changed after creation"

    dashboard.rooms.set_field("id", "trivia1")
    dashboard.rooms.set_field("name", "Trivia Tuesday")
    room = dashboard.rooms.submit()

    assert room.name == "Trivia Tuesday"
    assert db.calls("PUT") == [("PUT", "/rooms/trivia1")]


def test_trivia1_has_a_single_menu_setting():
    dashboard, db = _build_dashboard()
    settings = dashboard.room_menu_settings

    values = settings.open_for_room("trivia1")
    assert values["room_id"] == "trivia1"
    assert values["menu_id"] == 1
    assert settings.is_open
    first = settings.submit()
    assert first.room_id == "trivia1"
    assert not settings.is_open

    settings.start_add()
    settings.set_field("room_id", "trivia1")
    settings.set_field("show_menu", False)
    second = settings.submit()

    assert second.show_menu is False
    assert [s.room_id for s in dashboard.store.all(ROOM_MENU_SETTINGS)] == ["trivia1"]
    assert list(db.settings) == ["trivia1"]
    assert db.calls("POST", "/room-menu-settings") == [("POST", "/room-menu-settings")]
    assert db.calls("PUT", "/room-menu-settings") == [("PUT", "/room-menu-settings/trivia1")]


def test_open_existing_setting_edits_it():
    dashboard, db = _build_dashboard()
    db.settings["trivia1"] = {
        "room_id": "trivia1",
        "show_menu": True,
        "menu_id": 1,
        "menu_description": "Snacks all night",
    }

    values = dashboard.room_menu_settings.open_for_room("trivia1")

    assert values["menu_description"] == "Snacks all night"
    assert dashboard.room_menu_settings.is_editing
    assert dashboard.store.contains(ROOM_MENU_SETTINGS, "trivia1")


def test_setting_load_failure_is_not_treated_as_missing():
    dashboard, db = _build_dashboard()
    db.fail("GET", "/room-menu-settings/trivia1", 500, "Database unavailable")

    assert dashboard.room_menu_settings.open_for_room("trivia1") is None

    assert dashboard.banner.message == "Database unavailable"
    assert not dashboard.room_menu_settings.is_open
    assert db.calls("POST") == []


def test_room_delete_cascades_to_setting():
    dashboard, db = _build_dashboard()
    dashboard.room_menu_settings.open_for_room("trivia1")
    dashboard.room_menu_settings.submit()

    assert dashboard.rooms.delete("trivia1", lambda message: True) is True

    assert db.calls("DELETE") == [("DELETE", "/room-menu-settings/trivia1"), ("DELETE", "/rooms/trivia1")]
    assert dashboard.store.all(ROOMS) == []
    assert dashboard.store.all(ROOM_MENU_SETTINGS) == []
    assert db.settings == {}


def test_menu_shown_in_room():
    dashboard, _ = _build_dashboard()
    dashboard.room_menu_settings.open_for_room("trivia1")
    dashboard.room_menu_settings.set_field("menu_description", "Kitchen open until 10")
    dashboard.room_menu_settings.submit()

    view = dashboard.menu_for_room("trivia1")

    assert view["menu"].name == "Lunch"
    assert view["description"] == "Kitchen open until 10"
    assert view["categories"][0]["items"][0]["item"].name == "Burger"
