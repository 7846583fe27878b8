#!/usr/bin/env python3
from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
sys.path.append(str(ROOT))

from quiz_admin.core.config import QUIZ_API_BASE_URL, QUIZ_API_TIMEOUT_SECONDS  # noqa: E402
from quiz_admin.core.logging_setup import configure_logging  # noqa: E402
from quiz_admin.dashboard import Dashboard  # noqa: E402
from quiz_admin.integrations.http_client import RemoteDataClient  # noqa: E402
from quiz_admin.services import derived_views  # noqa: E402
from quiz_admin.services.store import MENUS, ROOMS  # noqa: E402


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Summary of menus, rooms and questions from the quiz API.")
    parser.add_argument("--base-url", default=QUIZ_API_BASE_URL, help="Quiz API base URL")
    parser.add_argument("--timeout", type=float, default=QUIZ_API_TIMEOUT_SECONDS, help="Request timeout (s)")
    parser.add_argument("--token", help="Bearer token for the API")
    parser.add_argument("--room", help="Room ID to show in detail")
    parser.add_argument(
        "--metrics",
        action="store_true",
        help="Print per-endpoint call metrics at the end",
    )
    parser.add_argument("--log-level", default=None, help="Log level (ex: DEBUG)")
    return parser.parse_args(argv)


def _print_menus(dashboard: Dashboard) -> None:
    menus = dashboard.store.all(MENUS)
    print(f"Menus: {len(menus)}")
    for menu in menus:
        categories = derived_views.categories_for_menu(dashboard.store, menu.id)
        items = derived_views.items_for_menu(dashboard.store, menu.id)
        status = "active" if menu.is_active else "inactive"
        print(f"  [{menu.id}] {menu.name} ({status}) -> {len(categories)} categories, {len(items)} items")


def _print_rooms(dashboard: Dashboard) -> None:
    rooms = dashboard.store.all(ROOMS)
    print(f"Rooms: {len(rooms)}")
    for room in rooms:
        setting = derived_views.setting_for_room(dashboard.store, room.id)
        questions = derived_views.questions_for_room(dashboard.store, room.id)
        if setting is None:
            menu_info = "no menu settings"
        elif not setting.show_menu:
            menu_info = "menu hidden"
        else:
            menu_info = f"menu: {derived_views.menu_name(dashboard.store, setting.menu_id)}"
        print(f"  [{room.id}] {room.name} -> {len(questions)} questions, {menu_info}")


def _print_room_detail(dashboard: Dashboard, room_id: str) -> None:
    print(f"Room {room_id}: {derived_views.room_name(dashboard.store, room_id)}")
    for question in derived_views.questions_for_room(dashboard.store, room_id):
        flag = "" if question.is_active else " (inactive)"
        print(f"  Q{question.id}{flag}: {question.text} [{question.points} pts] -> {question.correct_answer}")
        for option in derived_views.options_for_question(dashboard.store, question.id):
            print(f"    {option.option_letter}) {option.option_text}")

    view = dashboard.menu_for_room(room_id)
    if not view:
        print("  Menu not shown in this room")
        return
    print(f"  Menu: {view['menu'].name}")
    for group in view["categories"]:
        print(f"    {group['category'].name}")
        for entry in group["items"]:
            item = entry["item"]
            print(f"      {item.name} ${item.price:.2f}")


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    configure_logging(args.log_level)

    client = RemoteDataClient(args.base_url, timeout=args.timeout, token=args.token)
    with Dashboard(client) as dashboard:
        if not dashboard.load_all():
            print(f"Failed to load data: {dashboard.banner.message}")
            return 1

        _print_menus(dashboard)
        _print_rooms(dashboard)
        if args.room:
            _print_room_detail(dashboard, args.room)
        if args.metrics:
            print(json.dumps(client.metrics.snapshot(), indent=2))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
