from __future__ import annotations

import logging
from typing import Any, Optional

from quiz_admin.controllers.menus import (
    CategoryController,
    ItemOptionController,
    MenuController,
    MenuItemController,
)
from quiz_admin.controllers.questions import QuestionController
from quiz_admin.controllers.rooms import RoomController, RoomMenuSettingController
from quiz_admin.core.errors import DashboardError, OperationInProgressError, ValidationError
from quiz_admin.core.request_context import clear_operation_context, get_actor, set_operation_context
from quiz_admin.integrations.api import QuizApi
from quiz_admin.integrations.http_client import RemoteDataClient
from quiz_admin.schemas.auth import TokenResponse
from quiz_admin.services import derived_views
from quiz_admin.services.error_banner import ErrorBanner
from quiz_admin.services.event_bus import EventBus
from quiz_admin.services.in_flight import InFlightRegistry
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

logger = logging.getLogger(__name__)

# Parents before children so derived views are never half-populated
LOAD_ORDER = (
    MENUS,
    CATEGORIES,
    MENU_ITEMS,
    ITEM_OPTIONS,
    ROOMS,
    ROOM_MENU_SETTINGS,
    QUESTIONS,
    QUESTION_OPTIONS,
)


class Dashboard:
    """One client, one store and one controller per entity section."""

    def __init__(
        self,
        client: Optional[RemoteDataClient] = None,
        *,
        store: Optional[EntityStore] = None,
        event_bus: Optional[EventBus] = None,
        banner: Optional[ErrorBanner] = None,
        in_flight: Optional[InFlightRegistry] = None,
    ) -> None:
        self.client = client or RemoteDataClient()
        self.api = QuizApi(self.client)
        self.store = store or EntityStore(event_bus)
        self.banner = banner or ErrorBanner()
        self.in_flight = in_flight or InFlightRegistry()

        shared = (self.api, self.store, self.banner, self.in_flight)
        self.menus = MenuController(*shared)
        self.categories = CategoryController(*shared)
        self.menu_items = MenuItemController(*shared)
        self.item_options = ItemOptionController(*shared)
        self.rooms = RoomController(*shared)
        self.room_menu_settings = RoomMenuSettingController(*shared)
        self.questions = QuestionController(*shared)

        self.selected_menu_id: Optional[int] = None
        self.selected_category_id: Optional[int] = None
        self.selected_item_id: Optional[int] = None
        self.selected_room_id: Optional[str] = None

    def close(self) -> None:
        self.client.close()

    def __enter__(self) -> "Dashboard":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    # Loading

    def load_collection(self, collection: str) -> bool:
        resource_api = getattr(self.api, collection)
        try:
            with self.in_flight.track(f"{collection}:load"):
                records = resource_api.list_all()
        except OperationInProgressError:
            return False
        except DashboardError as exc:
            self.banner.show(exc)
            logger.warning("loading %s failed: %s", collection, exc.message, extra={"collection": collection})
            return False
        self.store.replace_all(collection, records)
        return True

    def load_all(self) -> bool:
        results = [self.load_collection(collection) for collection in LOAD_ORDER]
        # Select from whatever parents did load
        self._apply_initial_selection()
        return all(results)

    def _apply_initial_selection(self) -> None:
        if self.selected_menu_id is None or not self.store.contains(MENUS, self.selected_menu_id):
            menus = self.store.all(MENUS)
            self.select_menu(menus[0].id if menus else None)
        if self.selected_room_id is None or not self.store.contains(ROOMS, self.selected_room_id):
            rooms = self.store.all(ROOMS)
            self.select_room(rooms[0].id if rooms else None)

    # Selection cascades

    def select_menu(self, menu_id: Optional[int]) -> None:
        self.selected_menu_id = menu_id
        self.categories.set_parent_default("menu_id", menu_id)
        categories = derived_views.categories_for_menu(self.store, menu_id)
        self.select_category(categories[0].id if categories else None)

    def select_category(self, category_id: Optional[int]) -> None:
        self.selected_category_id = category_id
        self.menu_items.set_parent_default("category_id", category_id)
        items = derived_views.items_for_category(self.store, category_id)
        self.select_item(items[0].id if items else None)

    def select_item(self, item_id: Optional[int]) -> None:
        self.selected_item_id = item_id
        self.item_options.set_parent_default("menu_item_id", item_id)

    def select_room(self, room_id: Optional[str]) -> None:
        self.selected_room_id = room_id
        self.questions.set_parent_default("room_id", room_id)

    # Views for the selected parents

    def visible_categories(self):
        return derived_views.categories_for_menu(self.store, self.selected_menu_id)

    def visible_items(self):
        return derived_views.items_for_menu(self.store, self.selected_menu_id)

    def visible_item_options(self):
        return derived_views.options_for_item(self.store, self.selected_item_id)

    def visible_questions(self):
        return derived_views.questions_for_room(self.store, self.selected_room_id)

    def menu_for_room(self, room_id: Optional[str] = None) -> dict[str, Any]:
        return derived_views.menu_for_room(self.store, room_id or self.selected_room_id)

    def is_busy(self, section: str = "") -> bool:
        return self.in_flight.any_busy(section)

    # Auth

    def login(self, username: str, password: str) -> Optional[TokenResponse]:
        if not (username or "").strip() or not password:
            self.banner.show(ValidationError("Username and password are required", ["username", "password"]))
            return None
        try:
            with self.in_flight.track("auth:login"):
                token = self.api.auth.login(username, password)
        except OperationInProgressError:
            return None
        except DashboardError as exc:
            self.banner.show(exc)
            logger.warning("login failed: %s", exc.message)
            return None
        self.client.token = token.access_token
        set_operation_context(actor=username)
        logger.info("logged in", extra={"actor": username})
        return token

    def logout(self) -> None:
        actor = get_actor()
        self.client.token = None
        clear_operation_context(include_actor=True)
        logger.info("logged out", extra={"actor": actor})
