from __future__ import annotations

import logging
from typing import Any, Optional

from pydantic import BaseModel

from quiz_admin.controllers.base import EditingDraft, EntityFormController, NewDraft
from quiz_admin.core.errors import DashboardError, NotFoundError, OperationInProgressError, ValidationError
from quiz_admin.schemas.rooms import RoomCreate, RoomMenuSetting, RoomMenuSettingCreate, RoomUpdate
from quiz_admin.services.store import MENUS, ROOM_MENU_SETTINGS, ROOMS

logger = logging.getLogger(__name__)


class RoomController(EntityFormController):
    collection = ROOMS
    entity_label = "room"
    create_model = RoomCreate
    update_model = RoomUpdate
    defaults = {"id": "", "name": "", "is_active": True}

    def _extra_checks(self, payload: BaseModel) -> BaseModel:
        room_id = str(self.values.get("id") or "").strip()
        if isinstance(self.draft, EditingDraft):
            if room_id and room_id != self.draft.original_key:
                raise ValidationError("Room ID cannot be changed after creation", ["id"])
        elif self.store.contains(ROOMS, room_id):
            raise ValidationError("A room with this ID already exists", ["id"])
        return payload

    def confirmation_message(self, key: Any) -> str:
        return "Are you sure you want to delete this room? Its menu settings will be deleted too."


class RoomMenuSettingController(EntityFormController):
    """Menu settings for one room at a time.

    There is at most one setting per room, so submit picks PUT when the store
    already holds a row for the room and POST otherwise.
    """

    collection = ROOM_MENU_SETTINGS
    entity_label = "room menu settings"
    create_model = RoomMenuSettingCreate
    defaults = {"room_id": "", "show_menu": True, "menu_id": None, "menu_description": ""}
    references = {"room_id": ROOMS, "menu_id": MENUS}

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.is_open = False

    def _default_values(self, room_id: str) -> dict[str, Any]:
        menus = self.store.all(MENUS)
        values = self.blank_values()
        values.update(
            {
                "room_id": room_id,
                "show_menu": True,
                "menu_id": menus[0].id if menus else None,
                "menu_description": "",
            }
        )
        return values

    def open_for_room(self, room_id: str) -> Optional[dict[str, Any]]:
        """Load the room's setting into the form.

        A 404 means the room has none yet and the form opens with defaults;
        any other failure is surfaced and the form stays closed.
        """
        try:
            with self.in_flight.track(f"{self.collection}:load:{room_id}"):
                try:
                    setting = self.quiz_api.room_menu_settings.get(room_id)
                except NotFoundError:
                    setting = None
        except OperationInProgressError:
            return None
        except DashboardError as exc:
            self.surface(exc, "load")
            return None

        if setting is None:
            logger.info("room %s has no menu settings yet", room_id, extra={"collection": self.collection})
            self.store.remove(ROOM_MENU_SETTINGS, room_id)
            self.draft = NewDraft()
            self.values = self._default_values(room_id)
        else:
            self.store.upsert(ROOM_MENU_SETTINGS, setting)
            self.edit(setting)
        self.is_open = True
        return self.values

    def close(self) -> None:
        self.is_open = False
        self.start_add()

    def cancel(self) -> None:
        self.close()

    def _submit_record_keys(self, payload: BaseModel) -> list[str]:
        # Keyed by room, and a room delete takes the setting with it
        return [self.record_key(payload.room_id), self.record_key(payload.room_id, ROOMS)]

    def _save(self, payload: BaseModel) -> RoomMenuSetting:
        room_id = payload.room_id
        if self.store.contains(ROOM_MENU_SETTINGS, room_id):
            record = self.quiz_api.room_menu_settings.update(room_id, payload)
        else:
            record = self.quiz_api.room_menu_settings.create(payload)
        self.store.upsert(ROOM_MENU_SETTINGS, record)
        return record

    def submit(self) -> Optional[BaseModel]:
        record = super().submit()
        if record is not None:
            self.is_open = False
        return record
