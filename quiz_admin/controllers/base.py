from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Optional, Type, Union

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from quiz_admin.core.errors import DashboardError, NotFoundError, OperationInProgressError, ValidationError
from quiz_admin.integrations.api import QuizApi, ResourceApi
from quiz_admin.services.cascade import DeletePlan, apply_delete, plan_delete
from quiz_admin.services.error_banner import ErrorBanner
from quiz_admin.services.in_flight import InFlightRegistry
from quiz_admin.services.store import ITEM_OPTIONS, ROOM_MENU_SETTINGS, EntityStore, key_of

logger = logging.getLogger(__name__)

ConfirmCallback = Callable[[str], bool]

_MISSING_ERROR_TYPES = {"missing", "string_too_short"}


@dataclass(frozen=True)
class NewDraft:
    kind: str = "new"


@dataclass(frozen=True)
class EditingDraft:
    original_key: Any
    kind: str = "editing"


Draft = Union[NewDraft, EditingDraft]


class FormStatus(str, Enum):
    IDLE = "idle"
    SUBMITTING = "submitting"


def describe_validation_error(exc: PydanticValidationError) -> tuple[str, list[str]]:
    missing: list[str] = []
    problems: list[str] = []
    fields: list[str] = []
    for error in exc.errors():
        field = ".".join(str(part) for part in error.get("loc", ())) or "payload"
        fields.append(field)
        if error.get("type") in _MISSING_ERROR_TYPES or error.get("input") in (None, ""):
            missing.append(field)
        else:
            problems.append(f"{field}: {error.get('msg')}")

    parts: list[str] = []
    if missing:
        parts.append("Please fill all required fields: " + ", ".join(missing))
    parts.extend(problems)
    return "; ".join(parts), fields


class EntityFormController:
    """Add/edit/delete lifecycle for one entity type.

    The draft is either ``NewDraft`` (next submit creates) or
    ``EditingDraft`` (next submit updates ``original_key``); ``values`` holds
    the form fields. The store only changes after the API accepts a call.
    """

    collection: str = ""
    entity_label: str = "record"
    create_model: Type[BaseModel] = BaseModel
    update_model: Optional[Type[BaseModel]] = None
    defaults: dict[str, Any] = {}
    # payload field -> collection it must exist in
    references: dict[str, str] = {}

    def __init__(
        self,
        api: QuizApi,
        store: EntityStore,
        banner: ErrorBanner,
        in_flight: InFlightRegistry,
    ) -> None:
        self.quiz_api = api
        self.store = store
        self.banner = banner
        self.in_flight = in_flight
        self.parent_defaults: dict[str, Any] = {}
        self.draft: Draft = NewDraft()
        self.values: dict[str, Any] = self.blank_values()

    @property
    def api(self) -> ResourceApi:
        return getattr(self.quiz_api, self.collection)

    @property
    def submit_key(self) -> str:
        return f"{self.collection}:submit"

    def delete_key(self, key: Any) -> str:
        return f"{self.collection}:delete:{key}"

    def record_key(self, key: Any, collection: Optional[str] = None) -> str:
        """Lock shared by every mutation of one record (update, delete, toggle)."""
        return f"{collection or self.collection}:record:{key}"

    def _submit_record_keys(self, payload: BaseModel) -> list[str]:
        if isinstance(self.draft, EditingDraft):
            return [self.record_key(self.draft.original_key)]
        return []

    @property
    def status(self) -> FormStatus:
        return FormStatus.SUBMITTING if self.in_flight.is_busy(self.submit_key) else FormStatus.IDLE

    @property
    def is_editing(self) -> bool:
        return isinstance(self.draft, EditingDraft)

    def blank_values(self) -> dict[str, Any]:
        values = dict(self.defaults)
        values.update(self.parent_defaults)
        return values

    def start_add(self) -> None:
        self.draft = NewDraft()
        self.values = self.blank_values()

    def cancel(self) -> None:
        self.start_add()

    def edit(self, record: BaseModel) -> None:
        self.draft = EditingDraft(key_of(self.collection, record))
        self.values = record.model_dump()

    def set_field(self, name: str, value: Any) -> None:
        self.values[name] = value

    def set_parent_default(self, name: str, value: Any) -> None:
        self.parent_defaults[name] = value
        if not self.is_editing:
            self.values[name] = value

    def _payload_model(self) -> Type[BaseModel]:
        if self.is_editing and self.update_model is not None:
            return self.update_model
        return self.create_model

    def _normalized_values(self, model: Type[BaseModel]) -> dict[str, Any]:
        data: dict[str, Any] = {}
        for name, value in self.values.items():
            if isinstance(value, str) and not value.strip():
                value = None
            if value is None:
                field = model.model_fields.get(name)
                if field is not None and not field.is_required():
                    continue
            data[name] = value
        return data

    def build_payload(self) -> BaseModel:
        model = self._payload_model()
        try:
            return model.model_validate(self._normalized_values(model))
        except PydanticValidationError as exc:
            message, fields = describe_validation_error(exc)
            raise ValidationError(message, fields) from exc

    def _check_references(self, payload: BaseModel) -> None:
        for field, collection in self.references.items():
            value = getattr(payload, field, None)
            if value is None:
                continue
            if not self.store.contains(collection, value):
                raise ValidationError(f"Selected {field} does not exist: {value}", [field])

    def _extra_checks(self, payload: BaseModel) -> BaseModel:
        return payload

    def validate(self) -> BaseModel:
        payload = self.build_payload()
        self._check_references(payload)
        return self._extra_checks(payload)

    def surface(self, error: DashboardError, action: str) -> None:
        self.banner.show(error)
        logger.warning(
            "%s %s failed: %s",
            self.entity_label,
            action,
            error.message,
            extra={"collection": self.collection},
        )

    def _save(self, payload: BaseModel) -> BaseModel:
        if isinstance(self.draft, EditingDraft):
            record = self.api.update(self.draft.original_key, payload)
        else:
            record = self.api.create(payload)
        self.store.upsert(self.collection, record)
        return record

    def submit(self) -> Optional[BaseModel]:
        """Validate and create/update. Returns the saved record or None."""
        try:
            payload = self.validate()
        except ValidationError as exc:
            self.surface(exc, "validation")
            return None

        try:
            with self.in_flight.track(self.submit_key, *self._submit_record_keys(payload)):
                record = self._save(payload)
        except OperationInProgressError:
            logger.info("%s submit ignored, already in flight", self.entity_label)
            return None
        except DashboardError as exc:
            self.surface(exc, "submit")
            return None

        logger.info(
            "%s saved",
            self.entity_label,
            extra={"collection": self.collection},
        )
        self.start_add()
        return record

    def _dependent_api(self, collection: str) -> Optional[ResourceApi]:
        if collection == ITEM_OPTIONS:
            return self.quiz_api.item_options
        if collection == ROOM_MENU_SETTINGS:
            return self.quiz_api.room_menu_settings
        # Anything else is removed by the server together with its parent
        return None

    def _delete_remote(self, plan: DeletePlan) -> None:
        for dependent_collection, dependent_key in plan.dependents:
            dependent_api = self._dependent_api(dependent_collection)
            if dependent_api is None:
                continue
            try:
                dependent_api.delete(dependent_key)
            except NotFoundError:
                logger.info("dependent already gone", extra={"collection": dependent_collection})
            self.store.remove(dependent_collection, dependent_key)

        try:
            self.api.delete(plan.key)
        except NotFoundError:
            logger.warning(
                "%s %s already deleted on the server",
                self.entity_label,
                plan.key,
                extra={"collection": self.collection},
            )
        apply_delete(self.store, plan)

    def confirmation_message(self, key: Any) -> str:
        return f"Are you sure you want to delete this {self.entity_label}?"

    def delete(self, key: Any, confirm: ConfirmCallback) -> bool:
        """Guard, confirm, then delete remotely and mirror into the store."""
        try:
            plan = plan_delete(self.store, self.collection, key)
        except DashboardError as exc:
            self.surface(exc, "delete")
            return False

        if not confirm(self.confirmation_message(key)):
            return False

        record_keys = [self.record_key(key)] + [
            self.record_key(dependent_key, dependent_collection)
            for dependent_collection, dependent_key in plan.dependents
        ]
        try:
            with self.in_flight.track(self.delete_key(key), *record_keys):
                self._delete_remote(plan)
        except OperationInProgressError:
            logger.info("%s delete ignored, already in flight", self.entity_label)
            return False
        except DashboardError as exc:
            self.surface(exc, "delete")
            return False

        if isinstance(self.draft, EditingDraft) and self.draft.original_key == key:
            self.start_add()
        return True
