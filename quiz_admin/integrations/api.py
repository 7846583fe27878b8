from __future__ import annotations

from typing import Any, BinaryIO, Optional, Type

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from quiz_admin.core.config import QUIZ_API_PAGE_LIMIT
from quiz_admin.core.errors import RemoteError
from quiz_admin.integrations.http_client import RemoteDataClient, resource_path
from quiz_admin.schemas.auth import LoginRequest, TeamProfile, TeamProfileUpdate, TokenResponse
from quiz_admin.schemas.menu import Category, ItemOption, Menu, MenuItem
from quiz_admin.schemas.questions import Question, QuestionOption, QuestionOptionIn, QuestionOptionsBulk
from quiz_admin.schemas.rooms import Room, RoomMenuSetting


def parse_record(model: Type[BaseModel], data: Any) -> Any:
    """Validate a success body; a shape the models do not accept is a RemoteError."""
    try:
        return model.model_validate(data)
    except PydanticValidationError as exc:
        raise RemoteError("API returned an unexpected response") from exc


class ResourceApi:
    """CRUD calls for one REST resource, parsed into ``record_model``."""

    resource: str = ""
    record_model: Type[BaseModel] = BaseModel
    parent_param: Optional[str] = None

    def __init__(self, client: RemoteDataClient) -> None:
        self.client = client

    def _parse(self, data: Any) -> Any:
        return parse_record(self.record_model, data)

    def _parse_many(self, data: Any) -> list[Any]:
        if data is None:
            return []
        if not isinstance(data, list):
            raise RemoteError("API returned an unexpected response")
        return [self._parse(entry) for entry in data]

    def list(
        self,
        parent_id: Any = None,
        *,
        skip: int = 0,
        limit: int = QUIZ_API_PAGE_LIMIT,
    ) -> list[Any]:
        params: dict[str, Any] = {"skip": skip, "limit": limit}
        if self.parent_param and parent_id is not None:
            params[self.parent_param] = parent_id
        return self._parse_many(self.client.list(self.resource, params=params))

    def list_all(self, parent_id: Any = None, *, page_size: int = QUIZ_API_PAGE_LIMIT) -> list[Any]:
        records: list[Any] = []
        skip = 0
        previous_first = None
        while True:
            page = self.list(parent_id, skip=skip, limit=page_size)
            # Stop if the server ignores paging and sends the same page again
            if page and previous_first is not None and page[0] == previous_first:
                return records
            records.extend(page)
            if page_size <= 0 or len(page) != page_size:
                return records
            previous_first = page[0]
            skip += page_size

    def get(self, key: Any) -> Any:
        return self._parse(self.client.get(self.resource, key))

    def create(self, payload: BaseModel) -> Any:
        return self._parse(self.client.create(self.resource, payload))

    def update(self, key: Any, payload: BaseModel) -> Any:
        return self._parse(self.client.update(self.resource, key, payload))

    def delete(self, key: Any) -> None:
        self.client.delete(self.resource, key)


class MenuApi(ResourceApi):
    resource = "menus"
    record_model = Menu


class CategoryApi(ResourceApi):
    resource = "categories"
    record_model = Category
    parent_param = "menu_id"


class MenuItemApi(ResourceApi):
    resource = "menu-items"
    record_model = MenuItem
    parent_param = "category_id"

    def list_by_menu(self, menu_id: int) -> list[MenuItem]:
        path = resource_path(self.resource, "by-menu", str(menu_id))
        data = self.client.request("GET", path, endpoint=f"/{self.resource}/by-menu/{{menu_id}}")
        return self._parse_many(data)


class ItemOptionApi(ResourceApi):
    resource = "item-options"
    record_model = ItemOption
    parent_param = "menu_item_id"


class RoomApi(ResourceApi):
    resource = "rooms"
    record_model = Room


class RoomMenuSettingApi(ResourceApi):
    resource = "room-menu-settings"
    record_model = RoomMenuSetting


class QuestionApi(ResourceApi):
    resource = "questions"
    record_model = Question
    parent_param = "room_id"

    def toggle_active(self, question_id: int) -> Question:
        return self._parse(self.client.patch(self.resource, question_id, action="toggle-active"))


class QuestionOptionApi(ResourceApi):
    resource = "options"
    record_model = QuestionOption
    parent_param = "question_id"

    def bulk_replace(self, question_id: int, options: list[QuestionOptionIn]) -> list[QuestionOption]:
        path = resource_path(self.resource, "bulk", str(question_id))
        data = self.client.request(
            "POST",
            path,
            body=QuestionOptionsBulk(options=options),
            endpoint=f"/{self.resource}/bulk/{{question_id}}",
        )
        if isinstance(data, dict):
            data = data.get("options")
        if data is None:
            # Some deployments answer the bulk call without a body
            return [
                QuestionOption(
                    question_id=question_id,
                    option_letter=option.option_letter,
                    option_text=option.option_text,
                )
                for option in options
            ]
        return self._parse_many(data)


class AuthApi:
    def __init__(self, client: RemoteDataClient) -> None:
        self.client = client

    def login(self, username: str, password: str) -> TokenResponse:
        payload = LoginRequest(username=username, password=password)
        data = self.client.request("POST", "/login", body=payload)
        return parse_record(TokenResponse, data)

    def update_team_profile(self, payload: TeamProfileUpdate, token: str) -> TeamProfile:
        data = self.client.request("PUT", "/teams/profile", body=payload, token=token)
        return parse_record(TeamProfile, data)

    def upload_profile_picture(
        self,
        filename: str,
        content: bytes | BinaryIO,
        token: str,
        content_type: str = "application/octet-stream",
    ) -> TeamProfile:
        data = self.client.request(
            "POST",
            "/teams/profile-picture",
            files={"file": (filename, content, content_type)},
            token=token,
        )
        return parse_record(TeamProfile, data)


class QuizApi:
    """All resource APIs sharing one client."""

    def __init__(self, client: RemoteDataClient) -> None:
        self.client = client
        self.menus = MenuApi(client)
        self.categories = CategoryApi(client)
        self.menu_items = MenuItemApi(client)
        self.item_options = ItemOptionApi(client)
        self.rooms = RoomApi(client)
        self.room_menu_settings = RoomMenuSettingApi(client)
        self.questions = QuestionApi(client)
        self.question_options = QuestionOptionApi(client)
        self.auth = AuthApi(client)
