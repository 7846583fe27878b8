from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class Room(BaseModel):
    id: str
    name: str
    is_active: bool = True
    created_at: Optional[str] = None


class RoomCreate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    id: str = Field(..., min_length=1, max_length=64)
    name: str = Field(..., min_length=1, max_length=255)
    is_active: bool = True


class RoomUpdate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(..., min_length=1, max_length=255)
    is_active: bool = True


class RoomMenuSetting(BaseModel):
    room_id: str
    show_menu: bool = True
    menu_id: Optional[int] = None
    menu_description: Optional[str] = None
    created_at: Optional[str] = None


class RoomMenuSettingCreate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    room_id: str = Field(..., min_length=1)
    show_menu: bool = True
    menu_id: Optional[int] = None
    menu_description: Optional[str] = None
