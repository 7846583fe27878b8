from __future__ import annotations

from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class Menu(BaseModel):
    id: int
    name: str
    description: Optional[str] = None
    is_active: bool = True


class MenuCreate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    is_active: bool = True


class Category(BaseModel):
    id: int
    menu_id: int
    name: str
    description: Optional[str] = None
    display_order: int = 0


class CategoryCreate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    menu_id: int
    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    display_order: int = 0


class MenuItem(BaseModel):
    id: int
    category_id: int
    name: str
    description: Optional[str] = None
    price: Decimal
    image_path: Optional[str] = None
    is_available: bool = True
    is_popular: bool = False
    display_order: int = 0


class MenuItemCreate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    category_id: int
    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    price: Decimal = Field(..., ge=0)
    image_path: Optional[str] = None
    is_available: bool = True
    is_popular: bool = False
    display_order: int = 0


class ItemOption(BaseModel):
    id: int
    menu_item_id: int
    name: str
    price_addition: Decimal = Decimal("0")


class ItemOptionCreate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    menu_item_id: int
    name: str = Field(..., min_length=1, max_length=255)
    # Negative additions are discounts
    price_addition: Decimal = Decimal("0")
