from __future__ import annotations

from decimal import Decimal

from quiz_admin.controllers.base import EntityFormController
from quiz_admin.schemas.menu import CategoryCreate, ItemOptionCreate, MenuCreate, MenuItemCreate
from quiz_admin.services.store import CATEGORIES, ITEM_OPTIONS, MENU_ITEMS, MENUS


class MenuController(EntityFormController):
    collection = MENUS
    entity_label = "menu"
    create_model = MenuCreate
    defaults = {"name": "", "description": "", "is_active": True}


class CategoryController(EntityFormController):
    collection = CATEGORIES
    entity_label = "category"
    create_model = CategoryCreate
    defaults = {"menu_id": None, "name": "", "description": "", "display_order": 0}
    references = {"menu_id": MENUS}


class MenuItemController(EntityFormController):
    collection = MENU_ITEMS
    entity_label = "menu item"
    create_model = MenuItemCreate
    defaults = {
        "category_id": None,
        "name": "",
        "description": "",
        "price": "",
        "image_path": "",
        "is_available": True,
        "is_popular": False,
        "display_order": 0,
    }
    references = {"category_id": CATEGORIES}

    def confirmation_message(self, key) -> str:
        return "Are you sure you want to delete this menu item? Its options will be deleted too."


class ItemOptionController(EntityFormController):
    collection = ITEM_OPTIONS
    entity_label = "item option"
    create_model = ItemOptionCreate
    defaults = {"menu_item_id": None, "name": "", "price_addition": Decimal("0")}
    references = {"menu_item_id": MENU_ITEMS}
