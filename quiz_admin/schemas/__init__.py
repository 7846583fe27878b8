from quiz_admin.schemas.menu import (
    Category,
    CategoryCreate,
    ItemOption,
    ItemOptionCreate,
    Menu,
    MenuCreate,
    MenuItem,
    MenuItemCreate,
)
from quiz_admin.schemas.rooms import Room, RoomCreate, RoomMenuSetting, RoomMenuSettingCreate, RoomUpdate
from quiz_admin.schemas.questions import (
    Question,
    QuestionCreate,
    QuestionOption,
    QuestionOptionIn,
    QuestionOptionsBulk,
    QuestionType,
)
from quiz_admin.schemas.auth import LoginRequest, TeamProfile, TeamProfileUpdate, TokenResponse
