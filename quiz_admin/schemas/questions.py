from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

OPTION_LETTERS = "ABCDEFGH"
MIN_OPTIONS = 2
MAX_OPTIONS = len(OPTION_LETTERS)


class QuestionType(str, Enum):
    TEXT = "TEXT"
    MULTIPLE_CHOICE = "MULTIPLE_CHOICE"


class Question(BaseModel):
    id: int
    room_id: str
    text: str
    question_type: QuestionType = QuestionType.TEXT
    correct_answer: str
    points: int = 1
    time_limit: Optional[int] = None
    is_active: bool = True


class QuestionCreate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    room_id: str = Field(..., min_length=1)
    text: str = Field(..., min_length=1)
    question_type: QuestionType = QuestionType.TEXT
    correct_answer: str = Field(..., min_length=1)
    points: int = Field(1, ge=1)
    time_limit: Optional[int] = Field(None, ge=1)
    is_active: bool = True


class QuestionOption(BaseModel):
    question_id: int
    option_letter: str
    option_text: str


class QuestionOptionIn(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    option_letter: str = Field(..., pattern=r"^[A-H]$")
    option_text: str = Field(..., min_length=1)


class QuestionOptionsBulk(BaseModel):
    options: list[QuestionOptionIn] = Field(default_factory=list)
