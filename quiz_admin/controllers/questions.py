from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional

from pydantic import BaseModel

from quiz_admin.controllers.base import EditingDraft, EntityFormController
from quiz_admin.core.errors import DashboardError, OperationInProgressError, ValidationError
from quiz_admin.schemas.questions import (
    MAX_OPTIONS,
    MIN_OPTIONS,
    OPTION_LETTERS,
    Question,
    QuestionCreate,
    QuestionOptionIn,
    QuestionType,
)
from quiz_admin.services import derived_views
from quiz_admin.services.store import QUESTION_OPTIONS, QUESTIONS, ROOMS

logger = logging.getLogger(__name__)


@dataclass
class OptionDraft:
    option_letter: str
    option_text: str = ""


def relabel(options: list[OptionDraft]) -> list[OptionDraft]:
    for index, option in enumerate(options):
        option.option_letter = OPTION_LETTERS[index]
    return options


class QuestionController(EntityFormController):
    collection = QUESTIONS
    entity_label = "question"
    create_model = QuestionCreate
    defaults = {
        "room_id": None,
        "text": "",
        "question_type": QuestionType.TEXT,
        "correct_answer": "",
        "points": 1,
        "time_limit": None,
        "is_active": True,
    }
    references = {"room_id": ROOMS}

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.options: list[OptionDraft] = []

    @property
    def is_multiple_choice(self) -> bool:
        return QuestionType(self.values.get("question_type") or QuestionType.TEXT) == QuestionType.MULTIPLE_CHOICE

    def start_add(self) -> None:
        super().start_add()
        self.options = []

    def edit(self, record: BaseModel) -> None:
        super().edit(record)
        self.options = [
            OptionDraft(option.option_letter, option.option_text)
            for option in derived_views.options_for_question(self.store, record.id)
        ]

    def set_field(self, name: str, value: Any) -> None:
        if name == "question_type":
            self.set_question_type(value)
            return
        super().set_field(name, value)

    def set_question_type(self, question_type: Any) -> None:
        question_type = QuestionType(question_type)
        self.values["question_type"] = question_type
        # Switching back to TEXT keeps the typed options around in the draft
        if question_type == QuestionType.MULTIPLE_CHOICE and not self.options:
            self.options = [OptionDraft("A"), OptionDraft("B")]

    def add_option(self, text: str = "") -> bool:
        if len(self.options) >= MAX_OPTIONS:
            self.surface(ValidationError(f"A question can have at most {MAX_OPTIONS} options", ["options"]), "edit")
            return False
        self.options.append(OptionDraft(OPTION_LETTERS[len(self.options)], text))
        return True

    def set_option_text(self, index: int, text: str) -> None:
        self.options[index].option_text = text

    def remove_option(self, index: int) -> None:
        removed = self.options.pop(index)
        correct = str(self.values.get("correct_answer") or "").strip().upper()
        if self.is_multiple_choice and correct:
            if correct == removed.option_letter:
                self.values["correct_answer"] = ""
            elif correct in OPTION_LETTERS and OPTION_LETTERS.index(correct) > index:
                # Keep pointing at the same option after the letters shift down
                self.values["correct_answer"] = OPTION_LETTERS[OPTION_LETTERS.index(correct) - 1]
        relabel(self.options)

    def _option_payloads(self) -> list[QuestionOptionIn]:
        letters = [option.option_letter for option in self.options]
        if letters != list(OPTION_LETTERS[: len(letters)]):
            raise ValidationError("Option letters must run A, B, C... without gaps", ["options"])
        blank = [option.option_letter for option in self.options if not (option.option_text or "").strip()]
        if blank:
            raise ValidationError("Please fill the text of option(s): " + ", ".join(blank), ["options"])
        return [
            QuestionOptionIn(option_letter=option.option_letter, option_text=option.option_text)
            for option in self.options
        ]

    def _extra_checks(self, payload: BaseModel) -> BaseModel:
        if payload.question_type != QuestionType.MULTIPLE_CHOICE:
            return payload

        if len(self.options) < MIN_OPTIONS:
            raise ValidationError(
                f"Multiple choice questions need at least {MIN_OPTIONS} options", ["options"]
            )
        if len(self.options) > MAX_OPTIONS:
            raise ValidationError(f"A question can have at most {MAX_OPTIONS} options", ["options"])
        self._option_payloads()

        correct = payload.correct_answer.strip().upper()
        letters = [option.option_letter for option in self.options]
        if correct not in letters:
            raise ValidationError(
                "Correct answer must be one of the option letters: " + ", ".join(letters),
                ["correct_answer"],
            )
        return payload.model_copy(update={"correct_answer": correct})

    def _save(self, payload: BaseModel) -> Question:
        question = super()._save(payload)
        # From here on a resubmit must update, not create a second question
        self.draft = EditingDraft(question.id)

        if payload.question_type == QuestionType.MULTIPLE_CHOICE:
            saved = self.quiz_api.question_options.bulk_replace(question.id, self._option_payloads())
        elif derived_views.options_for_question(self.store, question.id):
            saved = self.quiz_api.question_options.bulk_replace(question.id, [])
        else:
            return question

        self.store.remove_where(QUESTION_OPTIONS, lambda option: option.question_id == question.id)
        for option in saved:
            self.store.upsert(QUESTION_OPTIONS, option)
        return question

    def load_options(self, question_id: int) -> bool:
        try:
            with self.in_flight.track(f"{QUESTION_OPTIONS}:load:{question_id}"):
                options = self.quiz_api.question_options.list(question_id)
        except OperationInProgressError:
            return False
        except DashboardError as exc:
            self.surface(exc, "load options")
            return False
        self.store.remove_where(QUESTION_OPTIONS, lambda option: option.question_id == question_id)
        for option in options:
            self.store.upsert(QUESTION_OPTIONS, option)
        return True

    def toggle_active(self, question_id: int) -> Optional[Question]:
        try:
            with self.in_flight.track(f"{self.collection}:toggle:{question_id}", self.record_key(question_id)):
                question = self.quiz_api.questions.toggle_active(question_id)
        except OperationInProgressError:
            return None
        except DashboardError as exc:
            self.surface(exc, "toggle")
            return None
        self.store.upsert(QUESTIONS, question)
        logger.info(
            "question %s is now %s",
            question.id,
            "active" if question.is_active else "inactive",
            extra={"collection": self.collection},
        )
        return question

    def set_active(self, question_id: int, active: bool) -> Optional[Question]:
        current = self.store.get(QUESTIONS, question_id)
        if current is not None and current.is_active == active:
            return current
        return self.toggle_active(question_id)
