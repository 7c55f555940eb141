"""
Question bank and diagnostic questionnaire loading.

Both sources are JSON files validated with Pydantic before being turned
into the immutable core records:

question_bank.json:
    {"questions": [{"id": "...", "difficulty_level": 1, "text": "...",
                    "options": [...], "correct_option_index": 0, ...}]}

diagnostic.json:
    {"items": [{"text": "...", "level": 1}, ...]}
"""

from __future__ import annotations

import json
from collections.abc import Iterable, Sequence
from pathlib import Path
from typing import Any

from loguru import logger
from pydantic import BaseModel, Field, ValidationError, model_validator

from src.core.levels import DifficultyLevel
from src.core.models import DiagnosticItem, Question


class QuestionBankError(Exception):
    """Raised when a content file is missing, malformed or invalid."""
    pass


# =============================================================================
# File Schemas
# =============================================================================


class QuestionSchema(BaseModel):
    """One question record as stored in the bank."""

    id: str = Field(min_length=1)
    difficulty_level: int = Field(ge=1, le=4)
    text: str = Field(min_length=1)
    options: list[str] = Field(min_length=1)
    correct_option_index: int = Field(ge=0)
    explanation: str = ""
    topic_tag: str = ""
    competency: str = ""
    misconception: str | None = None
    learning_tip: str | None = None
    image_url: str | None = None

    @model_validator(mode="after")
    def check_correct_index(self) -> QuestionSchema:
        if self.correct_option_index >= len(self.options):
            raise ValueError(
                f"correct_option_index {self.correct_option_index} out of range "
                f"for {len(self.options)} options"
            )
        return self

    def to_question(self) -> Question:
        return Question(
            id=self.id,
            difficulty_level=DifficultyLevel(self.difficulty_level),
            text=self.text,
            options=tuple(self.options),
            correct_option_index=self.correct_option_index,
            explanation=self.explanation,
            topic_tag=self.topic_tag,
            competency=self.competency,
            misconception=self.misconception,
            learning_tip=self.learning_tip,
            image_url=self.image_url,
        )


class QuestionBankSchema(BaseModel):
    questions: list[QuestionSchema]

    @model_validator(mode="after")
    def check_unique_ids(self) -> QuestionBankSchema:
        ids = [q.id for q in self.questions]
        duplicates = sorted({i for i in ids if ids.count(i) > 1})
        if duplicates:
            raise ValueError(f"Duplicate question ids: {', '.join(duplicates)}")
        return self


class DiagnosticItemSchema(BaseModel):
    text: str = Field(min_length=1)
    level: int = Field(ge=1, le=4)


class DiagnosticSchema(BaseModel):
    items: list[DiagnosticItemSchema]


def _read_json(path: Path) -> Any:
    try:
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)
    except OSError as e:
        raise QuestionBankError(f"Cannot read {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise QuestionBankError(f"Malformed JSON in {path}: {e}") from e


# =============================================================================
# Question Repository
# =============================================================================


class InMemoryQuestionRepository:
    """Immutable question collection indexed by level."""

    def __init__(self, questions: Iterable[Question]):
        self._by_level: dict[DifficultyLevel, tuple[Question, ...]] = {}
        grouped: dict[DifficultyLevel, list[Question]] = {level: [] for level in DifficultyLevel}
        for q in questions:
            grouped[q.difficulty_level].append(q)
        self._by_level = {level: tuple(qs) for level, qs in grouped.items()}

    def questions_by_level(self, level: DifficultyLevel | int) -> Sequence[Question]:
        return self._by_level.get(DifficultyLevel(level), ())

    def all_questions(self) -> list[Question]:
        return [q for level in DifficultyLevel for q in self._by_level[level]]

    def get_stats(self) -> dict[int, int]:
        """Question count per level."""
        return {int(level): len(qs) for level, qs in self._by_level.items()}

    def __len__(self) -> int:
        return sum(len(qs) for qs in self._by_level.values())


class JsonQuestionRepository(InMemoryQuestionRepository):
    """Question repository backed by a JSON bank file."""

    def __init__(self, path: Path | str):
        self.path = Path(path)
        data = _read_json(self.path)
        try:
            bank = QuestionBankSchema.model_validate(data)
        except ValidationError as e:
            raise QuestionBankError(f"Invalid question bank {self.path}: {e}") from e

        super().__init__(q.to_question() for q in bank.questions)
        logger.debug(f"Loaded {len(self)} questions from {self.path}")


# =============================================================================
# Diagnostic Source
# =============================================================================


class StaticDiagnosticSource:
    """Diagnostic source over an in-memory item list."""

    def __init__(self, items: Iterable[DiagnosticItem]):
        self._items = list(items)

    def fetch_diagnostic_items(self) -> list[DiagnosticItem]:
        """Items sorted ascending by level (stable within a level)."""
        return sorted(self._items, key=lambda item: item.level)


class JsonDiagnosticSource(StaticDiagnosticSource):
    """Diagnostic questionnaire read from a JSON file."""

    def __init__(self, path: Path | str):
        self.path = Path(path)
        data = _read_json(self.path)
        try:
            schema = DiagnosticSchema.model_validate(data)
        except ValidationError as e:
            raise QuestionBankError(f"Invalid diagnostic file {self.path}: {e}") from e

        super().__init__(
            DiagnosticItem(text=item.text, level=DifficultyLevel(item.level))
            for item in schema.items
        )
        if not self._items:
            logger.warning(f"Diagnostic file {self.path} has no items")
