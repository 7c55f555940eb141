"""
Core domain records for the adaptive quiz.

- DiagnosticItem: one self-assessment statement tagged with a level
- Question: an immutable multiple-choice record owned by the question bank
- MistakeRecord: log entry emitted for every incorrect submission
- MasterySummary: final payload once level 4 is cleared
"""

from __future__ import annotations

import time
from dataclasses import asdict, dataclass, field
from typing import Any

from src.core.levels import DifficultyLevel


@dataclass(frozen=True)
class DiagnosticItem:
    """A yes/no self-assessment statement."""

    text: str
    level: DifficultyLevel


@dataclass(frozen=True)
class Question:
    """A single multiple-choice question."""

    id: str
    difficulty_level: DifficultyLevel
    text: str
    options: tuple[str, ...]
    correct_option_index: int
    explanation: str
    topic_tag: str
    competency: str
    misconception: str | None = None
    learning_tip: str | None = None
    image_url: str | None = None

    def is_correct(self, option_index: int) -> bool:
        return option_index == self.correct_option_index

    @property
    def correct_option(self) -> str:
        return self.options[self.correct_option_index]

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        data = asdict(self)
        data["difficulty_level"] = int(self.difficulty_level)
        data["options"] = list(self.options)
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Question:
        """Create from dictionary."""
        return cls(
            id=data["id"],
            difficulty_level=DifficultyLevel(data["difficulty_level"]),
            text=data["text"],
            options=tuple(data["options"]),
            correct_option_index=data["correct_option_index"],
            explanation=data["explanation"],
            topic_tag=data["topic_tag"],
            competency=data["competency"],
            misconception=data.get("misconception"),
            learning_tip=data.get("learning_tip"),
            image_url=data.get("image_url"),
        )


def now_ms() -> int:
    """Wall-clock time in epoch milliseconds."""
    return int(time.time() * 1000)


@dataclass(frozen=True)
class MistakeRecord:
    """
    One incorrect submission.

    A question missed twice produces two records; the timestamp is the
    record's identity when listing the mistake book.
    """

    question: Question
    user_wrong_answer_index: int
    timestamp: int = field(default_factory=now_ms)

    @property
    def wrong_option(self) -> str:
        return self.question.options[self.user_wrong_answer_index]

    def to_dict(self) -> dict[str, Any]:
        return {
            "question": self.question.to_dict(),
            "timestamp": self.timestamp,
            "user_wrong_answer_index": self.user_wrong_answer_index,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> MistakeRecord:
        return cls(
            question=Question.from_dict(data["question"]),
            user_wrong_answer_index=data["user_wrong_answer_index"],
            timestamp=data["timestamp"],
        )


@dataclass(frozen=True)
class MasterySummary:
    """Terminal result of a session that cleared the highest level."""

    current_level: DifficultyLevel
    score: int
    questions_answered: int
