"""
Mistake Book.

Collects the MistakeRecords emitted by the progression engine for
post-session review. Records are kept in submission order; a question
missed on several attempts appears once per miss.

MistakeBookStore optionally persists the book as a JSON file
(default ~/.ascent/mistakes.json) so the CLI can review it later.
"""

from __future__ import annotations

import json
import os
from collections import Counter
from collections.abc import Iterator
from pathlib import Path

from loguru import logger

from src.core.levels import DifficultyLevel
from src.core.models import MistakeRecord, Question

# Parse failures of a mistake book file, malformed JSON or records
_UNREADABLE = (json.JSONDecodeError, KeyError, TypeError, ValueError, AttributeError)


class MistakeBook:
    """In-memory mistake sink. Pass `book.record` as the engine's on_mistake."""

    def __init__(self, records: list[MistakeRecord] | None = None):
        self._records: list[MistakeRecord] = list(records or [])

    def record(self, mistake: MistakeRecord) -> None:
        self._records.append(mistake)

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[MistakeRecord]:
        return iter(self._records)

    @property
    def records(self) -> list[MistakeRecord]:
        return list(self._records)

    def for_level(self, level: DifficultyLevel | int) -> list[MistakeRecord]:
        return [r for r in self._records if r.question.difficulty_level == level]

    def miss_counts(self) -> Counter[str]:
        """Number of misses per question id."""
        return Counter(r.question.id for r in self._records)

    def distinct_questions(self) -> list[Question]:
        """Missed questions, first miss order, without repeats."""
        seen: dict[str, Question] = {}
        for r in self._records:
            seen.setdefault(r.question.id, r.question)
        return list(seen.values())

    def clear(self) -> None:
        self._records.clear()


class MistakeBookStore:
    """JSON file persistence for a MistakeBook."""

    def __init__(self, path: Path):
        self.path = Path(path)

    @property
    def backup_path(self) -> Path:
        """Where an unreadable book is moved before it would be overwritten."""
        return self.path.with_name(self.path.name + ".bak")

    def _read(self) -> MistakeBook:
        with open(self.path, "r", encoding="utf-8") as f:
            data = json.load(f)
        return MistakeBook([MistakeRecord.from_dict(item) for item in data.get("records", [])])

    def load(self) -> MistakeBook:
        """Load the book; a missing or unreadable file yields an empty book."""
        if not self.path.exists():
            return MistakeBook()

        try:
            return self._read()
        except _UNREADABLE as e:
            logger.warning(f"Ignoring unreadable mistake book {self.path}: {e}")
            return MistakeBook()

    def save(self, book: MistakeBook) -> Path:
        """Write the book through a temp file so a partial write never replaces it."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_name(self.path.name + ".tmp")
        with open(tmp_path, "w", encoding="utf-8") as f:
            json.dump(
                {"records": [r.to_dict() for r in book]},
                f,
                indent=2,
                ensure_ascii=False,
            )
        os.replace(tmp_path, self.path)
        logger.debug(f"Saved {len(book)} mistakes to {self.path}")
        return self.path

    def append(self, records: list[MistakeRecord]) -> MistakeBook:
        """
        Add records to the stored book and write it back.

        An existing file that cannot be parsed is moved to `backup_path`
        first, so its content is never overwritten.
        """
        book = MistakeBook()
        if self.path.exists():
            try:
                book = self._read()
            except _UNREADABLE as e:
                os.replace(self.path, self.backup_path)
                logger.warning(
                    f"Unreadable mistake book {self.path} moved to {self.backup_path}: {e}"
                )

        for r in records:
            book.record(r)
        self.save(book)
        return book

    def clear(self) -> bool:
        if self.path.exists():
            self.path.unlink()
            return True
        return False
