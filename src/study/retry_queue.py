"""
Retry queue for missed questions.

A FIFO of questions answered incorrectly at least once and not yet
answered correctly. Membership is tracked in an id-set alongside the
deque so the "already queued" check is O(1).
"""
from __future__ import annotations

from collections import deque
from collections.abc import Iterator

from src.core.models import Question


class RetryQueue:
    """FIFO of unresolved questions, at most one entry per question id."""

    def __init__(self) -> None:
        self._items: deque[Question] = deque()
        self._ids: set[str] = set()

    def __len__(self) -> int:
        return len(self._items)

    def __bool__(self) -> bool:
        return bool(self._items)

    def __iter__(self) -> Iterator[Question]:
        return iter(self._items)

    def __contains__(self, question: object) -> bool:
        if isinstance(question, Question):
            return question.id in self._ids
        return question in self._ids

    @property
    def head(self) -> Question | None:
        return self._items[0] if self._items else None

    def enqueue(self, question: Question) -> bool:
        """
        Append to the tail unless already queued.

        Returns:
            True if the question was added
        """
        if question.id in self._ids:
            return False
        self._items.append(question)
        self._ids.add(question.id)
        return True

    def pop(self) -> Question:
        """Remove and return the head."""
        question = self._items.popleft()
        self._ids.discard(question.id)
        return question

    def clear(self) -> None:
        self._items.clear()
        self._ids.clear()

    def ids(self) -> list[str]:
        return [q.id for q in self._items]
