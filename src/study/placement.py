"""
Placement Evaluator for the diagnostic questionnaire.

Turns a sequence of yes/no self-assessment answers into a starting level:

- Level 1 is a prerequisite gate: every level-1 statement must be a "yes".
- Levels 2 and 3 pass when yes >= ceil(total * gate_pass_ratio).
- Passing a gate unlocks the next level; the first failed gate stops the
  cascade. Level 4 is never gated, so the placement is capped at 4.
- A gate with no statements is passed vacuously.
"""
from __future__ import annotations

import math
from collections import Counter
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field

from loguru import logger

from src.core.levels import DifficultyLevel
from src.core.models import DiagnosticItem

DEFAULT_GATE_PASS_RATIO = 0.66


@dataclass
class LevelTally:
    """Yes-count and item count for one level."""
    total: int = 0
    yes: int = 0


class PlacementEvaluator:
    """
    Pure placement function over a completed questionnaire.

    The evaluator holds only its threshold configuration; `evaluate`
    has no side effects.
    """

    def __init__(self, gate_pass_ratio: float = DEFAULT_GATE_PASS_RATIO):
        self.gate_pass_ratio = gate_pass_ratio

    @staticmethod
    def tally(
        items: Sequence[DiagnosticItem],
        answers: Sequence[bool],
    ) -> dict[DifficultyLevel, LevelTally]:
        """Partition answers by level into per-level counts."""
        totals = Counter(item.level for item in items)
        yeses = Counter(item.level for item, yes in zip(items, answers) if yes)
        return {
            level: LevelTally(total=totals[level], yes=yeses[level])
            for level in DifficultyLevel
        }

    def required_yes(self, level: DifficultyLevel, total: int) -> int:
        """Minimum "yes" answers needed to pass the gate at `level`."""
        if level == DifficultyLevel.RECALL:
            return total
        return math.ceil(total * self.gate_pass_ratio)

    def gate_passes(self, level: DifficultyLevel, tally: LevelTally) -> bool:
        if tally.total == 0:
            return True
        return tally.yes >= self.required_yes(level, tally.total)

    def evaluate(
        self,
        items: Sequence[DiagnosticItem],
        answers: Sequence[bool],
    ) -> DifficultyLevel:
        """
        Recommend a starting level.

        Args:
            items: Diagnostic statements, sorted ascending by level
            answers: answers[i] is the yes/no response to items[i]

        Returns:
            One past the highest passed gate, capped at level 4
        """
        if len(items) != len(answers):
            raise ValueError(
                f"Got {len(answers)} answers for {len(items)} diagnostic items"
            )

        tallies = self.tally(items, answers)
        recommended = DifficultyLevel.lowest()

        # Gates run on every level below the highest; each pass unlocks the next.
        while not recommended.is_highest:
            tally = tallies[recommended]
            if not self.gate_passes(recommended, tally):
                logger.debug(
                    f"Placement gate L{int(recommended)} failed "
                    f"({tally.yes}/{tally.total})"
                )
                break
            recommended = recommended.next()

        logger.debug(f"Placement resolved to level {int(recommended)}")
        return recommended


def evaluate(
    items: Sequence[DiagnosticItem],
    answers: Sequence[bool],
    gate_pass_ratio: float = DEFAULT_GATE_PASS_RATIO,
) -> DifficultyLevel:
    """Convenience wrapper around PlacementEvaluator.evaluate."""
    return PlacementEvaluator(gate_pass_ratio).evaluate(items, answers)


@dataclass
class DiagnosticSession:
    """
    Step-wise questionnaire driver.

    Items are sorted by level on construction. Each `answer()` consumes
    the current item; the last answer resolves the placement and fires
    `on_placement` exactly once.
    """

    items: list[DiagnosticItem]
    evaluator: PlacementEvaluator = field(default_factory=PlacementEvaluator)
    on_placement: Callable[[DifficultyLevel], None] | None = None
    answers: list[bool] = field(default_factory=list)
    placement: DifficultyLevel | None = None

    def __post_init__(self) -> None:
        self.items = sorted(self.items, key=lambda item: item.level)
        if not self.items:
            logger.warning("Diagnostic questionnaire is empty; nothing to place")

    @property
    def current_item(self) -> DiagnosticItem | None:
        if self.is_complete or not self.items:
            return None
        return self.items[len(self.answers)]

    @property
    def index(self) -> int:
        return len(self.answers)

    @property
    def total(self) -> int:
        return len(self.items)

    @property
    def progress(self) -> float:
        """Fraction of the questionnaire answered (0.0 to 1.0)."""
        return self.index / self.total if self.total else 0.0

    @property
    def is_complete(self) -> bool:
        return self.placement is not None

    def answer(self, yes: bool) -> DifficultyLevel | None:
        """
        Record the answer to the current item.

        Returns:
            The placement once the last item is answered, otherwise None
        """
        if self.current_item is None:
            return self.placement

        self.answers.append(yes)
        if len(self.answers) < len(self.items):
            return None

        self.placement = self.evaluator.evaluate(self.items, self.answers)
        logger.info(f"Diagnostic complete: starting at level {int(self.placement)}")
        if self.on_placement is not None:
            self.on_placement(self.placement)
        return self.placement
