"""
Difficulty Levels.

Four strictly ordered tiers that gate both diagnostic placement and
quiz content selection.
"""

from __future__ import annotations

from enum import IntEnum


class DifficultyLevel(IntEnum):
    """
    Difficulty tier 1-4.

    Each tier maps to an academic-quality competency band, from basic
    recall up to evaluation and complex decision making.
    """

    RECALL = 1
    PRINCIPLES = 2
    REASONING = 3
    EVALUATION = 4

    @classmethod
    def lowest(cls) -> DifficultyLevel:
        return cls.RECALL

    @classmethod
    def highest(cls) -> DifficultyLevel:
        return cls.EVALUATION

    @property
    def is_highest(self) -> bool:
        return self is DifficultyLevel.EVALUATION

    def next(self) -> DifficultyLevel:
        """The following tier. The highest tier has no successor."""
        if self.is_highest:
            raise ValueError(f"Level {int(self)} is the highest level")
        return DifficultyLevel(self + 1)

    @property
    def title(self) -> str:
        """Short heading, e.g. 'Level 2'."""
        return f"Level {int(self)}"

    @property
    def subtitle(self) -> str:
        """Competency described by this tier."""
        return {
            DifficultyLevel.RECALL: "Recall and description of phenomena",
            DifficultyLevel.PRINCIPLES: "Understanding principles and micro-level analysis",
            DifficultyLevel.REASONING: "Evidence-based reasoning and model application",
            DifficultyLevel.EVALUATION: "Evaluation and complex decision making",
        }[self]

    @property
    def label(self) -> str:
        """Compact tag for the diagnostic questionnaire."""
        return {
            DifficultyLevel.RECALL: "L1 Recall",
            DifficultyLevel.PRINCIPLES: "L2 Principles",
            DifficultyLevel.REASONING: "L3 Transfer",
            DifficultyLevel.EVALUATION: "L4 Inquiry",
        }[self]

    @property
    def color(self) -> str:
        """Rich color for CLI display."""
        return {
            DifficultyLevel.RECALL: "green",
            DifficultyLevel.PRINCIPLES: "cyan",
            DifficultyLevel.REASONING: "yellow",
            DifficultyLevel.EVALUATION: "magenta",
        }[self]
