"""
Study Module for adaptive leveled quizzes.

Provides:
- Diagnostic placement (starting level from a self-assessment)
- Level progression with retry-until-mastery
- Mistake collection for post-session review
"""

from src.study.mistake_book import MistakeBook, MistakeBookStore
from src.study.placement import DiagnosticSession, PlacementEvaluator, evaluate
from src.study.progression_engine import (
    Action,
    AnswerOutcome,
    EngineState,
    LevelProgressionEngine,
    SessionState,
)
from src.study.retry_queue import RetryQueue

__all__ = [
    "PlacementEvaluator",
    "DiagnosticSession",
    "evaluate",
    "LevelProgressionEngine",
    "EngineState",
    "Action",
    "AnswerOutcome",
    "SessionState",
    "RetryQueue",
    "MistakeBook",
    "MistakeBookStore",
]
