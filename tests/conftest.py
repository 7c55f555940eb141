"""
Pytest Configuration and Fixtures.

This file configures pytest and provides shared fixtures for all tests.
"""
import random
import sys
from pathlib import Path

import pytest

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from src.content.loader import InMemoryQuestionRepository  # noqa: E402
from src.core.levels import DifficultyLevel  # noqa: E402
from src.core.models import DiagnosticItem, Question  # noqa: E402


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "integration: Integration tests (placement through mastery)")
    config.addinivalue_line("markers", "smoke: Smoke tests for CLI commands")
    config.addinivalue_line("markers", "slow: Slow tests")


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their location."""
    for item in items:
        # Mark based on test file location
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
        elif "integration" in str(item.fspath):
            item.add_marker(pytest.mark.integration)
        elif "smoke" in str(item.fspath):
            item.add_marker(pytest.mark.smoke)


class NoShuffle(random.Random):
    """Random source that keeps the repository order."""

    def shuffle(self, x, *args, **kwargs):
        return None


def build_question(
    qid: str,
    level: int,
    correct: int = 0,
    options: tuple[str, ...] = ("Option A", "Option B", "Option C", "Option D"),
) -> Question:
    return Question(
        id=qid,
        difficulty_level=DifficultyLevel(level),
        text=f"Question {qid}?",
        options=options,
        correct_option_index=correct,
        explanation=f"Because {qid}.",
        topic_tag="Sulfur",
        competency="Recall",
        misconception="A common slip.",
        learning_tip="Read carefully.",
    )


@pytest.fixture(scope="session")
def project_root():
    """Return the project root directory."""
    return PROJECT_ROOT


@pytest.fixture
def make_question():
    """Factory for Question records."""
    return build_question


@pytest.fixture
def no_shuffle():
    return NoShuffle()


@pytest.fixture
def repository():
    """Three questions per level, ids L{level}-Q{n}."""
    return InMemoryQuestionRepository(
        build_question(f"L{level}-Q{n}", level)
        for level in range(1, 5)
        for n in range(1, 4)
    )


@pytest.fixture
def diagnostic_items():
    """Two statements per level, already sorted."""
    return [
        DiagnosticItem(text=f"L{level} statement {n}", level=DifficultyLevel(level))
        for level in range(1, 5)
        for n in range(1, 3)
    ]
