"""
Level Progression Engine.

Runs a learner through leveled question sets with retry-until-mastery:

    LOADING -> ACTIVE_PRIMARY -> ACTIVE_RETRY -> (level complete)
            -> next level ... -> MASTERY

Each level starts with a shuffled primary queue of unseen questions.
Wrong answers are logged to the mistake sink and parked in a FIFO retry
queue; once the primary queue is exhausted the retry queue is drained,
cycling a question to the tail every time it is missed again. A level is
complete only when both queues are empty, so every question is eventually
answered correctly before the learner advances.

All session fields live in one SessionState and are only mutated through
`dispatch()`, which applies one action atomically.
"""
from __future__ import annotations

import random
from collections import deque
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import Protocol

from loguru import logger

from src.core.levels import DifficultyLevel
from src.core.models import MasterySummary, MistakeRecord, Question, now_ms
from src.study.retry_queue import RetryQueue

DEFAULT_POINTS_PER_LEVEL = 10


class QuestionRepository(Protocol):
    """Read-only source of questions, queried by level."""

    def questions_by_level(self, level: DifficultyLevel) -> Sequence[Question]:
        ...


class EngineState(str, Enum):
    """Externally visible engine state."""

    LOADING = "loading"  # no question to present (empty level)
    ACTIVE_PRIMARY = "active_primary"
    ACTIVE_RETRY = "active_retry"
    MASTERY = "mastery"  # terminal


class Action(str, Enum):
    """Learner actions accepted by the engine."""

    SELECT = "select"
    SUBMIT = "submit"
    ADVANCE = "advance"
    FINISH_LEVEL = "finish_level"


@dataclass
class AnswerOutcome:
    """Result of a submitted answer."""

    question: Question
    selected_index: int
    is_correct: bool
    points: int
    mistake: MistakeRecord | None = None


@dataclass
class SessionState:
    """Mutable session state, owned by one engine."""

    current_level: DifficultyLevel
    score: int = 0
    total_answered: int = 0
    completed_levels: dict[DifficultyLevel, None] = field(default_factory=dict)  # ordered set
    primary_queue: deque[Question] = field(default_factory=deque)
    retry_queue: RetryQueue = field(default_factory=RetryQueue)
    is_retry_mode: bool = False
    current_question: Question | None = None

    # Current presentation
    selected_option: int | None = None
    is_submitted: bool = False
    last_outcome: AnswerOutcome | None = None

    is_closed: bool = False

    @property
    def remaining(self) -> int:
        """Questions still to clear on this level, excluding one just answered."""
        count = len(self.primary_queue) + len(self.retry_queue)
        if self.is_submitted:
            count -= 1
        return max(0, count)


class LevelProgressionEngine:
    """
    State machine for a single learner's quiz session.

    Usage:
        engine = LevelProgressionEngine(repo, start_level=2, seed=7)
        engine.select_option(1)
        outcome = engine.submit()
        engine.advance()
    """

    def __init__(
        self,
        repository: QuestionRepository,
        start_level: DifficultyLevel | int = DifficultyLevel.RECALL,
        *,
        on_mistake: Callable[[MistakeRecord], None] | None = None,
        on_mastery: Callable[[MasterySummary], None] | None = None,
        points_per_level: int = DEFAULT_POINTS_PER_LEVEL,
        seed: int | None = None,
        rng: random.Random | None = None,
        clock: Callable[[], int] = now_ms,
    ):
        """
        Initialize the engine and load the starting level.

        Args:
            repository: Question source queried once per level
            start_level: Level from placement (1-4)
            on_mistake: Called once per incorrect submission
            on_mastery: Called once when level 4 is cleared
            points_per_level: Score for a correct answer is this times the level
            seed: Seed for the primary-queue shuffle (ignored if rng is given)
            rng: Random source to shuffle with
            clock: Millisecond timestamp source for mistake records
        """
        self.repository = repository
        self.on_mistake = on_mistake
        self.on_mastery = on_mastery
        self.points_per_level = points_per_level
        self.rng = rng or random.Random(seed)
        self.clock = clock
        self.summary: MasterySummary | None = None
        self._handlers: dict[Action, Callable[..., bool]] = {
            Action.SELECT: self._select,
            Action.SUBMIT: self._submit,
            Action.ADVANCE: self._advance,
            Action.FINISH_LEVEL: self._complete_level,
        }

        level = DifficultyLevel(start_level)
        self.state = SessionState(current_level=level)
        self.initialize(level)

    # ========================================
    # STATE QUERIES
    # ========================================

    @property
    def engine_state(self) -> EngineState:
        if self.state.is_closed:
            return EngineState.MASTERY
        if self.state.current_question is None:
            return EngineState.LOADING
        if self.state.is_retry_mode:
            return EngineState.ACTIVE_RETRY
        return EngineState.ACTIVE_PRIMARY

    @property
    def current_question(self) -> Question | None:
        return self.state.current_question

    @property
    def current_level(self) -> DifficultyLevel:
        return self.state.current_level

    @property
    def score(self) -> int:
        return self.state.score

    @property
    def total_answered(self) -> int:
        return self.state.total_answered

    @property
    def is_finished(self) -> bool:
        return self.state.is_closed

    # ========================================
    # TRANSITIONS
    # ========================================

    def dispatch(self, action: Action, option_index: int | None = None) -> bool:
        """
        Apply one learner action.

        Illegal actions (precondition violations) are ignored.

        Returns:
            True if the action changed the session
        """
        if self.state.is_closed:
            logger.debug(f"Ignoring {action.value}: session closed")
            return False

        handler = self._handlers[action]
        applied = handler(option_index) if action is Action.SELECT else handler()
        if not applied:
            logger.debug(f"Ignoring {action.value} in state {self.engine_state.value}")
        return applied

    def select_option(self, index: int) -> bool:
        return self.dispatch(Action.SELECT, index)

    def submit(self) -> AnswerOutcome | None:
        """Submit the selected option. Returns None if the submit was rejected."""
        if self.dispatch(Action.SUBMIT):
            return self.state.last_outcome
        return None

    def advance(self) -> bool:
        return self.dispatch(Action.ADVANCE)

    def finish_level(self) -> bool:
        """Force the current level to complete regardless of queue state."""
        return self.dispatch(Action.FINISH_LEVEL)

    def initialize(self, level: DifficultyLevel | int) -> None:
        """Load and shuffle the questions for `level` into a fresh primary queue."""
        state = self.state
        state.current_level = DifficultyLevel(level)

        questions = list(self.repository.questions_by_level(state.current_level))
        self.rng.shuffle(questions)

        state.primary_queue = deque(questions)
        state.retry_queue.clear()
        state.is_retry_mode = False
        state.current_question = state.primary_queue[0] if questions else None
        self._reset_presentation()

        if not questions:
            logger.warning(f"No questions found for level {int(state.current_level)}")
        else:
            logger.debug(
                f"Initialized level {int(state.current_level)} with {len(questions)} questions"
            )

    def restart(self, level: DifficultyLevel | int = DifficultyLevel.RECALL) -> None:
        """Discard the session and start a fresh one at `level`."""
        self.state = SessionState(current_level=DifficultyLevel(level))
        self.summary = None
        self.initialize(level)

    # ========================================
    # HANDLERS
    # ========================================

    def _reset_presentation(self) -> None:
        self.state.selected_option = None
        self.state.is_submitted = False
        self.state.last_outcome = None

    def _select(self, index: int | None) -> bool:
        state = self.state
        question = state.current_question
        if question is None or state.is_submitted or index is None:
            return False
        if not 0 <= index < len(question.options):
            return False
        state.selected_option = index
        return True

    def _submit(self) -> bool:
        state = self.state
        question = state.current_question
        if question is None or state.selected_option is None or state.is_submitted:
            return False

        selected = state.selected_option
        state.is_submitted = True

        is_correct = question.is_correct(selected)
        points = self.points_per_level * int(state.current_level) if is_correct else 0
        state.score += points
        state.total_answered += 1

        mistake = None
        if not is_correct:
            mistake = MistakeRecord(
                question=question,
                user_wrong_answer_index=selected,
                timestamp=self.clock(),
            )
            state.retry_queue.enqueue(question)
            if self.on_mistake is not None:
                self.on_mistake(mistake)

        state.last_outcome = AnswerOutcome(
            question=question,
            selected_index=selected,
            is_correct=is_correct,
            points=points,
            mistake=mistake,
        )
        return True

    def _advance(self) -> bool:
        state = self.state
        if state.current_question is None or not state.is_submitted:
            return False

        answered_correctly = state.last_outcome is not None and state.last_outcome.is_correct

        if not state.is_retry_mode:
            state.primary_queue.popleft()
        else:
            just_finished = state.retry_queue.pop()
            if not answered_correctly:
                state.retry_queue.enqueue(just_finished)

        self._reset_presentation()

        if state.primary_queue:
            state.is_retry_mode = False
            state.current_question = state.primary_queue[0]
        elif state.retry_queue:
            state.is_retry_mode = True
            state.current_question = state.retry_queue.head
        else:
            self._complete_level()
        return True

    def _complete_level(self) -> bool:
        state = self.state
        level = state.current_level
        state.completed_levels.setdefault(level)
        logger.debug(f"Level {int(level)} complete (score={state.score})")

        if not level.is_highest:
            self.initialize(level.next())
            return True

        self._declare_mastery()
        return True

    def _declare_mastery(self) -> None:
        state = self.state
        self._reset_presentation()
        state.current_question = None
        state.primary_queue.clear()
        state.retry_queue.clear()
        state.is_retry_mode = False
        state.is_closed = True

        self.summary = MasterySummary(
            current_level=state.current_level,
            score=state.score,
            questions_answered=state.total_answered,
        )
        logger.info(
            f"Mastery reached: score={self.summary.score}, "
            f"answered={self.summary.questions_answered}"
        )
        if self.on_mastery is not None:
            self.on_mastery(self.summary)
