"""
Unit tests for the Placement Evaluator and DiagnosticSession.

Tests:
- Level 1 all-or-nothing gate
- 66% ceiling threshold on levels 2 and 3
- Vacuous gates and the level 4 cap
- Step-wise questionnaire driving and the placement callback
"""

import pytest

from src.core.levels import DifficultyLevel
from src.core.models import DiagnosticItem
from src.study.placement import DiagnosticSession, PlacementEvaluator, evaluate


def items_for(counts: dict[int, int]) -> list[DiagnosticItem]:
    return [
        DiagnosticItem(text=f"L{level} #{n}", level=DifficultyLevel(level))
        for level, count in sorted(counts.items())
        for n in range(count)
    ]


@pytest.fixture
def evaluator():
    return PlacementEvaluator()


class TestCascade:
    def test_all_yes_places_at_level_four(self, evaluator, diagnostic_items):
        answers = [True] * len(diagnostic_items)
        assert evaluator.evaluate(diagnostic_items, answers) == DifficultyLevel.EVALUATION

    def test_single_level_one_no_places_at_level_one(self, evaluator, diagnostic_items):
        answers = [True] * len(diagnostic_items)
        answers[1] = False  # second level-1 statement
        assert evaluator.evaluate(diagnostic_items, answers) == DifficultyLevel.RECALL

    def test_level_one_failure_stops_cascade_even_if_higher_levels_pass(self, evaluator):
        items = items_for({1: 3, 2: 3, 3: 3})
        answers = [False, True, True] + [True] * 6
        assert evaluator.evaluate(items, answers) == 1

    def test_three_of_four_passes_level_two(self, evaluator):
        # ceil(4 * 0.66) = 3
        items = items_for({1: 1, 2: 4, 3: 3})
        answers = [True] + [True, True, True, False] + [False, False, False]
        assert evaluator.evaluate(items, answers) == DifficultyLevel.REASONING

    def test_two_of_four_fails_level_two(self, evaluator):
        items = items_for({1: 1, 2: 4})
        answers = [True] + [True, False, True, False]
        assert evaluator.evaluate(items, answers) == DifficultyLevel.PRINCIPLES

    def test_level_one_pass_level_two_fail(self, evaluator):
        # total = {1: 2, 2: 2}; ceil(2 * 0.66) = 2 > 1 yes
        items = items_for({1: 2, 2: 2})
        answers = [True, True, True, False]
        assert evaluator.evaluate(items, answers) == 2

    def test_level_four_answers_never_affect_placement(self, evaluator):
        items = items_for({1: 1, 2: 1, 3: 1, 4: 4})
        answers = [True, True, True, False, False, False, False]
        assert evaluator.evaluate(items, answers) == 4

    def test_placement_never_exceeds_four(self, evaluator):
        items = items_for({1: 2, 2: 2, 3: 2, 4: 2})
        assert evaluator.evaluate(items, [True] * 8) <= DifficultyLevel.highest()


class TestVacuousGates:
    def test_no_items_passes_every_gate(self, evaluator):
        assert evaluator.evaluate([], []) == 4

    def test_empty_level_three_is_passed(self, evaluator):
        items = items_for({1: 2, 2: 2, 4: 2})
        answers = [True, True, True, True, False, False]
        assert evaluator.evaluate(items, answers) == 4

    def test_empty_level_one_still_gates_level_two(self, evaluator):
        items = items_for({2: 3})
        assert evaluator.evaluate(items, [False, False, False]) == 2


class TestThresholds:
    @pytest.mark.parametrize(
        ("total", "required"),
        [(1, 1), (2, 2), (3, 2), (4, 3), (5, 4), (6, 4)],
    )
    def test_gate_requires_ceiling_of_ratio(self, evaluator, total, required):
        assert evaluator.required_yes(DifficultyLevel.PRINCIPLES, total) == required

    def test_level_one_requires_every_answer(self, evaluator):
        assert evaluator.required_yes(DifficultyLevel.RECALL, 5) == 5

    def test_custom_ratio(self):
        items = items_for({1: 1, 2: 4, 3: 1})
        answers = [True, True, True, False, False, False]
        assert PlacementEvaluator(gate_pass_ratio=0.5).evaluate(items, answers) == 3
        assert PlacementEvaluator(gate_pass_ratio=0.75).evaluate(items, answers) == 2

    def test_tally_counts_per_level(self, diagnostic_items):
        answers = [True, False] * 4
        tallies = PlacementEvaluator.tally(diagnostic_items, answers)
        assert tallies[DifficultyLevel.RECALL].total == 2
        assert tallies[DifficultyLevel.RECALL].yes == 1

    def test_mismatched_lengths_rejected(self, evaluator, diagnostic_items):
        with pytest.raises(ValueError):
            evaluator.evaluate(diagnostic_items, [True])

    def test_module_level_evaluate(self, diagnostic_items):
        assert evaluate(diagnostic_items, [True] * len(diagnostic_items)) == 4


class TestDiagnosticSession:
    def test_items_sorted_by_level(self):
        items = [
            DiagnosticItem("hard", DifficultyLevel.EVALUATION),
            DiagnosticItem("easy", DifficultyLevel.RECALL),
        ]
        session = DiagnosticSession(items)
        assert [i.text for i in session.items] == ["easy", "hard"]

    def test_answers_resolve_on_last_item(self, diagnostic_items):
        placements = []
        session = DiagnosticSession(diagnostic_items, on_placement=placements.append)

        for _ in range(len(diagnostic_items) - 1):
            assert session.answer(True) is None
        assert session.progress == pytest.approx(7 / 8)

        assert session.answer(True) == DifficultyLevel.EVALUATION
        assert session.is_complete
        assert session.current_item is None
        assert placements == [DifficultyLevel.EVALUATION]

    def test_placement_fires_once(self, diagnostic_items):
        placements = []
        session = DiagnosticSession(diagnostic_items, on_placement=placements.append)
        for _ in diagnostic_items:
            session.answer(False)

        assert session.answer(True) == DifficultyLevel.RECALL
        assert placements == [DifficultyLevel.RECALL]
        assert len(session.answers) == len(diagnostic_items)

    def test_current_item_follows_answers(self, diagnostic_items):
        session = DiagnosticSession(diagnostic_items)
        assert session.current_item == diagnostic_items[0]
        session.answer(True)
        assert session.current_item == diagnostic_items[1]
        assert session.index == 1

    def test_empty_questionnaire_has_no_current_item(self):
        session = DiagnosticSession([])
        assert session.current_item is None
        assert session.total == 0
        assert session.progress == 0.0
