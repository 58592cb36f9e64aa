"""
Unit tests for the FSRS memory model.

Covers the forgetting curve, initial state, stability/difficulty updates
and the review entry points.
"""

from datetime import date, timedelta

import pytest

from rote.core import fsrs
from rote.core.errors import InvalidGradeError
from rote.core.fsrs import Grade

STABILITIES = [0.1, 0.40255, 1.0, 3.0, 3.173, 10.0, 42.5, 365.0]


class TestGrade:
    """Test grade parsing at the boundary."""

    @pytest.mark.parametrize("raw,expected", [
        (1, Grade.FORGOT),
        (2, Grade.HARD),
        (3, Grade.GOOD),
        (4, Grade.EASY),
        ("3", Grade.GOOD),
        (" 4\n", Grade.EASY),
        (2.0, Grade.HARD),
        (Grade.HARD, Grade.HARD),
    ])
    def test_parse_valid(self, raw, expected):
        assert Grade.parse(raw) is expected

    @pytest.mark.parametrize("raw", [0, 5, -1, "", "x", "2.5", 2.5, None, True])
    def test_parse_invalid(self, raw):
        with pytest.raises(InvalidGradeError):
            Grade.parse(raw)

    def test_invalid_grade_is_value_error(self):
        """Callers that only know about ValueError still catch it."""
        with pytest.raises(ValueError):
            Grade.parse(9)

    def test_ordering_and_index(self):
        assert Grade.FORGOT < Grade.HARD < Grade.GOOD < Grade.EASY
        assert [g.index for g in Grade] == [0, 1, 2, 3]


class TestForgettingCurve:
    """Test retrievability and interval."""

    @pytest.mark.parametrize("s", STABILITIES)
    def test_retrievability_at_zero_is_one(self, s):
        assert fsrs.retrievability(0, s) == pytest.approx(1.0, abs=1e-9)

    @pytest.mark.parametrize("s", STABILITIES)
    def test_retrievability_at_stability_is_target(self, s):
        assert fsrs.retrievability(s, s) == pytest.approx(fsrs.DESIRED_RETENTION, abs=1e-9)

    def test_retrievability_decreases_over_time(self):
        values = [fsrs.retrievability(t, 5.0) for t in (0, 1, 5, 30, 365)]
        assert values == sorted(values, reverse=True)
        assert all(0 < v <= 1 for v in values)

    @pytest.mark.parametrize("s", STABILITIES)
    def test_interval_equals_stability(self, s):
        """At 90% desired retention the interval is the stability itself."""
        assert fsrs.interval(s) == pytest.approx(s, abs=1e-9)


class TestInitialState:
    """Test first-review stability and difficulty."""

    def test_initial_stability_from_weights(self):
        assert [fsrs.initial_stability(g) for g in Grade] == list(fsrs.W[:4])

    def test_initial_difficulty_forgot(self):
        # exp(0) = 1, so D0(Forgot) = w4
        assert fsrs.initial_difficulty(Grade.FORGOT) == pytest.approx(fsrs.W[4])

    def test_initial_difficulty_decreases_with_grade(self):
        values = [fsrs.initial_difficulty(g) for g in Grade]
        assert values == sorted(values, reverse=True)
        assert all(1.0 <= v <= 10.0 for v in values)

    def test_weight_table_size(self):
        assert len(fsrs.W) == 19


class TestUpdatedStability:
    """Test stability after a review at the target retrievability."""

    @pytest.mark.parametrize("grade", [Grade.HARD, Grade.GOOD, Grade.EASY])
    @pytest.mark.parametrize("s", STABILITIES)
    @pytest.mark.parametrize("d", [1.0, 5.0, 10.0])
    def test_success_increases_stability(self, grade, s, d):
        r = fsrs.retrievability(s, s)
        assert fsrs.updated_stability(d, s, r, grade) > s

    @pytest.mark.parametrize("s", STABILITIES)
    @pytest.mark.parametrize("d", [1.0, 5.0, 10.0])
    def test_forgot_decreases_stability(self, s, d):
        r = fsrs.retrievability(s, s)
        assert fsrs.updated_stability(d, s, r, Grade.FORGOT) < s

    def test_easy_beats_good_beats_hard(self):
        s, d = 3.0, 5.0
        r = fsrs.retrievability(s, s)
        hard, good, easy = (fsrs.updated_stability(d, s, r, g) for g in (Grade.HARD, Grade.GOOD, Grade.EASY))
        assert hard < good < easy

    def test_zero_elapsed_success_keeps_stability(self):
        """With R = 1 the growth term vanishes."""
        assert fsrs.updated_stability(5.0, 3.0, 1.0, Grade.GOOD) == pytest.approx(3.0)

    def test_forgot_never_exceeds_previous_stability(self):
        """A lapse after a long gap is capped at the old stability."""
        s = 0.5
        r = fsrs.retrievability(1000, s)
        assert fsrs.updated_stability(1.0, s, r, Grade.FORGOT) <= s


class TestUpdatedDifficulty:
    """Test difficulty updates and clamping."""

    @pytest.mark.parametrize("grade", list(Grade))
    def test_repeated_grading_stays_in_bounds(self, grade):
        d = fsrs.initial_difficulty(grade)
        for _ in range(100):
            d = fsrs.updated_difficulty(d, grade)
            assert 1.0 <= d <= 10.0

    def test_repeated_forgot_approaches_max(self):
        d = fsrs.initial_difficulty(Grade.FORGOT)
        for _ in range(100):
            d = fsrs.updated_difficulty(d, Grade.FORGOT)
        assert d > 9.0

    def test_repeated_easy_stays_at_or_above_min(self):
        d = fsrs.initial_difficulty(Grade.EASY)
        for _ in range(100):
            d = fsrs.updated_difficulty(d, Grade.EASY)
        assert d >= 1.0

    def test_good_is_nearly_neutral(self):
        """Good only applies the small mean reversion."""
        assert fsrs.updated_difficulty(5.0, Grade.GOOD) == pytest.approx(5.0, abs=0.01)

    def test_out_of_range_input_is_clamped(self):
        assert fsrs.updated_difficulty(50.0, Grade.FORGOT) == 10.0
        assert fsrs.updated_difficulty(-50.0, Grade.EASY) == 1.0


class TestReviewNew:
    """Test first reviews."""

    def test_good_produces_future_due(self):
        today = date(2025, 1, 1)
        outcome = fsrs.review_new(Grade.GOOD, today)

        assert outcome.due > today
        assert outcome.stability > 0
        assert 1.0 <= outcome.difficulty <= 10.0

    @pytest.mark.parametrize("grade,days", [
        (Grade.FORGOT, 1),   # 0.40 rounds to 0, floored to 1
        (Grade.HARD, 1),
        (Grade.GOOD, 3),
        (Grade.EASY, 16),
    ])
    def test_due_offsets(self, grade, days):
        today = date(2025, 1, 1)
        assert fsrs.review_new(grade, today).due == today + timedelta(days=days)

    def test_outcome_is_immutable(self):
        outcome = fsrs.review_new(Grade.GOOD, date(2025, 1, 1))
        with pytest.raises(AttributeError):
            outcome.stability = 1.0


class TestReviewExisting:
    """Test subsequent reviews."""

    def test_good_twice_extends_interval(self):
        today = date(2025, 1, 1)
        first = fsrs.review_new(Grade.GOOD, today)
        first_gap = (first.due - today).days

        second = fsrs.review_existing(
            first.difficulty,
            first.stability,
            float(first_gap),
            Grade.GOOD,
            first.due,
        )

        assert second.due > first.due
        assert (second.due - first.due).days > first_gap
        assert second.stability > first.stability

    def test_forgot_shortens_interval(self):
        today = date(2025, 1, 1)
        outcome = fsrs.review_existing(5.0, 30.0, 30.0, Grade.FORGOT, today)

        assert outcome.stability < 30.0
        assert (outcome.due - today).days < 30
        assert outcome.due > today

    def test_zero_elapsed_still_due_tomorrow_or_later(self):
        today = date(2025, 1, 1)
        outcome = fsrs.review_existing(5.0, 0.1, 0.0, Grade.FORGOT, today)
        assert outcome.due == today + timedelta(days=1)
