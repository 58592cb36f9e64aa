"""
FSRS Memory Model.

Free Spaced Repetition Scheduler, in its compact 19-weight form:
1. Forgetting curve - retrievability as a power function of elapsed days
2. Interval - days until retrievability falls to the desired retention
3. Stability / difficulty updates after each graded review

Everything here is a pure function of its arguments. Callers clamp
elapsed time to >= 0 and only feed back values this module produced,
so nothing needs to be rejected.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date, timedelta
from enum import IntEnum

from .errors import InvalidGradeError

# =============================================================================
# FSRS CONSTANTS
# =============================================================================

# Forgetting curve factor and decay. With C = -0.5, F = 19/81 makes
# R(t=S) exactly 0.9.
F = 19.0 / 81.0
C = -0.5
DESIRED_RETENTION = 0.9

# Default FSRS weights (v4.5/v5 defaults, not fitted per user)
W: tuple[float, ...] = (
    0.40255,   # w0: initial stability for Forgot
    1.18385,   # w1: initial stability for Hard
    3.173,     # w2: initial stability for Good
    15.69105,  # w3: initial stability for Easy
    7.1949,    # w4: initial difficulty offset
    0.5345,    # w5: initial difficulty grade slope
    1.4604,    # w6: difficulty delta per grade step
    0.0046,    # w7: mean reversion toward D0(Easy)
    1.54575,   # w8: recall stability scale (exp)
    0.1192,    # w9: recall stability decay with S
    1.01925,   # w10: recall stability growth with (1 - R)
    1.9395,    # w11: forget stability scale
    0.11,      # w12: forget stability difficulty exponent
    0.29605,   # w13: forget stability S exponent
    2.2698,    # w14: forget stability growth with (1 - R)
    0.2315,    # w15: hard penalty
    2.9898,    # w16: easy bonus
    0.51655,   # w17: short-term (unused)
    0.6621,    # w18: short-term (unused)
)

MIN_DIFFICULTY = 1.0
MAX_DIFFICULTY = 10.0


class Grade(IntEnum):
    """Recall quality reported after a review (1-4 at every boundary)."""

    FORGOT = 1
    HARD = 2
    GOOD = 3
    EASY = 4

    @classmethod
    def parse(cls, value: object) -> Grade:
        """
        Parse a grade from user input or a caller-supplied value.

        Accepts a Grade, an int, an integral float, or a numeric string
        ("3", " 4 "). Bools are rejected.

        Raises:
            InvalidGradeError: for anything outside 1..4
        """
        if isinstance(value, Grade):
            return value
        if isinstance(value, bool):
            raise InvalidGradeError(value)
        try:
            number = int(value.strip()) if isinstance(value, str) else int(value)
        except (TypeError, ValueError):
            raise InvalidGradeError(value) from None
        if isinstance(value, float) and value != number:
            raise InvalidGradeError(value)
        try:
            return cls(number)
        except ValueError:
            raise InvalidGradeError(value) from None

    @property
    def index(self) -> int:
        """0-based position, used for per-grade tallies."""
        return self.value - 1

    @property
    def label(self) -> str:
        return self.name.lower()


@dataclass(frozen=True)
class ReviewOutcome:
    """Result of grading one card. Applied to a Card, never stored itself."""

    stability: float
    difficulty: float
    due: date


# =============================================================================
# Forgetting curve
# =============================================================================


def retrievability(elapsed_days: float, stability: float) -> float:
    """Probability of recall after `elapsed_days` at the given stability."""
    return (1.0 + F * elapsed_days / stability) ** C


def interval(stability: float) -> float:
    """Days until retrievability falls to DESIRED_RETENTION.

    With DESIRED_RETENTION = 0.9 this is the stability itself.
    """
    return (stability / F) * (DESIRED_RETENTION ** (1.0 / C) - 1.0)


def _clamp_difficulty(d: float) -> float:
    return min(max(d, MIN_DIFFICULTY), MAX_DIFFICULTY)


# =============================================================================
# Initial state (first review)
# =============================================================================


def initial_stability(grade: Grade) -> float:
    return W[grade.index]


def initial_difficulty(grade: Grade) -> float:
    return _clamp_difficulty(W[4] - math.exp(W[5] * (grade.value - 1)) + 1.0)


# =============================================================================
# Updates (subsequent reviews)
# =============================================================================


def _success_stability(d: float, s: float, r: float, grade: Grade) -> float:
    t_d = 11.0 - d
    t_s = s ** -W[9]
    t_r = math.exp(W[10] * (1.0 - r)) - 1.0
    hard_penalty = W[15] if grade == Grade.HARD else 1.0
    easy_bonus = W[16] if grade == Grade.EASY else 1.0
    c = math.exp(W[8])
    return s * (1.0 + t_d * t_s * t_r * hard_penalty * easy_bonus * c)


def _failure_stability(d: float, s: float, r: float) -> float:
    d_f = d ** -W[12]
    s_f = (s + 1.0) ** W[13] - 1.0
    r_f = math.exp(W[14] * (1.0 - r))
    c_f = W[11]
    # A lapse never increases stability
    return min(s, d_f * s_f * r_f * c_f)


def updated_stability(
    difficulty: float,
    stability: float,
    retrievability: float,
    grade: Grade,
) -> float:
    """
    Stability after a review of a card that already has memory state.

    Args:
        difficulty: Current difficulty (1-10)
        stability: Current stability in days
        retrievability: Recall probability at the moment of review
        grade: Reported recall quality

    Returns:
        New stability in days
    """
    if grade == Grade.FORGOT:
        return _failure_stability(difficulty, stability, retrievability)
    return _success_stability(difficulty, stability, retrievability, grade)


def updated_difficulty(difficulty: float, grade: Grade) -> float:
    """Difficulty after a review, mean-reverted toward D0(Easy) and clamped to [1, 10]."""
    delta = -W[6] * (grade.value - 3)
    dp = difficulty + delta * ((10.0 - difficulty) / 9.0)
    return _clamp_difficulty(W[7] * initial_difficulty(Grade.EASY) + (1.0 - W[7]) * dp)


def _due_after(today: date, stability: float) -> date:
    # Half rounds up, not to even. At least one day, so a card is never
    # due again on the day it was graded.
    days = max(math.floor(interval(stability) + 0.5), 1)
    return today + timedelta(days=days)


# =============================================================================
# Review entry points
# =============================================================================


def review_new(grade: Grade, today: date) -> ReviewOutcome:
    """First review of a card with no memory state."""
    s = initial_stability(grade)
    d = initial_difficulty(grade)
    return ReviewOutcome(stability=s, difficulty=d, due=_due_after(today, s))


def review_existing(
    difficulty: float,
    stability: float,
    elapsed_days: float,
    grade: Grade,
    today: date,
) -> ReviewOutcome:
    """Review of a card graded before, `elapsed_days` (>= 0) after its last review."""
    r = retrievability(elapsed_days, stability)
    new_s = updated_stability(difficulty, stability, r, grade)
    new_d = updated_difficulty(difficulty, grade)
    return ReviewOutcome(stability=new_s, difficulty=new_d, due=_due_after(today, new_s))
