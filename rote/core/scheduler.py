"""
Review Session Scheduler.

Implements:
- Due filtering (a card with no due date is always due)
- Per-deck summaries for reporting
- Shuffled review sessions that advance exactly once per grade

A session walks through a fixed order of card indices:

    start_session -> Active (position < total) -> Complete (position == total)

The card list is shared state. Grading holds the scheduler lock across
read card -> compute outcome -> write card -> advance, so concurrent
callers see each grading step as a single operation.
"""

from __future__ import annotations

import random
import threading
from collections.abc import Collection, MutableSequence, Sequence
from dataclasses import dataclass, field
from datetime import date
from enum import Enum

from loguru import logger

from .cards import Card
from .cloze import render_front, render_reveal
from .errors import SessionStateError
from .fsrs import Grade, ReviewOutcome, review_existing, review_new

# =============================================================================
# Deck scope
# =============================================================================


class DeckScope(Enum):
    """Reserved scope values that are never confused with a deck name."""

    ALL = "all"


ALL_DECKS = DeckScope.ALL

# A single deck name, several deck names, or ALL_DECKS
DeckScopeLike = DeckScope | str | Collection[str]


def in_scope(card: Card, scope: DeckScopeLike) -> bool:
    if scope is ALL_DECKS:
        return True
    if isinstance(scope, str):
        return card.deck == scope
    return card.deck in scope


# =============================================================================
# Due queries
# =============================================================================


def due_cards(cards: Sequence[Card], today: date) -> list[Card]:
    """Cards that are due on `today`, in input order."""
    return [card for card in cards if card.is_due(today)]


def due_indices(
    cards: Sequence[Card],
    today: date,
    scope: DeckScopeLike = ALL_DECKS,
) -> list[int]:
    """Indices of due cards within `scope`, in input order."""
    return [
        i for i, card in enumerate(cards)
        if card.is_due(today) and in_scope(card, scope)
    ]


@dataclass(frozen=True)
class DeckSummary:
    """Card counts for one deck."""

    name: str
    total: int
    due: int


def deck_summaries(cards: Sequence[Card], today: date) -> list[DeckSummary]:
    """Total and due counts per deck, sorted by deck name."""
    counts: dict[str, list[int]] = {}
    for card in cards:
        entry = counts.setdefault(card.deck, [0, 0])
        entry[0] += 1
        if card.is_due(today):
            entry[1] += 1

    return [
        DeckSummary(name=name, total=total, due=due)
        for name, (total, due) in sorted(counts.items())
    ]


# =============================================================================
# Grading
# =============================================================================


def apply_grade(card: Card, grade: Grade, today: date) -> ReviewOutcome:
    """
    Run the memory model for one card and write the result back.

    Args:
        card: Card to grade (mutated in place)
        grade: Reported recall quality
        today: Review date

    Returns:
        The ReviewOutcome that was applied
    """
    if card.memory is None:
        outcome = review_new(grade, today)
    else:
        # Clock skew can put last_review in the future; treat as zero elapsed
        elapsed = max((today - card.memory.last_review).days, 0)
        outcome = review_existing(
            card.memory.difficulty,
            card.memory.stability,
            float(elapsed),
            grade,
            today,
        )

    card.apply(outcome, today)
    return outcome


# =============================================================================
# Sessions
# =============================================================================


@dataclass(frozen=True)
class ReviewItem:
    """What to show for one card: the prompt and the full reveal."""

    card_index: int
    deck: str
    front_display: str
    reveal_display: str

    @classmethod
    def from_card(cls, card: Card, card_index: int) -> ReviewItem:
        return cls(
            card_index=card_index,
            deck=card.deck,
            front_display=render_front(card.front),
            reveal_display=render_reveal(card.front, card.back),
        )


@dataclass
class ReviewSession:
    """Progress through one sitting. Owned by the caller, never persisted."""

    scope: DeckScopeLike
    order: tuple[int, ...]
    position: int = 0
    counts: list[int] = field(default_factory=lambda: [0, 0, 0, 0])

    @property
    def total(self) -> int:
        return len(self.order)

    @property
    def remaining(self) -> int:
        return self.total - self.position

    @property
    def is_complete(self) -> bool:
        return self.position >= self.total

    def tally(self) -> dict[Grade, int]:
        """Per-grade counts so far."""
        return {grade: self.counts[grade.index] for grade in Grade}


class ReviewScheduler:
    """
    Builds and drives review sessions over a shared card list.

    The card list is held by reference; grading mutates cards in place and
    the caller decides when to persist them.
    """

    def __init__(
        self,
        cards: MutableSequence[Card],
        rng: random.Random | None = None,
        lock: threading.RLock | None = None,
    ):
        """
        Initialize the scheduler.

        Args:
            cards: Shared card list (not copied)
            rng: Random source for shuffling (fresh entropy-seeded one if None)
            lock: Lock guarding the card list (a private one if None)
        """
        self.cards = cards
        self.rng = rng or random.Random()
        self.lock = lock or threading.RLock()

    def due_cards(self, today: date) -> list[Card]:
        return due_cards(self.cards, today)

    def deck_summaries(self, today: date) -> list[DeckSummary]:
        return deck_summaries(self.cards, today)

    def start_session(
        self,
        scope: DeckScopeLike,
        today: date,
    ) -> ReviewSession | None:
        """
        Start a session over the due cards in `scope`.

        Returns:
            A new ReviewSession, or None when nothing is due
        """
        with self.lock:
            order = due_indices(self.cards, today, scope)

        if not order:
            logger.debug(f"No cards due in scope {scope!r}")
            return None

        # random.shuffle is an unbiased Fisher-Yates shuffle
        self.rng.shuffle(order)
        logger.debug(f"Session started: {len(order)} cards in scope {scope!r}")
        return ReviewSession(scope=scope, order=tuple(order))

    def _current_index(self, session: ReviewSession) -> int:
        if session.is_complete:
            raise SessionStateError(
                f"Session is complete ({session.position}/{session.total}); no current card"
            )
        index = session.order[session.position]
        if not 0 <= index < len(self.cards):
            raise SessionStateError(
                f"Session position {session.position} refers to card index {index}, "
                f"but only {len(self.cards)} cards are loaded"
            )
        return index

    def current_card(self, session: ReviewSession) -> Card:
        """The card at the session's position. Check is_complete first."""
        with self.lock:
            return self.cards[self._current_index(session)]

    def current_item(self, session: ReviewSession) -> ReviewItem:
        """Display strings for the current card."""
        with self.lock:
            index = self._current_index(session)
            return ReviewItem.from_card(self.cards[index], index)

    def grade(
        self,
        session: ReviewSession,
        grade: Grade | int | str,
        today: date,
    ) -> ReviewOutcome:
        """
        Grade the current card and advance the session by one.

        Raises:
            InvalidGradeError: grade not in 1..4 (nothing is mutated)
            SessionStateError: session already complete
        """
        grade = Grade.parse(grade)

        with self.lock:
            index = self._current_index(session)
            card = self.cards[index]
            outcome = apply_grade(card, grade, today)
            session.counts[grade.index] += 1
            session.position += 1

        logger.debug(
            f"Graded {card.id} {grade.label}: stability={outcome.stability:.3f}, "
            f"difficulty={outcome.difficulty:.3f}, due={outcome.due}"
        )
        return outcome
