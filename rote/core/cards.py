"""
Card data model.

A card is either new (no memory state) or reviewed. The reviewed state
keeps stability, difficulty and the last review date together, so one
can never be present without the others.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import date

from .fsrs import ReviewOutcome


def new_card_id() -> str:
    return str(uuid.uuid4())


@dataclass(frozen=True)
class MemoryState:
    """FSRS memory state of a card that has been graded at least once."""

    stability: float
    difficulty: float
    last_review: date


@dataclass
class Card:
    """
    A single reviewable item.

    `front` may contain [cloze] spans. `media` is carried through
    unchanged for the record store. A card with `due` of None is due
    immediately.
    """

    deck: str
    front: str
    back: str = ""
    media: str = ""
    id: str = field(default_factory=new_card_id)
    memory: MemoryState | None = None
    due: date | None = None

    def __post_init__(self) -> None:
        if not self.deck:
            raise ValueError("Card deck must be a non-empty string")
        if not self.id:
            self.id = new_card_id()
        if self.memory is not None and self.due is not None and self.due < self.memory.last_review:
            raise ValueError(
                f"Card {self.id}: due {self.due} is before last review {self.memory.last_review}"
            )

    @property
    def is_new(self) -> bool:
        """True until the card has been graded once."""
        return self.memory is None

    @property
    def stability(self) -> float | None:
        return None if self.memory is None else self.memory.stability

    @property
    def difficulty(self) -> float | None:
        return None if self.memory is None else self.memory.difficulty

    @property
    def last_review(self) -> date | None:
        return None if self.memory is None else self.memory.last_review

    def is_due(self, today: date) -> bool:
        """Due when never scheduled, or scheduled for today or earlier."""
        return self.due is None or self.due <= today

    def apply(self, outcome: ReviewOutcome, today: date) -> None:
        """Write a grading outcome back into the card."""
        self.memory = MemoryState(
            stability=outcome.stability,
            difficulty=outcome.difficulty,
            last_review=today,
        )
        self.due = outcome.due
