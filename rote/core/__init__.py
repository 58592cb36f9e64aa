"""
rote core: memory model, session scheduling and cloze parsing.

Components:
- fsrs: FSRS memory model (pure functions)
- cloze: [bracket] span extraction and front/reveal rendering
- cards: Card and MemoryState
- scheduler: due filtering, deck summaries, review sessions
"""

from .cards import Card, MemoryState
from .cloze import expand_newlines, extract_cloze_spans, render_front, render_reveal
from .errors import (
    CardNotFoundError,
    CardStoreError,
    InvalidGradeError,
    RoteError,
    SessionStateError,
)
from .fsrs import Grade, ReviewOutcome, review_existing, review_new
from .scheduler import (
    ALL_DECKS,
    DeckScope,
    DeckSummary,
    ReviewItem,
    ReviewScheduler,
    ReviewSession,
    apply_grade,
    deck_summaries,
    due_cards,
)

__all__ = [
    # Cards
    "Card",
    "MemoryState",
    # Memory model
    "Grade",
    "ReviewOutcome",
    "review_new",
    "review_existing",
    # Cloze
    "extract_cloze_spans",
    "render_front",
    "render_reveal",
    "expand_newlines",
    # Scheduling
    "ALL_DECKS",
    "DeckScope",
    "DeckSummary",
    "ReviewItem",
    "ReviewScheduler",
    "ReviewSession",
    "apply_grade",
    "deck_summaries",
    "due_cards",
    # Errors
    "RoteError",
    "InvalidGradeError",
    "SessionStateError",
    "CardStoreError",
    "CardNotFoundError",
]
