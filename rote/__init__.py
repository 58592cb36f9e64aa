"""
rote: spaced-repetition flashcard drills over plain CSV decks.

- rote.core: FSRS memory model, review sessions, cloze parsing
- rote.delivery: CSV card store and the terminal CLI
"""

__version__ = "0.3.0"
