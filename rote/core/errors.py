"""Exception hierarchy for rote."""


class RoteError(Exception):
    """Base class for all rote errors."""
    pass


class InvalidGradeError(RoteError, ValueError):
    """Raised when a grade outside 1..4 reaches a grading boundary.

    Recoverable: nothing has been mutated when this is raised, so the caller
    can simply ask again.
    """

    def __init__(self, value: object):
        self.value = value
        super().__init__(f"Invalid grade {value!r}: expected 1, 2, 3 or 4")


class SessionStateError(RoteError, RuntimeError):
    """Raised when a review session is used outside its state machine.

    Reading or grading a complete session, or an order entry that points
    past the end of the card list. This is a programming error.
    """
    pass


class CardStoreError(RoteError):
    """Raised when a deck file cannot be read or written."""
    pass


class CardNotFoundError(RoteError, KeyError):
    """Raised when no card with the requested id exists in the store."""

    def __init__(self, card_id: str):
        self.card_id = card_id
        super().__init__(card_id)

    def __str__(self) -> str:
        return f"No card with id {self.card_id!r}"
