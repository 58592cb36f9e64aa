"""
CSV Card Store for rote.

Provides plain-file persistence for:
- Card content (deck, front, back, media)
- FSRS memory state (stability, difficulty, due, last_review)

Each CSV file is a deck source. Cards remember which file they came
from so that saving writes every card back to its own file.

Columns: deck,front,back,media,id,stability,difficulty,due,last_review
"""

from __future__ import annotations

import csv
import threading
from collections.abc import Iterable
from datetime import date, datetime
from pathlib import Path

from loguru import logger

from rote.core.cards import Card, MemoryState
from rote.core.errors import CardNotFoundError, CardStoreError

COLUMNS = (
    "deck",
    "front",
    "back",
    "media",
    "id",
    "stability",
    "difficulty",
    "due",
    "last_review",
)

DATE_FORMAT = "%Y-%m-%d"


# =============================================================================
# File discovery
# =============================================================================


def discover_files(paths: Iterable[str | Path]) -> list[Path]:
    """
    Find deck files.

    Directories are searched recursively for *.csv; other paths are
    kept only if they end in .csv.

    Returns:
        Sorted list of CSV paths
    """
    files: list[Path] = []
    for raw in paths:
        path = Path(raw)
        if path.is_dir():
            files.extend(p for p in path.rglob("*.csv") if p.is_file())
        elif path.suffix == ".csv":
            files.append(path)
    return sorted(set(files))


# =============================================================================
# Record parsing
# =============================================================================


def _field(row: list[str], index: int) -> str:
    return row[index] if index < len(row) else ""


def _parse_float(value: str, path: Path, line: int) -> float | None:
    """Blank or unparseable cells are absent; the card itself still loads."""
    value = value.strip()
    if not value:
        return None
    try:
        return float(value)
    except ValueError:
        logger.warning(f"{path}:{line}: invalid number {value!r}; ignoring it")
        return None


def _parse_date(value: str, path: Path, line: int) -> date | None:
    """Only YYYY-MM-DD is accepted; anything else is logged and treated as absent."""
    value = value.strip()
    if not value:
        return None
    try:
        return datetime.strptime(value, DATE_FORMAT).date()
    except ValueError:
        logger.warning(f"{path}:{line}: invalid date {value!r}; ignoring it")
        return None


def _card_from_row(row: list[str], default_deck: str, path: Path, line: int) -> Card:
    deck = _field(row, 0)
    stability = _parse_float(_field(row, 5), path, line)
    difficulty = _parse_float(_field(row, 6), path, line)
    due = _parse_date(_field(row, 7), path, line)
    last_review = _parse_date(_field(row, 8), path, line)

    memory = None
    if stability is not None and difficulty is not None and last_review is not None:
        memory = MemoryState(stability=stability, difficulty=difficulty, last_review=last_review)
    elif any(v is not None for v in (stability, difficulty, last_review)):
        logger.warning(
            f"{path}:{line}: incomplete memory state "
            f"(stability, difficulty and last_review must all be set); treating as new. "
            f"The partial values will be removed from the file on the next save"
        )

    if memory is not None and due is not None and due < memory.last_review:
        logger.warning(f"{path}:{line}: due {due} precedes last review; treating as due now")
        due = None

    try:
        return Card(
            deck=deck if deck.strip() else default_deck,
            front=_field(row, 1),
            back=_field(row, 2),
            media=_field(row, 3),
            id=_field(row, 4).strip(),
            memory=memory,
            due=due,
        )
    except ValueError as e:
        raise CardStoreError(f"{path}:{line}: {e}") from e


def load_csv(path: Path) -> list[Card]:
    """
    Load cards from one CSV file.

    Blank deck falls back to the file stem, blank id gets a fresh uuid.
    Malformed numbers and dates are logged and treated as blank.

    Raises:
        CardStoreError: unreadable file
    """
    default_deck = path.stem or "default"
    cards: list[Card] = []

    try:
        with open(path, encoding="utf-8", newline="") as f:
            reader = csv.reader(f)
            next(reader, None)  # header
            for row in reader:
                if not any(cell.strip() for cell in row):
                    continue
                cards.append(_card_from_row(row, default_deck, path, reader.line_num))
    except (OSError, csv.Error, UnicodeDecodeError) as e:
        raise CardStoreError(f"Failed to read {path}: {e}") from e

    logger.debug(f"Loaded {len(cards)} cards from {path.name}")
    return cards


def _row_from_card(card: Card) -> list[str]:
    return [
        card.deck,
        card.front,
        card.back,
        card.media,
        card.id,
        "" if card.stability is None else f"{card.stability:.3f}",
        "" if card.difficulty is None else f"{card.difficulty:.3f}",
        "" if card.due is None else card.due.strftime(DATE_FORMAT),
        "" if card.last_review is None else card.last_review.strftime(DATE_FORMAT),
    ]


def save_csv(path: Path, cards: Iterable[Card]) -> None:
    """
    Write cards to a CSV file, replacing its contents.

    Raises:
        CardStoreError: file could not be written
    """
    try:
        with open(path, "w", encoding="utf-8", newline="") as f:
            writer = csv.writer(f)
            writer.writerow(COLUMNS)
            writer.writerows(_row_from_card(card) for card in cards)
    except OSError as e:
        raise CardStoreError(f"Failed to write {path}: {e}") from e


# =============================================================================
# Card Store
# =============================================================================


class CardStore:
    """
    In-memory card collection backed by CSV files.

    `cards` is the shared list handed to the scheduler; `lock` guards it.
    `sources[i]` is the file that `cards[i]` is saved to.
    """

    def __init__(self) -> None:
        self.cards: list[Card] = []
        self.sources: list[Path] = []
        self.lock = threading.RLock()
        self.errors: list[str] = []
        self._files: list[Path] = []

    @property
    def files(self) -> list[Path]:
        """Known source files, in load order (including ones with no cards)."""
        return list(dict.fromkeys([*self._files, *self.sources]))

    def load(self, paths: Iterable[str | Path]) -> int:
        """
        Load every deck file found under `paths`.

        Unreadable files are logged and recorded in `errors`; the rest still load.

        Returns:
            Number of cards loaded
        """
        with self.lock:
            self.cards.clear()
            self.sources.clear()
            self.errors.clear()
            self._files.clear()

            files = discover_files(paths)
            for path in files:
                try:
                    cards = load_csv(path)
                except CardStoreError as e:
                    logger.warning(str(e))
                    self.errors.append(str(e))
                    continue
                self._files.append(path)
                self.cards.extend(cards)
                self.sources.extend([path] * len(cards))

            logger.info(f"CardStore loaded: {len(self.cards)} cards from {len(self._files)} files")
            return len(self.cards)

    def cards_from(self, path: Path) -> list[Card]:
        return [card for card, src in zip(self.cards, self.sources) if src == path]

    def source_of(self, card: Card) -> Path:
        for i, c in enumerate(self.cards):
            if c is card:
                return self.sources[i]
        raise CardNotFoundError(card.id)

    def save(self, path: Path | None = None) -> None:
        """Persist one source file, or every source file when `path` is None."""
        with self.lock:
            targets = [path] if path is not None else self.files
            for target in targets:
                save_csv(target, self.cards_from(target))
                logger.debug(f"Saved {target}")

    def save_card(self, card: Card) -> None:
        """Persist the file that holds `card`."""
        with self.lock:
            self.save(self.source_of(card))

    def get(self, card_id: str) -> Card:
        for card in self.cards:
            if card.id == card_id:
                return card
        raise CardNotFoundError(card_id)

    def _index_of(self, card_id: str) -> int:
        for i, card in enumerate(self.cards):
            if card.id == card_id:
                return i
        raise CardNotFoundError(card_id)

    def add_card(
        self,
        deck: str,
        front: str,
        back: str = "",
        source: Path | None = None,
    ) -> Card:
        """
        Create a new card.

        It is stored in `source`, else the file already holding `deck`,
        else the first known file.

        Raises:
            CardStoreError: no file to store the card in
        """
        with self.lock:
            if source is None:
                source = next(
                    (src for card, src in zip(self.cards, self.sources) if card.deck == deck),
                    None,
                )
            if source is None:
                files = self.files
                if not files:
                    raise CardStoreError(f"No deck file available for new card in {deck!r}")
                source = files[0]

            card = Card(deck=deck, front=front, back=back)
            self.cards.append(card)
            self.sources.append(source)
            logger.info(f"Added card {card.id} to {deck!r} ({source.name})")
            return card

    def update_card(
        self,
        card_id: str,
        deck: str | None = None,
        front: str | None = None,
        back: str | None = None,
    ) -> Card:
        """Edit a card's content. Memory state is left untouched."""
        with self.lock:
            card = self.get(card_id)
            if deck is not None:
                if not deck:
                    raise ValueError("Card deck must be a non-empty string")
                card.deck = deck
            if front is not None:
                card.front = front
            if back is not None:
                card.back = back
            return card

    def remove_card(self, card_id: str) -> Card:
        """
        Delete a card. Returns the removed card.

        Shifts the index of every later card, so do not call this while a
        review session over this store is still active.
        """
        with self.lock:
            i = self._index_of(card_id)
            self.sources.pop(i)
            return self.cards.pop(i)
