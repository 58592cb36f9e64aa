"""
rote: Terminal CLI.

A Rich terminal interface for drilling CSV flashcard decks with
FSRS scheduling.

Commands:
- rote decks    - Show due/total counts per deck
- rote drill    - Review due cards
- rote add      - Add a card to a deck
"""
from __future__ import annotations

import random
import sys
from datetime import date
from pathlib import Path
from typing import List, Optional

import typer
from loguru import logger
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.prompt import Prompt
from rich.table import Table
from rich.text import Text

from rote.config import get_settings
from rote.core.cards import Card
from rote.core.errors import CardStoreError, InvalidGradeError
from rote.core.fsrs import Grade
from rote.core.scheduler import (
    ALL_DECKS,
    DeckScopeLike,
    DeckSummary,
    ReviewScheduler,
    ReviewSession,
    deck_summaries,
)

from .card_store import CardStore


# =============================================================================
# CLI Setup
# =============================================================================

app = typer.Typer(
    name="rote",
    help="rote: spaced-repetition drills over CSV decks",
    no_args_is_help=True,
)
console = Console()


# =============================================================================
# Styling
# =============================================================================

STYLES = {
    "info": "bold cyan",
    "warning": "bold yellow",
    "error": "bold red",
    "dim": "dim",
    "grade": {
        Grade.FORGOT: "red",
        Grade.HARD: "yellow",
        Grade.GOOD: "green",
        Grade.EASY: "bright_blue",
    },
}

GRADE_PROMPT = "Rate (1=forgot, 2=hard, 3=good, 4=easy)"


# =============================================================================
# Helpers
# =============================================================================

def _load_store(paths: List[Path]) -> CardStore:
    """Load cards or exit with a message when there is nothing to load."""
    store = CardStore()
    store.load(paths)

    for error in store.errors:
        console.print(f"[{STYLES['warning']}]Warning:[/] {escape(error)}")

    if not store.files:
        console.print(f"[{STYLES['error']}]No CSV files found.[/]")
        raise typer.Exit(1)

    return store


def parse_deck_selection(
    raw: str,
    summaries: list[DeckSummary],
) -> DeckScopeLike | None:
    """
    Parse a comma-separated list of deck numbers.

    "0" anywhere selects all decks. Numbers are 1-based positions in
    `summaries`.

    Returns:
        ALL_DECKS, a list of deck names, or None if the input is invalid
    """
    selected: list[str] = []
    for part in raw.split(","):
        part = part.strip()
        if not part:
            continue
        try:
            n = int(part)
        except ValueError:
            return None
        if n == 0:
            return ALL_DECKS
        if not 1 <= n <= len(summaries):
            return None
        name = summaries[n - 1].name
        if name not in selected:
            selected.append(name)

    return selected or None


def _prompt_deck_selection(summaries: list[DeckSummary]) -> DeckScopeLike:
    while True:
        raw = Prompt.ask("Select deck(s) (comma-separated numbers, or 0 for all)")
        scope = parse_deck_selection(raw, summaries)
        if scope is not None:
            return scope
        console.print("Invalid selection. Try again.")


def _prompt_grade() -> Grade:
    while True:
        raw = Prompt.ask(GRADE_PROMPT)
        try:
            return Grade.parse(raw)
        except InvalidGradeError:
            console.print("Please enter 1, 2, 3, or 4.")


def display_summaries(summaries: list[DeckSummary]) -> None:
    """Numbered deck table, with 0 = all decks."""
    table = Table(title="Decks", title_justify="left")
    table.add_column("#", justify="right", style=STYLES["dim"])
    table.add_column("Deck")
    table.add_column("Due", justify="right", style=STYLES["info"])
    table.add_column("Total", justify="right")

    for i, s in enumerate(summaries, 1):
        table.add_row(str(i), escape(s.name), str(s.due), str(s.total))
    table.add_row("0", "All decks", str(sum(s.due for s in summaries)), str(sum(s.total for s in summaries)))

    console.print(table)


def _display_session_summary(session: ReviewSession) -> None:
    tally = session.tally()
    lines = ", ".join(
        f"[{STYLES['grade'][grade]}]{grade.label.capitalize()}: {count}[/]"
        for grade, count in tally.items()
    )
    title = "Session complete!" if session.is_complete else "Session ended early"
    console.print()
    console.print(Panel(
        f"[bold]{title}[/bold]\n\n"
        f"Cards reviewed: {session.position}/{session.total}\n"
        f"{lines}",
        title="Summary",
        border_style="green" if session.is_complete else "yellow",
    ))


def _save(store: CardStore, card: Card | None = None) -> bool:
    try:
        if card is None:
            store.save()
        else:
            store.save_card(card)
    except CardStoreError as e:
        console.print(f"[{STYLES['error']}]Error saving:[/] {escape(str(e))}")
        return False
    return True


# =============================================================================
# Commands
# =============================================================================

@app.command()
def decks(
    paths: List[Path] = typer.Argument(..., help="CSV files or directories of CSV files"),
) -> None:
    """Show due and total card counts per deck."""
    store = _load_store(paths)
    display_summaries(deck_summaries(store.cards, date.today()))


@app.command()
def drill(
    paths: List[Path] = typer.Argument(..., help="CSV files or directories of CSV files"),
    deck: Optional[List[str]] = typer.Option(
        None,
        "--deck", "-d",
        help="Deck to review (repeatable); prompts when omitted",
    ),
    all_decks: bool = typer.Option(
        False,
        "--all", "-a",
        help="Review due cards from every deck",
    ),
    seed: Optional[int] = typer.Option(
        None,
        "--seed",
        help="Seed for the card order (reproducible sessions)",
    ),
) -> None:
    """
    Review due cards in the terminal.

    Cards are shown in shuffled order. Press Enter to reveal the answer,
    then rate your recall from 1 to 4. Progress is written back to the
    CSV files.
    """
    settings = get_settings()
    store = _load_store(paths)

    if not store.cards:
        console.print(f"[{STYLES['error']}]No cards found.[/]")
        raise typer.Exit(1)

    today = date.today()
    summaries = deck_summaries(store.cards, today)
    display_summaries(summaries)
    console.print()

    scope: DeckScopeLike
    if all_decks:
        scope = ALL_DECKS
    elif deck:
        known = {s.name for s in summaries}
        for name in deck:
            if name not in known:
                console.print(f"[{STYLES['warning']}]Unknown deck:[/] {escape(name)}")
        scope = list(deck)
    else:
        try:
            scope = _prompt_deck_selection(summaries)
        except (KeyboardInterrupt, EOFError):
            console.print()
            raise typer.Exit(1)

    if seed is None:
        seed = settings.shuffle_seed
    scheduler = ReviewScheduler(store.cards, rng=random.Random(seed), lock=store.lock)

    session = scheduler.start_session(scope, today)
    if session is None:
        console.print("[green]No cards due for review.[/green]")
        raise typer.Exit(0)

    console.print(f"[bold]{session.total} cards due for review.[/bold]\n")

    saved = True
    try:
        while not session.is_complete:
            item = scheduler.current_item(session)
            card = scheduler.current_card(session)

            console.print(f"[{STYLES['dim']}]\\[{session.position + 1}/{session.total}][/] {escape(item.deck)}")
            console.print(Panel(Text(item.front_display), border_style="cyan", padding=(1, 2)))
            Prompt.ask(f"[{STYLES['dim']}]Press Enter to reveal[/]", default="", show_default=False)
            console.print(Panel(Text(item.reveal_display), border_style="green", padding=(1, 2)))

            grade = _prompt_grade()
            outcome = scheduler.grade(session, grade, today)
            console.print(f"[{STYLES['dim']}]Next review: {outcome.due.isoformat()}[/]\n")

            if settings.save_after_each_grade:
                saved = _save(store, card) and saved

    except (KeyboardInterrupt, EOFError):
        console.print(f"\n\n[{STYLES['warning']}]Session interrupted.[/]")

    if session.position > 0:
        saved = _save(store) and saved

    _display_session_summary(session)

    if not saved:
        raise typer.Exit(1)


@app.command()
def add(
    paths: List[Path] = typer.Argument(..., help="CSV files or directories of CSV files"),
    deck: str = typer.Option(..., "--deck", "-d", help="Deck name"),
    front: str = typer.Option(..., "--front", "-f", help="Prompt text ([brackets] mark cloze spans)"),
    back: str = typer.Option("", "--back", "-b", help="Answer text"),
) -> None:
    """Add a new card to a deck."""
    store = _load_store(paths)

    try:
        card = store.add_card(deck=deck, front=front, back=back)
    except (CardStoreError, ValueError) as e:
        console.print(f"[{STYLES['error']}]{escape(str(e))}[/]")
        raise typer.Exit(1)

    if not _save(store, card):
        raise typer.Exit(1)

    console.print(f"[green]Added card {card.id} to {escape(deck)}[/green]")


# =============================================================================
# Entry Point
# =============================================================================

def configure_logging() -> None:
    """Replace loguru's default sink with the configured ones."""
    settings = get_settings()
    logger.remove()
    logger.add(
        sys.stderr,
        level=settings.log_level,
        format="<dim>{time:HH:mm:ss}</dim> | <level>{level: <8}</level> | {message}",
    )
    if settings.log_file:
        logger.add(settings.log_file, level="DEBUG", rotation="10 MB", retention=5)


def main() -> None:
    """CLI entry point."""
    configure_logging()
    app()


if __name__ == "__main__":
    main()
