"""
Entry point for running rote as a module.

Usage:
    python -m rote drill decks/
    python -m rote decks decks/
    python -m rote --help
"""
from .delivery.cli import main

if __name__ == "__main__":
    main()
