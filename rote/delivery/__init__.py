"""
rote delivery layer.

Components:
- CardStore: CSV loading, saving and card editing
- cli: Typer/Rich terminal interface
"""

from .card_store import CardStore, discover_files, load_csv, save_csv

__all__ = [
    "CardStore",
    "discover_files",
    "load_csv",
    "save_csv",
]
