"""
Pytest Configuration and Fixtures.

This file configures pytest and provides shared fixtures for all tests.
"""
import sys
from datetime import date
from pathlib import Path

import pytest

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from rote.config import get_settings  # noqa: E402
from rote.core.cards import Card, MemoryState  # noqa: E402

CSV_HEADER = "deck,front,back,media,id,stability,difficulty,due,last_review\n"


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "smoke: Smoke tests for CLI commands")


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their location."""
    for item in items:
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
        elif "smoke" in str(item.fspath):
            item.add_marker(pytest.mark.smoke)


@pytest.fixture(autouse=True)
def clean_settings(monkeypatch):
    """Isolate every test from ROTE_* variables in the environment."""
    import os

    for key in list(os.environ):
        if key.startswith("ROTE_"):
            monkeypatch.delenv(key)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def log_messages():
    """Collect loguru messages at WARNING and above."""
    from loguru import logger

    messages: list[str] = []
    handler_id = logger.add(lambda m: messages.append(str(m)), level="WARNING", format="{message}")
    yield messages
    logger.remove(handler_id)


@pytest.fixture
def today():
    return date(2025, 6, 1)


@pytest.fixture
def new_card():
    """A card that has never been reviewed."""
    return Card(deck="biology", front="The [mitochondria] is the [powerhouse] of the cell", back="ATP", id="new-1")


@pytest.fixture
def reviewed_card():
    """A card last reviewed four days before `today`, due on `today`."""
    return Card(
        deck="math",
        front="What is 2+2?",
        back="4",
        id="rev-1",
        memory=MemoryState(stability=3.173, difficulty=5.5, last_review=date(2025, 5, 28)),
        due=date(2025, 6, 1),
    )


@pytest.fixture
def deck_dir(tmp_path):
    """A directory with two deck files, one in a subdirectory."""
    (tmp_path / "sub").mkdir()
    (tmp_path / "math.csv").write_text(
        CSV_HEADER
        + ",What is 2+2?,4,,m-1,,,,\n"
        + ",What is pi?,3.14159,,m-2,3.173,5.500,2999-01-01,2025-06-01\n",
        encoding="utf-8",
    )
    (tmp_path / "sub" / "french.csv").write_text(
        CSV_HEADER + ",Bonjour means [hello],,,f-1,,,,\n",
        encoding="utf-8",
    )
    (tmp_path / "notes.txt").write_text("not a deck\n", encoding="utf-8")
    return tmp_path
