"""
Shared test fixtures for the flashdeck scheduler.

Provides:
- Deck files of any size written to a temp directory
- A state file path inside a not-yet-created subdirectory
- A factory that opens a QueueScheduler on those files
"""

import json
import pytest

from flashdeck.flashcards import QueueScheduler


@pytest.fixture
def write_deck(tmp_path):
    """Write a deck of `count` cards and return its path."""
    def _write(count: int = 3, name: str = "deck.json"):
        path = tmp_path / name
        path.write_text(json.dumps([
            {"question": f"Question {i}", "answer": f"Answer {i}"}
            for i in range(1, count + 1)
        ]))
        return path
    return _write


@pytest.fixture
def deck_file(write_deck):
    """Three-card deck (ids 1, 2, 3)."""
    return write_deck(3)


@pytest.fixture
def state_file(tmp_path):
    return tmp_path / "state" / "card-state.json"


@pytest.fixture
def open_scheduler(deck_file, state_file):
    """Async factory for schedulers; defaults to the three-card deck."""
    async def _open(deck=None, state=None, **kwargs) -> QueueScheduler:
        return await QueueScheduler.open(deck or deck_file, state or state_file, **kwargs)
    return _open


def read_state(path) -> dict:
    return json.loads(path.read_text())


@pytest.fixture
def read_state_file():
    return read_state
