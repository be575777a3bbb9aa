"""
Flashcard Scheduler Data Models

Cards come from the deck file and never change. Card states, the queue and
the freshness counter live in a Snapshot that is persisted whole.
"""

import math
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional, Union

DEFAULT_SNAPSHOT_VERSION = 2


class Rating(Enum):
    """Difficulty feedback for a reviewed card."""
    TRIVIAL = "trivial"  # Retire to the tail
    EASY = "easy"
    NORMAL = "normal"
    HARD = "hard"        # Resurface soon


RATING_ALIASES = {"medium": "normal"}


def normalize_rating(value: Any) -> Optional[Rating]:
    """Resolve a rating token (case-insensitive, aliases applied)."""
    if isinstance(value, Rating):
        return value
    if not isinstance(value, str):
        return None
    token = value.lower()
    token = RATING_ALIASES.get(token, token)
    try:
        return Rating(token)
    except ValueError:
        return None


def to_number(value: Any) -> Optional[Union[int, float]]:
    """Return a finite number for ints, floats and numeric strings, else None."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return value if math.isfinite(value) else None
    if isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return None
        return number if math.isfinite(number) else None
    return None


def coerce_card_id(value: Any) -> Optional[int]:
    """Coerce a stored queue entry to an int id, truncating fractions."""
    number = to_number(value)
    if number is None:
        return None
    return int(number)


def utc_timestamp() -> str:
    """Current UTC instant as ISO-8601 with millisecond precision."""
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


@dataclass(frozen=True)
class Card:
    """A question/answer pair, identified by its 1-based deck position."""
    id: int
    question: str
    answer: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "question": self.question,
            "answer": self.answer,
        }


@dataclass
class CardState:
    """Review history for one card, oldest rating first."""
    reviews: List[Rating] = field(default_factory=list)

    @property
    def is_fresh(self) -> bool:
        return not self.reviews

    def count(self, rating: Rating) -> int:
        return sum(1 for review in self.reviews if review is rating)

    def copy(self) -> "CardState":
        return CardState(reviews=list(self.reviews))

    def to_dict(self) -> Dict[str, Any]:
        return {"reviews": [review.value for review in self.reviews]}


@dataclass
class Snapshot:
    """Complete persisted scheduler state."""
    version: int = DEFAULT_SNAPSHOT_VERSION
    updated_at: Optional[str] = None
    cards: Dict[str, CardState] = field(default_factory=dict)
    queue: List[Any] = field(default_factory=list)
    since_fresh: int = 0

    def state_for(self, card_id: int) -> CardState:
        """Stored state for a card, or the never-reviewed default."""
        state = self.cards.get(str(card_id))
        if state is None:
            return CardState()
        return state

    def to_dict(self) -> Dict[str, Any]:
        return {
            "version": self.version,
            "updatedAt": self.updated_at,
            "cards": {key: state.to_dict() for key, state in self.cards.items()},
            "queue": list(self.queue),
            "sinceFresh": self.since_fresh,
        }
