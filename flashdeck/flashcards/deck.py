"""Deck loading from a JSON array of {question, answer} objects."""
import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Union

from flashdeck.errors import LoadError
from flashdeck.models import Card

logger = logging.getLogger(__name__)


def _clean_text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def load_deck(deck_file: Union[str, Path]) -> List[Card]:
    """
    Load an ordered deck of cards.

    Ids are the 1-based position of each entry in the file, so they stay
    stable only while the file ordering does.

    Args:
        deck_file: Path to the JSON deck file

    Returns:
        Cards in file order

    Raises:
        LoadError: The file is unreadable, not JSON, or not a JSON array
    """
    path = Path(deck_file)
    try:
        with open(path, "r", encoding="utf-8") as f:
            items = json.load(f)
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        raise LoadError(f"Unable to load flashcards from {path}: {e}") from e

    if not isinstance(items, list):
        raise LoadError(
            f"Unable to load flashcards from {path}: expected a JSON array, "
            f"got {type(items).__name__}"
        )

    cards = []
    for index, item in enumerate(items):
        fields: Dict[str, Any] = item if isinstance(item, dict) else {}
        cards.append(Card(
            id=index + 1,
            question=_clean_text(fields.get("question")),
            answer=_clean_text(fields.get("answer")),
        ))

    logger.info(f"Loaded {len(cards)} cards from {path}")
    return cards


def build_card_index(cards: List[Card]) -> Dict[int, Card]:
    """Map card id to card."""
    return {card.id: card for card in cards}
