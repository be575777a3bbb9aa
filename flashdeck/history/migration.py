"""
Snapshot migration.

Every stored card state is normalized independently into the current
``{"reviews": [...]}`` shape, so the scheduler only ever sees full review
histories whatever schema wrote the file. Corrupt entries are repaired, never
fatal.
"""

from typing import Any, Dict, List

from flashdeck.models import (
    CardState,
    Rating,
    coerce_card_id,
    normalize_rating,
    to_number,
)

# Upper bound on reviews rebuilt from a legacy reviewCount
LEGACY_REVIEW_LIMIT = 100


def sanitize_reviews(values: List[Any]) -> List[Rating]:
    """Keep string entries that resolve to a known rating."""
    reviews = []
    for value in values:
        if not isinstance(value, str):
            continue
        rating = normalize_rating(value)
        if rating is not None:
            reviews.append(rating)
    return reviews


def upgrade_legacy_state(raw: Dict[str, Any]) -> CardState:
    """Rebuild a review history from a legacy {lastRating, reviewCount} record."""
    last_rating = raw.get("lastRating")
    rating = normalize_rating(last_rating) if isinstance(last_rating, str) else None
    if rating is None:
        return CardState()

    count = to_number(raw.get("reviewCount"))
    if count is not None and count > 0:
        repeat = min(int(count), LEGACY_REVIEW_LIMIT)
    else:
        repeat = 1
    return CardState(reviews=[rating] * repeat)


def normalize_card_state(raw: Any) -> CardState:
    """Normalize one stored card state."""
    if isinstance(raw, dict) and isinstance(raw.get("reviews"), list):
        return CardState(reviews=sanitize_reviews(raw["reviews"]))
    if isinstance(raw, dict):
        return upgrade_legacy_state(raw)
    return CardState()


def normalize_card_map(raw_cards: Any) -> Dict[str, CardState]:
    """Normalize the stored ``cards`` mapping."""
    if not isinstance(raw_cards, dict):
        return {}
    return {str(key): normalize_card_state(value) for key, value in raw_cards.items()}


def normalize_queue(raw_queue: Any) -> List[int]:
    """Coerce queue entries to ints, dropping non-numeric ones."""
    if not isinstance(raw_queue, list):
        return []
    queue = []
    for entry in raw_queue:
        card_id = coerce_card_id(entry)
        if card_id is not None:
            queue.append(card_id)
    return queue


def sanitize_since_fresh(value: Any) -> int:
    if isinstance(value, int) and not isinstance(value, bool) and value >= 0:
        return value
    return 0
