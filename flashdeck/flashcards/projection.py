"""Public payloads built from scheduler state."""
from typing import Any, Dict, List, Optional

from flashdeck.models import Card, CardState, Rating, Snapshot, utc_timestamp

# More easy ratings than this count a card as completed
COMPLETED_EASY_COUNT = 4


def is_completed(state: CardState) -> bool:
    """A card is completed once rated trivial, or easy more than 4 times."""
    return (
        Rating.TRIVIAL in state.reviews
        or state.count(Rating.EASY) > COMPLETED_EASY_COUNT
    )


def compute_meta(cards: List[Card], snapshot: Snapshot) -> Dict[str, int]:
    """Aggregate counts over the deck and every stored card state."""
    states = snapshot.cards.values()
    return {
        "total": len(cards),
        "remaining": len(snapshot.queue),
        "reviewed": sum(len(state.reviews) for state in states),
        "seen": sum(1 for state in states if state.reviews),
        "completed": sum(1 for state in states if is_completed(state)),
    }


def client_state(snapshot: Snapshot, card_id: int) -> Dict[str, Any]:
    """Public copy of a card's state."""
    return snapshot.state_for(card_id).to_dict()


def card_payload(card: Optional[Card], snapshot: Snapshot) -> Optional[Dict[str, Any]]:
    if card is None:
        return None
    payload = card.to_dict()
    payload["state"] = client_state(snapshot, card.id)
    return payload


def build_projection(
    card: Optional[Card],
    cards: List[Card],
    snapshot: Snapshot,
    **extra: Any,
) -> Dict[str, Any]:
    """
    Build the response returned by both scheduler entry points.

    Args:
        card: Card to present, or None when nothing is queued
        cards: The deck, for aggregate counts
        snapshot: Current scheduler state
        **extra: Additional top-level fields (e.g. ``rated``)

    Returns:
        ``{card, meta, generatedAt, **extra}``
    """
    return {
        "card": card_payload(card, snapshot),
        "meta": compute_meta(cards, snapshot),
        "generatedAt": utc_timestamp(),
        **extra,
    }
