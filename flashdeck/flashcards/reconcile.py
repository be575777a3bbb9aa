"""Queue repair against the authoritative deck."""
import logging
from typing import List

from flashdeck.models import Card, Snapshot, coerce_card_id

logger = logging.getLogger(__name__)


def reconcile_queue(snapshot: Snapshot, cards: List[Card]) -> bool:
    """
    Make the snapshot queue hold every deck id exactly once.

    Non-numeric, unknown and duplicate entries are dropped (first occurrence
    wins, order kept), then missing deck ids are appended in deck order.
    Running it twice in a row is a no-op the second time.

    Args:
        snapshot: Snapshot whose queue is repaired in place
        cards: The loaded deck

    Returns:
        True if the queue changed and should be persisted
    """
    original = snapshot.queue if isinstance(snapshot.queue, list) else []
    valid_ids = {card.id for card in cards}
    seen = set()
    queue = []

    for entry in original:
        card_id = coerce_card_id(entry)
        if card_id is None or card_id not in valid_ids or card_id in seen:
            continue
        seen.add(card_id)
        queue.append(card_id)

    dropped = len(original) - len(queue)
    appended = 0
    for card in cards:
        if card.id not in seen:
            seen.add(card.id)
            queue.append(card.id)
            appended += 1

    mutated = not isinstance(snapshot.queue, list) or queue != snapshot.queue
    snapshot.queue = queue

    if mutated:
        logger.info(
            f"Queue repaired: dropped {dropped} stale entries, appended {appended} cards"
        )
    return mutated
