"""
QueueScheduler - queue-reordering flashcard scheduler.

Cards are served from the head of an ordered queue. Rating a card removes it
and splices it back in at an offset chosen by the ReinsertionPolicy: hard
cards come back within a few cards, easy ones drift further back each time,
trivial ones go to the tail.

Persistence is asymmetric:
  get_next_card - the snapshot write runs as a background task; failures
                  are only logged
  rate_card     - the write is awaited and failures are raised
"""

import asyncio
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Set

from flashdeck.errors import NotFoundError, StoreError, ValidationError
from flashdeck.history.store import dump_snapshot, load_snapshot, write_payload
from flashdeck.models import Card, CardState, Snapshot, normalize_rating, to_number, utc_timestamp

from .deck import build_card_index, load_deck
from .policy import DEFAULT_POLICY, ReinsertionPolicy, get_reinsert_index
from .projection import build_projection, client_state
from .reconcile import reconcile_queue

logger = logging.getLogger(__name__)

# Selections without a never-reviewed card before one is promoted to the head
FRESH_CARD_THRESHOLD = 7


class QueueScheduler:
    """
    Serves and reorders cards for one deck.

    Owns its snapshot exclusively for its lifetime. Entry points are meant to
    be called sequentially from one event loop.
    """

    def __init__(
        self,
        cards: List[Card],
        snapshot: Snapshot,
        state_file,
        policy: ReinsertionPolicy = DEFAULT_POLICY,
        fresh_threshold: int = FRESH_CARD_THRESHOLD,
    ):
        self.cards = list(cards)
        self.snapshot = snapshot
        self.state_file = Path(state_file)
        self.policy = policy
        self.fresh_threshold = fresh_threshold
        self._card_index = build_card_index(self.cards)
        self._write_lock = asyncio.Lock()
        self._pending_writes: Set[asyncio.Task] = set()

    @classmethod
    async def open(
        cls,
        deck_file,
        state_file,
        policy: ReinsertionPolicy = DEFAULT_POLICY,
        fresh_threshold: int = FRESH_CARD_THRESHOLD,
    ) -> "QueueScheduler":
        """
        Load the deck and snapshot, repair the queue and return a scheduler.

        Raises:
            LoadError: Deck file unusable
            StoreError: State file unreadable, or the repaired queue could not be saved
        """
        cards = await asyncio.to_thread(load_deck, deck_file)
        snapshot = await asyncio.to_thread(load_snapshot, state_file)
        scheduler = cls(cards, snapshot, state_file, policy=policy, fresh_threshold=fresh_threshold)
        if reconcile_queue(snapshot, cards):
            await scheduler.persist()
        return scheduler

    @property
    def queue(self) -> List[int]:
        return self.snapshot.queue

    # ---------------------------------------------------------------- freshness

    def _prioritize_fresh_card(self) -> None:
        """Move the first never-reviewed card to the head once the threshold is hit."""
        queue = self.snapshot.queue
        if not queue or self.snapshot.since_fresh < self.fresh_threshold:
            return
        for index, card_id in enumerate(queue):
            if self.snapshot.state_for(card_id).is_fresh:
                if index > 0:
                    queue.insert(0, queue.pop(index))
                    logger.debug(f"Promoted fresh card {card_id} from position {index + 1}")
                return

    def _update_fresh_tracking(self, state: CardState) -> None:
        if state.is_fresh:
            self.snapshot.since_fresh = 0
        else:
            self.snapshot.since_fresh += 1

    # ---------------------------------------------------------------- selection

    def _select_next(self) -> Optional[Card]:
        self._prioritize_fresh_card()
        if not self.snapshot.queue:
            return None
        return self._card_index.get(self.snapshot.queue[0])

    def _respond(self, card: Optional[Card], **extra: Any) -> Dict[str, Any]:
        if card is not None:
            self._update_fresh_tracking(self.snapshot.state_for(card.id))
        return build_projection(card, self.cards, self.snapshot, **extra)

    # -------------------------------------------------------------- persistence

    async def persist(self) -> None:
        """
        Write the current snapshot and wait for it.

        Serialization happens under the write lock, so whichever write lands
        last carries the newest in-memory state.

        Raises:
            StoreError: The write failed
        """
        async with self._write_lock:
            payload = dump_snapshot(self.snapshot)
            await asyncio.to_thread(write_payload, self.state_file, payload)

    async def _persist_quietly(self) -> None:
        try:
            await self.persist()
        except StoreError as e:
            logger.error(f"Failed to save scheduler state: {e}")

    def _persist_soon(self) -> None:
        """Schedule a best-effort write without waiting for it."""
        task = asyncio.create_task(self._persist_quietly())
        self._pending_writes.add(task)
        task.add_done_callback(self._pending_writes.discard)

    async def flush(self) -> None:
        """Wait for all background writes scheduled so far."""
        while self._pending_writes:
            await asyncio.gather(*list(self._pending_writes))

    # ------------------------------------------------------------- entry points

    async def get_next_card(self) -> Dict[str, Any]:
        """
        Return the card at the head of the queue.

        Selection updates freshness bookkeeping, which is saved in the
        background.

        Returns:
            ``{card, meta, generatedAt}``; ``card`` is None when the queue is empty
        """
        card = self._select_next()
        response = self._respond(card)
        if card is not None:
            self._persist_soon()
        return response

    async def rate_card(self, card_id: Any, rating: Any) -> Dict[str, Any]:
        """
        Apply a rating and move the card to its new queue position.

        Args:
            card_id: Card id (int or numeric string)
            rating: trivial, easy, normal/medium or hard

        Returns:
            Projection of the new head card plus a ``rated`` record

        Raises:
            ValidationError: Unknown rating or non-numeric id
            NotFoundError: No card with that id
            StoreError: The rating could not be persisted
        """
        normalized = normalize_rating(rating)
        if normalized is None:
            raise ValidationError("Unsupported rating option")

        number = to_number(card_id)
        if number is None:
            raise ValidationError("Invalid card identifier")

        is_whole = isinstance(number, int) or number.is_integer()
        card = self._card_index.get(int(number)) if is_whole else None
        if card is None:
            raise NotFoundError("Card not found")

        key = str(card.id)
        state = self.snapshot.state_for(card.id).copy()
        queue = self.snapshot.queue

        remaining = len(queue) - (card.id in queue)
        insert_index = get_reinsert_index(normalized, remaining, state, self.policy)
        if card.id in queue:
            queue.remove(card.id)
        queue.insert(insert_index, card.id)

        state.reviews.append(normalized)
        self.snapshot.cards[key] = state
        self.snapshot.updated_at = utc_timestamp()

        logger.info(
            f"Card {card.id} rated {normalized.value}, "
            f"reinserted at position {insert_index + 1} of {len(queue)}"
        )

        next_card = self._select_next()
        response = self._respond(next_card, rated={
            "id": card.id,
            "rating": normalized.value,
            "state": client_state(self.snapshot, card.id),
            "queueIndex": insert_index,
            "queuePosition": insert_index + 1,
        })
        await self.persist()
        return response


async def create_scheduler(deck_key: Optional[str] = None, config=None) -> QueueScheduler:
    """
    Build a scheduler for a configured deck.

    Args:
        deck_key: Deck name, case-insensitive; unknown keys use the default deck
        config: FlashdeckConfig (default: loaded from YAML)
    """
    if config is None:
        from flashdeck.config import load_config
        config = load_config()

    deck = config.resolve_deck(deck_key)
    return await QueueScheduler.open(
        deck.deck_file,
        deck.state_file,
        policy=config.policy,
        fresh_threshold=config.fresh_threshold,
    )
