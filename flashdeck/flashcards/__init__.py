"""
Flashcard queue scheduler.

Serves cards from an ordered queue and reinserts rated cards by difficulty.
"""

from flashdeck.errors import FlashdeckError, LoadError, NotFoundError, StoreError, ValidationError
from flashdeck.models import Card, CardState, Rating, Snapshot

from .engine import QueueScheduler, create_scheduler
from .policy import DEFAULT_POLICY, ReinsertionPolicy, get_reinsert_index

__all__ = [
    'QueueScheduler',
    'create_scheduler',
    'Card',
    'CardState',
    'Rating',
    'Snapshot',
    'ReinsertionPolicy',
    'DEFAULT_POLICY',
    'get_reinsert_index',
    'FlashdeckError',
    'LoadError',
    'NotFoundError',
    'StoreError',
    'ValidationError',
]
