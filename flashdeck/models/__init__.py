"""Data models shared by the scheduler and the snapshot store."""

from .cards import (
    DEFAULT_SNAPSHOT_VERSION,
    RATING_ALIASES,
    Card,
    CardState,
    Rating,
    Snapshot,
    coerce_card_id,
    normalize_rating,
    to_number,
    utc_timestamp,
)

__all__ = [
    'DEFAULT_SNAPSHOT_VERSION',
    'RATING_ALIASES',
    'Card',
    'CardState',
    'Rating',
    'Snapshot',
    'coerce_card_id',
    'normalize_rating',
    'to_number',
    'utc_timestamp',
]
