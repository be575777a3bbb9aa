"""
Reinsertion Policy - where a just-rated card goes back into the queue.

This is a heuristic priority-queue reinsertion, not a date-based interval
formula. The offset is the distance from the queue head:
  trivial - end of the queue (effectively retired)
  easy    - base + bonus that grows with every prior easy rating
  normal  - base nudged by whether easy or hard dominates the history
  hard    - base only, so the card comes back soon

The result is always clamped to [1, queue_length]: a rated card is never
served again immediately, and never placed past the end of the queue it was
just removed from.
"""

import math
from dataclasses import dataclass, field, fields
from typing import Any, Dict, Optional, Sequence

from flashdeck.models import CardState, Rating


NUMERIC_FIELDS = ("easy_bonus", "easy_linear_step", "normal_step", "normal_min", "normal_max")


def _whole(name: str, value: Any) -> int:
    """Floor a configured constant to an int; non-numbers are rejected."""
    if isinstance(value, bool) or not isinstance(value, (int, float)) or not math.isfinite(value):
        raise ValueError(f"Policy value {name} must be a number, got {value!r}")
    return math.floor(value)


@dataclass(frozen=True)
class ReinsertionPolicy:
    """Tunable constants of the reinsertion formula."""
    base_offsets: Dict[str, int] = field(default_factory=lambda: {
        "easy": 15,
        "normal": 15,
        "hard": 5,
    })
    easy_bonus: int = 15
    easy_growth: str = "exponential"   # exponential: bonus * 2^n, linear: step * n
    easy_linear_step: int = 10
    normal_step: int = 5
    normal_min: int = 5
    normal_max: int = 30

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "ReinsertionPolicy":
        """Build a policy from a config mapping, ignoring unknown keys."""
        if not data:
            return cls()
        known = {f.name for f in fields(cls)}
        values = {key: value for key, value in data.items() if key in known}
        if "base_offsets" in values:
            offsets = values["base_offsets"] or {}
            if not isinstance(offsets, dict):
                raise ValueError(f"base_offsets must be a mapping, got {offsets!r}")
            values["base_offsets"] = {
                **cls().base_offsets,
                **{key: _whole(f"base_offsets.{key}", value) for key, value in offsets.items()},
            }
        for name in NUMERIC_FIELDS:
            if name in values:
                values[name] = _whole(name, values[name])
        if values.get("easy_growth", "exponential") not in ("exponential", "linear"):
            raise ValueError(f"Unknown easy_growth mode: {values['easy_growth']}")
        return cls(**values)


DEFAULT_POLICY = ReinsertionPolicy()


def _history(history: Any) -> Sequence[Rating]:
    if isinstance(history, CardState):
        return history.reviews
    return history or ()


def easy_bonus(policy: ReinsertionPolicy, prior_easy: int) -> int:
    if policy.easy_growth == "linear":
        return policy.easy_linear_step * prior_easy
    return policy.easy_bonus * (2 ** prior_easy)


def get_reinsert_index(
    rating: Rating,
    queue_length: int,
    history=None,
    policy: ReinsertionPolicy = DEFAULT_POLICY,
) -> int:
    """
    Compute the queue index a rated card is reinserted at.

    Args:
        rating: Normalized rating just given
        queue_length: Queue length after the card was removed
        history: Pre-rating CardState or sequence of Ratings (read only)
        policy: Formula constants

    Returns:
        Index in [1, queue_length]; 0 only when the queue is empty
    """
    if rating is Rating.TRIVIAL:
        return queue_length

    reviews = _history(history)
    prior_easy = sum(1 for review in reviews if review is Rating.EASY)
    prior_hard = sum(1 for review in reviews if review is Rating.HARD)

    offset = max(math.floor(policy.base_offsets[rating.value]), 0)

    if rating is Rating.EASY:
        offset += easy_bonus(policy, prior_easy)
    elif rating is Rating.NORMAL:
        offset += policy.normal_step * (prior_easy - prior_hard)
        offset = min(max(offset, policy.normal_min), policy.normal_max)

    offset = max(math.floor(offset), 1)
    return min(offset, queue_length)
