"""
Configuration for flashdeck.

Deck definitions, the freshness threshold and the reinsertion policy come from
a YAML file (``FLASHDECK_CONFIG``, default: the packaged ``config.yaml``).
Relative deck and state paths are resolved against ``FLASHDECK_DATA_DIR``.
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from dotenv import load_dotenv

from flashdeck.flashcards.engine import FRESH_CARD_THRESHOLD
from flashdeck.flashcards.policy import ReinsertionPolicy

load_dotenv()

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path(__file__).parent / "config.yaml"


def _default_config() -> Dict[str, Any]:
    """Built-in configuration used when no YAML file is found."""
    return {
        "default_deck": "social",
        "decks": {
            "social": {
                "deck_file": "socialstudies.json",
                # Keep the original filename so existing progress is preserved
                "state_file": "card-state.json",
            },
            "vocab": {
                "deck_file": "vocab.json",
                "state_file": "card-state-vocab.json",
            },
        },
        "scheduler": {
            "fresh_threshold": FRESH_CARD_THRESHOLD,
        },
        "policy": {},
    }


@dataclass
class DeckConfig:
    """Where one deck and its scheduler state live."""
    key: str
    deck_file: Path
    state_file: Path


@dataclass
class FlashdeckConfig:
    """Resolved application configuration."""
    decks: Dict[str, DeckConfig]
    default_deck: str = "social"
    fresh_threshold: int = FRESH_CARD_THRESHOLD
    policy: ReinsertionPolicy = field(default_factory=ReinsertionPolicy)

    def resolve_deck(self, deck_key: Optional[str] = None) -> DeckConfig:
        """Look up a deck case-insensitively, falling back to the default deck."""
        if isinstance(deck_key, str):
            deck = self.decks.get(deck_key.strip().lower())
            if deck is not None:
                return deck
            logger.warning(f"Unknown deck '{deck_key}', using '{self.default_deck}'")
        return self.decks[self.default_deck]


def _resolve_path(value: str, data_dir: Path) -> Path:
    path = Path(str(value))
    return path if path.is_absolute() else data_dir / path


def load_config(config_path=None, data_dir=None) -> FlashdeckConfig:
    """
    Load configuration from YAML.

    Args:
        config_path: YAML file (default: $FLASHDECK_CONFIG or packaged config.yaml)
        data_dir: Base for relative paths (default: $FLASHDECK_DATA_DIR or ./data)

    Returns:
        Resolved configuration
    """
    path = Path(config_path or os.getenv("FLASHDECK_CONFIG", DEFAULT_CONFIG_PATH))
    if path.exists():
        with open(path) as f:
            raw = yaml.safe_load(f) or {}
    else:
        logger.warning(f"Config not found at {path}, using defaults")
        raw = _default_config()

    if not isinstance(raw, dict):
        raise ValueError(f"Config at {path} must be a mapping, got {type(raw).__name__}")

    base_dir = Path(data_dir or os.getenv("FLASHDECK_DATA_DIR", "data"))

    deck_entries = raw.get("decks") or _default_config()["decks"]
    if not isinstance(deck_entries, dict):
        raise ValueError(f"Config at {path}: decks must be a mapping")

    decks = {}
    for key, entry in deck_entries.items():
        deck_key = str(key).lower()
        if not isinstance(entry, dict) or not entry.get("deck_file") or not entry.get("state_file"):
            raise ValueError(f"Config at {path}: deck '{deck_key}' needs deck_file and state_file")
        decks[deck_key] = DeckConfig(
            key=deck_key,
            deck_file=_resolve_path(entry["deck_file"], base_dir),
            state_file=_resolve_path(entry["state_file"], base_dir),
        )

    default_deck = str(raw.get("default_deck", "social")).lower()
    if default_deck not in decks:
        raise ValueError(f"Default deck '{default_deck}' is not configured")

    scheduler = raw.get("scheduler") or {}
    policy = raw.get("policy")
    if not isinstance(scheduler, dict) or not isinstance(policy, (dict, type(None))):
        raise ValueError(f"Config at {path}: scheduler and policy must be mappings")
    return FlashdeckConfig(
        decks=decks,
        default_deck=default_deck,
        fresh_threshold=int(scheduler.get("fresh_threshold", FRESH_CARD_THRESHOLD)),
        policy=ReinsertionPolicy.from_dict(policy),
    )
