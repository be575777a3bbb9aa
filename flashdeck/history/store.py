"""
JSON snapshot store for scheduler state.

The whole snapshot is read and rewritten on every access; there is no partial
write or merge. File locking guards readers against a concurrent writer.
"""

import fcntl
import json
import logging
from pathlib import Path
from typing import Any, Dict, Union

from flashdeck.errors import StoreError
from flashdeck.models import DEFAULT_SNAPSHOT_VERSION, Snapshot

from .migration import (
    normalize_card_map,
    normalize_queue,
    sanitize_since_fresh,
)

logger = logging.getLogger(__name__)


def snapshot_from_dict(data: Dict[str, Any]) -> Snapshot:
    """Build a Snapshot from parsed JSON, repairing what it can."""
    version = data.get("version")
    return Snapshot(
        version=version if version is not None else DEFAULT_SNAPSHOT_VERSION,
        updated_at=data.get("updatedAt"),
        cards=normalize_card_map(data.get("cards")),
        queue=normalize_queue(data.get("queue")),
        since_fresh=sanitize_since_fresh(data.get("sinceFresh")),
    )


def dump_snapshot(snapshot: Snapshot) -> str:
    """Serialize the full snapshot."""
    return json.dumps(snapshot.to_dict(), indent=2)


def write_payload(state_file: Union[str, Path], payload: str) -> None:
    """
    Overwrite the state file with a serialized snapshot.

    Raises:
        StoreError: The file could not be written
    """
    path = Path(state_file)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            fcntl.flock(f.fileno(), fcntl.LOCK_EX)  # Exclusive lock for writing
            try:
                f.write(payload)
            finally:
                fcntl.flock(f.fileno(), fcntl.LOCK_UN)
    except OSError as e:
        raise StoreError(f"Unable to save scheduler state to {path}: {e}") from e


def save_snapshot(state_file: Union[str, Path], snapshot: Snapshot) -> None:
    """Serialize and persist the whole snapshot."""
    write_payload(state_file, dump_snapshot(snapshot))


def load_snapshot(state_file: Union[str, Path]) -> Snapshot:
    """
    Load the scheduler snapshot.

    A missing file is a first run: a default snapshot is written and
    returned.

    Args:
        state_file: Path to the JSON state file

    Returns:
        Normalized snapshot

    Raises:
        StoreError: The file exists but cannot be read or parsed
    """
    path = Path(state_file)
    try:
        with open(path, "r", encoding="utf-8") as f:
            fcntl.flock(f.fileno(), fcntl.LOCK_SH)  # Shared lock for reading
            try:
                data = json.load(f)
            finally:
                fcntl.flock(f.fileno(), fcntl.LOCK_UN)
    except FileNotFoundError:
        logger.info(f"No scheduler state at {path}, creating a fresh one")
        snapshot = Snapshot()
        save_snapshot(path, snapshot)
        return snapshot
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        raise StoreError(f"Unable to load scheduler state from {path}: {e}") from e

    if not isinstance(data, dict):
        logger.warning(
            f"Scheduler state at {path} is a {type(data).__name__}, not an object; "
            "starting from defaults"
        )
        data = {}

    return snapshot_from_dict(data)
