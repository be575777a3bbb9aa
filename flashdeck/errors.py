"""Scheduler error types.

Each error carries the HTTP-style status a transport layer should answer with.
"""


class FlashdeckError(Exception):
    """Base scheduler error."""

    status = 500

    def __init__(self, message: str, status: int = None):
        super().__init__(message)
        if status is not None:
            self.status = status


class ValidationError(FlashdeckError):
    """Malformed card id or rating token."""

    status = 400


class NotFoundError(FlashdeckError):
    """No card with the requested id exists in the deck."""

    status = 404


class StoreError(FlashdeckError):
    """Snapshot file could not be read, parsed or written."""


class LoadError(FlashdeckError):
    """Deck file could not be read or is not a JSON array."""
