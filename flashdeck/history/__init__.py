"""Persisted scheduler state: JSON snapshot store and legacy schema migration."""

from .store import load_snapshot, save_snapshot

__all__ = ['load_snapshot', 'save_snapshot']
