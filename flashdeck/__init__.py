"""
flashdeck - queue-reordering flashcard scheduler.

Serves question/answer cards from an ordered review queue and reinserts each
rated card at a position driven by its rating and review history.
"""

__version__ = "1.0.0"
