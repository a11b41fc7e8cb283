"""
Errors raised by the item selection algorithms.

Every failure here is a contract violation surfaced to the caller right away;
nothing is retried.
"""


class SelectionError(Exception):
    """Base class for item selection errors."""
    pass


class InvalidConfiguration(SelectionError):
    """Raised when a scheduler cannot be built from its items or settings."""
    pass


class StateInconsistency(SelectionError):
    """Raised when the cluster partition or an item lookup is violated."""
    pass


class RoundOverrun(StateInconsistency):
    """Raised when an answer count skips past more than one round boundary."""

    def __init__(self, item_index: int, answers: int, threshold: int):
        self.item_index = item_index
        self.answers = answers
        self.threshold = threshold
        super().__init__(
            f"Item {item_index} has {answers} answers, past the round threshold {threshold}"
        )
