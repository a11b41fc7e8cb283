"""
Non-clustered selection: shuffle the whole queue at the start of every full
pass and stop after a fixed number of passes.
"""

from __future__ import annotations

from collections.abc import Sequence

from loguru import logger

from .base import SelectionAlgorithm, SelectionConfig
from .exceptions import InvalidConfiguration
from .items import SupportsSelection


class RandomAlgorithm(SelectionAlgorithm):
    """
    Repeats the full queue in random order, max_passes times.

    Each call counts as one presentation; a new pass starts every
    ``queue_length`` calls. There is no back-to-back check, so the last item
    of one pass may open the next.
    """

    def __init__(
        self,
        items: Sequence[SupportsSelection],
        config: SelectionConfig | None = None,
    ):
        self.config = config or SelectionConfig()
        self.config.validate()
        if not items:
            raise InvalidConfiguration("Cannot select from an empty item set")

        self.queue_length = len(items)
        self.max_passes = self.config.max_passes
        self.passes_completed = 0

    def advance(
        self,
        queue: Sequence[SupportsSelection],
        just_answered: SupportsSelection | None = None,
    ) -> list[SupportsSelection]:
        """Shuffle at the start of each pass; empty the queue when done."""
        todo = list(queue)
        if self.passes_completed % self.queue_length == 0:
            todo = self.shuffle_queue(todo)
            logger.debug(f"Pass {self.passes_completed // self.queue_length + 1} shuffled")

        self.passes_completed += 1
        if self.passes_completed - 1 == self.max_passes * self.queue_length:
            logger.info(f"Session complete after {self.max_passes} passes")
            return []

        return todo
