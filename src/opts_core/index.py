"""Unprocessed index: unconsumed occurrences grouped by option name."""

from __future__ import annotations

from collections import deque
from typing import Iterable, Iterator

from .options import RawOption


class UnprocessedIndex:
    """Maps each option name to a FIFO queue of its unconsumed occurrences.

    A name is present iff its queue is non-empty: queues are dropped the
    moment their last occurrence is consumed. Iteration follows first
    insertion order.
    """

    def __init__(self, options: Iterable[RawOption] = ()) -> None:
        self._queues: dict[str, deque[RawOption]] = {}
        for opt in options:
            self.insert(opt)

    # -- Building -------------------------------------------------------

    def insert(self, opt: RawOption) -> None:
        self._queues.setdefault(opt.name, deque()).append(opt)

    # -- Queries --------------------------------------------------------

    def lookup(self, name: str) -> deque[RawOption] | None:
        return self._queues.get(name)

    def peek_last(self, name: str) -> RawOption | None:
        """Return the most recent occurrence of *name* (last one wins)."""
        queue = self._queues.get(name)
        return queue[-1] if queue else None

    def first_remaining(self) -> str | None:
        return next(iter(self._queues), None)

    def names(self) -> list[str]:
        return list(self._queues)

    def __contains__(self, name: object) -> bool:
        return name in self._queues

    def __len__(self) -> int:
        return len(self._queues)

    def __iter__(self) -> Iterator[str]:
        return iter(self._queues)

    # -- Consumption ----------------------------------------------------

    def discard(self, name: str) -> None:
        """Mark every occurrence of *name* as consumed."""
        self._queues.pop(name, None)

    def pop_head(self, name: str) -> RawOption:
        """Consume the oldest occurrence of *name*.

        Drops the name from the index when that was its last occurrence.
        """
        queue = self._queues[name]
        opt = queue.popleft()
        if not queue:
            del self._queues[name]
        return opt
