"""List/range state machine variants.

Only the variant that needs a piece of data carries it: ``NoList`` has no
queue, ``ListStarted``/``ListInProgress`` hold the active queue, and the two
range variants add their ``next``/``limit`` counters.
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from enum import Enum, auto
from typing import ClassVar, Union

from .options import RawOption


class ListMode(Enum):
    NONE = auto()            # no list active
    STARTED = auto()         # begin_list() succeeded
    IN_PROGRESS = auto()     # iterating raw occurrences
    SIGNED_RANGE = auto()    # expanding "a-b" into int64 elements
    UNSIGNED_RANGE = auto()  # expanding "a-b" into uint64 elements


@dataclass(slots=True)
class NoList:
    mode: ClassVar[ListMode] = ListMode.NONE


@dataclass(slots=True)
class ListStarted:
    mode: ClassVar[ListMode] = ListMode.STARTED
    name: str
    queue: deque[RawOption]


@dataclass(slots=True)
class ListInProgress:
    mode: ClassVar[ListMode] = ListMode.IN_PROGRESS
    name: str
    queue: deque[RawOption]


@dataclass(slots=True)
class SignedRange:
    mode: ClassVar[ListMode] = ListMode.SIGNED_RANGE
    name: str
    queue: deque[RawOption]
    next: int
    limit: int


@dataclass(slots=True)
class UnsignedRange:
    mode: ClassVar[ListMode] = ListMode.UNSIGNED_RANGE
    name: str
    queue: deque[RawOption]
    next: int
    limit: int


NO_LIST = NoList()

ListState = Union[NoList, ListStarted, ListInProgress, SignedRange, UnsignedRange]
