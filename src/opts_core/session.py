"""DecodeSession: one decode pass over an OptionSource.

The session owns the unprocessed index and the list/range state. A caller
(usually :func:`opts_core.decoder.decode`) drives it in program order::

    session = DecodeSession(source)
    session.begin_struct()
    name = session.decode_string("name")
    session.begin_list("size")
    sizes = []
    while session.next_list_element():
        sizes.append(session.decode_uint64("size"))
    session.end_list()
    session.end_struct()

Data errors raise subclasses of ``OptsError``; calls made out of order raise
``ProtocolError``.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable

from .config import DecodeConfig
from .errors import InvalidParameter, InvalidParameterValue, MissingParameter, ProtocolError
from .index import UnprocessedIndex
from .list_state import (
    NO_LIST,
    ListInProgress,
    ListMode,
    ListStarted,
    ListState,
    NoList,
    SignedRange,
    UnsignedRange,
)
from .options import OptionSource, RawOption
from .scalars import (
    BOOL_CHOICES,
    INT64_EXPECTED,
    INT64_RANGE_EXPECTED,
    SIZE_EXPECTED,
    UINT64_EXPECTED,
    UINT64_RANGE_EXPECTED,
    parse_bool,
    parse_int_full,
    parse_int_prefix,
    parse_size,
    parse_uint_full,
    parse_uint_prefix,
)

logger = logging.getLogger(__name__)

ID_OPTION = "id"


class DecodeSession:
    """Single-use decoder for one option source."""

    def __init__(self, source: OptionSource, config: DecodeConfig | None = None) -> None:
        self.source = source
        self.config = config if config is not None else DecodeConfig()
        self.depth = 0
        self.state: ListState = NO_LIST
        self._index: UnprocessedIndex | None = None
        self._finished = False

    @property
    def list_mode(self) -> ListMode:
        return self.state.mode

    # -- Struct lifecycle -----------------------------------------------

    def begin_struct(self) -> dict[str, Any]:
        """Open a struct and return its empty output record.

        Only the outermost call builds the index; nested structs share the
        same flat namespace.
        """
        if self.depth == 0:
            if self._finished:
                raise ProtocolError("decode session already used")
            self._index = self._build_index()
        self.depth += 1
        return {}

    def end_struct(self) -> None:
        """Close a struct; the outermost close rejects unconsumed options."""
        if not isinstance(self.state, NoList):
            raise ProtocolError("end_struct() called while a list is active")
        if self.depth == 0:
            raise ProtocolError("end_struct() without matching begin_struct()")
        self.depth -= 1
        if self.depth > 0:
            return

        index = self._index
        self._index = None
        self._finished = True
        leftover = index.first_remaining()
        if leftover is not None:
            logger.debug("Unconsumed options at end of struct: %s", index.names())
            raise InvalidParameter(leftover)

    def _build_index(self) -> UnprocessedIndex:
        index = UnprocessedIndex()
        for opt in self.source:
            if opt.name == ID_OPTION:
                raise ProtocolError(f"option source must not contain an option named {ID_OPTION!r}")
            index.insert(opt)
        if self.source.identifier is not None:
            index.insert(RawOption(ID_OPTION, self.source.identifier))
        logger.debug("Indexed %d option(s) under %d name(s)", len(self.source), len(index))
        return index

    @property
    def index(self) -> UnprocessedIndex:
        if self._index is None:
            raise ProtocolError("no struct is open")
        return self._index

    # -- Field presence -------------------------------------------------

    def has_field(self, name: str) -> bool:
        """True if *name* still has an unconsumed occurrence. Never consumes."""
        if not isinstance(self.state, NoList):
            raise ProtocolError("has_field() called while a list is active")
        return name in self.index

    # -- Lists ----------------------------------------------------------

    def begin_list(self, name: str) -> None:
        if not isinstance(self.state, NoList):
            raise ProtocolError("lists cannot be nested")
        queue = self.index.lookup(name)
        if queue is None:
            raise MissingParameter(name)
        self.state = ListStarted(name, queue)

    def next_list_element(self) -> bool:
        """Advance the active list.

        Returns True when an element is ready for a scalar decoder, False once
        every occurrence of the list's name has been consumed.
        """
        state = self.state
        if isinstance(state, ListStarted):
            self.state = ListInProgress(state.name, state.queue)
            return True

        if isinstance(state, (SignedRange, UnsignedRange)):
            if state.next < state.limit:
                state.next += 1
                return True
            # range exhausted; retire the occurrence it came from
            state = self.state = ListInProgress(state.name, state.queue)

        if isinstance(state, ListInProgress):
            if state.name not in self.index:
                raise ProtocolError(f"list {state.name!r} is already exhausted")
            self.index.pop_head(state.name)
            return state.name in self.index

        raise ProtocolError("next_list_element() called outside a list")

    def end_list(self) -> None:
        if isinstance(self.state, NoList):
            raise ProtocolError("end_list() called outside a list")
        self.state = NO_LIST

    # -- Scalar plumbing ------------------------------------------------

    def _lookup_scalar(self, name: str) -> RawOption:
        state = self.state
        if isinstance(state, NoList):
            opt = self.index.peek_last(name)
            if opt is None:
                raise MissingParameter(name)
            return opt
        if isinstance(state, ListInProgress):
            if not state.queue:
                raise ProtocolError(f"list {state.name!r} is already exhausted")
            return state.queue[0]
        raise ProtocolError(f"cannot decode a scalar in list mode {state.mode.name}")

    def _processed(self, name: str) -> None:
        # inside a list, next_list_element() does the consuming
        if isinstance(self.state, NoList):
            self.index.discard(name)

    # -- Scalar decoders ------------------------------------------------

    def decode_string(self, name: str) -> str:
        opt = self._lookup_scalar(name)
        self._processed(name)
        return opt.value if opt.value is not None else ""

    def decode_bool(self, name: str) -> bool:
        opt = self._lookup_scalar(name)
        try:
            value = parse_bool(opt.value)
        except ValueError:
            raise InvalidParameterValue(name, BOOL_CHOICES) from None
        self._processed(name)
        return value

    def decode_int64(self, name: str) -> int:
        if isinstance(self.state, SignedRange):
            return self.state.next

        opt = self._lookup_scalar(name)
        in_list = isinstance(self.state, ListInProgress)
        text = opt.value if opt.value is not None else ""
        try:
            lower, rest = parse_int_prefix(text)
            if not rest:
                self._processed(name)
                return lower
            if in_list and rest.startswith("-"):
                upper = parse_int_full(rest[1:])
                if self._range_ok(lower, upper):
                    return self._enter_range(SignedRange, lower, upper)
        except ValueError:
            pass
        raise InvalidParameterValue(name, INT64_RANGE_EXPECTED if in_list else INT64_EXPECTED)

    def decode_uint64(self, name: str) -> int:
        if isinstance(self.state, UnsignedRange):
            return self.state.next

        opt = self._lookup_scalar(name)
        in_list = isinstance(self.state, ListInProgress)
        text = opt.value if opt.value is not None else ""
        try:
            lower, rest = parse_uint_prefix(text)
            if not rest:
                self._processed(name)
                return lower
            # no unary minus in this grammar, so "-" can only separate bounds
            if in_list and rest.startswith("-"):
                upper = parse_uint_full(rest[1:])
                if self._range_ok(lower, upper):
                    return self._enter_range(UnsignedRange, lower, upper)
        except ValueError:
            pass
        raise InvalidParameterValue(name, UINT64_RANGE_EXPECTED if in_list else UINT64_EXPECTED)

    def decode_size(self, name: str) -> int:
        opt = self._lookup_scalar(name)
        try:
            value = parse_size(opt.value if opt.value is not None else "")
        except ValueError:
            raise InvalidParameterValue(name, SIZE_EXPECTED) from None
        self._processed(name)
        return value

    def decode_enum(self, name: str, accepted: Iterable[str]) -> str:
        choices = list(accepted)
        opt = self._lookup_scalar(name)
        value = opt.value if opt.value is not None else ""
        if value not in choices:
            raise InvalidParameterValue(name, "|".join(choices))
        self._processed(name)
        return value

    # -- Ranges ---------------------------------------------------------

    def _range_ok(self, lower: int, upper: int) -> bool:
        return lower <= upper and upper - lower < self.config.range_max

    def _enter_range(self, kind: type[SignedRange] | type[UnsignedRange], lower: int, upper: int) -> int:
        state = self.state
        assert isinstance(state, ListInProgress)
        logger.debug("Expanding %s=%d-%d", state.name, lower, upper)
        self.state = kind(state.name, state.queue, next=lower, limit=upper)
        return lower
