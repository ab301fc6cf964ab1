"""Tests for the list/range state machine."""

import pytest
from opts_core import (
    DecodeConfig,
    DecodeSession,
    InvalidParameterValue,
    ListMode,
    MissingParameter,
    OptionSource,
    ProtocolError,
)


def _session(*pairs, range_max=None):
    config = DecodeConfig(range_max=range_max) if range_max is not None else None
    return DecodeSession(OptionSource.from_pairs(pairs), config)


def _collect(session, name, decode):
    items = []
    session.begin_list(name)
    while session.next_list_element():
        items.append(decode(name))
    session.end_list()
    return items


# ---------------------------------------------------------------------------
# Transitions
# ---------------------------------------------------------------------------

class TestTransitions:
    def test_begin_list_starts(self):
        s = _session(("a", "1"))
        s.begin_struct()
        s.begin_list("a")
        assert s.list_mode is ListMode.STARTED

    def test_first_next_exposes_head_without_popping(self):
        s = _session(("a", "1"), ("a", "2"))
        s.begin_struct()
        s.begin_list("a")
        assert s.next_list_element() is True
        assert s.list_mode is ListMode.IN_PROGRESS
        assert len(s.index.lookup("a")) == 2
        assert s.decode_string("a") == "1"
        assert len(s.index.lookup("a")) == 2

    def test_next_pops_and_ends(self):
        s = _session(("a", "1"))
        s.begin_struct()
        s.begin_list("a")
        s.next_list_element()
        assert s.next_list_element() is False
        assert "a" not in s.index

    def test_end_list_resets(self):
        s = _session(("a", "1"))
        s.begin_struct()
        s.begin_list("a")
        s.end_list()
        assert s.list_mode is ListMode.NONE

    def test_begin_list_missing(self):
        s = _session(("b", "1"))
        s.begin_struct()
        with pytest.raises(MissingParameter) as exc_info:
            s.begin_list("a")
        assert exc_info.value.name == "a"
        assert s.list_mode is ListMode.NONE

    def test_lists_cannot_nest(self):
        s = _session(("a", "1"), ("b", "2"))
        s.begin_struct()
        s.begin_list("a")
        with pytest.raises(ProtocolError):
            s.begin_list("b")

    def test_next_outside_list(self):
        s = _session(("a", "1"))
        s.begin_struct()
        with pytest.raises(ProtocolError):
            s.next_list_element()

    def test_next_after_exhaustion(self):
        s = _session(("a", "1"))
        s.begin_struct()
        s.begin_list("a")
        s.next_list_element()
        s.next_list_element()
        with pytest.raises(ProtocolError):
            s.next_list_element()

    def test_scalar_after_exhaustion(self):
        s = _session(("a", "1"))
        s.begin_struct()
        s.begin_list("a")
        assert s.next_list_element() is True
        assert s.decode_uint64("a") == 1
        assert s.next_list_element() is False
        with pytest.raises(ProtocolError):
            s.decode_uint64("a")

    def test_end_list_outside_list(self):
        s = _session()
        s.begin_struct()
        with pytest.raises(ProtocolError):
            s.end_list()

    def test_scalar_before_first_next(self):
        s = _session(("a", "1"))
        s.begin_struct()
        s.begin_list("a")
        with pytest.raises(ProtocolError):
            s.decode_string("a")


# ---------------------------------------------------------------------------
# Element decoding
# ---------------------------------------------------------------------------

class TestElements:
    def test_source_order(self):
        s = _session(("size", "10"), ("name", "x"), ("size", "20"))
        s.begin_struct()
        assert _collect(s, "size", s.decode_uint64) == [10, 20]
        assert s.decode_string("name") == "x"
        s.end_struct()

    def test_strings_and_bools(self):
        s = _session(("s", "a"), ("s", None), ("b", "on"), ("b", None), ("b", "n"))
        s.begin_struct()
        assert _collect(s, "s", s.decode_string) == ["a", ""]
        assert _collect(s, "b", s.decode_bool) == [True, True, False]
        s.end_struct()

    def test_sizes_in_list(self):
        s = _session(("m", "1k"), ("m", "2k"))
        s.begin_struct()
        assert _collect(s, "m", s.decode_size) == [1024, 2048]

    def test_error_leaves_session_closable(self):
        s = _session(("a", "1"), ("a", "bad"))
        s.begin_struct()
        s.begin_list("a")
        s.next_list_element()
        s.decode_int64("a")
        s.next_list_element()
        with pytest.raises(InvalidParameterValue) as exc_info:
            s.decode_int64("a")
        assert exc_info.value.expected == "an int64 value or range"
        s.end_list()
        assert s.list_mode is ListMode.NONE


# ---------------------------------------------------------------------------
# Ranges
# ---------------------------------------------------------------------------

class TestRanges:
    def test_signed_range_expands(self):
        s = _session(("nums", "3-7"))
        s.begin_struct()
        assert _collect(s, "nums", s.decode_int64) == [3, 4, 5, 6, 7]
        s.end_struct()

    def test_unsigned_range_expands(self):
        s = _session(("nums", "3-7"))
        s.begin_struct()
        assert _collect(s, "nums", s.decode_uint64) == [3, 4, 5, 6, 7]
        s.end_struct()

    def test_range_consumes_one_occurrence(self):
        s = _session(("nums", "3-5"), ("nums", "9"))
        s.begin_struct()
        s.begin_list("nums")
        s.next_list_element()
        assert s.decode_int64("nums") == 3
        assert s.list_mode is ListMode.SIGNED_RANGE
        assert len(s.index.lookup("nums")) == 2
        assert s.next_list_element() and s.decode_int64("nums") == 4
        assert s.next_list_element() and s.decode_int64("nums") == 5
        assert len(s.index.lookup("nums")) == 2
        assert s.next_list_element() is True
        assert s.list_mode is ListMode.IN_PROGRESS
        assert len(s.index.lookup("nums")) == 1
        assert s.decode_int64("nums") == 9
        assert s.next_list_element() is False
        s.end_list()
        s.end_struct()

    def test_mixed_ranges_and_values(self):
        s = _session(("cpus", "0"), ("cpus", "2-4"), ("cpus", "0x8-0xa"))
        s.begin_struct()
        assert _collect(s, "cpus", s.decode_uint64) == [0, 2, 3, 4, 8, 9, 10]

    def test_negative_signed_range(self):
        s = _session(("n", "-3--1"))
        s.begin_struct()
        assert _collect(s, "n", s.decode_int64) == [-3, -2, -1]

    def test_single_element_range(self):
        s = _session(("n", "5-5"))
        s.begin_struct()
        assert _collect(s, "n", s.decode_uint64) == [5]

    def test_reversed_bounds_rejected(self):
        s = _session(("count", "5-3"))
        s.begin_struct()
        s.begin_list("count")
        s.next_list_element()
        with pytest.raises(InvalidParameterValue) as exc_info:
            s.decode_uint64("count")
        assert exc_info.value.expected == "a uint64 value or range"
        assert s.list_mode is ListMode.IN_PROGRESS

    @pytest.mark.parametrize("text", ["3-", "3-x", "3-7-9", "3+7"])
    def test_malformed_ranges(self, text):
        s = _session(("n", text))
        s.begin_struct()
        s.begin_list("n")
        s.next_list_element()
        with pytest.raises(InvalidParameterValue):
            s.decode_int64("n")

    def test_unsigned_rejects_negative_upper(self):
        s = _session(("n", "1--2"))
        s.begin_struct()
        s.begin_list("n")
        s.next_list_element()
        with pytest.raises(InvalidParameterValue):
            s.decode_uint64("n")

    def test_range_cap_same_for_signed_and_unsigned(self):
        for decode_name in ("decode_int64", "decode_uint64"):
            ok = _session(("n", "0-3"), range_max=4)
            ok.begin_struct()
            assert _collect(ok, "n", getattr(ok, decode_name)) == [0, 1, 2, 3]

            too_big = _session(("n", "0-4"), range_max=4)
            too_big.begin_struct()
            too_big.begin_list("n")
            too_big.next_list_element()
            with pytest.raises(InvalidParameterValue):
                getattr(too_big, decode_name)("n")

    def test_default_cap_rejects_huge_span(self):
        s = _session(("n", "0-99999999999"))
        s.begin_struct()
        s.begin_list("n")
        s.next_list_element()
        with pytest.raises(InvalidParameterValue):
            s.decode_uint64("n")

    def test_range_near_int64_max(self):
        s = _session(("n", "9223372036854775806-9223372036854775807"))
        s.begin_struct()
        assert _collect(s, "n", s.decode_int64) == [2 ** 63 - 2, 2 ** 63 - 1]

    def test_range_near_uint64_max(self):
        s = _session(("n", "18446744073709551614-18446744073709551615"))
        s.begin_struct()
        assert _collect(s, "n", s.decode_uint64) == [2 ** 64 - 2, 2 ** 64 - 1]

    def test_other_decoder_during_range_is_protocol_error(self):
        s = _session(("n", "1-3"))
        s.begin_struct()
        s.begin_list("n")
        s.next_list_element()
        s.decode_int64("n")
        with pytest.raises(ProtocolError):
            s.decode_uint64("n")
        with pytest.raises(ProtocolError):
            s.decode_string("n")

    def test_end_list_mid_range(self):
        s = _session(("n", "1-3"))
        s.begin_struct()
        s.begin_list("n")
        s.next_list_element()
        s.decode_int64("n")
        s.end_list()
        assert s.list_mode is ListMode.NONE
        assert "n" in s.index
