"""Schema-driven decoding: StructDef + OptionSource -> dict."""

from __future__ import annotations

import logging
from typing import Any

from .config import DecodeConfig
from .options import OptionSource
from .schema import FieldDef, StructDef
from .session import DecodeSession

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Public entry point
# ---------------------------------------------------------------------------

def decode(struct_def: StructDef, source: OptionSource, config: DecodeConfig | None = None) -> dict[str, Any]:
    """Decode *source* into a dict shaped like *struct_def*.

    Optional fields that are absent decode to ``None``; nested structs become
    nested dicts. Raises an ``OptsError`` subclass on bad or leftover input.
    """
    struct_def.validate()
    session = DecodeSession(source, config)
    result = _decode_struct(session, struct_def)
    logger.debug("Decoded %s: %d field(s)", struct_def.name or "<struct>", len(result))
    return result


# ---------------------------------------------------------------------------
# Struct / field visiting
# ---------------------------------------------------------------------------

def _decode_struct(session: DecodeSession, struct_def: StructDef) -> dict[str, Any]:
    record = session.begin_struct()
    for fd in struct_def.fields:
        if fd.is_struct:
            record[fd.name] = _decode_struct(session, fd.kind)
            continue
        if fd.optional and not session.has_field(fd.name):
            record[fd.name] = None
            continue
        if fd.multi:
            record[fd.name] = _decode_list(session, fd)
        else:
            record[fd.name] = _decode_scalar(session, fd)
    session.end_struct()
    return record


def _decode_list(session: DecodeSession, fd: FieldDef) -> list[Any]:
    items: list[Any] = []
    session.begin_list(fd.name)
    try:
        while session.next_list_element():
            items.append(_decode_scalar(session, fd))
    finally:
        session.end_list()
    return items


def _decode_scalar(session: DecodeSession, fd: FieldDef) -> Any:
    kind = fd.kind
    if kind == "str":
        return session.decode_string(fd.name)
    if kind == "bool":
        return session.decode_bool(fd.name)
    if kind == "int":
        return session.decode_int64(fd.name)
    if kind == "uint":
        return session.decode_uint64(fd.name)
    if kind == "size":
        return session.decode_size(fd.name)
    if kind == "enum":
        return session.decode_enum(fd.name, fd.choices)
    raise ValueError(f"unknown field kind {kind!r}")
