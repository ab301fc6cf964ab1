"""Raw option source — the flat input handed to a decode session."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable


@dataclass(frozen=True, slots=True)
class RawOption:
    name: str
    value: str | None = None  # None = bare flag (``name`` without ``=value``)


@dataclass(frozen=True, slots=True)
class OptionSource:
    """Ordered options plus the optional identifier value.

    The identifier is not part of ``options``; a session exposes it as a
    synthetic option named ``"id"``.
    """

    options: tuple[RawOption, ...] = ()
    identifier: str | None = None

    @classmethod
    def from_pairs(
        cls,
        pairs: Iterable[tuple[str, str | None]],
        identifier: str | None = None,
    ) -> OptionSource:
        """Build a source from ``(name, value)`` tuples, keeping their order."""
        return cls(
            options=tuple(RawOption(name, value) for name, value in pairs),
            identifier=identifier,
        )

    def __iter__(self):
        return iter(self.options)

    def __len__(self) -> int:
        return len(self.options)
