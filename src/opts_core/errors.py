"""Error taxonomy for opts-core."""

from __future__ import annotations


class OptsError(Exception):
    """Base class for data errors reported while decoding options."""

    def __init__(self, name: str, message: str) -> None:
        super().__init__(message)
        self.name = name


class MissingParameter(OptsError):
    """A mandatory field has no occurrence left in the index."""

    def __init__(self, name: str) -> None:
        super().__init__(name, f"Parameter '{name}' is missing")


class InvalidParameter(OptsError):
    """An option was provided but never consumed by any decode call."""

    def __init__(self, name: str) -> None:
        super().__init__(name, f"Invalid parameter '{name}'")


class InvalidParameterValue(OptsError):
    """An option exists but its text does not parse as the requested type."""

    def __init__(self, name: str, expected: str) -> None:
        super().__init__(name, f"Parameter '{name}' expects {expected}")
        self.expected = expected


class ProtocolError(RuntimeError):
    """The caller drove the session out of order (e.g. nested lists).

    Not an ``OptsError``: a programming mistake, never bad input.
    """


class SchemaError(ValueError):
    """A struct definition cannot be decoded by this core."""
