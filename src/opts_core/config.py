"""Decoder configuration."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from typing import Optional

logger = logging.getLogger(__name__)

# Largest number of elements a single "lower-upper" occurrence may expand into.
DEFAULT_RANGE_MAX = 65536


@dataclass(frozen=True)
class DecodeConfig:
    """
    Tunables for a decode session.

    Parameters
    ----------
    range_max
        A list occurrence ``lower-upper`` is accepted only when
        ``upper - lower < range_max``. Applies to signed and unsigned ranges alike.
    env_prefix
        Prefix for environment-variable overrides, e.g. ``"OPTS_"``.

    Usage example
    -------------
        cfg = DecodeConfig(range_max=1024)
    """

    range_max: int = DEFAULT_RANGE_MAX
    env_prefix: str = field(default="", repr=False)

    def __post_init__(self) -> None:
        if self.range_max <= 0:
            raise ValueError(f"range_max must be positive, got {self.range_max}")

    @classmethod
    def from_env(cls, *, default: Optional["DecodeConfig"] = None) -> "DecodeConfig":
        """
        Create config from environment variables.

        Supported variables (prefix controlled by env_prefix on `default`):
        - <PFX>RANGE_MAX: positive integer

        Invalid values are ignored and the default is kept.

        Usage example
        -------------
            cfg = DecodeConfig.from_env(default=DecodeConfig(env_prefix="OPTS_"))
        """
        base = default if default is not None else cls()
        pfx = base.env_prefix

        range_max = base.range_max
        raw = os.getenv(f"{pfx}RANGE_MAX", "").strip()
        if raw:
            try:
                parsed = int(raw)
            except ValueError:
                parsed = 0
            if parsed > 0:
                range_max = parsed
            else:
                logger.warning("Ignoring %sRANGE_MAX=%r (expected a positive integer)", pfx, raw)

        return cls(range_max=range_max, env_prefix=pfx)
