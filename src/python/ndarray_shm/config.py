# ndarray_shm/config.py
"""
Library-wide settings for segment allocation and view construction.
"""
import os
import sys
from dataclasses import dataclass, replace
from typing import Mapping, Optional

from .types import Order
from .exceptions import InvalidArgumentError

# Byte-length ceiling for consumers whose buffers are indexed by 32-bit ints.
INT32_MAX_BYTES = 2**31 - 1

ENV_MAX_BYTE_LENGTH = "NDSHM_MAX_BYTE_LENGTH"
ENV_NAME_PREFIX = "NDSHM_NAME_PREFIX"
ENV_DEFAULT_ORDER = "NDSHM_DEFAULT_ORDER"


@dataclass(frozen=True, slots=True)
class ShmConfig:
    """Configuration for views and the segments backing them.

    Attributes:
        max_byte_length: Largest byte length a view may address. Views whose
            element count times element width exceeds it fail with
            SizeOverflowError.
        name_prefix: Prefix of the names given to newly allocated segments.
        default_order: Order used for the numpy hand-off when none is given.
    """
    max_byte_length: int = sys.maxsize
    name_prefix: str = "ndshm_"
    default_order: Order = Order.C_ORDER

    def __post_init__(self) -> None:
        if self.max_byte_length <= 0:
            raise InvalidArgumentError(
                f"max_byte_length must be positive, got {self.max_byte_length}"
            )
        if not self.name_prefix or "/" in self.name_prefix:
            raise InvalidArgumentError(f"Invalid segment name prefix: '{self.name_prefix}'")

    def with_overrides(self, **changes) -> "ShmConfig":
        return replace(self, **changes)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "ShmConfig":
        """
        Builds a config from `NDSHM_*` environment variables, falling back to
        the defaults for unset ones.

        Raises:
            InvalidArgumentError: If a variable is set to an invalid value.
        """
        env = os.environ if environ is None else environ
        kwargs = {}

        raw_max = env.get(ENV_MAX_BYTE_LENGTH)
        if raw_max:
            try:
                kwargs["max_byte_length"] = int(raw_max, 0)
            except ValueError:
                raise InvalidArgumentError(
                    f"{ENV_MAX_BYTE_LENGTH} must be an integer, got '{raw_max}'"
                ) from None

        prefix = env.get(ENV_NAME_PREFIX)
        if prefix:
            kwargs["name_prefix"] = prefix

        raw_order = env.get(ENV_DEFAULT_ORDER)
        if raw_order:
            kwargs["default_order"] = Order.from_label(raw_order)

        return cls(**kwargs)


_default_config: Optional[ShmConfig] = None

def get_default_config() -> ShmConfig:
    """Returns the process-wide config, read from the environment on first use."""
    global _default_config
    if _default_config is None:
        _default_config = ShmConfig.from_env()
    return _default_config

def set_default_config(config: Optional[ShmConfig]) -> None:
    """Replaces the process-wide config; `None` re-reads the environment next time."""
    global _default_config
    _default_config = config
