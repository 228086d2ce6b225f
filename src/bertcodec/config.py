"""Codec configuration.

Limits and policies shared by the encoder and decoder. A single frozen
``CodecConfig`` instance may be reused across threads.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

# Conservative ceiling below the 4-byte limit, matching Erlang's 28-bit small integers.
MAX_INTEGER = 2**27 - 1
MAX_LENGTH = 2**27 - 1
# Each nesting level costs up to three interpreter frames.
MAX_DEPTH = 256


class CodecConfig(BaseModel):
    """Limits and policies for encode/decode calls.

    Attributes:
        max_integer: Largest integer written with the Int tag
        max_length: Largest length, arity or element count accepted
        max_depth: Deepest nesting of composite terms accepted
        allow_non_finite: Pass NaN and Infinity through instead of failing
        binary_as_text: Decode UTF-8 binaries to ``str`` rather than ``bytes``
        allow_trailing: Ignore bytes left after the top-level term

    Example:
        >>> config = CodecConfig(max_depth=32, allow_trailing=True)
        >>> decode(data, config=config)
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    max_integer: int = Field(default=MAX_INTEGER, ge=255, le=2**31 - 1)
    max_length: int = Field(default=MAX_LENGTH, ge=0, le=2**32 - 1)
    max_depth: int = Field(default=MAX_DEPTH, ge=1, le=MAX_DEPTH)
    allow_non_finite: bool = False
    binary_as_text: bool = True
    allow_trailing: bool = False


DEFAULT_CONFIG = CodecConfig()
