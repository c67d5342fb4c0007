"""Parser limits."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ParserConfig:
    """Limits applied while parsing untrusted input.

    ``max_comment_depth`` bounds how deeply parenthesised comments may nest
    (Server, User-Agent, Retry-After).  ``max_message_size`` rejects inputs
    longer than the given number of bytes before any parsing happens;
    ``None`` disables the check.
    """

    max_comment_depth: int = 32
    max_message_size: int | None = None

    def __post_init__(self) -> None:
        if self.max_comment_depth < 1:
            raise ValueError("max_comment_depth must be at least 1")
        if self.max_message_size is not None and self.max_message_size < 0:
            raise ValueError("max_message_size must not be negative")


DEFAULT_CONFIG = ParserConfig()
