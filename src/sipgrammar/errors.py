"""Parse error type and error kinds."""

from __future__ import annotations

import enum


class ErrorKind(enum.Enum):
    """Classification of a parse failure."""

    SYNTAX = "syntax"
    INVALID_INTEGER = "invalid-integer"
    INVALID_TTL = "invalid-ttl"
    INVALID_HOSTNAME = "invalid-hostname"
    INVALID_DOMAIN_LABEL = "invalid-domain-label"
    TEXT_ENCODING = "text-encoding"
    NESTING_TOO_DEEP = "nesting-too-deep"
    MESSAGE_TOO_LARGE = "message-too-large"
    UNKNOWN = "unknown"


class ParseError(ValueError):
    """Raised when input does not match the SIP grammar.

    A *fatal* error is never retried by an enclosing alternation: it means
    the input was recognised far enough to be certain it is invalid (an
    integer overflow, a TTL above 255, a header value that does not match
    its field grammar).  Non-fatal errors are ordinary backtracking signals.

    ``backtrace`` holds the errors of the alternatives that were attempted
    before this one was raised, in the order they were tried.
    """

    def __init__(
        self,
        kind: ErrorKind,
        position: int,
        expected: str,
        *,
        fatal: bool = False,
        backtrace: tuple[ParseError, ...] = (),
    ) -> None:
        super().__init__(f"expected {expected} at offset {position} ({kind.value})")
        self.kind = kind
        self.position = position
        self.expected = expected
        self.fatal = fatal
        self.backtrace = backtrace

    def __repr__(self) -> str:
        return (
            f"ParseError(kind={self.kind.name}, position={self.position}, "
            f"expected={self.expected!r}, fatal={self.fatal})"
        )

    @property
    def closest(self) -> ParseError:
        """The attempted alternative that got furthest into the input."""
        best: ParseError = self
        for err in self.backtrace:
            candidate = err.closest
            if candidate.position > best.position:
                best = candidate
        return best

    def escalate(self) -> ParseError:
        """Return a fatal copy of this error."""
        if self.fatal:
            return self
        return ParseError(
            self.kind,
            self.position,
            self.expected,
            fatal=True,
            backtrace=self.backtrace,
        )

    def walk(self) -> list[ParseError]:
        """Flatten this error and its backtrace, depth first."""
        errors = [self]
        for err in self.backtrace:
            errors.extend(err.walk())
        return errors
