"""Byte cursor and backtracking helpers for the recursive-descent grammar.

A *production* is any callable taking a :class:`Scanner` and returning a
value.  On success it leaves the cursor just past the input it recognised;
on failure it raises :class:`~sipgrammar.errors.ParseError`.  Productions
never return ``None``, so :meth:`Scanner.attempt` can use it to signal an
absent optional element.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from contextlib import contextmanager
from typing import TypeVar

from .config import DEFAULT_CONFIG, ParserConfig
from .errors import ErrorKind, ParseError

T = TypeVar("T")

Production = Callable[["Scanner"], T]


class Scanner:
    """Cursor over an immutable byte buffer."""

    __slots__ = ("data", "pos", "config", "_depth")

    def __init__(self, data: bytes, config: ParserConfig = DEFAULT_CONFIG) -> None:
        self.data = data
        self.pos = 0
        self.config = config
        self._depth = 0

    def __repr__(self) -> str:
        return f"Scanner(pos={self.pos}, ahead={self.data[self.pos:self.pos + 16]!r})"

    # --- Inspection ---

    def at_end(self) -> bool:
        return self.pos >= len(self.data)

    def peek(self, offset: int = 0) -> int:
        """Byte at ``pos + offset``, or -1 past the end."""
        index = self.pos + offset
        if index < len(self.data):
            return self.data[index]
        return -1

    def remaining(self) -> bytes:
        return self.data[self.pos :]

    def startswith(self, prefix: bytes) -> bool:
        return self.data.startswith(prefix, self.pos)

    def startswith_nocase(self, prefix: bytes) -> bool:
        end = self.pos + len(prefix)
        return self.data[self.pos : end].lower() == prefix.lower()

    # --- Errors ---

    def error(
        self,
        expected: str,
        kind: ErrorKind = ErrorKind.SYNTAX,
        *,
        fatal: bool = False,
        position: int | None = None,
        backtrace: tuple[ParseError, ...] = (),
    ) -> ParseError:
        return ParseError(
            kind,
            self.pos if position is None else position,
            expected,
            fatal=fatal,
            backtrace=backtrace,
        )

    # --- Consuming ---

    def advance(self, count: int = 1) -> bytes:
        chunk = self.data[self.pos : self.pos + count]
        self.pos += len(chunk)
        return chunk

    def expect(self, literal: bytes, expected: str | None = None) -> bytes:
        """Consume *literal* exactly or fail."""
        if not self.data.startswith(literal, self.pos):
            raise self.error(expected or repr(literal.decode("latin-1")))
        self.pos += len(literal)
        return literal

    def expect_nocase(self, literal: bytes, expected: str | None = None) -> bytes:
        """Consume *literal*, ignoring ASCII case, or fail."""
        if not self.startswith_nocase(literal):
            raise self.error(expected or repr(literal.decode("latin-1")))
        return self.advance(len(literal))

    def accept(self, literal: bytes) -> bool:
        """Consume *literal* if it is next; report whether it was."""
        if self.data.startswith(literal, self.pos):
            self.pos += len(literal)
            return True
        return False

    def take_while(
        self,
        predicate: Callable[[int], bool],
        minimum: int = 0,
        maximum: int | None = None,
        expected: str = "character",
    ) -> bytes:
        """Consume a run of bytes matching *predicate*.

        Fails without consuming if fewer than *minimum* bytes match.  At most
        *maximum* bytes are taken.
        """
        data = self.data
        start = end = self.pos
        limit = len(data) if maximum is None else min(len(data), start + maximum)
        while end < limit and predicate(data[end]):
            end += 1
        if end - start < minimum:
            raise self.error(expected)
        self.pos = end
        return data[start:end]

    def decode(self, raw: bytes, position: int | None = None) -> str:
        """Decode *raw* as strict UTF-8, failing fatally on invalid text."""
        try:
            return raw.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise self.error(
                "UTF-8 text",
                ErrorKind.TEXT_ENCODING,
                fatal=True,
                position=position,
            ) from exc

    def text_since(self, start: int) -> str:
        """Decoded text of everything consumed since *start*."""
        return self.decode(self.data[start : self.pos], start)

    def recognize(self, production: Production[object]) -> str:
        """Run *production* and return the text it consumed."""
        start = self.pos
        production(self)
        return self.text_since(start)

    # --- Backtracking ---

    def attempt(self, production: Production[T]) -> T | None:
        """Run *production*; on a non-fatal failure rewind and return ``None``."""
        start = self.pos
        try:
            return production(self)
        except ParseError as exc:
            if exc.fatal:
                raise
            self.pos = start
            return None

    def choice(self, expected: str, *alternatives: Production[T]) -> T:
        """Return the result of the first alternative that succeeds.

        When every alternative fails the raised error carries each attempt's
        error in its backtrace and takes the kind of the one that got
        furthest.
        """
        start = self.pos
        failures: list[ParseError] = []
        for alternative in alternatives:
            try:
                return alternative(self)
            except ParseError as exc:
                if exc.fatal:
                    raise
                failures.append(exc)
                self.pos = start
        kind = ErrorKind.SYNTAX
        if failures:
            furthest = max(failures, key=lambda err: err.position)
            kind = furthest.kind
        raise self.error(expected, kind, backtrace=tuple(failures))

    def repeat(self, production: Production[T], minimum: int = 0) -> list[T]:
        """Apply *production* as many times as it matches."""
        items: list[T] = []
        while True:
            start = self.pos
            if len(items) < minimum:
                items.append(production(self))
            else:
                item = self.attempt(production)
                if item is None:
                    break
                items.append(item)
            if self.pos == start:
                break
        return items

    def separated(
        self,
        item: Production[T],
        separator: Production[object],
        minimum: int = 1,
    ) -> list[T]:
        """Parse ``item *(separator item)``, or nothing when *minimum* is 0."""
        if minimum == 0:
            first = self.attempt(item)
            if first is None:
                return []
        else:
            first = item(self)
        items = [first]

        def follower(s: Scanner) -> T:
            separator(s)
            return item(s)

        items.extend(self.repeat(follower, max(0, minimum - 1)))
        return items

    @contextmanager
    def nested(self, expected: str) -> Iterator[None]:
        """Guard one level of recursion against ``config.max_comment_depth``."""
        if self._depth >= self.config.max_comment_depth:
            raise self.error(expected, ErrorKind.NESTING_TOO_DEEP, fatal=True)
        self._depth += 1
        try:
            yield
        finally:
            self._depth -= 1

    @contextmanager
    def committed(self) -> Iterator[None]:
        """Turn any failure inside the block into a fatal one."""
        try:
            yield
        except ParseError as exc:
            if exc.fatal:
                raise
            raise exc.escalate() from None


def run(
    production: Production[T],
    data: bytes | str,
    config: ParserConfig = DEFAULT_CONFIG,
) -> tuple[T, bytes]:
    """Apply *production* to the start of *data*.

    Returns the parsed value and the unconsumed remainder.
    """
    if isinstance(data, str):
        data = data.encode("utf-8")
    scanner = Scanner(data, config)
    value = production(scanner)
    return value, scanner.remaining()


def parse_all(
    production: Production[T],
    data: bytes | str,
    config: ParserConfig = DEFAULT_CONFIG,
) -> T:
    """Apply *production* to *data*, requiring the whole input to match."""
    if isinstance(data, str):
        data = data.encode("utf-8")
    scanner = Scanner(data, config)
    value = production(scanner)
    if not scanner.at_end():
        raise scanner.error("end of input")
    return value
