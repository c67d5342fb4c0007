"""Tests for sipgrammar.errors and sipgrammar.config."""

import pytest

from sipgrammar.config import DEFAULT_CONFIG, ParserConfig
from sipgrammar.errors import ErrorKind, ParseError


class TestParseError:
    def test_is_value_error(self) -> None:
        err = ParseError(ErrorKind.SYNTAX, 4, "token")
        assert isinstance(err, ValueError)
        assert not err.fatal
        assert err.backtrace == ()

    def test_message(self) -> None:
        err = ParseError(ErrorKind.INVALID_TTL, 12, "ttl")
        assert str(err) == "expected ttl at offset 12 (invalid-ttl)"

    def test_repr(self) -> None:
        err = ParseError(ErrorKind.SYNTAX, 3, "token", fatal=True)
        assert repr(err) == "ParseError(kind=SYNTAX, position=3, expected='token', fatal=True)"

    def test_escalate(self) -> None:
        inner = ParseError(ErrorKind.SYNTAX, 1, "a")
        err = ParseError(ErrorKind.INVALID_INTEGER, 5, "integer", backtrace=(inner,))
        fatal = err.escalate()
        assert fatal.fatal
        assert fatal.kind is ErrorKind.INVALID_INTEGER
        assert fatal.position == 5
        assert fatal.backtrace == (inner,)
        assert not err.fatal

    def test_escalate_fatal_is_identity(self) -> None:
        err = ParseError(ErrorKind.SYNTAX, 0, "x", fatal=True)
        assert err.escalate() is err

    def test_closest(self) -> None:
        deep = ParseError(ErrorKind.INVALID_HOSTNAME, 9, "hostname")
        near = ParseError(ErrorKind.SYNTAX, 2, "sips", backtrace=(deep,))
        other = ParseError(ErrorKind.SYNTAX, 4, "absoluteURI")
        err = ParseError(ErrorKind.SYNTAX, 0, "Request-URI", backtrace=(near, other))
        assert err.closest is deep

    def test_closest_without_backtrace(self) -> None:
        err = ParseError(ErrorKind.SYNTAX, 7, "x")
        assert err.closest is err

    def test_walk(self) -> None:
        a = ParseError(ErrorKind.SYNTAX, 1, "a")
        b = ParseError(ErrorKind.SYNTAX, 2, "b", backtrace=(a,))
        c = ParseError(ErrorKind.SYNTAX, 3, "c")
        root = ParseError(ErrorKind.UNKNOWN, 3, "message", backtrace=(b, c))
        assert root.walk() == [root, b, a, c]


class TestParserConfig:
    def test_defaults(self) -> None:
        assert DEFAULT_CONFIG.max_comment_depth == 32
        assert DEFAULT_CONFIG.max_message_size is None

    def test_custom(self) -> None:
        config = ParserConfig(max_comment_depth=4, max_message_size=1024)
        assert config.max_comment_depth == 4
        assert config.max_message_size == 1024

    def test_zero_depth_rejected(self) -> None:
        with pytest.raises(ValueError, match="max_comment_depth"):
            ParserConfig(max_comment_depth=0)

    def test_negative_size_rejected(self) -> None:
        with pytest.raises(ValueError, match="max_message_size"):
            ParserConfig(max_message_size=-1)

    def test_frozen(self) -> None:
        with pytest.raises(AttributeError):
            DEFAULT_CONFIG.max_comment_depth = 1  # type: ignore[misc]
