"""Property-based tests for the lexical productions."""

import pytest
from hypothesis import given
from hypothesis import strategies as st

from sipgrammar.common import host, hostname, ipv4_address, ttl
from sipgrammar.errors import ErrorKind, ParseError
from sipgrammar.scanner import parse_all
from sipgrammar.tokens import MAX_INT, integer, quoted_string, token

domain_labels = st.from_regex(r"[a-z0-9]([a-z0-9-]{0,10}[a-z0-9])?", fullmatch=True)
top_labels = st.from_regex(r"[a-zA-Z]([a-zA-Z0-9-]{0,10}[a-zA-Z0-9])?", fullmatch=True)
octets = st.integers(min_value=0, max_value=999).map(str)
qdtext = st.text(
    st.characters(min_codepoint=0x23, max_codepoint=0x7E, blacklist_characters="\\"),
    max_size=30,
)


class TestIntegerProperties:
    @given(st.integers(min_value=0, max_value=MAX_INT))
    def test_in_range(self, value: int) -> None:
        assert parse_all(integer, str(value)) == value

    @given(st.integers(min_value=MAX_INT + 1, max_value=10**20))
    def test_overflow_is_fatal(self, value: int) -> None:
        with pytest.raises(ParseError) as info:
            parse_all(integer, str(value))
        assert info.value.kind is ErrorKind.INVALID_INTEGER
        assert info.value.fatal


class TestTtlProperties:
    @given(st.integers(min_value=0, max_value=255))
    def test_in_range(self, value: int) -> None:
        assert parse_all(ttl, str(value)) == value

    @given(st.integers(min_value=256, max_value=99999))
    def test_out_of_range_is_fatal(self, value: int) -> None:
        with pytest.raises(ParseError) as info:
            parse_all(ttl, str(value))
        assert info.value.kind is ErrorKind.INVALID_TTL
        assert info.value.fatal


class TestHostProperties:
    @given(st.lists(domain_labels, max_size=4), top_labels, st.booleans())
    def test_hostname(self, labels: list[str], top: str, trailing_dot: bool) -> None:
        text = ".".join([*labels, top]) + ("." if trailing_dot else "")
        assert parse_all(hostname, text) == text

    @given(st.lists(octets, min_size=4, max_size=4))
    def test_ipv4_is_lexical(self, groups: list[str]) -> None:
        text = ".".join(groups)
        assert parse_all(ipv4_address, text) == text
        assert parse_all(host, text) == text


class TestTextProperties:
    @given(qdtext)
    def test_quoted_string(self, text: str) -> None:
        assert parse_all(quoted_string, f'"{text}"') == text

    @given(st.from_regex(r"[A-Za-z0-9.!%*_+`'~-]+", fullmatch=True))
    def test_token(self, text: str) -> None:
        assert parse_all(token, text) == text
