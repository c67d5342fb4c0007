"""Value types and productions shared across the grammar (RFC 3261 §25.1)."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import TypeVar

from . import chars
from .errors import ErrorKind
from .scanner import Scanner
from .tokens import comma, digits, equal, integer, quoted_string_verbatim, semi, token

# --- Value types ---


@dataclass(frozen=True)
class Extension:
    """A syntactically valid token with no dedicated meaning, kept verbatim."""

    value: str

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class XExtension(Extension):
    """An ``x-`` prefixed extension token (media types and subtypes)."""


class Wildcard(enum.Enum):
    """The literal ``*`` where a grammar allows it."""

    ANY = "*"

    def __str__(self) -> str:
        return self.value


E = TypeVar("E", bound="KeywordEnum")


class KeywordEnum(enum.Enum):
    """Closed set of grammar keywords, matched case-insensitively."""

    def __str__(self) -> str:
        return str(self.value)

    @classmethod
    def classify(cls: type[E], text: str) -> E | Extension:
        """Map *text* to a member, or wrap it in :class:`Extension`."""
        folded = text.lower()
        for member in cls:
            if member.value.lower() == folded:
                return member
        return Extension(text)


class Method(KeywordEnum):
    """Request methods defined by RFC 3261 §27.4."""

    INVITE = "INVITE"
    ACK = "ACK"
    OPTIONS = "OPTIONS"
    BYE = "BYE"
    CANCEL = "CANCEL"
    REGISTER = "REGISTER"

    @classmethod
    def classify(cls: type[E], text: str) -> E | Extension:
        # Method names are case-sensitive (RFC 3261 §7.1).
        for member in cls:
            if member.value == text:
                return member
        return Extension(text)


class Transport(KeywordEnum):
    UDP = "UDP"
    TCP = "TCP"
    SCTP = "SCTP"
    TLS = "TLS"


@dataclass(frozen=True)
class Version:
    """``SIP/major.minor``."""

    major: int
    minor: int

    def __str__(self) -> str:
        return f"SIP/{self.major}.{self.minor}"

    @property
    def is_sip_2_0(self) -> bool:
        return self == SIP_2_0


SIP_2_0 = Version(2, 0)


@dataclass(frozen=True)
class GenericParam:
    """``token [EQUAL gen-value]``; quoted values keep their quotes."""

    name: str
    value: str | None = None


@dataclass(frozen=True)
class Q:
    """A ``q=`` preference weight, kept as written."""

    value: str

    @property
    def weight(self) -> float:
        return float(self.value)


# --- Keywords ---


def method(s: Scanner) -> Method | Extension:
    return Method.classify(token(s))


def sip_version(s: Scanner) -> Version:
    """``"SIP" "/" 1*DIGIT "." 1*DIGIT``."""
    s.expect_nocase(b"SIP/", "SIP-Version")
    major = integer(s)
    s.expect(b".", "'.'")
    minor = integer(s)
    return Version(major, minor)


def transport(s: Scanner) -> Transport | Extension:
    return Transport.classify(token(s))


def ttl(s: Scanner) -> int:
    """``1*3DIGIT`` in the range 0-255; anything else is a fatal error."""
    start = s.pos
    text = digits(s)
    if len(text) > 3 or int(text) > 255:
        raise s.error("TTL between 0 and 255", ErrorKind.INVALID_TTL, fatal=True, position=start)
    return int(text)


def qvalue(s: Scanner) -> str:
    """``"0" ["." 0*3DIGIT] / "1" ["." 0*3("0")]``."""
    start = s.pos
    if s.accept(b"0"):
        if s.accept(b"."):
            s.take_while(chars.is_digit, 0, 3)
    elif s.accept(b"1"):
        if s.accept(b"."):
            s.take_while(lambda c: c == 0x30, 0, 3)
    else:
        raise s.error("qvalue")
    return s.text_since(start)


# --- Hosts ---


def _labels(s: Scanner) -> list[tuple[int, int, bool]]:
    """Split the upcoming ``1*(alphanum / "-")`` runs at dots.

    Returns ``(start, end, followed_by_dot)`` for each run, without moving
    the cursor.
    """
    data = s.data
    pos = s.pos
    labels: list[tuple[int, int, bool]] = []
    while True:
        end = pos
        while end < len(data) and chars.is_alphanum_hyphen(data[end]):
            end += 1
        if end == pos:
            break
        dotted = end < len(data) and data[end] == 0x2E
        labels.append((pos, end, dotted))
        if not dotted:
            break
        pos = end + 1
    return labels


def _is_domain_label(label: bytes) -> bool:
    return label[:1] != b"-" and label[-1:] != b"-"


def _is_top_label(label: bytes) -> bool:
    return chars.is_alpha(label[0]) and label[-1:] != b"-"


def hostname(s: Scanner) -> str:
    """``*(domainlabel ".") toplabel ["."]``.

    A hostname that ends in a dot has its last label re-validated as a
    top label.
    """
    start = s.pos
    labels = _labels(s)
    if not labels:
        raise s.error("hostname")
    data = s.data
    dotted = 0
    for begin, end, followed_by_dot in labels:
        if not (followed_by_dot and _is_domain_label(data[begin:end])):
            break
        dotted += 1

    if dotted < len(labels):
        begin, end, _ = labels[dotted]
        if _is_top_label(data[begin:end]):
            s.pos = end
            return s.text_since(start)
    if dotted:
        begin, end, _ = labels[dotted - 1]
        if _is_top_label(data[begin:end]):
            s.pos = end + 1
            return s.text_since(start)
        raise s.error("hostname", ErrorKind.INVALID_HOSTNAME)
    raise s.error("domain label", ErrorKind.INVALID_DOMAIN_LABEL)


def ipv4_address(s: Scanner) -> str:
    """Four dot-separated groups of one to three digits, no range check."""
    start = s.pos
    for index in range(4):
        if index:
            s.expect(b".", "'.'")
        s.take_while(chars.is_digit, 1, 3, "digit")
    if chars.is_digit(s.peek()):
        s.pos = start
        raise s.error("IPv4 address")
    return s.text_since(start)


def _hex4(s: Scanner) -> bytes:
    start = s.pos
    group = s.take_while(chars.is_hexdig, 1, 4, "hex digit")
    if s.peek() == 0x2E:
        # Leading digits of an embedded IPv4 address.
        s.pos = start
        raise s.error("hex group")
    return group


def _hexseq(s: Scanner) -> str:
    start = s.pos
    _hex4(s)
    while s.peek() == 0x3A and chars.is_hexdig(s.peek(1)):
        resume = s.pos
        s.advance(1)
        if s.attempt(_hex4) is None:
            s.pos = resume
            break
    return s.text_since(start)


def _compressed(s: Scanner) -> str:
    start = s.pos
    _hexseq(s)
    s.expect(b"::")
    s.attempt(_hexseq)
    return s.text_since(start)


def _leading_compressed(s: Scanner) -> str:
    start = s.pos
    s.expect(b"::")
    s.attempt(_hexseq)
    return s.text_since(start)


def ipv6_address(s: Scanner) -> str:
    """``hexpart [":" IPv4address]``."""
    start = s.pos
    hexpart = s.choice("IPv6 address", _compressed, _leading_compressed, _hexseq)
    resume = s.pos
    if hexpart.endswith("::"):
        if s.attempt(ipv4_address) is None:
            s.pos = resume
    elif s.accept(b":") and s.attempt(ipv4_address) is None:
        s.pos = resume
    return s.text_since(start)


def ipv6_reference(s: Scanner) -> str:
    start = s.pos
    s.expect(b"[", "'['")
    ipv6_address(s)
    s.expect(b"]", "']'")
    return s.text_since(start)


def host(s: Scanner) -> str:
    return s.choice("host", hostname, ipv4_address, ipv6_reference)


def port(s: Scanner) -> int:
    return integer(s)


def host_port(s: Scanner) -> tuple[str, int | None]:
    """``host [":" port]``."""
    name = host(s)
    if s.peek() == 0x3A and chars.is_digit(s.peek(1)):
        s.advance(1)
        return name, port(s)
    return name, None


# --- Parameters ---


def _gen_value(s: Scanner) -> str:
    c = s.peek()
    if c == 0x5B:
        return ipv6_reference(s)
    if c == 0x22:
        return quoted_string_verbatim(s)
    return token(s)


def generic_param(s: Scanner) -> GenericParam:
    """``token [EQUAL gen-value]`` with ``gen-value = token / host / quoted-string``."""
    name = token(s)
    resume = s.pos
    if s.attempt(equal) is None:
        return GenericParam(name)
    value = s.attempt(_gen_value)
    if value is None:
        s.pos = resume
        raise s.error("parameter value")
    return GenericParam(name, value)


def _semi_generic_param(s: Scanner) -> GenericParam:
    semi(s)
    return generic_param(s)


def generic_params(s: Scanner) -> list[GenericParam]:
    """``*(SEMI generic-param)``."""
    return s.repeat(_semi_generic_param)


def option_tags(s: Scanner, minimum: int = 1) -> list[str]:
    """``option-tag *(COMMA option-tag)``."""
    return s.separated(token, comma, minimum)
