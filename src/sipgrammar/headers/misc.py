"""Remaining single-purpose headers and the extension-header fallback."""

from __future__ import annotations

import datetime
from dataclasses import dataclass
from typing import Union

from .. import chars
from ..common import (
    Extension,
    GenericParam,
    KeywordEnum,
    Method,
    generic_param,
    host_port,
    method,
    option_tags,
)
from ..scanner import Scanner
from ..tokens import (
    comma,
    comment,
    delta_seconds,
    digits,
    equal,
    header_colon,
    header_value,
    integer,
    lws,
    quoted_string,
    semi,
    slash,
    text_utf8_trim,
    token,
)
from .base import Header, header_parser

# --- Value types ---


class Priority(KeywordEnum):
    EMERGENCY = "emergency"
    URGENT = "urgent"
    NORMAL = "normal"
    NON_URGENT = "non-urgent"


@dataclass(frozen=True)
class Duration:
    """Retry-After ``duration`` parameter."""

    seconds: int


RetryParam = Union[Duration, GenericParam]


@dataclass(frozen=True)
class Product:
    name: str
    version: str | None = None


@dataclass(frozen=True)
class Comment:
    text: str


ServerValue = Union[Product, Comment]


@dataclass(frozen=True)
class WarningValue:
    code: int
    agent: str
    text: str


# --- Headers ---


@dataclass(frozen=True)
class AllowHeader(Header):
    canonical_name = "Allow"

    methods: tuple[Method | Extension, ...] = ()


@dataclass(frozen=True)
class CSeqHeader(Header):
    canonical_name = "CSeq"

    seq: int
    method: Method | Extension


@dataclass(frozen=True)
class DateHeader(Header):
    """``Date`` in the fixed RFC 1123 form, always GMT."""

    canonical_name = "Date"

    weekday: str
    day: int
    month: str
    year: int
    hour: int
    minute: int
    second: int

    def as_datetime(self) -> datetime.datetime:
        """The date as an aware UTC datetime; raises ValueError for impossible dates."""
        return datetime.datetime(
            self.year,
            _MONTHS.index(self.month) + 1,
            self.day,
            self.hour,
            self.minute,
            self.second,
            tzinfo=datetime.timezone.utc,
        )


@dataclass(frozen=True)
class ExpiresHeader(Header):
    canonical_name = "Expires"

    seconds: int


@dataclass(frozen=True)
class MaxForwardsHeader(Header):
    canonical_name = "Max-Forwards"

    hops: int


@dataclass(frozen=True)
class MinExpiresHeader(Header):
    canonical_name = "Min-Expires"

    seconds: int


@dataclass(frozen=True)
class OrganizationHeader(Header):
    canonical_name = "Organization"

    value: str | None = None


@dataclass(frozen=True)
class SubjectHeader(Header):
    canonical_name = "Subject"

    value: str | None = None


@dataclass(frozen=True)
class PriorityHeader(Header):
    canonical_name = "Priority"

    priority: Priority | Extension


@dataclass(frozen=True)
class RequireHeader(Header):
    canonical_name = "Require"

    options: tuple[str, ...]


@dataclass(frozen=True)
class ProxyRequireHeader(Header):
    canonical_name = "Proxy-Require"

    options: tuple[str, ...]


@dataclass(frozen=True)
class SupportedHeader(Header):
    canonical_name = "Supported"

    options: tuple[str, ...] = ()


@dataclass(frozen=True)
class UnsupportedHeader(Header):
    canonical_name = "Unsupported"

    options: tuple[str, ...]


@dataclass(frozen=True)
class RetryAfterHeader(Header):
    canonical_name = "Retry-After"

    seconds: int
    comment: str | None = None
    params: tuple[RetryParam, ...] = ()

    @property
    def duration(self) -> int | None:
        for param in self.params:
            if isinstance(param, Duration):
                return param.seconds
        return None


@dataclass(frozen=True)
class ServerHeader(Header):
    canonical_name = "Server"

    values: tuple[ServerValue, ...]


@dataclass(frozen=True)
class UserAgentHeader(Header):
    canonical_name = "User-Agent"

    values: tuple[ServerValue, ...]


@dataclass(frozen=True)
class TimestampHeader(Header):
    canonical_name = "Timestamp"

    value: str
    delay: str | None = None


@dataclass(frozen=True)
class WarningHeader(Header):
    canonical_name = "Warning"

    warnings: tuple[WarningValue, ...]


@dataclass(frozen=True)
class ExtensionHeader(Header):
    """Any header without a dedicated grammar, kept as ``name: value`` text."""

    name: str
    value: str

    @property
    def field_name(self) -> str:
        return self.name


# --- Date (RFC 1123 as profiled by RFC 3261 §25.1) ---

_WEEKDAYS = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")
_MONTHS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")


def _one_of(s: Scanner, names: tuple[str, ...], expected: str) -> str:
    for name in names:
        if s.accept(name.encode("ascii")):
            return name
    raise s.error(expected)


def _fixed_digits(s: Scanner, count: int) -> int:
    start = s.pos
    text = digits(s, count, count)
    if chars.is_digit(s.peek()):
        raise s.error(f"{count} digits", position=start)
    return int(text)


def _date(s: Scanner) -> DateHeader:
    """``wkday "," SP 2DIGIT SP month SP 4DIGIT SP time SP "GMT"``."""
    weekday = _one_of(s, _WEEKDAYS, "weekday")
    s.expect(b", ")
    day = _fixed_digits(s, 2)
    s.expect(b" ")
    month = _one_of(s, _MONTHS, "month")
    s.expect(b" ")
    year = _fixed_digits(s, 4)
    s.expect(b" ")
    hour = _fixed_digits(s, 2)
    s.expect(b":")
    minute = _fixed_digits(s, 2)
    s.expect(b":")
    second = _fixed_digits(s, 2)
    s.expect(b" GMT")
    return DateHeader(weekday, day, month, year, hour, minute, second)


# --- Values ---


def _retry_param(s: Scanner) -> RetryParam:
    semi(s)

    def duration(s: Scanner) -> Duration:
        s.expect_nocase(b"duration", "'duration'")
        if chars.is_token(s.peek()):
            raise s.error("'duration'")
        equal(s)
        return Duration(delta_seconds(s))

    return s.choice("retry-param", duration, generic_param)


def _retry_after(s: Scanner) -> RetryAfterHeader:
    seconds = delta_seconds(s)
    note = s.attempt(comment)
    return RetryAfterHeader(seconds, note, tuple(s.repeat(_retry_param)))


def product(s: Scanner) -> Product:
    """``token [SLASH product-version]``."""
    name = token(s)
    resume = s.pos
    if s.attempt(slash) is not None:
        version = s.attempt(token)
        if version is not None:
            return Product(name, version)
        s.pos = resume
    return Product(name)


def server_val(s: Scanner) -> ServerValue:
    """``product / comment``."""
    if s.peek() == 0x28:
        return Comment(comment(s))
    return product(s)


def _server_vals(s: Scanner) -> list[ServerValue]:
    """``server-val *(LWS server-val)``."""
    return s.separated(server_val, lws)


def _timestamp(s: Scanner) -> TimestampHeader:
    """``1*DIGIT ["." *DIGIT] [LWS delay]``."""
    start = s.pos
    digits(s)
    if s.accept(b"."):
        digits(s, 0)
    value = s.text_since(start)

    def delay(s: Scanner) -> str:
        lws(s)
        begin = s.pos
        digits(s, 0)
        if s.accept(b"."):
            digits(s, 0)
        if s.pos == begin:
            raise s.error("delay")
        return s.text_since(begin)

    return TimestampHeader(value, s.attempt(delay))


def _warn_agent(s: Scanner) -> str:
    start = s.pos
    if s.attempt(host_port) is not None and s.peek() == 0x20:
        return s.text_since(start)
    s.pos = start
    return token(s)


def warning_value(s: Scanner) -> WarningValue:
    """``warn-code SP warn-agent SP warn-text``."""
    code = _fixed_digits(s, 3)
    s.expect(b" ")
    agent = _warn_agent(s)
    s.expect(b" ")
    return WarningValue(code, agent, quoted_string(s))


def _cseq(s: Scanner) -> CSeqHeader:
    """``1*DIGIT LWS Method``."""
    seq = integer(s)
    lws(s)
    return CSeqHeader(seq, method(s))


def extension_header(s: Scanner) -> ExtensionHeader:
    """``header-name HCOLON header-value``, tried for any unrecognised name."""
    name = token(s)
    header_colon(s)
    with s.committed():
        return ExtensionHeader(name, header_value(s))


allow_header = header_parser(
    AllowHeader, lambda s: AllowHeader(tuple(s.separated(method, comma, 0)))
)
cseq_header = header_parser(CSeqHeader, _cseq)
date_header = header_parser(DateHeader, _date)
expires_header = header_parser(ExpiresHeader, lambda s: ExpiresHeader(delta_seconds(s)))
max_forwards_header = header_parser(MaxForwardsHeader, lambda s: MaxForwardsHeader(integer(s)))
min_expires_header = header_parser(MinExpiresHeader, lambda s: MinExpiresHeader(delta_seconds(s)))
organization_header = header_parser(
    OrganizationHeader, lambda s: OrganizationHeader(s.attempt(text_utf8_trim))
)
subject_header = header_parser(SubjectHeader, lambda s: SubjectHeader(s.attempt(text_utf8_trim)))
priority_header = header_parser(
    PriorityHeader, lambda s: PriorityHeader(Priority.classify(token(s)))
)
require_header = header_parser(RequireHeader, lambda s: RequireHeader(tuple(option_tags(s))))
proxy_require_header = header_parser(
    ProxyRequireHeader, lambda s: ProxyRequireHeader(tuple(option_tags(s)))
)
supported_header = header_parser(
    SupportedHeader, lambda s: SupportedHeader(tuple(option_tags(s, 0)))
)
unsupported_header = header_parser(
    UnsupportedHeader, lambda s: UnsupportedHeader(tuple(option_tags(s)))
)
retry_after_header = header_parser(RetryAfterHeader, _retry_after)
server_header = header_parser(ServerHeader, lambda s: ServerHeader(tuple(_server_vals(s))))
user_agent_header = header_parser(
    UserAgentHeader, lambda s: UserAgentHeader(tuple(_server_vals(s)))
)
timestamp_header = header_parser(TimestampHeader, _timestamp)
warning_header = header_parser(
    WarningHeader, lambda s: WarningHeader(tuple(s.separated(warning_value, comma)))
)
