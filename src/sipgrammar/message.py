"""SIP message assembly: start line, header fields, body (RFC 3261 §7, §25.1)."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import TypeVar, Union

from . import chars
from .common import Extension, Method, Version, method, sip_version
from .config import DEFAULT_CONFIG, ParserConfig
from .errors import ErrorKind, ParseError
from .headers import (
    CallIDHeader,
    Contact,
    ContactHeader,
    ContentLengthHeader,
    ContentTypeHeader,
    CSeqHeader,
    FromHeader,
    Header,
    Media,
    ToHeader,
    Via,
    ViaHeader,
    expand_compact_header,
    message_header,
)
from .scanner import Scanner
from .tokens import crlf, digits, escaped, utf8_nonascii
from .uri import absolute_uri, sip_uri, sips_uri

logger = logging.getLogger(__name__)

H = TypeVar("H", bound=Header)


@dataclass(frozen=True)
class RequestLine:
    method: Method | Extension
    uri: str
    version: Version


@dataclass(frozen=True)
class StatusLine:
    version: Version
    status_code: int
    reason_phrase: str


@dataclass(frozen=True)
class Request:
    """A parsed SIP request.

    Headers keep their wire order; repeated fields are not merged.  ``body``
    is every byte after the empty line, or ``None`` when there are none.
    """

    request_line: RequestLine
    headers: tuple[Header, ...] = ()
    body: bytes | None = None

    @classmethod
    def parse(cls, data: bytes | str, config: ParserConfig = DEFAULT_CONFIG) -> Request:
        return parse_request(data, config)

    @property
    def method(self) -> Method | Extension:
        return self.request_line.method

    @property
    def uri(self) -> str:
        return self.request_line.uri

    @property
    def version(self) -> Version:
        return self.request_line.version

    # --- Header access ---

    def get_headers(self, name: str) -> list[Header]:
        """All headers with the given field name, compact forms included."""
        wanted = expand_compact_header(name)
        return [h for h in self.headers if h.field_name.lower() == wanted]

    def get_header(self, name: str) -> Header | None:
        """The first header with the given field name."""
        found = self.get_headers(name)
        return found[0] if found else None

    def _first(self, kind: type[H]) -> H | None:
        for header in self.headers:
            if isinstance(header, kind):
                return header
        return None

    @property
    def via(self) -> list[Via]:
        """Every Via entry across all Via headers, top first."""
        return [v for h in self.headers if isinstance(h, ViaHeader) for v in h.vias]

    @property
    def from_header(self) -> FromHeader | None:
        return self._first(FromHeader)

    @property
    def to_header(self) -> ToHeader | None:
        return self._first(ToHeader)

    @property
    def call_id(self) -> str | None:
        header = self._first(CallIDHeader)
        return header.value if header is not None else None

    @property
    def cseq(self) -> CSeqHeader | None:
        return self._first(CSeqHeader)

    @property
    def contact(self) -> list[Contact]:
        """Contact entries across all Contact headers; empty for ``Contact: *``."""
        contacts: list[Contact] = []
        for header in self.headers:
            if isinstance(header, ContactHeader) and isinstance(header.contacts, tuple):
                contacts.extend(header.contacts)
        return contacts

    @property
    def content_type(self) -> Media | None:
        header = self._first(ContentTypeHeader)
        return header.media if header is not None else None

    @property
    def content_length(self) -> int | None:
        header = self._first(ContentLengthHeader)
        return header.length if header is not None else None


@dataclass(frozen=True)
class Response:
    """A SIP response.

    ``content`` is the complete message as received.  The status line is
    parsed and the header fields are checked against their grammars, but
    only the status line is kept in structured form.
    """

    content: bytes
    status_line: StatusLine

    @classmethod
    def parse(cls, data: bytes | str, config: ParserConfig = DEFAULT_CONFIG) -> Response:
        return parse_response(data, config)

    @property
    def version(self) -> Version:
        return self.status_line.version

    @property
    def status_code(self) -> int:
        return self.status_line.status_code

    @property
    def reason_phrase(self) -> str:
        return self.status_line.reason_phrase


Message = Union[Request, Response]


# --- Start lines ---


def _uri_then_space(production: Callable[[Scanner], object]) -> Callable[[Scanner], str]:
    def alternative(s: Scanner) -> str:
        start = s.pos
        production(s)
        uri = s.text_since(start)
        s.expect(b" ", "SP")
        return uri

    return alternative


_REQUEST_URI_ALTERNATIVES = (
    _uri_then_space(sip_uri),
    _uri_then_space(sips_uri),
    _uri_then_space(absolute_uri),
)


def request_line(s: Scanner) -> RequestLine:
    """``Method SP Request-URI SP SIP-Version CRLF``."""
    verb = method(s)
    s.expect(b" ", "SP")
    uri = s.choice("Request-URI", *_REQUEST_URI_ALTERNATIVES)
    version = sip_version(s)
    crlf(s)
    return RequestLine(verb, uri, version)


def _is_reason_char(c: int) -> bool:
    return (
        chars.is_reserved(c)
        or chars.is_unreserved(c)
        or chars.is_utf8_cont(c)
        or c in (0x20, 0x09)
    )


def reason_phrase(s: Scanner) -> str:
    """``*(reserved / unreserved / escaped / UTF8-NONASCII / UTF8-CONT / SP / HTAB)``."""
    start = s.pos
    while True:
        c = s.peek()
        if _is_reason_char(c):
            s.take_while(_is_reason_char)
        elif c == 0x25:
            escaped(s)
        elif chars.utf8_sequence_length(c):
            utf8_nonascii(s)
        else:
            break
    return s.text_since(start)


def status_line(s: Scanner) -> StatusLine:
    """``SIP-Version SP Status-Code SP Reason-Phrase CRLF``."""
    version = sip_version(s)
    s.expect(b" ", "SP")
    start = s.pos
    code = digits(s, 3, 3)
    if chars.is_digit(s.peek()):
        raise s.error("3-digit status code", position=start)
    s.expect(b" ", "SP")
    reason = reason_phrase(s)
    crlf(s)
    return StatusLine(version, int(code), reason)


# --- Messages ---


def _headers_and_body(s: Scanner) -> tuple[list[Header], bytes | None]:
    headers = s.repeat(message_header)
    crlf(s)
    body = s.remaining() or None
    s.pos = len(s.data)
    return headers, body


def request(s: Scanner) -> Request:
    """``Request-Line *(message-header) CRLF [message-body]``."""
    line = request_line(s)
    headers, body = _headers_and_body(s)
    return Request(line, tuple(headers), body)


def response(s: Scanner) -> Response:
    """``Status-Line *(message-header) CRLF [message-body]``."""
    start = s.pos
    line = status_line(s)
    _headers_and_body(s)
    return Response(s.data[start:], line)


def _prepare(data: bytes | str, config: ParserConfig) -> bytes:
    if isinstance(data, str):
        data = data.encode("utf-8")
    limit = config.max_message_size
    if limit is not None and len(data) > limit:
        raise ParseError(
            ErrorKind.MESSAGE_TOO_LARGE,
            limit,
            f"message of at most {limit} bytes",
            fatal=True,
        )
    return data


def parse_request(data: bytes | str, config: ParserConfig = DEFAULT_CONFIG) -> Request:
    """Parse a complete SIP request."""
    return request(Scanner(_prepare(data, config), config))


def parse_response(data: bytes | str, config: ParserConfig = DEFAULT_CONFIG) -> Response:
    """Parse a complete SIP response."""
    return response(Scanner(_prepare(data, config), config))


def parse_message(data: bytes | str, config: ParserConfig = DEFAULT_CONFIG) -> Message:
    """Parse a SIP request or response.

    The request grammar is tried first.  The response grammar is only tried
    when the request grammar failed recoverably; a fatal request error
    (for example a malformed header value) is raised as is.  When both
    grammars fail the error has kind ``UNKNOWN`` and both attempts in its
    backtrace.
    """
    raw = _prepare(data, config)
    try:
        return request(Scanner(raw, config))
    except ParseError as request_error:
        if request_error.fatal:
            raise
        logger.debug("Not a SIP request (%s), trying the response grammar", request_error)
        try:
            return response(Scanner(raw, config))
        except ParseError as response_error:
            if response_error.fatal:
                raise
            raise ParseError(
                ErrorKind.UNKNOWN,
                max(request_error.position, response_error.position),
                "SIP request or response",
                backtrace=(request_error, response_error),
            ) from None
