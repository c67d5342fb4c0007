"""Accept family, Content-* and MIME-Version (RFC 3261 §20.1-20.3, §20.11-20.15, §20.24)."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from .. import chars
from ..common import (
    Extension,
    GenericParam,
    KeywordEnum,
    Q,
    Wildcard,
    XExtension,
    generic_param,
    qvalue,
)
from ..scanner import Scanner
from ..tokens import comma, equal, integer, quoted_string_verbatim, semi, slash, token
from .base import Header, header_parser

# --- Media types ---


class MediaType(KeywordEnum):
    TEXT = "text"
    IMAGE = "image"
    AUDIO = "audio"
    VIDEO = "video"
    APPLICATION = "application"
    MESSAGE = "message"
    MULTIPART = "multipart"


@dataclass(frozen=True)
class MediaParam:
    """``m-attribute EQUAL m-value``; quoted values keep their quotes."""

    name: str
    value: str


@dataclass(frozen=True)
class Media:
    type: MediaType | Extension | Wildcard
    subtype: Extension | Wildcard
    params: tuple[MediaParam, ...] = ()

    @property
    def mime_type(self) -> str:
        return f"{self.type}/{self.subtype}"


AcceptParam = Union[Q, GenericParam]


@dataclass(frozen=True)
class AcceptRange:
    media: Media
    params: tuple[AcceptParam, ...] = ()


@dataclass(frozen=True)
class Encoding:
    coding: str | Wildcard
    params: tuple[AcceptParam, ...] = ()


@dataclass(frozen=True)
class Language:
    range: str | Wildcard
    params: tuple[AcceptParam, ...] = ()


def _extension_token(text: str) -> Extension:
    if text[:2].lower() == "x-" and len(text) > 2:
        return XExtension(text)
    return Extension(text)


def _m_type(s: Scanner, wildcard: bool) -> MediaType | Extension | Wildcard:
    text = token(s)
    if wildcard and text == "*":
        return Wildcard.ANY
    kind = MediaType.classify(text)
    if isinstance(kind, MediaType):
        return kind
    return _extension_token(text)


def _m_subtype(s: Scanner, wildcard: bool) -> Extension | Wildcard:
    text = token(s)
    if wildcard and text == "*":
        return Wildcard.ANY
    return _extension_token(text)


def _m_value(s: Scanner) -> str:
    if s.peek() == 0x22:
        return quoted_string_verbatim(s)
    return token(s)


def _m_parameter(s: Scanner, stop_at_q: bool = False) -> MediaParam:
    semi(s)
    start = s.pos
    name = token(s)
    if stop_at_q and name.lower() == "q":
        # q starts the accept-params of an Accept range.
        raise s.error("media parameter", position=start)
    equal(s)
    return MediaParam(name, _m_value(s))


def _media(s: Scanner, accept: bool) -> Media:
    """A media type; within an Accept range it may be a wildcard and stops at q."""
    kind = _m_type(s, accept)
    slash(s)
    subtype = _m_subtype(s, accept)
    params = s.repeat(lambda s: _m_parameter(s, stop_at_q=accept))
    return Media(kind, subtype, tuple(params))


def media_type(s: Scanner) -> Media:
    """``m-type SLASH m-subtype *(SEMI m-parameter)``."""
    return _media(s, accept=False)


def _q_param(s: Scanner) -> Q:
    s.expect_nocase(b"q", "'q'")
    if chars.is_token(s.peek()):
        raise s.error("'q'")
    equal(s)
    return Q(qvalue(s))


def _accept_param(s: Scanner) -> AcceptParam:
    semi(s)
    return s.choice("accept-param", _q_param, generic_param)


def accept_params(s: Scanner) -> list[AcceptParam]:
    return s.repeat(_accept_param)


def accept_range(s: Scanner) -> AcceptRange:
    media = _media(s, accept=True)
    return AcceptRange(media, tuple(accept_params(s)))


def _encoding(s: Scanner) -> Encoding:
    text = token(s)
    coding: str | Wildcard = Wildcard.ANY if text == "*" else text
    return Encoding(coding, tuple(accept_params(s)))


def language_tag(s: Scanner) -> str:
    """``1*8ALPHA *("-" 1*8ALPHA)``."""
    start = s.pos
    s.take_while(chars.is_alpha, 1, 8, "language tag")
    while s.peek() == 0x2D and chars.is_alpha(s.peek(1)):
        s.advance(1)
        s.take_while(chars.is_alpha, 1, 8)
    if chars.is_alpha(s.peek()):
        s.pos = start
        raise s.error("language tag of at most 8 letters")
    return s.text_since(start)


def _language(s: Scanner) -> Language:
    if s.accept(b"*"):
        return Language(Wildcard.ANY, tuple(accept_params(s)))
    return Language(language_tag(s), tuple(accept_params(s)))


# --- Headers ---


@dataclass(frozen=True)
class AcceptHeader(Header):
    canonical_name = "Accept"

    ranges: tuple[AcceptRange, ...] = ()


@dataclass(frozen=True)
class AcceptEncodingHeader(Header):
    canonical_name = "Accept-Encoding"

    encodings: tuple[Encoding, ...] = ()


@dataclass(frozen=True)
class AcceptLanguageHeader(Header):
    canonical_name = "Accept-Language"

    languages: tuple[Language, ...] = ()


class DispositionType(KeywordEnum):
    RENDER = "render"
    SESSION = "session"
    ICON = "icon"
    ALERT = "alert"


class HandlingKind(KeywordEnum):
    OPTIONAL = "optional"
    REQUIRED = "required"


@dataclass(frozen=True)
class Handling:
    kind: HandlingKind | Extension


@dataclass(frozen=True)
class ContentDispositionHeader(Header):
    canonical_name = "Content-Disposition"

    disposition: DispositionType | Extension
    params: tuple[Handling | GenericParam, ...] = ()


@dataclass(frozen=True)
class ContentEncodingHeader(Header):
    canonical_name = "Content-Encoding"

    encodings: tuple[str, ...]


@dataclass(frozen=True)
class ContentLanguageHeader(Header):
    canonical_name = "Content-Language"

    languages: tuple[str, ...]


@dataclass(frozen=True)
class ContentLengthHeader(Header):
    canonical_name = "Content-Length"

    length: int


@dataclass(frozen=True)
class ContentTypeHeader(Header):
    canonical_name = "Content-Type"

    media: Media


@dataclass(frozen=True)
class MIMEVersionHeader(Header):
    canonical_name = "MIME-Version"

    major: int
    minor: int


def _accept(s: Scanner) -> AcceptHeader:
    return AcceptHeader(tuple(s.separated(accept_range, comma, 0)))


def _accept_encoding(s: Scanner) -> AcceptEncodingHeader:
    return AcceptEncodingHeader(tuple(s.separated(_encoding, comma, 0)))


def _accept_language(s: Scanner) -> AcceptLanguageHeader:
    return AcceptLanguageHeader(tuple(s.separated(_language, comma, 0)))


def _handling_param(s: Scanner) -> Handling:
    s.expect_nocase(b"handling", "'handling'")
    if chars.is_token(s.peek()):
        raise s.error("'handling'")
    equal(s)
    return Handling(HandlingKind.classify(token(s)))


def _disp_param(s: Scanner) -> Handling | GenericParam:
    semi(s)
    return s.choice("disp-param", _handling_param, generic_param)


def _content_disposition(s: Scanner) -> ContentDispositionHeader:
    disposition = DispositionType.classify(token(s))
    return ContentDispositionHeader(disposition, tuple(s.repeat(_disp_param)))


def _content_encoding(s: Scanner) -> ContentEncodingHeader:
    return ContentEncodingHeader(tuple(s.separated(token, comma)))


def _content_language(s: Scanner) -> ContentLanguageHeader:
    return ContentLanguageHeader(tuple(s.separated(language_tag, comma)))


def _content_length(s: Scanner) -> ContentLengthHeader:
    return ContentLengthHeader(integer(s))


def _content_type(s: Scanner) -> ContentTypeHeader:
    return ContentTypeHeader(media_type(s))


def _mime_version(s: Scanner) -> MIMEVersionHeader:
    major = integer(s)
    s.expect(b".", "'.'")
    return MIMEVersionHeader(major, integer(s))


accept_header = header_parser(AcceptHeader, _accept)
accept_encoding_header = header_parser(AcceptEncodingHeader, _accept_encoding)
accept_language_header = header_parser(AcceptLanguageHeader, _accept_language)
content_disposition_header = header_parser(ContentDispositionHeader, _content_disposition)
content_encoding_header = header_parser(ContentEncodingHeader, _content_encoding)
content_language_header = header_parser(ContentLanguageHeader, _content_language)
content_length_header = header_parser(ContentLengthHeader, _content_length)
content_type_header = header_parser(ContentTypeHeader, _content_type)
mime_version_header = header_parser(MIMEVersionHeader, _mime_version)
