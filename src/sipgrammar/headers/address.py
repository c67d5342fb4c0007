"""Address headers: Contact, From, To, Route, Record-Route, Reply-To (RFC 3261 §20.10)."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Union

from .. import chars
from ..common import GenericParam, Q, Wildcard, generic_param, generic_params, qvalue
from ..errors import ParseError
from ..scanner import Scanner
from ..tokens import (
    comma,
    delta_seconds,
    equal,
    laquot,
    lws,
    quoted_string,
    raquot,
    semi,
    star,
    token,
)
from ..uri import SipUri, absolute_uri, parse_uri, sip_uri, sips_uri
from .base import Header, header_parser

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Expires:
    """Contact ``expires`` parameter."""

    value: int


@dataclass(frozen=True)
class Tag:
    value: str


ContactParam = Union[Q, Expires, GenericParam]
FromToParam = Union[Tag, GenericParam]


class _AddressMixin:
    addr: str

    @property
    def uri(self) -> SipUri | None:
        """``addr`` parsed as a SIP/SIPS URI, or ``None`` for other schemes."""
        try:
            return parse_uri(self.addr)
        except ParseError:
            logger.debug("Address %r is not a SIP URI", self.addr)
            return None


@dataclass(frozen=True)
class Contact(_AddressMixin):
    addr: str
    name: str | None = None
    params: tuple[ContactParam, ...] = ()

    @property
    def q(self) -> Q | None:
        for param in self.params:
            if isinstance(param, Q):
                return param
        return None

    @property
    def expires(self) -> int | None:
        for param in self.params:
            if isinstance(param, Expires):
                return param.value
        return None


@dataclass(frozen=True)
class Route(_AddressMixin):
    """One entry of a Route or Record-Route header."""

    addr: str
    name: str | None = None
    params: tuple[GenericParam, ...] = ()


# --- Addresses ---


def addr_spec(s: Scanner, bare: bool = False) -> str:
    """``SIP-URI / SIPS-URI / absoluteURI``, returned as written.

    With *bare* set the URI stands outside angle brackets and ends before
    any ``;``, ``?`` or ``,``.
    """
    start = s.pos
    s.choice(
        "addr-spec",
        lambda s: sip_uri(s, bare),
        lambda s: sips_uri(s, bare),
        lambda s: absolute_uri(s, bare),
    )
    return s.text_since(start)


def _token_lws(s: Scanner) -> str:
    name = token(s)
    lws(s)
    return name


def display_name(s: Scanner) -> str | None:
    """``*(token LWS) / quoted-string``, or ``None`` when absent."""
    name = s.attempt(quoted_string)
    if name is not None:
        return name
    words = s.repeat(_token_lws)
    return " ".join(words) if words else None


def name_addr(s: Scanner) -> tuple[str | None, str]:
    """``[display-name] LAQUOT addr-spec RAQUOT``."""
    name = display_name(s)
    laquot(s)
    addr = addr_spec(s)
    raquot(s)
    return name, addr


def _bare_addr(s: Scanner) -> tuple[str | None, str]:
    return None, addr_spec(s, bare=True)


def address(s: Scanner) -> tuple[str | None, str]:
    """``name-addr / addr-spec``."""
    return s.choice("address", name_addr, _bare_addr)


def _named_value(s: Scanner, name: bytes) -> None:
    s.expect_nocase(name, repr(name.decode("ascii")))
    if chars.is_token(s.peek()):
        raise s.error(repr(name.decode("ascii")))
    equal(s)


def _q_param(s: Scanner) -> Q:
    _named_value(s, b"q")
    return Q(qvalue(s))


def _expires_param(s: Scanner) -> Expires:
    _named_value(s, b"expires")
    return Expires(delta_seconds(s))


def _contact_param(s: Scanner) -> ContactParam:
    semi(s)
    return s.choice("contact-params", _q_param, _expires_param, generic_param)


def contact_param(s: Scanner) -> Contact:
    """``(name-addr / addr-spec) *(SEMI contact-params)``."""
    name, addr = address(s)
    return Contact(addr, name, tuple(s.repeat(_contact_param)))


def _tag_param(s: Scanner) -> Tag:
    _named_value(s, b"tag")
    return Tag(token(s))


def _from_to_param(s: Scanner) -> FromToParam:
    semi(s)
    return s.choice("from-param", _tag_param, generic_param)


def route_param(s: Scanner) -> Route:
    """``name-addr *(SEMI rr-param)``."""
    name, addr = name_addr(s)
    return Route(addr, name, tuple(generic_params(s)))


# --- Headers ---


@dataclass(frozen=True)
class ContactHeader(Header):
    canonical_name = "Contact"

    contacts: tuple[Contact, ...] | Wildcard

    @property
    def is_wildcard(self) -> bool:
        return self.contacts is Wildcard.ANY


@dataclass(frozen=True)
class _FromToHeader(Header):
    addr: str
    name: str | None = None
    params: tuple[FromToParam, ...] = ()

    @property
    def tag(self) -> str | None:
        for param in self.params:
            if isinstance(param, Tag):
                return param.value
        return None


@dataclass(frozen=True)
class FromHeader(_AddressMixin, _FromToHeader):
    canonical_name = "From"


@dataclass(frozen=True)
class ToHeader(_AddressMixin, _FromToHeader):
    canonical_name = "To"


@dataclass(frozen=True)
class ReplyToHeader(_AddressMixin, Header):
    canonical_name = "Reply-To"

    addr: str
    name: str | None = None
    params: tuple[GenericParam, ...] = ()


@dataclass(frozen=True)
class RouteHeader(Header):
    canonical_name = "Route"

    routes: tuple[Route, ...]


@dataclass(frozen=True)
class RecordRouteHeader(Header):
    canonical_name = "Record-Route"

    routes: tuple[Route, ...]


def _contact(s: Scanner) -> ContactHeader:
    start = s.pos
    if s.attempt(star) is not None and (s.peek() == 0x0D or s.at_end()):
        return ContactHeader(Wildcard.ANY)
    s.pos = start
    return ContactHeader(tuple(s.separated(contact_param, comma)))


def _from(s: Scanner) -> FromHeader:
    name, addr = address(s)
    return FromHeader(addr, name, tuple(s.repeat(_from_to_param)))


def _to(s: Scanner) -> ToHeader:
    name, addr = address(s)
    return ToHeader(addr, name, tuple(s.repeat(_from_to_param)))


def _reply_to(s: Scanner) -> ReplyToHeader:
    name, addr = address(s)
    return ReplyToHeader(addr, name, tuple(generic_params(s)))


contact_header = header_parser(ContactHeader, _contact)
from_header = header_parser(FromHeader, _from)
to_header = header_parser(ToHeader, _to)
reply_to_header = header_parser(ReplyToHeader, _reply_to)
route_header = header_parser(
    RouteHeader, lambda s: RouteHeader(tuple(s.separated(route_param, comma)))
)
record_route_header = header_parser(
    RecordRouteHeader, lambda s: RecordRouteHeader(tuple(s.separated(route_param, comma)))
)
