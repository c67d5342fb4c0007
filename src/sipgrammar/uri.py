"""SIP, SIPS and generic URIs (RFC 3261 §19.1, §25.1; RFC 2396)."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Union

from . import chars
from .common import (
    Extension,
    KeywordEnum,
    Method,
    Transport,
    host,
    host_port,
    method,
    transport,
    ttl,
)
from .config import DEFAULT_CONFIG, ParserConfig
from .rfc2806 import telephone_subscriber
from .scanner import Scanner, parse_all
from .tokens import escaped, token

# --- URI parameters ---


class UserType(KeywordEnum):
    PHONE = "phone"
    IP = "ip"


@dataclass(frozen=True)
class TransportParam:
    transport: Transport | Extension


@dataclass(frozen=True)
class UserParam:
    user: UserType | Extension


@dataclass(frozen=True)
class MethodParam:
    method: Method | Extension


@dataclass(frozen=True)
class TtlParam:
    ttl: int


@dataclass(frozen=True)
class MaddrParam:
    host: str


@dataclass(frozen=True)
class LrParam:
    pass


@dataclass(frozen=True)
class OtherParam:
    name: str
    value: str | None = None


URIParam = Union[TransportParam, UserParam, MethodParam, TtlParam, MaddrParam, LrParam, OtherParam]


@dataclass(frozen=True)
class URIHeader:
    name: str
    value: str


@dataclass(frozen=True)
class SipUri:
    """SIP or SIPS URI (RFC 3261 §19.1)."""

    scheme: str
    user: str | None
    password: str | None
    host: str
    port: int | None
    params: tuple[URIParam, ...] = ()
    headers: tuple[URIHeader, ...] = ()

    @property
    def transport(self) -> Transport | Extension | None:
        for param in self.params:
            if isinstance(param, TransportParam):
                return param.transport
        return None

    @property
    def maddr(self) -> str | None:
        for param in self.params:
            if isinstance(param, MaddrParam):
                return param.host
        return None

    @property
    def lr(self) -> bool:
        return any(isinstance(param, LrParam) for param in self.params)

    @property
    def secure(self) -> bool:
        return self.scheme == "sips"


# --- Character runs with %HH escapes ---


def _escaped_run(
    s: Scanner,
    predicate: Callable[[int], bool],
    minimum: int = 1,
    expected: str = "URI character",
) -> str:
    """``*(predicate / escaped)``, returned as written."""
    start = s.pos
    count = 0
    while True:
        c = s.peek()
        if predicate(c):
            s.advance(1)
        elif c == 0x25:
            if s.attempt(escaped) is None:
                break
        else:
            break
        count += 1
    if count < minimum:
        s.pos = start
        raise s.error(expected)
    return s.text_since(start)


def _is_user_char(c: int) -> bool:
    return c in chars.UNRESERVED or c in chars.USER_UNRESERVED


def _is_password_char(c: int) -> bool:
    return c in chars.UNRESERVED or c in chars.PASSWORD_EXTRA


def _is_paramchar(c: int) -> bool:
    return c in chars.UNRESERVED or c in chars.PARAM_UNRESERVED


def _is_hnv_char(c: int) -> bool:
    return c in chars.UNRESERVED or c in chars.HNV_UNRESERVED


def _is_pchar(c: int) -> bool:
    return c in chars.UNRESERVED or c in chars.PCHAR_EXTRA


def _is_reg_name_char(c: int) -> bool:
    return c in chars.UNRESERVED or c in chars.REG_NAME_EXTRA


def user(s: Scanner) -> str:
    """``1*(unreserved / escaped / user-unreserved)``."""
    return _escaped_run(s, _is_user_char, 1, "user")


def password(s: Scanner) -> str:
    """``*(unreserved / escaped / "&" / "=" / "+" / "$" / ",")``."""
    return _escaped_run(s, _is_password_char, 0, "password")


def _credentials_tail(s: Scanner, name: str) -> tuple[str, str | None]:
    secret = None
    if s.accept(b":"):
        secret = password(s)
    s.expect(b"@", "'@'")
    return name, secret


def _plain_user_info(s: Scanner) -> tuple[str, str | None]:
    return _credentials_tail(s, user(s))


def _telephone_user_info(s: Scanner) -> tuple[str, str | None]:
    return _credentials_tail(s, telephone_subscriber(s))


def user_info(s: Scanner) -> tuple[str, str | None]:
    """``(user / telephone-subscriber) [":" password] "@"``."""
    return s.choice("userinfo", _plain_user_info, _telephone_user_info)


def _uri_parameter(s: Scanner) -> URIParam:
    name = _escaped_run(s, _is_paramchar, 1, "parameter name")
    folded = name.lower()
    if not s.accept(b"="):
        if folded == "lr":
            return LrParam()
        return OtherParam(name)

    value_start = s.pos
    keyword: Callable[[Scanner], URIParam] | None = _KEYWORD_PARAMS.get(folded)
    if keyword is not None:
        param = s.attempt(keyword)
        if param is not None and not _is_paramchar(s.peek()) and s.peek() != 0x25:
            return param
        s.pos = value_start
    return OtherParam(name, _escaped_run(s, _is_paramchar, 1, "parameter value"))


_KEYWORD_PARAMS: dict[str, Callable[[Scanner], URIParam]] = {
    "transport": lambda s: TransportParam(transport(s)),
    "user": lambda s: UserParam(UserType.classify(token(s))),
    "method": lambda s: MethodParam(method(s)),
    "ttl": lambda s: TtlParam(ttl(s)),
    "maddr": lambda s: MaddrParam(host(s)),
}


def uri_parameters(s: Scanner) -> list[URIParam]:
    """``*(";" uri-parameter)``."""

    def parameter(s: Scanner) -> URIParam:
        s.expect(b";", "';'")
        return _uri_parameter(s)

    return s.repeat(parameter)


def _uri_header(s: Scanner) -> URIHeader:
    name = _escaped_run(s, _is_hnv_char, 1, "header name")
    s.expect(b"=", "'='")
    return URIHeader(name, _escaped_run(s, _is_hnv_char, 0, "header value"))


def uri_headers(s: Scanner) -> list[URIHeader]:
    """``"?" header *("&" header)``."""
    s.expect(b"?", "'?'")

    def follower(s: Scanner) -> URIHeader:
        s.expect(b"&", "'&'")
        return _uri_header(s)

    return [_uri_header(s), *s.repeat(follower)]


def _sip_family(s: Scanner, scheme: str, bare: bool) -> SipUri:
    s.expect_nocase(scheme.encode("ascii") + b":", f"{scheme}: URI")
    credentials = s.attempt(user_info)
    name, number = host_port(s)
    params: list[URIParam] = []
    headers: list[URIHeader] = []
    if not bare:
        params = uri_parameters(s)
        if s.peek() == 0x3F:
            headers = uri_headers(s)
    user_part, secret = credentials if credentials is not None else (None, None)
    return SipUri(scheme, user_part, secret, name, number, tuple(params), tuple(headers))


def sip_uri(s: Scanner, bare: bool = False) -> SipUri:
    """``"sip:" [userinfo] hostport uri-parameters [headers]``.

    With *bare* set, the URI stops after ``hostport``: an addr-spec outside
    angle brackets leaves ``;`` parameters to the enclosing header.
    """
    return _sip_family(s, "sip", bare)


def sips_uri(s: Scanner, bare: bool = False) -> SipUri:
    return _sip_family(s, "sips", bare)


# --- Generic URIs (RFC 2396) ---


def _scheme(s: Scanner) -> str:
    start = s.pos
    s.take_while(chars.is_alpha, 1, 1, "scheme")
    s.take_while(lambda c: c in chars.ALPHANUM or c in chars.SCHEME_EXTRA)
    return s.text_since(start)


def _segment(s: Scanner) -> str:
    start = s.pos
    _escaped_run(s, _is_pchar, 0)
    while s.accept(b";"):
        _escaped_run(s, _is_pchar, 0)
    return s.text_since(start)


def abs_path(s: Scanner) -> str:
    """``"/" path-segments``."""
    start = s.pos
    s.expect(b"/", "'/'")
    _segment(s)
    while s.accept(b"/"):
        _segment(s)
    return s.text_since(start)


def _srvr(s: Scanner) -> str:
    start = s.pos
    s.attempt(user_info)
    if s.attempt(host_port) is None:
        s.pos = start
    return s.text_since(start)


def reg_name(s: Scanner) -> str:
    return _escaped_run(s, _is_reg_name_char, 1, "reg-name")


def authority(s: Scanner) -> str:
    """``srvr / reg-name``."""
    start = s.pos
    server = _srvr(s)
    if server:
        return server
    s.pos = start
    return s.attempt(reg_name) or ""


def _query(s: Scanner, bare: bool) -> str:
    return _escaped_run(s, _uric_predicate(bare), 0)


def _uric_predicate(bare: bool) -> Callable[[int], bool]:
    if bare:
        return lambda c: chars.is_uric(c) and c not in b";,?"
    return chars.is_uric


def _hier_part(s: Scanner, bare: bool) -> str:
    start = s.pos
    if s.startswith(b"//"):
        s.advance(2)
        authority(s)
        if s.peek() == 0x2F:
            abs_path(s)
    else:
        abs_path(s)
    if not bare and s.accept(b"?"):
        _query(s, bare)
    return s.text_since(start)


def _opaque_part(s: Scanner, bare: bool) -> str:
    start = s.pos
    c = s.peek()
    if not chars.is_uric_no_slash(c) and c != 0x25:
        raise s.error("opaque URI part")
    if bare and c in b";,?":
        raise s.error("opaque URI part")
    _escaped_run(s, _uric_predicate(bare), 1)
    return s.text_since(start)


def absolute_uri(s: Scanner, bare: bool = False) -> str:
    """``scheme ":" (hier-part / opaque-part)``, returned as written.

    With *bare* set, ``;``, ``,`` and ``?`` end the URI so that it can stand
    unbracketed in a header value.
    """
    start = s.pos
    _scheme(s)
    s.expect(b":", "':'")
    if s.peek() == 0x2F:
        _hier_part(s, bare)
    else:
        _opaque_part(s, bare)
    return s.text_since(start)


def parse_uri(text: str | bytes, config: ParserConfig = DEFAULT_CONFIG) -> SipUri:
    """Parse a complete ``sip:`` or ``sips:`` URI into a :class:`SipUri`."""

    def either(s: Scanner) -> SipUri:
        return s.choice("SIP URI", sip_uri, sips_uri)

    return parse_all(either, text, config)
