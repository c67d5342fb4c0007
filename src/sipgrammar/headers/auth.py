"""Authentication headers (RFC 3261 §20.5-20.7, §20.27-20.28, §20.44; RFC 2617)."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import TypeVar, Union

from .. import chars
from ..common import Extension, KeywordEnum
from ..scanner import Scanner
from ..tokens import comma, equal, ldquot, lws, quoted_string, quoted_string_verbatim, rdquot, token
from ..uri import abs_path, absolute_uri, authority
from .base import Header, header_parser


P = TypeVar("P")


class AlgorithmKind(KeywordEnum):
    MD5 = "MD5"
    MD5_SESS = "MD5-sess"


class QopValue(KeywordEnum):
    AUTH = "auth"
    AUTH_INT = "auth-int"


@dataclass(frozen=True)
class Realm:
    value: str


@dataclass(frozen=True)
class Domain:
    uris: tuple[str, ...]


@dataclass(frozen=True)
class Nonce:
    value: str


@dataclass(frozen=True)
class Opaque:
    value: str


@dataclass(frozen=True)
class Stale:
    value: bool


@dataclass(frozen=True)
class Algorithm:
    kind: AlgorithmKind | Extension


@dataclass(frozen=True)
class QopOptions:
    values: tuple[QopValue | Extension, ...]


@dataclass(frozen=True)
class Username:
    value: str


@dataclass(frozen=True)
class DigestUri:
    value: str


@dataclass(frozen=True)
class ResponseDigest:
    value: str


@dataclass(frozen=True)
class CNonce:
    value: str


@dataclass(frozen=True)
class Qop:
    value: QopValue | Extension


@dataclass(frozen=True)
class NonceCount:
    value: str


@dataclass(frozen=True)
class NextNonce:
    value: str


@dataclass(frozen=True)
class ResponseAuth:
    value: str


@dataclass(frozen=True)
class AuthParam:
    """``auth-param-name EQUAL (token / quoted-string)``; the value is kept as written."""

    name: str
    value: str


DigestParam = Union[Realm, Domain, Nonce, Opaque, Stale, Algorithm, QopOptions, AuthParam]
DigestResponseParam = Union[
    Username,
    Realm,
    Nonce,
    DigestUri,
    ResponseDigest,
    Algorithm,
    CNonce,
    Opaque,
    Qop,
    NonceCount,
    AuthParam,
]
AuthInfoParam = Union[NextNonce, Qop, ResponseAuth, CNonce, NonceCount]


@dataclass(frozen=True)
class DigestChallenge:
    params: tuple[DigestParam, ...]

    @property
    def scheme(self) -> str:
        return "Digest"

    def get(self, kind: type[P]) -> P | None:
        """First parameter of the given type, or ``None``."""
        for param in self.params:
            if isinstance(param, kind):
                return param
        return None


@dataclass(frozen=True)
class OtherChallenge:
    scheme: str
    params: tuple[AuthParam, ...]


@dataclass(frozen=True)
class DigestCredentials:
    params: tuple[DigestResponseParam, ...]

    @property
    def scheme(self) -> str:
        return "Digest"

    def get(self, kind: type[P]) -> P | None:
        """First parameter of the given type, or ``None``."""
        for param in self.params:
            if isinstance(param, kind):
                return param
        return None


@dataclass(frozen=True)
class OtherCredentials:
    scheme: str
    params: tuple[AuthParam, ...]


Challenge = Union[DigestChallenge, OtherChallenge]
Credentials = Union[DigestCredentials, OtherCredentials]


# --- Parameter values ---


def _quoted_lhex(s: Scanner, minimum: int, maximum: int | None) -> str:
    ldquot(s)
    value = s.take_while(chars.is_lhex, minimum, maximum, "lower-case hex digit")
    rdquot(s)
    return value.decode("ascii")


def _domain(s: Scanner) -> Domain:
    ldquot(s)

    def uri(s: Scanner) -> str:
        return s.choice("domain URI", absolute_uri, abs_path)

    def spaced_uri(s: Scanner) -> str:
        s.take_while(lambda c: c == 0x20, 1, expected="space")
        return uri(s)

    uris = [uri(s), *s.repeat(spaced_uri)]
    rdquot(s)
    return Domain(tuple(uris))


def _stale(s: Scanner) -> Stale:
    start = s.pos
    value = token(s).lower()
    if value not in ("true", "false"):
        raise s.error("'true' or 'false'", position=start)
    return Stale(value == "true")


def _qop_options(s: Scanner) -> QopOptions:
    ldquot(s)
    values = s.separated(lambda s: QopValue.classify(token(s)), comma)
    rdquot(s)
    return QopOptions(tuple(values))


def _digest_uri_value(s: Scanner) -> str:
    def wildcard(s: Scanner) -> str:
        s.expect(b"*", "'*'")
        return "*"

    return s.choice("digest-uri-value", wildcard, absolute_uri, abs_path, authority)


def _digest_uri(s: Scanner) -> DigestUri:
    ldquot(s)
    value = _digest_uri_value(s)
    rdquot(s)
    return DigestUri(value)


ParamValue = Callable[[Scanner], object]

_CHALLENGE_PARAMS: Mapping[str, ParamValue] = {
    "realm": lambda s: Realm(quoted_string(s)),
    "domain": _domain,
    "nonce": lambda s: Nonce(quoted_string(s)),
    "opaque": lambda s: Opaque(quoted_string(s)),
    "stale": _stale,
    "algorithm": lambda s: Algorithm(AlgorithmKind.classify(token(s))),
    "qop": _qop_options,
}

_RESPONSE_PARAMS: Mapping[str, ParamValue] = {
    "username": lambda s: Username(quoted_string(s)),
    "realm": lambda s: Realm(quoted_string(s)),
    "nonce": lambda s: Nonce(quoted_string(s)),
    "uri": _digest_uri,
    "response": lambda s: ResponseDigest(_quoted_lhex(s, 32, 32)),
    "algorithm": lambda s: Algorithm(AlgorithmKind.classify(token(s))),
    "cnonce": lambda s: CNonce(quoted_string(s)),
    "opaque": lambda s: Opaque(quoted_string(s)),
    "qop": lambda s: Qop(QopValue.classify(token(s))),
    "nc": lambda s: NonceCount(s.take_while(chars.is_lhex, 8, 8, "nonce count").decode("ascii")),
}

_AUTH_INFO_PARAMS: Mapping[str, ParamValue] = {
    "nextnonce": lambda s: NextNonce(quoted_string(s)),
    "qop": _RESPONSE_PARAMS["qop"],
    "rspauth": lambda s: ResponseAuth(_quoted_lhex(s, 0, None)),
    "cnonce": _RESPONSE_PARAMS["cnonce"],
    "nc": _RESPONSE_PARAMS["nc"],
}


def _auth_value(s: Scanner) -> str:
    if s.peek() == 0x22:
        return quoted_string_verbatim(s)
    return token(s)


def auth_param(s: Scanner) -> AuthParam:
    """``auth-param-name EQUAL (token / quoted-string)``."""
    name = token(s)
    equal(s)
    return AuthParam(name, _auth_value(s))


def _named_param(s: Scanner, table: Mapping[str, ParamValue], fallback: bool) -> object:
    """A parameter whose name selects its value grammar.

    The whole parameter name is read before it is looked up, so ``qop``
    never matches as a prefix of a longer name.  With *fallback* set, a
    name or value that fits no dedicated grammar becomes an
    :class:`AuthParam`.
    """
    start = s.pos
    name = token(s)
    equal(s)
    value_start = s.pos
    value = table.get(name.lower())
    if value is not None:
        param = s.attempt(value)
        if param is not None:
            return param
        s.pos = value_start
    if not fallback:
        s.pos = start
        raise s.error("authentication parameter")
    return AuthParam(name, _auth_value(s))


def _is_digest(s: Scanner) -> bool:
    start = s.pos
    if token(s).lower() == "digest":
        return True
    s.pos = start
    return False


def challenge(s: Scanner) -> Challenge:
    """``("Digest" LWS digest-cln *(COMMA digest-cln)) / other-challenge``."""
    if _is_digest(s):
        lws(s)
        params = s.separated(lambda s: _named_param(s, _CHALLENGE_PARAMS, True), comma)
        return DigestChallenge(tuple(params))  # type: ignore[arg-type]
    scheme = token(s)
    lws(s)
    return OtherChallenge(scheme, tuple(s.separated(auth_param, comma)))


def credentials(s: Scanner) -> Credentials:
    """``("Digest" LWS digest-response) / other-response``."""
    if _is_digest(s):
        lws(s)
        params = s.separated(lambda s: _named_param(s, _RESPONSE_PARAMS, True), comma)
        return DigestCredentials(tuple(params))  # type: ignore[arg-type]
    scheme = token(s)
    lws(s)
    return OtherCredentials(scheme, tuple(s.separated(auth_param, comma)))


# --- Headers ---


@dataclass(frozen=True)
class WWWAuthenticateHeader(Header):
    canonical_name = "WWW-Authenticate"

    challenge: Challenge


@dataclass(frozen=True)
class ProxyAuthenticateHeader(Header):
    canonical_name = "Proxy-Authenticate"

    challenge: Challenge


@dataclass(frozen=True)
class AuthorizationHeader(Header):
    canonical_name = "Authorization"

    credentials: Credentials


@dataclass(frozen=True)
class ProxyAuthorizationHeader(Header):
    canonical_name = "Proxy-Authorization"

    credentials: Credentials


@dataclass(frozen=True)
class AuthenticationInfoHeader(Header):
    canonical_name = "Authentication-Info"

    params: tuple[AuthInfoParam, ...]


def _authentication_info(s: Scanner) -> AuthenticationInfoHeader:
    params = s.separated(lambda s: _named_param(s, _AUTH_INFO_PARAMS, False), comma)
    return AuthenticationInfoHeader(tuple(params))  # type: ignore[arg-type]


www_authenticate_header = header_parser(
    WWWAuthenticateHeader, lambda s: WWWAuthenticateHeader(challenge(s))
)
proxy_authenticate_header = header_parser(
    ProxyAuthenticateHeader, lambda s: ProxyAuthenticateHeader(challenge(s))
)
authorization_header = header_parser(
    AuthorizationHeader, lambda s: AuthorizationHeader(credentials(s))
)
proxy_authorization_header = header_parser(
    ProxyAuthorizationHeader, lambda s: ProxyAuthorizationHeader(credentials(s))
)
authentication_info_header = header_parser(AuthenticationInfoHeader, _authentication_info)
