"""Via header (RFC 3261 §20.42)."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TypeVar, Union

from .. import chars
from ..common import (
    Extension,
    GenericParam,
    Transport,
    generic_param,
    host,
    ipv4_address,
    ipv6_address,
    port,
    transport,
    ttl,
)
from ..scanner import Scanner
from ..tokens import colon, comma, equal, lws, semi, slash, token
from .base import Header, header_parser


@dataclass(frozen=True)
class ViaTtl:
    value: int


@dataclass(frozen=True)
class ViaMaddr:
    host: str


@dataclass(frozen=True)
class ViaReceived:
    address: str


@dataclass(frozen=True)
class ViaBranch:
    value: str


ViaParam = Union[ViaTtl, ViaMaddr, ViaReceived, ViaBranch, GenericParam]
P = TypeVar("P")


@dataclass(frozen=True)
class Via:
    """One ``via-parm``: ``sent-protocol LWS sent-by *(SEMI via-params)``."""

    protocol: str
    sent_by: str
    params: tuple[ViaParam, ...] = ()

    @property
    def protocol_name(self) -> str:
        return self.protocol.split("/")[0]

    @property
    def protocol_version(self) -> str:
        return self.protocol.split("/")[1]

    @property
    def transport(self) -> Transport | Extension:
        return Transport.classify(self.protocol.split("/")[2])

    @property
    def host(self) -> str:
        return self._split_sent_by()[0]

    @property
    def port(self) -> int | None:
        return self._split_sent_by()[1]

    def _split_sent_by(self) -> tuple[str, int | None]:
        sent_by = self.sent_by
        if sent_by.startswith("["):
            bracket_end = sent_by.find("]")
            after = sent_by[bracket_end + 1 :]
            if after.startswith(":"):
                return sent_by[: bracket_end + 1], int(after[1:])
            return sent_by, None
        if ":" in sent_by:
            host_part, _, port_part = sent_by.rpartition(":")
            return host_part, int(port_part)
        return sent_by, None

    def _first(self, kind: type[P]) -> P | None:
        for param in self.params:
            if isinstance(param, kind):
                return param
        return None

    @property
    def branch(self) -> str | None:
        param = self._first(ViaBranch)
        return param.value if param is not None else None

    @property
    def received(self) -> str | None:
        param = self._first(ViaReceived)
        return param.address if param is not None else None

    @property
    def maddr(self) -> str | None:
        param = self._first(ViaMaddr)
        return param.host if param is not None else None

    @property
    def ttl(self) -> int | None:
        param = self._first(ViaTtl)
        return param.value if param is not None else None

    def get_param(self, name: str) -> GenericParam | None:
        """An extension parameter (``rport``, ``alias``, ...) by name."""
        for param in self.params:
            if isinstance(param, GenericParam) and param.name.lower() == name.lower():
                return param
        return None


def sent_protocol(s: Scanner) -> str:
    """``protocol-name SLASH protocol-version SLASH transport``."""
    name = token(s)
    if name.lower() == "sip":
        name = "SIP"
    slash(s)
    version = token(s)
    slash(s)
    return f"{name}/{version}/{transport(s)}"


def sent_by(s: Scanner) -> str:
    """``host [COLON port]``."""
    name = host(s)
    resume = s.pos
    if s.attempt(colon) is not None:
        if chars.is_digit(s.peek()):
            return f"{name}:{port(s)}"
        s.pos = resume
    return name


def _received(s: Scanner) -> ViaReceived:
    address = s.choice("IPv4 or IPv6 address", ipv4_address, ipv6_address)
    if chars.is_token(s.peek()):
        raise s.error("end of address")
    return ViaReceived(address)


_VIA_PARAMS = {
    "ttl": lambda s: ViaTtl(ttl(s)),
    "maddr": lambda s: ViaMaddr(host(s)),
    "received": _received,
    "branch": lambda s: ViaBranch(token(s)),
}


def via_param(s: Scanner) -> ViaParam:
    """``via-ttl / via-maddr / via-received / via-branch / via-extension``."""
    semi(s)
    start = s.pos
    name = token(s).lower()
    value = _VIA_PARAMS.get(name)
    if value is not None and s.attempt(equal) is not None:
        param = s.attempt(value)
        if param is not None:
            return param
    s.pos = start
    return generic_param(s)


def via_parm(s: Scanner) -> Via:
    protocol = sent_protocol(s)
    lws(s)
    return Via(protocol, sent_by(s), tuple(s.repeat(via_param)))


@dataclass(frozen=True)
class ViaHeader(Header):
    canonical_name = "Via"

    vias: tuple[Via, ...]


via_header = header_parser(ViaHeader, lambda s: ViaHeader(tuple(s.separated(via_parm, comma))))
