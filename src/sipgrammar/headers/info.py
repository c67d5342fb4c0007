"""Alert-Info, Call-Info, Error-Info, Call-ID and In-Reply-To.

RFC 3261 §20.4, §20.8, §20.9, §20.18 and §20.21.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from .. import chars
from ..common import Extension, GenericParam, KeywordEnum, generic_param, generic_params
from ..scanner import Scanner
from ..tokens import comma, equal, laquot, raquot, semi, token, word
from ..uri import absolute_uri
from .base import Header, header_parser


class InfoPurpose(KeywordEnum):
    ICON = "icon"
    INFO = "info"
    CARD = "card"


@dataclass(frozen=True)
class Purpose:
    kind: InfoPurpose | Extension


InfoParam = Union[Purpose, GenericParam]


@dataclass(frozen=True)
class AlertInfo:
    uri: str
    params: tuple[GenericParam, ...] = ()


@dataclass(frozen=True)
class ErrorInfo:
    uri: str
    params: tuple[GenericParam, ...] = ()


@dataclass(frozen=True)
class Info:
    """One Call-Info entry."""

    uri: str
    params: tuple[InfoParam, ...] = ()

    @property
    def purpose(self) -> InfoPurpose | Extension | None:
        for param in self.params:
            if isinstance(param, Purpose):
                return param.kind
        return None


def _bracketed_uri(s: Scanner) -> str:
    """``LAQUOT absoluteURI RAQUOT``."""
    laquot(s)
    uri = absolute_uri(s)
    raquot(s)
    return uri


def _purpose_param(s: Scanner) -> Purpose:
    s.expect_nocase(b"purpose", "'purpose'")
    if chars.is_token(s.peek()):
        raise s.error("'purpose'")
    equal(s)
    return Purpose(InfoPurpose.classify(token(s)))


def _info_param(s: Scanner) -> InfoParam:
    semi(s)
    return s.choice("info-param", _purpose_param, generic_param)


def _alert_param(s: Scanner) -> AlertInfo:
    uri = _bracketed_uri(s)
    return AlertInfo(uri, tuple(generic_params(s)))


def _error_uri(s: Scanner) -> ErrorInfo:
    uri = _bracketed_uri(s)
    return ErrorInfo(uri, tuple(generic_params(s)))


def _info(s: Scanner) -> Info:
    uri = _bracketed_uri(s)
    return Info(uri, tuple(s.repeat(_info_param)))


def callid(s: Scanner) -> str:
    """``word ["@" word]``."""
    start = s.pos
    word(s)
    resume = s.pos
    if s.accept(b"@") and s.attempt(word) is None:
        s.pos = resume
    return s.text_since(start)


@dataclass(frozen=True)
class AlertInfoHeader(Header):
    canonical_name = "Alert-Info"

    alerts: tuple[AlertInfo, ...]


@dataclass(frozen=True)
class ErrorInfoHeader(Header):
    canonical_name = "Error-Info"

    errors: tuple[ErrorInfo, ...]


@dataclass(frozen=True)
class CallInfoHeader(Header):
    canonical_name = "Call-Info"

    infos: tuple[Info, ...]


@dataclass(frozen=True)
class CallIDHeader(Header):
    canonical_name = "Call-ID"

    value: str


@dataclass(frozen=True)
class InReplyToHeader(Header):
    canonical_name = "In-Reply-To"

    call_ids: tuple[str, ...]


alert_info_header = header_parser(
    AlertInfoHeader, lambda s: AlertInfoHeader(tuple(s.separated(_alert_param, comma)))
)
error_info_header = header_parser(
    ErrorInfoHeader, lambda s: ErrorInfoHeader(tuple(s.separated(_error_uri, comma)))
)
call_info_header = header_parser(
    CallInfoHeader, lambda s: CallInfoHeader(tuple(s.separated(_info, comma)))
)
call_id_header = header_parser(CallIDHeader, lambda s: CallIDHeader(callid(s)))
in_reply_to_header = header_parser(
    InReplyToHeader, lambda s: InReplyToHeader(tuple(s.separated(callid, comma)))
)
