"""SIP header field grammars and the header dispatcher."""

from __future__ import annotations

import logging
from collections.abc import Callable

from .. import chars
from ..config import DEFAULT_CONFIG, ParserConfig
from ..scanner import Scanner, parse_all
from ..tokens import crlf, token
from .address import (
    Contact,
    ContactHeader,
    Expires,
    FromHeader,
    RecordRouteHeader,
    ReplyToHeader,
    Route,
    RouteHeader,
    Tag,
    ToHeader,
    addr_spec,
    contact_header,
    contact_param,
    from_header,
    name_addr,
    record_route_header,
    reply_to_header,
    route_header,
    to_header,
)
from .auth import (
    Algorithm,
    AlgorithmKind,
    AuthenticationInfoHeader,
    AuthorizationHeader,
    AuthParam,
    CNonce,
    DigestChallenge,
    DigestCredentials,
    DigestUri,
    Domain,
    NextNonce,
    Nonce,
    NonceCount,
    Opaque,
    OtherChallenge,
    OtherCredentials,
    ProxyAuthenticateHeader,
    ProxyAuthorizationHeader,
    Qop,
    QopOptions,
    QopValue,
    Realm,
    ResponseAuth,
    ResponseDigest,
    Stale,
    Username,
    WWWAuthenticateHeader,
    authentication_info_header,
    authorization_header,
    proxy_authenticate_header,
    proxy_authorization_header,
    www_authenticate_header,
)
from .base import Header
from .content import (
    AcceptHeader,
    AcceptEncodingHeader,
    AcceptLanguageHeader,
    AcceptRange,
    ContentDispositionHeader,
    ContentEncodingHeader,
    ContentLanguageHeader,
    ContentLengthHeader,
    ContentTypeHeader,
    DispositionType,
    Encoding,
    Handling,
    HandlingKind,
    Language,
    Media,
    MediaParam,
    MediaType,
    MIMEVersionHeader,
    accept_encoding_header,
    accept_header,
    accept_language_header,
    content_disposition_header,
    content_encoding_header,
    content_language_header,
    content_length_header,
    content_type_header,
    media_type,
    mime_version_header,
)
from .info import (
    AlertInfo,
    AlertInfoHeader,
    CallIDHeader,
    CallInfoHeader,
    ErrorInfo,
    ErrorInfoHeader,
    Info,
    InfoPurpose,
    InReplyToHeader,
    Purpose,
    alert_info_header,
    call_id_header,
    call_info_header,
    error_info_header,
    in_reply_to_header,
)
from .misc import (
    AllowHeader,
    Comment,
    CSeqHeader,
    DateHeader,
    Duration,
    ExpiresHeader,
    ExtensionHeader,
    MaxForwardsHeader,
    MinExpiresHeader,
    OrganizationHeader,
    Priority,
    PriorityHeader,
    Product,
    ProxyRequireHeader,
    RequireHeader,
    RetryAfterHeader,
    ServerHeader,
    SubjectHeader,
    SupportedHeader,
    TimestampHeader,
    UnsupportedHeader,
    UserAgentHeader,
    WarningHeader,
    WarningValue,
    allow_header,
    cseq_header,
    date_header,
    expires_header,
    extension_header,
    max_forwards_header,
    min_expires_header,
    organization_header,
    priority_header,
    proxy_require_header,
    require_header,
    retry_after_header,
    server_header,
    subject_header,
    supported_header,
    timestamp_header,
    unsupported_header,
    user_agent_header,
    warning_header,
)
from .names import COMPACT_HEADERS, compact_form, expand_compact_header
from .via import Via, ViaBranch, ViaHeader, ViaMaddr, ViaReceived, ViaTtl, via_header, via_parm

logger = logging.getLogger(__name__)

HeaderParser = Callable[[Scanner], Header]

_PARSERS: tuple[tuple[type[Header], HeaderParser], ...] = (
    (AcceptHeader, accept_header),
    (AcceptEncodingHeader, accept_encoding_header),
    (AcceptLanguageHeader, accept_language_header),
    (AlertInfoHeader, alert_info_header),
    (AllowHeader, allow_header),
    (AuthenticationInfoHeader, authentication_info_header),
    (AuthorizationHeader, authorization_header),
    (CallIDHeader, call_id_header),
    (CallInfoHeader, call_info_header),
    (ContactHeader, contact_header),
    (ContentDispositionHeader, content_disposition_header),
    (ContentEncodingHeader, content_encoding_header),
    (ContentLanguageHeader, content_language_header),
    (ContentLengthHeader, content_length_header),
    (ContentTypeHeader, content_type_header),
    (CSeqHeader, cseq_header),
    (DateHeader, date_header),
    (ErrorInfoHeader, error_info_header),
    (ExpiresHeader, expires_header),
    (FromHeader, from_header),
    (InReplyToHeader, in_reply_to_header),
    (MaxForwardsHeader, max_forwards_header),
    (MIMEVersionHeader, mime_version_header),
    (MinExpiresHeader, min_expires_header),
    (OrganizationHeader, organization_header),
    (PriorityHeader, priority_header),
    (ProxyAuthenticateHeader, proxy_authenticate_header),
    (ProxyAuthorizationHeader, proxy_authorization_header),
    (ProxyRequireHeader, proxy_require_header),
    (RecordRouteHeader, record_route_header),
    (ReplyToHeader, reply_to_header),
    (RequireHeader, require_header),
    (RetryAfterHeader, retry_after_header),
    (RouteHeader, route_header),
    (ServerHeader, server_header),
    (SubjectHeader, subject_header),
    (SupportedHeader, supported_header),
    (TimestampHeader, timestamp_header),
    (ToHeader, to_header),
    (UnsupportedHeader, unsupported_header),
    (UserAgentHeader, user_agent_header),
    (ViaHeader, via_header),
    (WarningHeader, warning_header),
    (WWWAuthenticateHeader, www_authenticate_header),
)


def _build_dispatch() -> dict[str, HeaderParser]:
    table: dict[str, HeaderParser] = {}
    for header, parser in _PARSERS:
        table[header.canonical_name.lower()] = parser
        short = compact_form(header.canonical_name)
        if short is not None:
            table[short] = parser
    return table


HEADER_PARSERS: dict[str, HeaderParser] = _build_dispatch()


def _field(s: Scanner) -> Header:
    start = s.pos
    name = token(s)
    s.pos = start
    parser = HEADER_PARSERS.get(name.lower())
    if parser is None:
        logger.debug("No grammar for header %r, keeping it as an extension header", name)
        parser = extension_header
    header = parser(s)
    s.take_while(chars.is_wsp)
    return header


def message_header(s: Scanner) -> Header:
    """``header-field CRLF``.

    The field name selects the grammar; names without one are kept as
    :class:`ExtensionHeader`.  Trailing SP/HTAB before the CRLF is allowed.
    """
    header = _field(s)
    with s.committed():
        crlf(s)
    return header


def _header_line(s: Scanner) -> Header:
    header = _field(s)
    s.attempt(crlf)
    return header


def parse_header(line: bytes | str, config: ParserConfig = DEFAULT_CONFIG) -> Header:
    """Parse one header field; the terminating CRLF may be omitted."""
    return parse_all(_header_line, line, config)


__all__ = [
    "COMPACT_HEADERS",
    "HEADER_PARSERS",
    "AcceptEncodingHeader",
    "AcceptHeader",
    "AcceptLanguageHeader",
    "AcceptRange",
    "AlertInfo",
    "AlertInfoHeader",
    "Algorithm",
    "AlgorithmKind",
    "AllowHeader",
    "AuthParam",
    "AuthenticationInfoHeader",
    "AuthorizationHeader",
    "CNonce",
    "CSeqHeader",
    "CallIDHeader",
    "CallInfoHeader",
    "Comment",
    "Contact",
    "ContactHeader",
    "ContentDispositionHeader",
    "ContentEncodingHeader",
    "ContentLanguageHeader",
    "ContentLengthHeader",
    "ContentTypeHeader",
    "DateHeader",
    "DigestChallenge",
    "DigestCredentials",
    "DigestUri",
    "DispositionType",
    "Domain",
    "Duration",
    "Encoding",
    "ErrorInfo",
    "ErrorInfoHeader",
    "Expires",
    "ExpiresHeader",
    "ExtensionHeader",
    "FromHeader",
    "Handling",
    "HandlingKind",
    "Header",
    "InReplyToHeader",
    "Info",
    "InfoPurpose",
    "Language",
    "MIMEVersionHeader",
    "MaxForwardsHeader",
    "Media",
    "MediaParam",
    "MediaType",
    "MinExpiresHeader",
    "NextNonce",
    "Nonce",
    "NonceCount",
    "Opaque",
    "OrganizationHeader",
    "OtherChallenge",
    "OtherCredentials",
    "Priority",
    "PriorityHeader",
    "Product",
    "ProxyAuthenticateHeader",
    "ProxyAuthorizationHeader",
    "ProxyRequireHeader",
    "Purpose",
    "Qop",
    "QopOptions",
    "QopValue",
    "Realm",
    "RecordRouteHeader",
    "ReplyToHeader",
    "RequireHeader",
    "ResponseAuth",
    "ResponseDigest",
    "RetryAfterHeader",
    "Route",
    "RouteHeader",
    "ServerHeader",
    "Stale",
    "SubjectHeader",
    "SupportedHeader",
    "Tag",
    "TimestampHeader",
    "ToHeader",
    "UnsupportedHeader",
    "UserAgentHeader",
    "Username",
    "Via",
    "ViaBranch",
    "ViaHeader",
    "ViaMaddr",
    "ViaReceived",
    "ViaTtl",
    "WWWAuthenticateHeader",
    "WarningHeader",
    "WarningValue",
    "addr_spec",
    "compact_form",
    "contact_param",
    "expand_compact_header",
    "extension_header",
    "media_type",
    "message_header",
    "name_addr",
    "parse_header",
    "via_parm",
]
