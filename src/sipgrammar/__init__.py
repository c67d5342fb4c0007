"""sipgrammar: a validating RFC 3261 SIP message parser."""

from __future__ import annotations

from .common import (
    SIP_2_0,
    Extension,
    GenericParam,
    Method,
    Q,
    Transport,
    Version,
    Wildcard,
    XExtension,
)
from .config import DEFAULT_CONFIG, ParserConfig
from .errors import ErrorKind, ParseError
from .headers import (
    Contact,
    ExtensionHeader,
    Header,
    Via,
    expand_compact_header,
    parse_header,
)
from .message import (
    Message,
    Request,
    RequestLine,
    Response,
    StatusLine,
    parse_message,
    parse_request,
    parse_response,
)
from .scanner import Scanner, parse_all, run
from .uri import SipUri, parse_uri

__version__ = "0.1.0"

__all__ = [
    "DEFAULT_CONFIG",
    "SIP_2_0",
    "Contact",
    "ErrorKind",
    "Extension",
    "ExtensionHeader",
    "GenericParam",
    "Header",
    "Message",
    "Method",
    "ParseError",
    "ParserConfig",
    "Q",
    "Request",
    "RequestLine",
    "Response",
    "Scanner",
    "SipUri",
    "StatusLine",
    "Transport",
    "Version",
    "Via",
    "Wildcard",
    "XExtension",
    "expand_compact_header",
    "parse_all",
    "parse_header",
    "parse_message",
    "parse_request",
    "parse_response",
    "parse_uri",
    "run",
]
