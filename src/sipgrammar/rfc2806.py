"""RFC 2806 ``telephone-subscriber``, used as an alternative user part of SIP URIs."""

from __future__ import annotations

from . import chars
from .common import hostname
from .scanner import Scanner

VISUAL_SEPARATORS = frozenset(b"-.()")
DTMF_DIGITS = frozenset(b"*#ABCD")
PAUSE_CHARACTERS = frozenset(b"pw")

PHONEDIGIT = chars.DIGIT | VISUAL_SEPARATORS
DIALABLE = PHONEDIGIT | DTMF_DIGITS | PAUSE_CHARACTERS

# token-char = %x21 / %x23-27 / %x2A-2B / %x2D-2E / %x30-39 / %x41-5A / %x5E-7A / %x7C / %x7E
TOKEN_CHARS = chars.ALPHANUM | frozenset(b"!#$%&'*+-.^_`|~")

PRIVATE_PREFIX_FIRST = frozenset(
    [0x21, 0x22, 0x2C, 0x2F, 0x3A]
    + list(range(0x24, 0x28))
    + list(range(0x3C, 0x41))
    + list(range(0x45, 0x50))
    + list(range(0x51, 0x57))
    + list(range(0x58, 0x61))
    + list(range(0x65, 0x70))
    + list(range(0x71, 0x77))
    + list(range(0x78, 0x7F))
)
PRIVATE_PREFIX_REST = frozenset(range(0x21, 0x3B)) | frozenset(range(0x3C, 0x7F))

QUOTED_TEXT = frozenset({0x20, 0x21}) | frozenset(range(0x23, 0x7F)) | frozenset(range(0x80, 0x100))


def _run(s: Scanner, charset: frozenset[int], expected: str) -> bytes:
    return s.take_while(lambda c: c in charset, 1, expected=expected)


def _isdn_subaddress(s: Scanner) -> bytes:
    s.expect(b";isub=")
    return _run(s, PHONEDIGIT, "phone digit")


def _post_dial(s: Scanner) -> bytes:
    s.expect(b";postd=")
    return _run(s, DIALABLE, "dial string")


def _network_prefix(s: Scanner) -> bytes:
    if s.accept(b"+"):
        return _run(s, PHONEDIGIT, "phone digit")
    return _run(s, DIALABLE, "network prefix")


def _private_prefix(s: Scanner) -> bytes:
    if s.peek() not in PRIVATE_PREFIX_FIRST:
        raise s.error("private prefix")
    s.advance(1)
    return s.take_while(lambda c: c in PRIVATE_PREFIX_REST)


def _area_specifier(s: Scanner) -> bytes:
    s.expect(b";phone-context=")
    return s.choice("phone-context", _network_prefix, _private_prefix)


def _service_provider(s: Scanner) -> str:
    s.expect(b";tsp=")
    return hostname(s)


def _quoted_string(s: Scanner) -> bytes:
    start = s.pos
    s.expect(b'"')
    while not s.accept(b'"'):
        if s.accept(b"\\"):
            if not 0x00 <= s.peek() <= 0x7F:
                raise s.error("CHAR")
            s.advance(1)
        elif s.peek() in QUOTED_TEXT:
            s.advance(1)
        else:
            raise s.error("closing '\"'")
    return s.data[start : s.pos]


def _extension_value(s: Scanner) -> bytes:
    if s.peek() == 0x22:
        return _quoted_string(s)
    start = s.pos
    _run(s, TOKEN_CHARS, "token")
    if s.accept(b"?"):
        _run(s, TOKEN_CHARS, "token")
    return s.data[start : s.pos]


def _future_extension(s: Scanner) -> bytes:
    start = s.pos
    s.expect(b";")
    _run(s, TOKEN_CHARS, "extension name")
    if s.accept(b"="):
        _extension_value(s)
    return s.data[start : s.pos]


def _trailing_params(s: Scanner) -> None:
    def param(s: Scanner) -> object:
        return s.choice(
            "telephone parameter", _area_specifier, _service_provider, _future_extension
        )

    s.repeat(param)


def global_phone_number(s: Scanner) -> str:
    """``"+" base-phone-number [isub] [postd] *(area / tsp / extension)``."""
    start = s.pos
    s.expect(b"+", "'+'")
    _run(s, PHONEDIGIT, "phone digit")
    s.attempt(_isdn_subaddress)
    s.attempt(_post_dial)
    _trailing_params(s)
    return s.text_since(start)


def local_phone_number(s: Scanner) -> str:
    """``1*dialable [isub] [postd] area-specifier *(area / tsp / extension)``."""
    start = s.pos
    _run(s, DIALABLE, "phone digit")
    s.attempt(_isdn_subaddress)
    s.attempt(_post_dial)
    _area_specifier(s)
    _trailing_params(s)
    return s.text_since(start)


def telephone_subscriber(s: Scanner) -> str:
    """A global or local telephone number, returned as written."""
    return s.choice("telephone-subscriber", global_phone_number, local_phone_number)
