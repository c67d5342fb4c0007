"""Byte classes of the SIP grammar (RFC 3261 §25.1, RFC 2234 core rules).

Every predicate takes a single byte as an ``int`` and never raises; ``-1``
(the scanner's end-of-input marker) belongs to no class.
"""

from __future__ import annotations


def _bytes(chars: str) -> frozenset[int]:
    return frozenset(chars.encode("ascii"))


DIGIT = frozenset(range(0x30, 0x3A))
ALPHA = frozenset(range(0x41, 0x5B)) | frozenset(range(0x61, 0x7B))
ALPHANUM = ALPHA | DIGIT
HEXDIG = DIGIT | _bytes("ABCDEFabcdef")
LHEX = DIGIT | _bytes("abcdef")
WSP = _bytes(" \t")

RESERVED = _bytes(";/?:@&=+$,")
MARK = _bytes("-_.!~*'()")
UNRESERVED = ALPHANUM | MARK

TOKEN = ALPHANUM | _bytes("-.!%*_+`'~")
WORD = ALPHANUM | _bytes("-.!%*_+`'~()<>:\\\"/[]?{}")

USER_UNRESERVED = _bytes("&=+$,;?/")
PASSWORD_EXTRA = _bytes("&=+$,")
PARAM_UNRESERVED = _bytes("[]/:&+$")
HNV_UNRESERVED = _bytes("[]/?:+$")
REG_NAME_EXTRA = _bytes("$,;:@&=+")
PCHAR_EXTRA = _bytes(":@&=+$,")
SCHEME_EXTRA = _bytes("+-.")
URIC_NO_SLASH_EXTRA = _bytes(";?:@&=+$,")

# qdtext = LWS / %x21 / %x23-5B / %x5D-7E / UTF8-NONASCII
QDTEXT = frozenset({0x21}) | frozenset(range(0x23, 0x5C)) | frozenset(range(0x5D, 0x7F))
# ctext = %x21-27 / %x2A-5B / %x5D-7E / UTF8-NONASCII / LWS
CTEXT = (
    frozenset(range(0x21, 0x28))
    | frozenset(range(0x2A, 0x5C))
    | frozenset(range(0x5D, 0x7F))
)
# quoted-pair = "\" (%x00-09 / %x0B-0C / %x0E-7F)
QUOTABLE = frozenset(range(0x00, 0x0A)) | frozenset({0x0B, 0x0C}) | frozenset(range(0x0E, 0x80))
# TEXT-UTF8char = %x21-7E / UTF8-NONASCII
TEXT_ASCII = frozenset(range(0x21, 0x7F))

UTF8_CONT = frozenset(range(0x80, 0xC0))

# Lead byte ranges and the number of continuation bytes each one requires.
UTF8_LEADS: tuple[tuple[range, int], ...] = (
    (range(0xC0, 0xE0), 1),
    (range(0xE0, 0xF0), 2),
    (range(0xF0, 0xF8), 3),
    (range(0xF8, 0xFC), 4),
    (range(0xFC, 0xFE), 5),
)


def is_digit(c: int) -> bool:
    return c in DIGIT


def is_alpha(c: int) -> bool:
    return c in ALPHA


def is_alphanum(c: int) -> bool:
    return c in ALPHANUM


def is_hexdig(c: int) -> bool:
    return c in HEXDIG


def is_lhex(c: int) -> bool:
    return c in LHEX


def is_wsp(c: int) -> bool:
    return c in WSP


def is_reserved(c: int) -> bool:
    return c in RESERVED


def is_mark(c: int) -> bool:
    return c in MARK


def is_unreserved(c: int) -> bool:
    return c in UNRESERVED


def is_token(c: int) -> bool:
    return c in TOKEN


def is_word(c: int) -> bool:
    return c in WORD


def is_alphanum_hyphen(c: int) -> bool:
    return c in ALPHANUM or c == 0x2D


def is_user_unreserved(c: int) -> bool:
    return c in USER_UNRESERVED


def is_param_unreserved(c: int) -> bool:
    return c in PARAM_UNRESERVED


def is_hnv_unreserved(c: int) -> bool:
    return c in HNV_UNRESERVED


def is_uric(c: int) -> bool:
    """``uric`` minus ``escaped``, which callers handle separately."""
    return c in RESERVED or c in UNRESERVED


def is_uric_no_slash(c: int) -> bool:
    return c in UNRESERVED or c in URIC_NO_SLASH_EXTRA


def is_utf8_cont(c: int) -> bool:
    return c in UTF8_CONT


def utf8_sequence_length(c: int) -> int:
    """Number of continuation bytes a UTF-8 lead byte announces, or 0."""
    for lead, count in UTF8_LEADS:
        if c in lead:
            return count
    return 0
