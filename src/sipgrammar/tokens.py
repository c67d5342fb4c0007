"""Primitive recognizers (RFC 3261 §25.1 basic rules)."""

from __future__ import annotations

from collections.abc import Callable

from . import chars
from .errors import ErrorKind
from .scanner import Scanner

MAX_INT = 2**31 - 1


def escaped(s: Scanner) -> int:
    """``"%" HEXDIG HEXDIG``, returning the decoded octet."""
    start = s.pos
    s.expect(b"%", "escaped octet")
    digits = s.take_while(chars.is_hexdig, 2, 2, "two hex digits")
    if len(digits) != 2:
        raise s.error("two hex digits", position=start)
    return int(digits, 16)


def crlf(s: Scanner) -> bytes:
    return s.expect(b"\r\n", "CRLF")


def lws(s: Scanner) -> bytes:
    """``[*WSP CRLF] 1*WSP``: whitespace, possibly folded onto a new line."""
    start = s.pos
    s.take_while(chars.is_wsp)
    if s.startswith(b"\r\n") and chars.is_wsp(s.peek(2)):
        s.advance(2)
        s.take_while(chars.is_wsp)
    elif s.pos == start:
        raise s.error("whitespace")
    return s.data[start : s.pos]


def sws(s: Scanner) -> bytes:
    """``[LWS]``."""
    return s.attempt(lws) or b""


def header_colon(s: Scanner) -> bytes:
    """``*(SP / HTAB) ":" SWS``."""
    s.take_while(chars.is_wsp)
    s.expect(b":", "':'")
    sws(s)
    return b":"


def _separator(char: bytes, name: str) -> Callable[[Scanner], bytes]:
    def production(s: Scanner) -> bytes:
        start = s.pos
        sws(s)
        if not s.accept(char):
            raise s.error(name, position=start)
        sws(s)
        return char

    production.__name__ = name
    return production


star = _separator(b"*", "STAR")
slash = _separator(b"/", "SLASH")
equal = _separator(b"=", "EQUAL")
lparen = _separator(b"(", "LPAREN")
rparen = _separator(b")", "RPAREN")
comma = _separator(b",", "COMMA")
semi = _separator(b";", "SEMI")
colon = _separator(b":", "COLON")


def laquot(s: Scanner) -> bytes:
    """``SWS "<"``."""
    start = s.pos
    sws(s)
    if not s.accept(b"<"):
        raise s.error("'<'", position=start)
    return b"<"


def raquot(s: Scanner) -> bytes:
    """``">" SWS``."""
    s.expect(b">", "'>'")
    sws(s)
    return b">"


def ldquot(s: Scanner) -> bytes:
    """``SWS DQUOTE``."""
    start = s.pos
    sws(s)
    if not s.accept(b'"'):
        raise s.error("'\"'", position=start)
    return b'"'


def rdquot(s: Scanner) -> bytes:
    """``DQUOTE SWS``."""
    s.expect(b'"', "'\"'")
    sws(s)
    return b'"'


def token(s: Scanner) -> str:
    return s.take_while(chars.is_token, 1, expected="token").decode("ascii")


def word(s: Scanner) -> str:
    return s.take_while(chars.is_word, 1, expected="word").decode("ascii")


def digits(s: Scanner, minimum: int = 1, maximum: int | None = None) -> str:
    return s.take_while(chars.is_digit, minimum, maximum, "digit").decode("ascii")


def integer(s: Scanner) -> int:
    """``1*DIGIT`` as a signed 32-bit value; overflow is fatal."""
    start = s.pos
    value = int(digits(s))
    if value > MAX_INT:
        raise s.error(
            "32-bit integer", ErrorKind.INVALID_INTEGER, fatal=True, position=start
        )
    return value


delta_seconds = integer


def utf8_nonascii(s: Scanner) -> bytes:
    """One multi-byte UTF-8 sequence: a lead byte and its continuation bytes."""
    start = s.pos
    count = chars.utf8_sequence_length(s.peek())
    if not count:
        raise s.error("UTF-8 lead byte")
    s.advance(1)
    tail = s.take_while(chars.is_utf8_cont, count, count, "UTF-8 continuation byte")
    if len(tail) != count:
        s.pos = start
        raise s.error("UTF-8 continuation byte")
    return s.data[start : s.pos]


def quoted_pair(s: Scanner) -> int:
    """``"\\" (%x00-09 / %x0B-0C / %x0E-7F)``, returning the quoted octet."""
    start = s.pos
    s.expect(b"\\", "quoted-pair")
    c = s.peek()
    if c not in chars.QUOTABLE:
        s.pos = start
        raise s.error("quotable character")
    s.advance(1)
    return c


def _quoted_body(s: Scanner) -> tuple[int, str]:
    sws(s)
    opening = s.pos
    s.expect(b'"', "quoted-string")
    out = bytearray()
    while True:
        c = s.peek()
        if c == 0x22:
            s.advance(1)
            break
        if c in chars.QDTEXT:
            out += s.take_while(lambda b: b in chars.QDTEXT)
        elif c == 0x5C:
            out.append(quoted_pair(s))
        elif chars.is_wsp(c) or c == 0x0D:
            out += lws(s).replace(b"\r\n", b"")
        elif chars.utf8_sequence_length(c):
            out += utf8_nonascii(s)
        else:
            raise s.error("closing '\"'")
    return opening, s.decode(bytes(out), opening)


def quoted_string(s: Scanner) -> str:
    """``SWS DQUOTE *(qdtext / quoted-pair) DQUOTE`` with escapes removed."""
    return _quoted_body(s)[1]


def quoted_string_verbatim(s: Scanner) -> str:
    """Like :func:`quoted_string` but keeps the quotes and escapes as written."""
    opening, _ = _quoted_body(s)
    return s.text_since(opening)


def comment(s: Scanner) -> str:
    """``LPAREN *(ctext / quoted-pair / comment) RPAREN``.

    Returns the text between the outer parentheses as written.  Whitespace
    after the closing parenthesis is left for the caller, which lets
    ``server-val *(LWS server-val)`` separate a comment from the next
    product.  Nesting is bounded by ``ParserConfig.max_comment_depth``.
    """
    with s.nested("comment"):
        lparen(s)
        inner = s.pos
        while True:
            c = s.peek()
            if c in chars.CTEXT:
                s.take_while(lambda b: b in chars.CTEXT)
            elif c == 0x5C:
                quoted_pair(s)
            elif c == 0x28:
                comment(s)
            elif chars.is_wsp(c) or c == 0x0D:
                if s.attempt(lws) is None:
                    break
            elif chars.utf8_sequence_length(c):
                utf8_nonascii(s)
            else:
                break
        end = s.pos
        s.expect(b")", "')'")
    return s.decode(s.data[inner:end], inner).replace("\r\n", "").strip(" \t")


def _text_utf8_char(s: Scanner) -> bytes:
    c = s.peek()
    if c in chars.TEXT_ASCII:
        return s.advance(1)
    return utf8_nonascii(s)


def text_utf8_trim(s: Scanner) -> str:
    """``1*TEXT-UTF8char *(*LWS TEXT-UTF8char)``: text with no outer whitespace."""
    start = s.pos
    _text_utf8_char(s)
    while True:
        resume = s.pos
        s.repeat(lws)
        if s.attempt(_text_utf8_char) is None:
            s.pos = resume
            break
    return s.text_since(start).replace("\r\n", "")


def header_value(s: Scanner) -> str:
    """``*(TEXT-UTF8char / UTF8-CONT / LWS)``, the value of an extension header."""
    start = s.pos
    while True:
        c = s.peek()
        if c in chars.TEXT_ASCII or chars.is_utf8_cont(c):
            s.advance(1)
        elif chars.utf8_sequence_length(c):
            if s.attempt(utf8_nonascii) is None:
                raise s.error("UTF-8 text", ErrorKind.TEXT_ENCODING, fatal=True)
        elif chars.is_wsp(c) or c == 0x0D:
            if s.attempt(lws) is None:
                break
        else:
            break
    return s.text_since(start).replace("\r\n", "").rstrip(" \t")
