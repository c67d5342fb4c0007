"""Header base class and the shared ``name HCOLON`` prefix."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import ClassVar, TypeVar

from ..scanner import Scanner
from ..tokens import header_colon, token
from .names import compact_form

H = TypeVar("H", bound="Header")


@dataclass(frozen=True)
class Header:
    """A parsed header field."""

    canonical_name: ClassVar[str] = ""

    @property
    def field_name(self) -> str:
        return self.canonical_name


def header_start(s: Scanner, header: type[Header]) -> None:
    """Match ``header-name HCOLON`` for *header*.

    The canonical name and, where one exists, the compact form are accepted,
    ignoring case.  Failure is recoverable so that the dispatcher can fall
    back to an extension header.
    """
    start = s.pos
    name = token(s).lower()
    canonical = header.canonical_name
    if name != canonical.lower() and name != compact_form(canonical):
        s.pos = start
        raise s.error(f"{canonical} header")
    header_colon(s)


def header_parser(header: type[H], value: Callable[[Scanner], H]) -> Callable[[Scanner], H]:
    """Build the full ``name HCOLON value`` parser for *header*.

    Once the name and colon have matched, a value that does not fit the
    field grammar is a fatal error.
    """

    def production(s: Scanner) -> H:
        header_start(s, header)
        with s.committed():
            return value(s)

    production.__name__ = f"{header.__name__}.parse"
    production.__doc__ = f"Parse a complete {header.canonical_name} header field."
    return production
