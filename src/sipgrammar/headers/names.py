"""Header field names."""

from __future__ import annotations

# --- Compact header expansion (RFC 3261 §7.3.3) ---

COMPACT_HEADERS: dict[str, str] = {
    "i": "call-id",
    "m": "contact",
    "e": "content-encoding",
    "l": "content-length",
    "c": "content-type",
    "f": "from",
    "s": "subject",
    "k": "supported",
    "t": "to",
    "v": "via",
}

_COMPACT_FORMS: dict[str, str] = {full: short for short, full in COMPACT_HEADERS.items()}


def expand_compact_header(name: str) -> str:
    """Expand a single-letter compact header name to its full lower-case form."""
    return COMPACT_HEADERS.get(name.lower(), name.lower())


def compact_form(name: str) -> str | None:
    """The single-letter form of a header name, if RFC 3261 defines one."""
    return _COMPACT_FORMS.get(name.lower())
