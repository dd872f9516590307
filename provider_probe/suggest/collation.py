"""Locale-independent collation strategies for tie-breaking.

The default mirrors an ``en-US`` collator: whitespace, then punctuation and
symbols, then digits, then letters; letters compare case- and
accent-insensitively first, then by accent, then lowercase before
uppercase. The result never depends on the process locale.
"""

from __future__ import annotations

import unicodedata
from typing import Any, Callable, Dict, Tuple

from provider_probe.constants import DEFAULT_COLLATION

Collation = Callable[[str], Any]


def _char_class(ch: str) -> int:
    if ch.isspace():
        return 0
    if ch.isdigit():
        return 2
    if ch.isalpha():
        return 3
    return 1


def _base_char(ch: str) -> str:
    decomposed = unicodedata.normalize("NFD", ch)
    stripped = "".join(c for c in decomposed if not unicodedata.combining(c))
    return (stripped or ch).lower()


def english_collation_key(text: str) -> Tuple[Any, ...]:
    """Sort key approximating ``localeCompare(..., "en-US")``."""
    primary = tuple((_char_class(ch), _base_char(ch)) for ch in text)
    secondary = unicodedata.normalize("NFD", text.lower())
    tertiary = tuple(1 if ch.isupper() else 0 for ch in text)
    return (primary, secondary, tertiary, text)


def codepoint_collation_key(text: str) -> str:
    """Plain code point order."""
    return text


_COLLATIONS: Dict[str, Collation] = {
    "en-US": english_collation_key,
    "codepoint": codepoint_collation_key,
}


def get_collation(name: str = DEFAULT_COLLATION) -> Collation:
    """Look up a named collation; raises ``KeyError`` for unknown names."""
    try:
        return _COLLATIONS[name]
    except KeyError:
        raise KeyError(f"Unknown collation '{name}'; expected one of {sorted(_COLLATIONS)}") from None
