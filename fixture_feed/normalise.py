from __future__ import annotations

import unicodedata


def strip_diacritics(s: str) -> str:
    decomposed = unicodedata.normalize("NFD", s)
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


def normalize_name(s: str) -> str:
    """Comparison key for team names: accent- and case-insensitive."""
    return strip_diacritics((s or "").lower())
