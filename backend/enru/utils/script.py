from __future__ import annotations

import re

_CYRILLIC_RE = re.compile(r"[а-яА-ЯёЁ]")

_STRESS_MARKS = ("\u0301", "\u0300", "\u0341")


def contains_cyrillic(text: str) -> bool:
    """Return True if any character of ``text`` is a Russian letter."""
    if not text:
        return False
    return _CYRILLIC_RE.search(text) is not None


def strip_stress_marks(text: str) -> str:
    """Remove combining stress accents from a headword."""
    if not text:
        return text
    for mark in _STRESS_MARKS:
        text = text.replace(mark, "")
    return text
