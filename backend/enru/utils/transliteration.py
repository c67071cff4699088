from __future__ import annotations

from functools import lru_cache
from typing import List, Tuple

# Longest sequences first: "shch" must win over "sh", "sh" over "s".
_LATIN_TO_CYRILLIC: Tuple[Tuple[str, str], ...] = (
    ("shch", "щ"),
    ("sch", "щ"),
    ("tch", "ч"),
    ("y''", "ъ"),
    ("zh", "ж"),
    ("kh", "х"),
    ("ts", "ц"),
    ("ch", "ч"),
    ("sh", "ш"),
    ("yu", "ю"),
    ("ya", "я"),
    ("ye", "е"),
    ("yo", "ё"),
    ("iy", "ий"),
    ("yy", "ый"),
    ("y'", "ь"),
    ("''", "ъ"),
    ("a", "а"),
    ("b", "б"),
    ("v", "в"),
    ("g", "г"),
    ("d", "д"),
    ("e", "е"),
    ("z", "з"),
    ("i", "и"),
    ("j", "й"),
    ("k", "к"),
    ("l", "л"),
    ("m", "м"),
    ("n", "н"),
    ("o", "о"),
    ("p", "п"),
    ("r", "р"),
    ("s", "с"),
    ("t", "т"),
    ("u", "у"),
    ("f", "ф"),
    ("h", "х"),
    ("c", "к"),
    ("w", "в"),
    ("x", "кс"),
    ("y", "ы"),
    ("'", "ь"),
)

RUSSIAN_PATTERNS = (
    "zh", "kh", "shch", "sch", "tch", "ts", "ch", "sh",
    "yu", "ya", "ye", "yo",
)

RUSSIAN_ENDINGS = (
    "ov", "ova", "ovich", "evich", "ovna", "evna",
    "sky", "skaya", "skiy", "skoi", "aya", "yy", "iy",
)


def looks_like_transliteration(text: str) -> bool:
    """Guess whether Latin ``text`` is romanized Russian."""
    lower = (text or "").lower()
    if not lower:
        return False
    if any(pattern in lower for pattern in RUSSIAN_PATTERNS):
        return True
    return lower.endswith(RUSSIAN_ENDINGS)


@lru_cache(maxsize=1024)
def transliterate(text: str) -> str:
    """Greedy longest-match conversion of Latin text to Cyrillic."""
    source = (text or "").lower()
    converted: List[str] = []
    position = 0
    while position < len(source):
        for latin, cyrillic in _LATIN_TO_CYRILLIC:
            if source.startswith(latin, position):
                converted.append(cyrillic)
                position += len(latin)
                break
        else:
            converted.append(source[position])
            position += 1
    return "".join(converted)


def to_cyrillic_variants(text: str) -> List[str]:
    """Cyrillic candidates for ``text``, canonical variant first.

    Several Latin letters are ambiguous (``e`` is е or э, ``y`` is ы, и
    or й, ``c`` is к or ц), so substituted spellings are transliterated as
    well. The result is de-duplicated and never contains empty strings.
    """
    lower = (text or "").strip().lower()
    if not lower:
        return []

    variants: List[str] = []

    def add_variant(source: str) -> None:
        value = transliterate(source)
        if value and value not in variants:
            variants.append(value)

    add_variant(lower)

    if "e" in lower:
        add_variant(lower.replace("e", "э"))

    if "e" in lower or "ё" in lower or "yo" in lower:
        add_variant(lower.replace("ё", "yo").replace("e", "yo"))

    if "y" in lower and not any(part in lower for part in ("ya", "yu", "ye")):
        add_variant(lower.replace("y", "i"))
        add_variant(lower.replace("y", "j"))

    if "c" in lower and "ch" not in lower and "sch" not in lower:
        add_variant(lower.replace("c", "k"))
        add_variant(lower.replace("c", "ts"))

    return variants
