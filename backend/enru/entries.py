from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from enru.config import GLOSS_PREVIEW_LENGTH
from enru.utils.script import strip_stress_marks

TAG_RE = re.compile(r"<[^>]+>")
MULTI_SPACE_RE = re.compile(r" {2,}")


class Table(str, Enum):
    EN_RU = "enRu"
    RU_EN = "ruEn"

    @property
    def is_russian(self) -> bool:
        return self is Table.RU_EN


@dataclass(frozen=True, slots=True)
class StoreRow:
    word: str
    gloss: str
    stress: Optional[str] = None
    popularity: Optional[float] = None


@dataclass(frozen=True, slots=True)
class ArticleRow:
    word: str
    translation: str
    transcription: Optional[str] = None
    stress: Optional[str] = None

    @property
    def display_form(self) -> str:
        return self.stress or self.word


@dataclass(frozen=True, slots=True)
class SpeechRequest:
    text: str
    is_russian: bool

    @property
    def language(self) -> str:
        return "ru-RU" if self.is_russian else "en-US"


def strip_tags(text: str) -> str:
    return TAG_RE.sub("", text or "")


def format_gloss(raw_gloss: str) -> str:
    """Preview text shown next to a headword in the result list."""
    text = strip_tags(raw_gloss)
    text = text.replace(",", ", ")
    text = MULTI_SPACE_RE.sub(" ", text)
    return text.strip()


def popularity_stars(popularity: Optional[float]) -> int:
    """0-3 stars from a frequency per million words; 0 means rare."""
    if popularity is None or popularity <= 0:
        return 0
    if popularity >= 100:
        return 3
    if popularity >= 10:
        return 2
    if popularity >= 1:
        return 1
    return 0


@dataclass(frozen=True, slots=True)
class Entry:
    word: str
    raw_gloss: str
    source_table: Table
    stress: Optional[str] = None
    popularity: Optional[float] = None

    def __post_init__(self) -> None:
        if not self.word:
            raise ValueError("Entry word must not be empty")

    @classmethod
    def from_row(cls, row: StoreRow, table: Table) -> "Entry":
        return cls(
            word=row.word,
            raw_gloss=row.gloss[:GLOSS_PREVIEW_LENGTH],
            source_table=table,
            stress=row.stress or None,
            popularity=row.popularity,
        )

    @property
    def display_form(self) -> str:
        return self.stress or self.word

    @property
    def short_gloss(self) -> str:
        return format_gloss(self.raw_gloss)

    @property
    def is_russian(self) -> bool:
        return self.source_table.is_russian

    @property
    def stars(self) -> int:
        return popularity_stars(self.popularity)

    @property
    def is_rare(self) -> bool:
        return self.stars == 0

    def speech(self) -> SpeechRequest:
        return SpeechRequest(text=strip_stress_marks(self.word), is_russian=self.is_russian)


@dataclass(frozen=True, slots=True)
class Article:
    raw_text: str
    transcription: str = ""
