from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field

from enru.entries import Entry
from enru.services.formatter import RenderedArticle


class EntryItem(BaseModel):
    word: str
    display_form: str
    short_gloss: str
    table: str
    stars: int = Field(ge=0, le=3)
    rare: bool
    expanded: bool = False
    speech_text: str
    speech_language: str

    @classmethod
    def from_entry(cls, entry: Entry, *, expanded: bool = False) -> "EntryItem":
        speech = entry.speech()
        return cls(
            word=entry.word,
            display_form=entry.display_form,
            short_gloss=entry.short_gloss,
            table=entry.source_table.value,
            stars=entry.stars,
            rare=entry.is_rare,
            expanded=expanded,
            speech_text=speech.text,
            speech_language=speech.language,
        )


class SearchResponse(BaseModel):
    query: str
    count: int
    items: List[EntryItem]


class ArticleResponse(BaseModel):
    word: str
    table: str
    transcription: Optional[str] = None
    html: str
    text: str
    links: List[str]

    @classmethod
    def from_rendered(cls, word: str, table: str, rendered: RenderedArticle) -> "ArticleResponse":
        return cls(
            word=word,
            table=table,
            transcription=rendered.transcription or None,
            html=rendered.html,
            text=rendered.document.plain_text,
            links=rendered.document.links,
        )


class CommitRequest(BaseModel):
    term: str = Field(min_length=1)


class RecentsResponse(BaseModel):
    items: List[str]


class LinkResponse(BaseModel):
    word: str
