from __future__ import annotations

import logging
import re
from typing import List

from enru.entries import Article, ArticleRow, Entry, Table, strip_tags
from enru.store import DictionaryStore
from enru.utils.script import strip_stress_marks

LOGGER = logging.getLogger(__name__)

PARAGRAPH_RE = re.compile(r"<P>(.*?)</P>", re.IGNORECASE | re.DOTALL)

# How far into a paragraph the Russian word may start and still count as
# the sense headed by that word.
SENSE_LEAD_WINDOW = 40

SENSE_SEPARATOR = " — "


def split_candidates(gloss: str) -> List[str]:
    words: List[str] = []
    for part in strip_tags(gloss).split(","):
        part = part.strip()
        if part and part not in words:
            words.append(part)
    return words


def find_relevant_senses(ru_word: str, article_text: str) -> List[str]:
    """Paragraph bodies of an English article that translate ``ru_word``."""
    word = strip_stress_marks(ru_word or "").strip()
    if not word or not article_text:
        return []
    pattern = re.compile(rf"(?<!\w){re.escape(word)}(?!\w)", re.IGNORECASE)

    senses: List[str] = []
    for match in PARAGRAPH_RE.finditer(article_text):
        content = match.group(1)
        plain = strip_stress_marks(strip_tags(content)).lstrip()
        found = pattern.search(plain)
        if found and found.start() <= SENSE_LEAD_WINDOW:
            senses.append(content.strip())
    return senses


def build_list_items(ru_word: str, articles: List[ArticleRow]) -> str:
    items: List[str] = []
    for article in articles:
        senses = find_relevant_senses(ru_word, article.translation)
        if not senses:
            items.append(f"<LI>{article.display_form}</LI>")
            continue
        for sense in senses:
            items.append(f"<LI>{article.display_form}{SENSE_SEPARATOR}{sense}</LI>")
    return "".join(items)


class ArticleResolver:
    """Fetches the full article behind a result-list entry.

    English entries map onto one ``enRu`` row. Russian entries have no
    article of their own: their preview lists English headwords, and the
    article is assembled from the senses of those English articles that
    mention the Russian word. Only the first 100 characters of the Russian
    gloss are available here, so long candidate lists are cut short.
    """

    def __init__(self, store: DictionaryStore):
        self.store = store

    def resolve(self, entry: Entry) -> Article:
        if entry.source_table is Table.RU_EN:
            return self._resolve_russian(entry)
        return self._resolve_english(entry)

    def _resolve_english(self, entry: Entry) -> Article:
        row = self.store.fetch_article(Table.EN_RU, entry.word)
        if row is None:
            return Article(raw_text="")
        return Article(raw_text=row.translation, transcription=row.transcription or "")

    def _resolve_russian(self, entry: Entry) -> Article:
        candidates = split_candidates(entry.raw_gloss)
        if not candidates:
            return Article(raw_text="")

        articles = self.store.fetch_articles_for_words(Table.EN_RU, candidates)
        LOGGER.debug(
            "%r fans out to %d of %d English candidates",
            entry.word,
            len(articles),
            len(candidates),
        )
        return Article(raw_text=build_list_items(entry.word, articles))
