from __future__ import annotations

import logging
from typing import List, Optional

from enru.config import DEFAULT_RESULT_LIMIT
from enru.entries import Entry, Table
from enru.store import DictionaryStore
from enru.utils.script import contains_cyrillic, strip_stress_marks
from enru.utils.transliteration import looks_like_transliteration, to_cyrillic_variants

LOGGER = logging.getLogger(__name__)

SHORT_TERM_LENGTH = 2


def normalize_query(text: Optional[str]) -> str:
    return (text or "").strip().lower()


class FuzzySearch:
    """Prefix search that relaxes the term when nothing matches.

    Dropping one and then two trailing characters absorbs typos at the end
    of a word and Russian inflections that headwords do not carry.
    """

    def __init__(self, store: DictionaryStore, limit: int = DEFAULT_RESULT_LIMIT):
        self.store = store
        self.limit = limit

    def search(self, table: Table, term: str) -> List[Entry]:
        clean = normalize_query(term)

        if len(clean) <= SHORT_TERM_LENGTH:
            LOGGER.debug("term %r too short, exact prefix only", clean)
            return self._query(table, clean)

        results = self._query(table, clean)
        if results:
            return results

        LOGGER.debug("no match for %r in %s, dropping 1 character", clean, table.value)
        results = self._query(table, clean[:-1])
        if results:
            return results

        LOGGER.debug("no match for %r in %s, dropping 2 characters", clean, table.value)
        return self._query(table, clean[:-2])

    def _query(self, table: Table, prefix: str) -> List[Entry]:
        rows = self.store.prefix_search(table, prefix, self.limit)
        return [Entry.from_row(row, table) for row in rows]


class SearchService:
    def __init__(self, store: DictionaryStore, limit: int = DEFAULT_RESULT_LIMIT):
        self.store = store
        self.fuzzy = FuzzySearch(store, limit=limit)
        self.limit = limit

    def lookup(self, query: str) -> List[Entry]:
        """Entries for ``query`` from exactly one of the two tables."""
        prepared = (query or "").strip()
        if not prepared:
            return []

        if contains_cyrillic(prepared):
            return self.fuzzy.search(Table.RU_EN, prepared)

        if looks_like_transliteration(prepared):
            for variant in to_cyrillic_variants(prepared):
                results = self.fuzzy.search(Table.RU_EN, variant)
                if results:
                    LOGGER.info("query %r matched as transliteration %r", prepared, variant)
                    return results

        return self.fuzzy.search(Table.EN_RU, prepared)

    def popular(self, table: Table = Table.EN_RU, limit: Optional[int] = None) -> List[Entry]:
        rows = self.store.prefix_search(table, "", limit or self.limit)
        return [Entry.from_row(row, table) for row in rows]


def should_auto_expand(entry: Entry, query: str, result_count: int) -> bool:
    if result_count == 1:
        return True
    clean = normalize_query(query)
    if not clean:
        return False
    return strip_stress_marks(entry.word).lower() == clean
