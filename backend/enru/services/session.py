from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from enru.config import DEFAULT_RESULT_LIMIT, RECENTS_LIMIT
from enru.entries import Entry, Table
from enru.persistence import LAST_QUERY_KEY, RECENTS_KEY, MemoryStateStore, StateStore
from enru.services.articles import ArticleResolver
from enru.services.formatter import RenderedArticle, link_target_to_word, render_article
from enru.services.search import SearchService, should_auto_expand
from enru.store import DictionaryStore

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionState:
    query_text: str = ""
    results: Tuple[Entry, ...] = ()
    history: Tuple[str, ...] = ()
    recents: Tuple[str, ...] = ()
    expanded: Mapping[str, RenderedArticle] = field(default_factory=dict)

    def is_expanded(self, word: str) -> bool:
        return word in self.expanded

    def entry(self, word: str) -> Optional[Entry]:
        for entry in self.results:
            if entry.word == word:
                return entry
        return None


def push_history(history: Sequence[str], query: str) -> Tuple[str, ...]:
    query = (query or "").strip()
    if not query or (history and history[-1] == query):
        return tuple(history)
    return (*history, query)


def push_recent(
    recents: Sequence[str],
    term: str,
    limit: int = RECENTS_LIMIT,
) -> Tuple[str, ...]:
    term = (term or "").strip()
    if not term:
        return tuple(recents)
    rest = [item for item in recents if item != term]
    return tuple([term, *rest][:limit])


def expand(state: SessionState, entry: Entry, resolver: ArticleResolver) -> SessionState:
    if entry.word in state.expanded:
        return state
    rendered = render_article(resolver.resolve(entry))
    expanded: Dict[str, RenderedArticle] = dict(state.expanded)
    expanded[entry.word] = rendered
    return replace(state, expanded=expanded)


def collapse(state: SessionState, word: str) -> SessionState:
    if word not in state.expanded:
        return state
    expanded = {key: value for key, value in state.expanded.items() if key != word}
    return replace(state, expanded=expanded)


def show_results(
    state: SessionState,
    query: str,
    results: Iterable[Entry],
    resolver: ArticleResolver,
) -> SessionState:
    """Replace the result list and open the rows that expand on their own."""
    results = tuple(results)
    state = replace(state, query_text=query, results=results, expanded={})
    for entry in results:
        if should_auto_expand(entry, query, len(results)):
            state = expand(state, entry, resolver)
    return state


def on_query_changed(
    state: SessionState,
    text: str,
    search: SearchService,
    resolver: ArticleResolver,
    *,
    record_history: bool = True,
) -> SessionState:
    if not (text or "").strip():
        return replace(state, query_text=text or "", results=(), expanded={})

    results = search.lookup(text)
    LOGGER.info("query %r: %d results", text, len(results))
    state = show_results(state, text, results, resolver)
    if record_history:
        state = replace(state, history=push_history(state.history, text))
    return state


class SearchSession:
    """One user's search screen: query, results, history and recents.

    Every call runs to completion before returning the new state, so the
    last query always wins.
    """

    def __init__(
        self,
        store: DictionaryStore,
        persistence: Optional[StateStore] = None,
        limit: int = DEFAULT_RESULT_LIMIT,
    ):
        self.search = SearchService(store, limit=limit)
        self.resolver = ArticleResolver(store)
        self.persistence = persistence if persistence is not None else MemoryStateStore()
        self.state = SessionState(recents=tuple(self.persistence.get_list(RECENTS_KEY)))

    @property
    def results(self) -> Tuple[Entry, ...]:
        return self.state.results

    @property
    def recents(self) -> Tuple[str, ...]:
        return self.state.recents

    @property
    def history(self) -> Tuple[str, ...]:
        return self.state.history

    def resolve(self, query: str) -> List[Entry]:
        return self.search.lookup(query)

    def on_query_changed(self, text: str) -> SessionState:
        self.state = on_query_changed(self.state, text, self.search, self.resolver)
        if (text or "").strip():
            self.persistence.set(LAST_QUERY_KEY, text)
        else:
            self.persistence.remove(LAST_QUERY_KEY)
        return self.state

    def go_back(self) -> SessionState:
        history = self.state.history
        if len(history) <= 1:
            return self.state
        previous = history[-2]
        self.state = replace(self.state, history=history[:-1])
        self.state = on_query_changed(
            self.state,
            previous,
            self.search,
            self.resolver,
            record_history=False,
        )
        self.persistence.set(LAST_QUERY_KEY, previous)
        return self.state

    def commit(self, term: Optional[str] = None) -> Tuple[str, ...]:
        value = self.state.query_text if term is None else term
        recents = push_recent(self.state.recents, value)
        if recents != self.state.recents:
            self.state = replace(self.state, recents=recents)
            self.persistence.set_list(RECENTS_KEY, list(recents))
        return self.state.recents

    def follow_link(self, href: str) -> SessionState:
        word = link_target_to_word(href)
        if not word:
            return self.state
        self.on_query_changed(word)
        self.commit(word)
        return self.state

    def restore(self) -> SessionState:
        last = self.persistence.get(LAST_QUERY_KEY)
        if last and last.strip():
            return self.on_query_changed(last)
        popular = self.search.popular(Table.EN_RU)
        self.state = show_results(self.state, "", popular, self.resolver)
        return self.state

    def expand(self, word: str) -> SessionState:
        entry = self.state.entry(word)
        if entry is None:
            return self.state
        self.state = expand(self.state, entry, self.resolver)
        return self.state

    def collapse(self, word: str) -> SessionState:
        self.state = collapse(self.state, word)
        return self.state

    def toggle(self, word: str) -> SessionState:
        if self.state.is_expanded(word):
            return self.collapse(word)
        return self.expand(word)

    def document_for(self, word: str) -> Optional[RenderedArticle]:
        return self.state.expanded.get(word)
