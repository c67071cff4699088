import logging
from contextlib import asynccontextmanager
from typing import Annotated, Optional

from fastapi import Depends, FastAPI, HTTPException, Query, Request

from enru import config
from enru.entries import Entry, Table
from enru.persistence import RECENTS_KEY, JsonStateStore
from enru.schemas import (
    ArticleResponse,
    CommitRequest,
    EntryItem,
    LinkResponse,
    RecentsResponse,
    SearchResponse,
)
from enru.services.articles import ArticleResolver
from enru.services.formatter import link_target_to_word, render_article
from enru.services.search import SearchService, should_auto_expand
from enru.services.session import push_recent
from enru.store import DictionaryStore, open_store


@asynccontextmanager
async def lifespan(app: FastAPI):
    logging.basicConfig(level=config.log_level())
    # A missing dictionary is fatal: open_store raises and startup aborts.
    if getattr(app.state, "store", None) is None:
        app.state.store = open_store(config.database_path())
    if getattr(app.state, "persistence", None) is None:
        app.state.persistence = JsonStateStore(config.state_path())
    try:
        yield
    finally:
        app.state.store.close()


def create_app(
    store: Optional[DictionaryStore] = None,
    persistence=None,
) -> FastAPI:
    app = FastAPI(
        title="EnRu Dictionary API",
        description="Англо-русский словарь: поиск и статьи",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.store = store
    app.state.persistence = persistence
    _register_routes(app)
    return app


def get_store(request: Request) -> DictionaryStore:
    return request.app.state.store


StoreDep = Annotated[DictionaryStore, Depends(get_store)]


def _ensure_table(table: str) -> Table:
    try:
        return Table(table)
    except ValueError:
        raise HTTPException(status_code=404, detail="Unsupported dictionary") from None


def _search_response(query: str, results) -> SearchResponse:
    items = [
        EntryItem.from_entry(entry, expanded=should_auto_expand(entry, query, len(results)))
        for entry in results
    ]
    return SearchResponse(query=query, count=len(items), items=items)


def _register_routes(app: FastAPI) -> None:
    @app.get("/search", response_model=SearchResponse)
    def search(query: Annotated[str, Query(min_length=1)], store: StoreDep):
        service = SearchService(store, limit=config.result_limit())
        return _search_response(query, service.lookup(query))

    @app.get("/popular", response_model=SearchResponse)
    def popular(
        store: StoreDep,
        table: str = Table.EN_RU.value,
        limit: Annotated[int, Query(ge=1, le=500)] = 100,
    ):
        service = SearchService(store, limit=config.result_limit())
        return _search_response("", service.popular(_ensure_table(table), limit))

    @app.get("/article", response_model=ArticleResponse)
    def article(
        table: str,
        word: Annotated[str, Query(min_length=1)],
        store: StoreDep,
        gloss: str = "",
    ):
        dictionary = _ensure_table(table)
        if dictionary is Table.RU_EN and not gloss:
            rows = store.prefix_search(dictionary, word, config.result_limit())
            gloss = next((row.gloss for row in rows if row.word == word), "")
        entry = Entry(word=word, raw_gloss=gloss, source_table=dictionary)
        rendered = render_article(ArticleResolver(store).resolve(entry))
        return ArticleResponse.from_rendered(word, dictionary.value, rendered)

    @app.get("/recents", response_model=RecentsResponse)
    def recents(request: Request):
        return RecentsResponse(items=request.app.state.persistence.get_list(RECENTS_KEY))

    @app.post("/recents", response_model=RecentsResponse)
    def commit(payload: CommitRequest, request: Request):
        persistence = request.app.state.persistence
        items = list(push_recent(persistence.get_list(RECENTS_KEY), payload.term))
        persistence.set_list(RECENTS_KEY, items)
        return RecentsResponse(items=items)

    @app.get("/link", response_model=LinkResponse)
    def link(href: Annotated[str, Query(min_length=1)]):
        return LinkResponse(word=link_target_to_word(href))


app = create_app()
