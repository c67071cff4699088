from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional, Sequence, Union

from sqlalchemy import case, func, select
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from enru.config import DEFAULT_RESULT_LIMIT, GLOSS_PREVIEW_LENGTH
from enru.database import open_dictionary
from enru.entries import ArticleRow, StoreRow, Table
from enru.models import EnRuEntry, RuEnEntry

LOGGER = logging.getLogger(__name__)

_MODELS = {
    Table.EN_RU: EnRuEntry,
    Table.RU_EN: RuEnEntry,
}


def _escape_like(value: str) -> str:
    return (
        value.replace("\\", "\\\\")
        .replace("%", "\\%")
        .replace("_", "\\_")
    )


class DictionaryStore:
    """Read-only access to the two headword tables.

    Storage errors never escape: they are logged and reported as an empty
    result, which callers treat the same as "no match".
    """

    def __init__(self, engine: Engine):
        self._engine = engine
        self._session_factory = sessionmaker(
            bind=engine,
            autoflush=False,
            autocommit=False,
            future=True,
        )

    def __enter__(self) -> "DictionaryStore":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:
        self._engine.dispose()

    def prefix_search(
        self,
        table: Table,
        prefix: str,
        limit: int = DEFAULT_RESULT_LIMIT,
    ) -> List[StoreRow]:
        model = _MODELS[Table(table)]
        prefix = prefix or ""
        gloss = func.substr(model.translation, 1, GLOSS_PREVIEW_LENGTH)
        stmt = select(model.word, gloss, model.stress, model.popularity)

        if prefix:
            pattern = f"{_escape_like(prefix.lower())}%"
            stmt = stmt.where(
                func.lower(model.word).like(pattern, escape="\\")
            ).order_by(func.lower(model.word).asc())
        else:
            stmt = stmt.order_by(
                model.popularity.desc(),
                func.length(model.word).asc(),
                func.lower(model.word).asc(),
            )
        stmt = stmt.limit(limit)

        try:
            with self._session_factory() as session:
                rows = session.execute(stmt).all()
        except SQLAlchemyError as exc:
            LOGGER.warning("prefix search for %r in %s failed: %s", prefix, table, exc)
            return []

        result = [
            StoreRow(word=word, gloss=text or "", stress=stress, popularity=popularity)
            for word, text, stress, popularity in rows
            if word
        ]
        LOGGER.debug("prefix search %r in %s returned %d rows", prefix, table, len(result))
        return result

    def fetch_article(self, table: Table, word: str) -> Optional[ArticleRow]:
        table = Table(table)
        model = _MODELS[table]
        transcription = model.transcription if table is Table.EN_RU else None
        columns = [model.word, model.translation, model.stress]
        if transcription is not None:
            columns.append(transcription)
        stmt = select(*columns).where(model.word == word).limit(1)

        try:
            with self._session_factory() as session:
                row = session.execute(stmt).first()
        except SQLAlchemyError as exc:
            LOGGER.warning("article fetch for %r in %s failed: %s", word, table, exc)
            return None

        if row is None:
            LOGGER.debug("no article for %r in %s", word, table)
            return None
        return ArticleRow(
            word=row[0],
            translation=row[1] or "",
            stress=row[2],
            transcription=row[3] if transcription is not None else None,
        )

    def fetch_articles_for_words(
        self,
        table: Table,
        words: Sequence[str],
    ) -> List[ArticleRow]:
        """Articles for ``words`` in the order the words were given."""
        model = _MODELS[Table(table)]
        ordered: List[str] = []
        for word in words:
            word = (word or "").strip()
            if word and word not in ordered:
                ordered.append(word)
        if not ordered:
            return []

        priority_case = case(
            {word: idx for idx, word in enumerate(ordered)},
            value=model.word,
            else_=len(ordered),
        )
        stmt = (
            select(model.word, model.translation, model.stress)
            .where(model.word.in_(ordered))
            .order_by(priority_case.asc(), model.id.asc())
        )

        try:
            with self._session_factory() as session:
                rows = session.execute(stmt).all()
        except SQLAlchemyError as exc:
            LOGGER.warning("article fetch for %d words in %s failed: %s", len(ordered), table, exc)
            return []

        seen = set()
        result: List[ArticleRow] = []
        for word, translation, stress in rows:
            if word in seen:
                continue
            seen.add(word)
            result.append(ArticleRow(word=word, translation=translation or "", stress=stress))
        return result


def open_store(path: Union[str, Path]) -> DictionaryStore:
    """Open the bundled dictionary; raises ``DictionaryUnavailableError``."""
    return DictionaryStore(open_dictionary(path))
