import logging
from pathlib import Path
from typing import Union
from urllib.parse import quote

from sqlalchemy import create_engine, event, inspect
from sqlalchemy.engine import URL, Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import declarative_base


Base = declarative_base()

LOGGER = logging.getLogger(__name__)

REQUIRED_TABLES = ("enRu", "ruEn")


class DictionaryUnavailableError(RuntimeError):
    """The bundled dictionary file is missing or cannot be opened."""


def _read_only_url(path: Path) -> URL:
    # the database part goes to sqlite verbatim as a file: URI
    return URL.create(
        "sqlite",
        database=f"file:{quote(path.as_posix())}",
        query={"mode": "ro", "uri": "true"},
    )


def create_dictionary_engine(path: Union[str, Path], *, read_only: bool = True) -> Engine:
    path = Path(path)
    url = _read_only_url(path) if read_only else URL.create("sqlite", database=path.as_posix())
    engine = create_engine(
        url,
        echo=False,
        future=True,
        connect_args={"check_same_thread": False},
    )

    @event.listens_for(engine, "connect")
    def _register_functions(dbapi_connection, _record) -> None:
        # sqlite's lower() only folds ASCII
        dbapi_connection.create_function("lower", 1, _unicode_lower, deterministic=True)

    return engine


def _unicode_lower(value):
    if value is None:
        return None
    return str(value).lower()


def open_dictionary(path: Union[str, Path]) -> Engine:
    path = Path(path)
    if not path.is_file():
        raise DictionaryUnavailableError(f"Dictionary file {path} not found.")

    engine = create_dictionary_engine(path)
    try:
        tables = set(inspect(engine).get_table_names())
    except SQLAlchemyError as exc:
        engine.dispose()
        raise DictionaryUnavailableError(f"Cannot open dictionary {path}: {exc}") from exc

    missing = [name for name in REQUIRED_TABLES if name not in tables]
    if missing:
        engine.dispose()
        raise DictionaryUnavailableError(
            f"Dictionary {path} lacks tables: {', '.join(missing)}"
        )

    LOGGER.info("Dictionary opened at %s", path)
    return engine


def init_db(engine: Engine) -> None:
    # Import models for side-effects so SQLAlchemy registers them with the metadata
    from enru import models  # noqa: F401

    Base.metadata.create_all(bind=engine)
