from pathlib import Path

import pytest
from sqlalchemy.orm import Session

from enru.database import create_dictionary_engine, init_db
from enru.models import EnRuEntry, RuEnEntry
from enru.store import open_store


EN_ROWS = [
    {"word": "tree", "translation": "<P>дерево</P>", "transcription": "triː", "popularity": 120},
    {"word": "treat", "translation": "<P>обращаться, обходиться</P><P>угощать</P>", "popularity": 50},
    {
        "word": "peace",
        "translation": "<P>мир, покой</P><P><E>make peace — помириться</E></P>",
        "popularity": 40,
    },
    {"word": "world", "translation": "<P>мир, свет</P><P>вселенная</P>", "popularity": 300},
    {"word": "house", "translation": "<P>дом</P>", "popularity": 5},
    {"word": "hello", "translation": "<P>привет</P>", "popularity": 150},
    {"word": "hi", "translation": "<P>привет</P>", "popularity": 90},
    {"word": "pike", "translation": "<P>щука</P>", "popularity": 3},
    {"word": "cheese", "translation": "<P>сыр</P>", "popularity": 8},
    {"word": "aardvark", "translation": "<P>трубкозуб</P>", "popularity": 0.5},
]

RU_ROWS = [
    {"word": "мир", "translation": "world,peace", "stress": "ми́р", "popularity": 200},
    {"word": "привет", "translation": "hello,hi", "popularity": 80},
    {"word": "дерево", "translation": "tree", "popularity": 60},
    {"word": "дом", "translation": "house", "popularity": 100},
    {"word": "щука", "translation": "pike", "popularity": 2},
]


def build_dictionary(path: Path, en_rows=(), ru_rows=()) -> Path:
    engine = create_dictionary_engine(path, read_only=False)
    init_db(engine)
    with Session(engine) as session:
        session.add_all(EnRuEntry(**row) for row in en_rows)
        session.add_all(RuEnEntry(**row) for row in ru_rows)
        session.commit()
    engine.dispose()
    return path


@pytest.fixture
def make_store(tmp_path):
    stores = []

    def _make(en_rows=(), ru_rows=(), directory=""):
        folder = tmp_path / directory
        folder.mkdir(parents=True, exist_ok=True)
        path = build_dictionary(folder / f"dict{len(stores)}.sqlite3", en_rows, ru_rows)
        store = open_store(path)
        stores.append(store)
        return store

    yield _make
    for store in stores:
        store.close()


@pytest.fixture
def store(make_store):
    return make_store(EN_ROWS, RU_ROWS)


@pytest.fixture
def dictionary_file(tmp_path):
    return build_dictionary(tmp_path / "cli.sqlite3", EN_ROWS, RU_ROWS)
