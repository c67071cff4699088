import pytest
from sqlalchemy import text

from enru.database import DictionaryUnavailableError, create_dictionary_engine
from enru.entries import Table
from enru.store import open_store


def _words(rows):
    return [row.word for row in rows]


def test_prefix_search_is_case_insensitive_and_alphabetical(store):
    rows = store.prefix_search(Table.EN_RU, "TRE")
    assert _words(rows) == ["treat", "tree"]


def test_prefix_search_cyrillic_case_insensitive(store):
    rows = store.prefix_search(Table.RU_EN, "МИ")
    assert _words(rows) == ["мир"]
    assert rows[0].stress == "ми́р"
    assert rows[0].popularity == 200


def test_prefix_search_escapes_wildcards(store):
    assert store.prefix_search(Table.EN_RU, "tr%") == []
    assert store.prefix_search(Table.EN_RU, "t_ee") == []


def test_prefix_search_respects_limit(store):
    rows = store.prefix_search(Table.EN_RU, "", limit=3)
    assert len(rows) == 3


def test_empty_prefix_orders_by_popularity(store):
    rows = store.prefix_search(Table.EN_RU, "")
    assert _words(rows)[:4] == ["world", "hello", "tree", "hi"]
    assert rows[-1].word == "aardvark"


def test_empty_prefix_breaks_ties_by_length_then_alphabet(make_store):
    store = make_store(
        en_rows=[
            {"word": "bravo", "translation": "браво", "popularity": 7},
            {"word": "Alpha", "translation": "альфа", "popularity": 7},
            {"word": "cat", "translation": "кот", "popularity": 7},
            {"word": "zebra", "translation": "зебра", "popularity": 9},
            {"word": "none", "translation": "ничто"},
        ]
    )
    rows = store.prefix_search(Table.EN_RU, "")
    assert _words(rows) == ["zebra", "cat", "Alpha", "bravo", "none"]


def test_gloss_is_truncated(make_store):
    long_text = "<P>" + "слово, " * 40 + "</P>"
    store = make_store(en_rows=[{"word": "word", "translation": long_text}])
    rows = store.prefix_search(Table.EN_RU, "word")
    assert len(rows[0].gloss) == 100
    assert rows[0].gloss.startswith("<P>слово, ")


def test_fetch_article_returns_transcription_for_english(store):
    row = store.fetch_article(Table.EN_RU, "tree")
    assert row.translation == "<P>дерево</P>"
    assert row.transcription == "triː"


def test_fetch_article_has_no_transcription_for_russian(store):
    row = store.fetch_article(Table.RU_EN, "мир")
    assert row.translation == "world,peace"
    assert row.transcription is None
    assert row.display_form == "ми́р"


def test_fetch_article_missing_word(store):
    assert store.fetch_article(Table.EN_RU, "nonexistent") is None


def test_fetch_articles_keeps_input_order(store):
    rows = store.fetch_articles_for_words(Table.EN_RU, ["world", "peace"])
    assert _words(rows) == ["world", "peace"]

    rows = store.fetch_articles_for_words(Table.EN_RU, [" peace", "missing", "world ", "peace"])
    assert _words(rows) == ["peace", "world"]


def test_fetch_articles_for_no_words(store):
    assert store.fetch_articles_for_words(Table.EN_RU, ["", "  "]) == []


def test_open_store_missing_file(tmp_path):
    with pytest.raises(DictionaryUnavailableError):
        open_store(tmp_path / "missing.sqlite3")


def test_open_store_without_tables(tmp_path):
    path = tmp_path / "empty.sqlite3"
    path.write_bytes(b"")
    with pytest.raises(DictionaryUnavailableError):
        open_store(path)


def test_storage_errors_become_empty_results(tmp_path):
    path = tmp_path / "broken.sqlite3"
    engine = create_dictionary_engine(path, read_only=False)
    with engine.begin() as connection:
        connection.execute(text('CREATE TABLE "enRu" (word TEXT)'))
        connection.execute(text('CREATE TABLE "ruEn" (word TEXT)'))
    engine.dispose()

    with open_store(path) as store:
        assert store.prefix_search(Table.EN_RU, "tree") == []
        assert store.fetch_article(Table.EN_RU, "tree") is None
        assert store.fetch_articles_for_words(Table.EN_RU, ["tree"]) == []


@pytest.mark.parametrize("directory", ["my#dir", "what?dir", "100%dir"])
def test_open_store_in_directory_with_uri_characters(make_store, directory):
    store = make_store(
        en_rows=[{"word": "tree", "translation": "<P>дерево</P>"}],
        directory=directory,
    )
    assert _words(store.prefix_search(Table.EN_RU, "tr")) == ["tree"]
