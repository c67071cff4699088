from enru.entries import Entry, StoreRow, Table
from enru.services.search import FuzzySearch, SearchService, should_auto_expand


class RecordingStore:
    """Prefix search over an in-memory word list, remembering every call."""

    def __init__(self, words):
        self.words = list(words)
        self.calls = []

    def prefix_search(self, table, prefix, limit=100):
        self.calls.append((table, prefix))
        matches = sorted(word for word in self.words if word.lower().startswith(prefix.lower()))
        return [StoreRow(word=word, gloss=f"<P>{word}</P>") for word in matches[:limit]]


def test_fuzzy_drops_one_character():
    store = RecordingStore(["tree"])
    results = FuzzySearch(store).search(Table.EN_RU, "trees")
    assert [entry.word for entry in results] == ["tree"]
    assert [prefix for _, prefix in store.calls] == ["trees", "tree"]


def test_fuzzy_drops_two_characters_at_most():
    store = RecordingStore(["tree"])
    results = FuzzySearch(store).search(Table.EN_RU, "trxxxx")
    assert results == []
    assert [prefix for _, prefix in store.calls] == ["trxxxx", "trxxx", "trxx"]


def test_fuzzy_second_drop_finds_match():
    store = RecordingStore(["tree"])
    results = FuzzySearch(store).search(Table.EN_RU, "treezz")
    assert [entry.word for entry in results] == ["tree"]
    assert [prefix for _, prefix in store.calls] == ["treezz", "treez", "tree"]


def test_fuzzy_short_term_is_not_relaxed():
    store = RecordingStore(["tree", "trap"])
    results = FuzzySearch(store).search(Table.EN_RU, "tr")
    assert [entry.word for entry in results] == ["trap", "tree"]
    assert store.calls == [(Table.EN_RU, "tr")]

    store = RecordingStore(["tree"])
    assert FuzzySearch(store).search(Table.EN_RU, "tx") == []
    assert store.calls == [(Table.EN_RU, "tx")]


def test_fuzzy_normalizes_term():
    store = RecordingStore(["tree"])
    FuzzySearch(store).search(Table.EN_RU, "  TREE \n")
    assert store.calls == [(Table.EN_RU, "tree")]


def test_fuzzy_entries_carry_source_table():
    store = RecordingStore(["дом"])
    results = FuzzySearch(store).search(Table.RU_EN, "дом")
    assert results[0].source_table is Table.RU_EN
    assert results[0].is_russian


def test_cyrillic_query_searches_russian_table(store):
    results = SearchService(store).lookup("мира")
    assert [entry.word for entry in results] == ["мир"]
    assert results[0].display_form == "ми́р"


def test_english_query_searches_english_table(store):
    results = SearchService(store).lookup("trees")
    assert [entry.word for entry in results] == ["tree"]
    assert results[0].source_table is Table.EN_RU


def test_transliterated_query_searches_russian_table(store):
    results = SearchService(store).lookup("shchuka")
    assert [entry.word for entry in results] == ["щука"]


def test_transliteration_relaxes_russian_endings(store):
    results = SearchService(store).lookup("domov")
    assert [entry.word for entry in results] == ["дом"]


def test_transliteration_falls_through_to_english(store):
    results = SearchService(store).lookup("cheese")
    assert [entry.word for entry in results] == ["cheese"]
    assert results[0].source_table is Table.EN_RU


def test_blank_query_has_no_results(store):
    assert SearchService(store).lookup("   ") == []


def test_lookup_is_idempotent(store):
    service = SearchService(store)
    assert service.lookup("tre") == service.lookup("tre")


def test_popular_lists_most_frequent_first(store):
    results = SearchService(store).popular(Table.EN_RU, limit=2)
    assert [entry.word for entry in results] == ["world", "hello"]


def test_auto_expand_rules():
    entry = Entry(word="tree", raw_gloss="дерево", source_table=Table.EN_RU)
    other = Entry(word="treat", raw_gloss="угощать", source_table=Table.EN_RU)
    assert should_auto_expand(entry, "Tree ", 2)
    assert not should_auto_expand(other, "tree", 2)
    assert should_auto_expand(other, "tre", 1)
    assert not should_auto_expand(other, "", 5)
