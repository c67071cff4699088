from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from enru import config
from enru.database import DictionaryUnavailableError
from enru.persistence import JsonStateStore, MemoryStateStore
from enru.services.session import SearchSession
from enru.store import open_store


def _stars(count: int) -> str:
    return "★" * count if count else "rare"


def main() -> int:
    parser = argparse.ArgumentParser(
        description="Look up a word in the English-Russian dictionary.",
    )
    parser.add_argument("query", nargs="?", default="", help="Word to look up (English, Russian or transliterated)")
    parser.add_argument("--db", type=Path, default=None, help="Path to the dictionary sqlite file")
    parser.add_argument(
        "--expand",
        action="store_true",
        help="Print the full article of every result, not only auto-expanded ones",
    )
    parser.add_argument("--show", type=int, default=20, help="Display first N results (default: 20)")
    parser.add_argument(
        "--remember",
        action="store_true",
        help="Store the query in the recent searches file",
    )
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else config.log_level(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        store = open_store(args.db or config.database_path())
    except DictionaryUnavailableError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    persistence = JsonStateStore(config.state_path()) if args.remember else MemoryStateStore()

    with store:
        session = SearchSession(store, persistence=persistence, limit=config.result_limit())
        if args.query.strip():
            state = session.on_query_changed(args.query)
        else:
            state = session.restore()

        if not state.results:
            print("Nothing found.")
            return 0

        print(f"Results: {len(state.results)}")
        for entry in state.results[: max(0, args.show)]:
            print(f"- {entry.display_form} [{_stars(entry.stars)}] {entry.short_gloss}")
            if args.expand:
                session.expand(entry.word)
            rendered = session.document_for(entry.word)
            if rendered is None:
                continue
            for line in rendered.document.plain_text.splitlines():
                print(f"    {line}")

        if args.remember:
            session.commit()
            print("Recent:", ", ".join(session.recents))
    return 0


if __name__ == "__main__":
    sys.exit(main())
