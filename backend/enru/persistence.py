from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Dict, List, Optional, Protocol, Union

LOGGER = logging.getLogger(__name__)

LAST_QUERY_KEY = "lastSearch"
RECENTS_KEY = "recentSearches"


class StateStore(Protocol):
    def get(self, key: str) -> Optional[str]: ...

    def set(self, key: str, value: str) -> None: ...

    def remove(self, key: str) -> None: ...

    def get_list(self, key: str) -> List[str]: ...

    def set_list(self, key: str, values: List[str]) -> None: ...


class MemoryStateStore:
    def __init__(self, initial: Optional[Dict[str, object]] = None):
        self._data: Dict[str, object] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        value = self._data.get(key)
        return value if isinstance(value, str) else None

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def remove(self, key: str) -> None:
        self._data.pop(key, None)

    def get_list(self, key: str) -> List[str]:
        value = self._data.get(key)
        if not isinstance(value, list):
            return []
        return [item for item in value if isinstance(item, str)]

    def set_list(self, key: str, values: List[str]) -> None:
        self._data[key] = list(values)


class JsonStateStore(MemoryStateStore):
    """Key-value state kept in a small JSON file.

    Read and write failures are logged and otherwise ignored; losing the
    recent-search list must never break a lookup.
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)
        super().__init__(self._load())

    def _load(self) -> Dict[str, object]:
        if not self.path.exists():
            return {}
        try:
            payload = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            LOGGER.warning("cannot read state file %s: %s", self.path, exc)
            return {}
        return payload if isinstance(payload, dict) else {}

    def _save(self) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(
                json.dumps(self._data, ensure_ascii=False, indent=2),
                encoding="utf-8",
            )
        except OSError as exc:
            LOGGER.warning("cannot write state file %s: %s", self.path, exc)

    def set(self, key: str, value: str) -> None:
        super().set(key, value)
        self._save()

    def remove(self, key: str) -> None:
        super().remove(key)
        self._save()

    def set_list(self, key: str, values: List[str]) -> None:
        super().set_list(key, values)
        self._save()
