"""Persistent browser-side state: the localStorage and cookie analogues."""

from __future__ import annotations

import json
import time
from pathlib import Path
from typing import Protocol

from shared.logging.logger import get_logger

logger = get_logger("widget.storage")


class StorageUnavailableError(RuntimeError):
    """Raised when persistent storage is blocked (privacy mode, read-only disk)."""


class KeyValueStorage(Protocol):
    def get_item(self, key: str) -> str | None: ...

    def set_item(self, key: str, value: str) -> None: ...


class MemoryStorage:
    def __init__(self, blocked: bool = False):
        self._items: dict[str, str] = {}
        self.blocked = blocked

    def _check(self) -> None:
        if self.blocked:
            raise StorageUnavailableError("storage is blocked")

    def get_item(self, key: str) -> str | None:
        self._check()
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._check()
        self._items[key] = value


class JsonFileStorage:
    """Key/value pairs persisted to one JSON file, rewritten on every set."""

    def __init__(self, path: str | Path):
        self.path = Path(path)

    def _load(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            return json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            raise StorageUnavailableError(f"cannot read {self.path}: {e}") from e

    def get_item(self, key: str) -> str | None:
        return self._load().get(key)

    def set_item(self, key: str, value: str) -> None:
        items = self._load()
        items[key] = value
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps(items), encoding="utf-8")
        except OSError as e:
            raise StorageUnavailableError(f"cannot write {self.path}: {e}") from e


class CookieJar:
    """document.cookie for a single host, with max-age expiry."""

    def __init__(self, clock=time.time):
        self._cookies: dict[str, tuple[str, float | None]] = {}
        self._clock = clock

    def set(self, name: str, value: str, max_age: int | None = None) -> None:
        expires = self._clock() + max_age if max_age is not None else None
        self._cookies[name] = (value, expires)
        logger.debug("cookie_set", extra={"cookie_name": name, "max_age": max_age})

    def get(self, name: str) -> str | None:
        entry = self._cookies.get(name)
        if entry is None:
            return None
        value, expires = entry
        if expires is not None and expires <= self._clock():
            del self._cookies[name]
            return None
        return value

    def has(self, name: str, value: str) -> bool:
        return self.get(name) == value
