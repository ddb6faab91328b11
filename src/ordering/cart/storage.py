"""Durable storage for shopping carts, keyed by cart session.

Plays the part of the browser's local storage: a cart written here is found
again on the next request from the same session. Two backends:

- InMemoryCartStorage for development and testing
- JsonFileCartStorage for one JSON document per session on disk
"""

import json
import re
from abc import ABC, abstractmethod
from pathlib import Path

from ordering.config import get_settings

_SAFE_SESSION_ID = re.compile(r"^[A-Za-z0-9_-]{1,128}$")


class CartStorage(ABC):
    """Abstract cart storage interface."""

    @abstractmethod
    def load(self, session_id: str) -> dict | None:
        """Return the stored cart document for ``session_id``, if any."""
        ...

    @abstractmethod
    def save(self, session_id: str, data: dict) -> None:
        """Replace the stored cart document for ``session_id``."""
        ...


class InMemoryCartStorage(CartStorage):
    def __init__(self) -> None:
        self._carts: dict[str, str] = {}

    def load(self, session_id: str) -> dict | None:
        raw = self._carts.get(session_id)
        return json.loads(raw) if raw else None

    def save(self, session_id: str, data: dict) -> None:
        self._carts[session_id] = json.dumps(data)


class JsonFileCartStorage(CartStorage):
    """One ``<session_id>.json`` file per cart under ``directory``."""

    def __init__(self, directory: str | Path) -> None:
        self.directory = Path(directory)

    def _path(self, session_id: str) -> Path:
        if not _SAFE_SESSION_ID.match(session_id or ""):
            raise ValueError(f"Invalid cart session id: {session_id!r}")
        return self.directory / f"{session_id}.json"

    def load(self, session_id: str) -> dict | None:
        path = self._path(session_id)
        if not path.exists():
            return None
        try:
            return json.loads(path.read_text(encoding="utf-8"))
        except json.JSONDecodeError:
            # A corrupt document is treated as an empty cart
            return None

    def save(self, session_id: str, data: dict) -> None:
        path = self._path(session_id)
        self.directory.mkdir(parents=True, exist_ok=True)
        tmp_path = path.with_suffix(".json.tmp")
        tmp_path.write_text(json.dumps(data), encoding="utf-8")
        tmp_path.replace(path)


_current_storage: CartStorage | None = None


def get_cart_storage() -> CartStorage:
    """Return the active cart storage, built from settings on first use."""
    global _current_storage
    if _current_storage is None:
        directory = get_settings().cart_storage_dir
        _current_storage = JsonFileCartStorage(directory) if directory else InMemoryCartStorage()
    return _current_storage


def set_cart_storage(storage: CartStorage) -> None:
    """Override the active cart storage (useful for tests)."""
    global _current_storage
    _current_storage = storage


def reset_cart_storage() -> None:
    global _current_storage
    _current_storage = None
