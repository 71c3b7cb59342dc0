from __future__ import annotations

import json
import logging
from typing import Any, Callable, Dict, Iterable, Optional, Protocol

logger = logging.getLogger(__name__)

Listener = Callable[[Dict[str, Any], Dict[str, Any]], None]


class KeyValueStorage(Protocol):
    def get(self, key: str) -> Optional[str]:
        ...

    def set(self, key: str, value: str) -> None:
        ...

    def delete(self, key: str) -> None:
        ...


class MemoryStorage:
    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._items: Dict[str, str] = dict(initial or {})

    def get(self, key):
        return self._items.get(key)

    def set(self, key, value):
        self._items[key] = value

    def delete(self, key):
        self._items.pop(key, None)


class StateStore:
    """Small observable state container.

    Only ``persist_keys`` are written to ``storage`` (as one JSON document
    under ``name``) and read back by ``open()``. The store must be opened
    before it accepts writes or subscribers.
    """

    def __init__(
        self,
        initial: Dict[str, Any],
        storage: Optional[KeyValueStorage] = None,
        name: str = "dashboard-state",
        persist_keys: Iterable[str] = (),
    ):
        self._state: Dict[str, Any] = dict(initial)
        self._storage = storage
        self._name = name
        self._persist_keys = tuple(persist_keys)
        self._listeners: list[Listener] = []
        self._open = False

    @property
    def is_open(self) -> bool:
        return self._open

    def open(self) -> "StateStore":
        if self._open:
            return self
        self._state.update(self._load_persisted())
        self._open = True
        return self

    def close(self) -> None:
        self._listeners.clear()
        self._open = False

    def get(self, key: Optional[str] = None, default=None):
        if key is None:
            return dict(self._state)
        return self._state.get(key, default)

    def set(self, **values) -> None:
        self._require_open()
        previous = dict(self._state)
        self._state.update(values)
        if self._storage is not None and any(key in self._persist_keys for key in values):
            self._persist()
        current = dict(self._state)
        for listener in list(self._listeners):
            listener(current, previous)

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._require_open()
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def clear_persisted(self) -> None:
        if self._storage is not None:
            self._storage.delete(self._name)

    def _require_open(self):
        if not self._open:
            raise RuntimeError(f"state store '{self._name}' is not open")

    def _persist(self):
        payload = {key: self._state.get(key) for key in self._persist_keys}
        self._storage.set(self._name, json.dumps(payload, ensure_ascii=False))

    def _load_persisted(self) -> Dict[str, Any]:
        if self._storage is None:
            return {}
        raw = self._storage.get(self._name)
        if not raw:
            return {}
        try:
            payload = json.loads(raw)
        except ValueError:
            logger.warning("Discarding unreadable persisted state for %s", self._name)
            return {}
        if not isinstance(payload, dict):
            return {}
        return {key: payload[key] for key in self._persist_keys if key in payload}
