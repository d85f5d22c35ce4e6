"""Session snapshots of a :class:`TreeState`.

Documents are stored under a per-tab key as JSON wrapped in a
``{"version": N, "state": ...}`` envelope. The storage medium is pluggable
through :class:`SessionStorage`.
"""

from __future__ import annotations

import json
import logging
from typing import Protocol

from pawnpath.config import SESSION_VERSION
from pawnpath.errors import SessionFormatError
from pawnpath.tree.path import clamp_path
from pawnpath.tree.state import TreeState

_LOGGER = logging.getLogger(__name__)


class SessionStorage(Protocol):
    """Key/value text store, e.g. a browser-like session storage."""

    def get_item(self, key: str) -> str | None: ...

    def set_item(self, key: str, value: str) -> None: ...

    def remove_item(self, key: str) -> None: ...


class MemorySessionStorage:
    """In-process :class:`SessionStorage` used by tests and headless tools."""

    __slots__ = ("_items",)

    def __init__(self) -> None:
        self._items: dict[str, str] = {}

    def get_item(self, key: str) -> str | None:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = value

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)

    def __contains__(self, key: object) -> bool:
        return key in self._items

    def __len__(self) -> int:
        return len(self._items)


def dumps_state(state: TreeState, *, version: int = SESSION_VERSION) -> str:
    return json.dumps({"version": version, "state": state.to_dict()})


def loads_state(text: str, *, version: int = SESSION_VERSION) -> TreeState:
    """Decode a session payload; the stored position is clamped to the tree."""
    try:
        payload = json.loads(text)
    except json.JSONDecodeError as exc:
        raise SessionFormatError(f"Session payload is not JSON: {exc}") from exc
    if not isinstance(payload, dict) or "state" not in payload:
        raise SessionFormatError("Session payload has no 'state' entry")
    if payload.get("version") != version:
        raise SessionFormatError(
            f"Unsupported session version {payload.get('version')!r}"
        )
    try:
        state = TreeState.from_dict(payload["state"])
    except (AttributeError, KeyError, TypeError, ValueError) as exc:
        raise SessionFormatError(f"Malformed session state: {exc}") from exc

    clamped = clamp_path(state.root, state.position)
    if clamped != state.position:
        _LOGGER.warning(
            "Stored position %s no longer resolves; clamped to %s",
            list(state.position),
            list(clamped),
        )
        state.position = clamped
    return state


def save_session(
    storage: SessionStorage,
    key: str,
    state: TreeState,
    *,
    version: int = SESSION_VERSION,
) -> None:
    storage.set_item(key, dumps_state(state, version=version))


def restore_session(
    storage: SessionStorage, key: str, *, version: int = SESSION_VERSION
) -> TreeState | None:
    """Restore the snapshot under *key*, or ``None`` if nothing is stored."""
    text = storage.get_item(key)
    if text is None:
        return None
    return loads_state(text, version=version)
