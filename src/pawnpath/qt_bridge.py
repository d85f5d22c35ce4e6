"""Qt bridge that re-emits :class:`TreeStore` callbacks as signals."""

from __future__ import annotations

from PyQt6.QtCore import QObject, pyqtSignal, pyqtSlot

from pawnpath.tree.store import TreeStore


class TreeStoreBridge(QObject):
    """GUI-thread adapter so widgets can connect to a tree store.

    Slots forward keyboard-shortcut style navigation to the store.
    """

    changed = pyqtSignal()
    position_changed = pyqtSignal(object)
    dirty_changed = pyqtSignal(bool)

    def __init__(self, store: TreeStore, parent: QObject | None = None) -> None:
        super().__init__(parent)
        self._store = store
        self._last_position = store.position
        store.events.on_change.append(self._on_store_change)
        store.events.on_dirty_changed.append(self._on_dirty_changed)

    @property
    def store(self) -> TreeStore:
        return self._store

    def detach(self) -> None:
        """Stop listening to the store."""
        events = self._store.events
        if self._on_store_change in events.on_change:
            events.on_change.remove(self._on_store_change)
        if self._on_dirty_changed in events.on_dirty_changed:
            events.on_dirty_changed.remove(self._on_dirty_changed)

    # -- Slots --

    @pyqtSlot(str)
    def make_move(self, uci: str) -> None:
        self._store.make_move(uci)

    @pyqtSlot()
    def go_to_next(self) -> None:
        self._store.go_to_next()

    @pyqtSlot()
    def go_to_previous(self) -> None:
        self._store.go_to_previous()

    @pyqtSlot()
    def go_to_start(self) -> None:
        self._store.go_to_start()

    @pyqtSlot()
    def go_to_end(self) -> None:
        self._store.go_to_end()

    @pyqtSlot()
    def save(self) -> None:
        self._store.save()

    # -- Store callbacks --

    def _on_store_change(self, store: TreeStore) -> None:
        self.changed.emit()
        if store.position != self._last_position:
            self._last_position = store.position
            self.position_changed.emit(store.position)

    def _on_dirty_changed(self, dirty: bool) -> None:
        self.dirty_changed.emit(dirty)
