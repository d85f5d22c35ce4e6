"""TreeStore: the per-document, observable owner of one :class:`TreeState`.

Every board, panel and shortcut of a document talks to the same store.
Mutations mark the store dirty until :meth:`TreeStore.save`; navigation
never does. Operations that would leave the tree (stepping past a leaf,
deleting the root, following a stale path) are no-ops, so UIs may call
them at any boundary.
"""

from __future__ import annotations

import copy
import logging
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass, field

from pawnpath import rules
from pawnpath.config import TreeSettings
from pawnpath.core.notation import position_from_fen
from pawnpath.errors import PathNotFound
from pawnpath.tree import model
from pawnpath.tree.model import InsertPolicy, TreeStats
from pawnpath.tree.node import Annotation, GameNode, Shape
from pawnpath.tree.path import (
    Path,
    get_node_at_path,
    is_prefix,
    mainline_end,
    nodes_along,
    parent_path,
)
from pawnpath.tree.state import GameHeaders, TreeState, default_tree

_LOGGER = logging.getLogger(__name__)

# ── Event definitions ────────────────────────────────────────────────────────

ChangeCallback = Callable[["TreeStore"], None]
DirtyCallback = Callable[[bool], None]


@dataclass
class TreeEvents:
    """Observable callbacks. Multiple handlers per event."""

    on_change: list[ChangeCallback] = field(default_factory=list)
    on_dirty_changed: list[DirtyCallback] = field(default_factory=list)


# ── Store ────────────────────────────────────────────────────────────────────


class TreeStore:
    """Navigation, mutation and annotation over one game tree.

    Thread-safety: a store belongs to one document and is driven from a
    single thread (the UI thread); nothing here blocks.
    """

    __slots__ = ("_state", "_dirty", "_settings", "events")

    def __init__(
        self,
        initial: TreeState | None = None,
        *,
        settings: TreeSettings | None = None,
    ) -> None:
        self._settings = settings or TreeSettings()
        self._state = initial or default_tree(
            self._settings.start_fen, self._settings
        )
        self._state.position = self._recover(self._state.position)
        self._dirty = False
        self.events = TreeEvents()

    # ── Properties ───────────────────────────────────────────────────────

    @property
    def state(self) -> TreeState:
        return self._state

    @property
    def root(self) -> GameNode:
        return self._state.root

    @property
    def position(self) -> Path:
        return self._state.position

    @property
    def headers(self) -> GameHeaders:
        return self._state.headers

    @property
    def dirty(self) -> bool:
        return self._dirty

    @property
    def settings(self) -> TreeSettings:
        return self._settings

    @property
    def current_node(self) -> GameNode:
        return get_node_at_path(self._state.root, self._current_path())

    def stats(self) -> TreeStats:
        return model.tree_stats(self._state.root)

    def snapshot(self) -> TreeState:
        """Independent deep copy, e.g. for session persistence."""
        return copy.deepcopy(self._state)

    # ── Whole-state lifecycle ────────────────────────────────────────────

    def reset(self) -> None:
        """Replace the tree with a fresh game; clears dirty."""
        self._state = default_tree(self._settings.start_fen, self._settings)
        self._set_dirty(False)
        self._emit_change()

    def set_state(self, state: TreeState) -> None:
        """Wholesale replace the tree (after reload); clears dirty."""
        self._state = state
        self._state.position = self._recover(state.position)
        self._set_dirty(False)
        self._emit_change()

    def set_fen(self, fen: str) -> None:
        """Start an empty tree from *fen*.

        Raises :class:`~pawnpath.errors.MalformedPositionEncoding` for a
        malformed string.
        """
        position_from_fen(fen)
        self._state = default_tree(fen, self._settings)
        self._set_dirty(True)
        self._emit_change()

    def set_headers(self, headers: GameHeaders) -> None:
        self._state.headers = dict(headers)
        self._set_dirty(True)
        self._emit_change()

    def save(self) -> None:
        """Mark the current tree as persisted."""
        self._set_dirty(False)

    # ── Moves ────────────────────────────────────────────────────────────

    def make_move(
        self,
        move: str,
        *,
        change_position: bool = True,
        change_headers: bool = True,
        mainline: bool = False,
    ) -> bool:
        """Play UCI *move* from the current node.

        A child already reached by the same move is reused. Otherwise the
        new node is appended as the last variation, or spliced in as the
        mainline head when *mainline* is set. Returns False (and leaves the
        tree untouched) for a move the rules engine rejects.
        """
        parent = self.current_node
        played = rules.play_uci(parent.fen, move)
        if played is None:
            _LOGGER.warning("Rejected move %s at %s", move, list(self.position))
            return False

        policy = InsertPolicy.MAINLINE if mainline else InsertPolicy.VARIATION
        idx = model.add_move(
            parent, played.uci, played.fen, san=played.san, policy=policy
        )
        if change_headers:
            self._update_result_header(played.fen)
        if change_position:
            self._state.position = (*self._state.position, idx)

        self._set_dirty(True)
        self._emit_change()
        return True

    def make_moves(
        self,
        moves: Iterable[str],
        *,
        mainline: bool = False,
        change_headers: bool = True,
    ) -> int:
        """Play *moves* in order, advancing after each one.

        Stops at the first rejected move and returns how many were played.
        """
        played = 0
        for move in moves:
            if not self.make_move(
                move,
                change_position=True,
                change_headers=change_headers,
                mainline=mainline,
            ):
                break
            played += 1
        return played

    def delete_move(self, path: Sequence[int] | None = None) -> None:
        """Remove the node at *path* (default: current) with its subtree."""
        current = self._current_path()
        target = tuple(current if path is None else path)
        if not target:
            return
        try:
            model.remove_subtree(self._state.root, target)
        except PathNotFound as exc:
            _LOGGER.warning("Cannot delete move: %s", exc)
            return

        position = current
        depth = len(target) - 1
        if is_prefix(target, position):
            position = parent_path(target)
        elif (
            is_prefix(target[:-1], position)
            and len(position) > depth
            and position[depth] > target[-1]
        ):
            # A later sibling shifted left; keep pointing at the same node.
            position = (*position[:depth], position[depth] - 1, *position[depth + 1 :])
        self._state.position = self._recover(position)

        self._set_dirty(True)
        self._emit_change()

    def promote_variation(self, path: Sequence[int] | None = None) -> None:
        """Make the node at *path* (default: current) its parent's mainline."""
        current = self._current_path()
        target = tuple(current if path is None else path)
        if not target or target[-1] == 0:
            return
        try:
            model.promote_variation(self._state.root, target)
        except PathNotFound as exc:
            _LOGGER.warning("Cannot promote variation: %s", exc)
            return

        position = current
        depth = len(target) - 1
        if is_prefix(target[:-1], position) and len(position) > depth:
            idx = position[depth]
            if idx == target[-1]:
                idx = 0
            elif idx < target[-1]:
                idx += 1
            position = (*position[:depth], idx, *position[depth + 1 :])
            self._state.position = position

        self._set_dirty(True)
        self._emit_change()

    # ── Annotation ───────────────────────────────────────────────────────

    def set_annotation(self, glyph: Annotation | str) -> None:
        """Set the glyph of the current move; setting it again clears it."""
        node = self.current_node
        if node.is_root:
            return
        annotation = Annotation(glyph)
        node.annotation = (
            Annotation.NONE if node.annotation == annotation else annotation
        )
        self._set_dirty(True)
        self._emit_change()

    def set_comment(self, comment: str) -> None:
        self.current_node.comment = comment
        self._set_dirty(True)
        self._emit_change()

    def set_shapes(self, shapes: Iterable[Shape]) -> None:
        self.current_node.shapes = list(shapes)
        self._set_dirty(True)
        self._emit_change()

    def add_shape(self, shape: Shape) -> None:
        """Toggle *shape* on the current node."""
        shapes = self.current_node.shapes
        if shape in shapes:
            shapes.remove(shape)
        else:
            shapes.append(shape)
        self._set_dirty(True)
        self._emit_change()

    def clear_shapes(self) -> None:
        self.current_node.shapes.clear()
        self._set_dirty(True)
        self._emit_change()

    # ── Navigation (never marks dirty) ───────────────────────────────────

    def go_to_move(self, path: Sequence[int]) -> None:
        self._navigate(self._recover(tuple(path)))

    def go_to_start(self) -> None:
        self._navigate(())

    def go_to_end(self) -> None:
        """Follow the mainline of the current line down to its leaf."""
        self._navigate(mainline_end(self._state.root, self._current_path()))

    def go_to_next(self) -> None:
        if self.current_node.children:
            self._navigate((*self._state.position, 0))

    def go_to_previous(self) -> None:
        position = self._current_path()
        if position:
            self._navigate(parent_path(position))

    def go_to_branch_start(self) -> None:
        """Jump to the first move of the current variation.

        From there, the next call steps to the node the variation
        branched from.
        """
        current = self._current_path()
        position = list(current)
        while position and position[-1] == 0:
            position.pop()
        if tuple(position) == current and position:
            position.pop()
        self._navigate(tuple(position))

    def go_to_branch_end(self) -> None:
        self.go_to_end()

    def next_branch(self) -> None:
        self._cycle_branch(1)

    def previous_branch(self) -> None:
        self._cycle_branch(-1)

    def next_branching(self) -> None:
        """Advance along the mainline to the next node with alternatives."""
        node = self.current_node
        position = list(self._state.position)
        while node.children:
            node = node.children[0]
            position.append(0)
            if len(node.children) > 1:
                break
        self._navigate(tuple(position))

    def previous_branching(self) -> None:
        """Step back to the previous node with alternatives (or the root)."""
        position = list(self._current_path())
        nodes = nodes_along(self._state.root, position)
        while position:
            position.pop()
            nodes.pop()
            if len(nodes[-1].children) > 1:
                break
        self._navigate(tuple(position))

    # ── Internal helpers ─────────────────────────────────────────────────

    def _cycle_branch(self, step: int) -> None:
        """Switch to a sibling at the deepest branch point on the path."""
        position = self._current_path()
        nodes = nodes_along(self._state.root, position)
        for depth in range(len(position) - 1, -1, -1):
            siblings = nodes[depth].children
            if len(siblings) > 1:
                idx = (position[depth] + step) % len(siblings)
                self._navigate((*position[:depth], idx))
                return

    def _navigate(self, position: Path) -> None:
        if position == self._state.position:
            return
        self._state.position = position
        self._emit_change()

    def _current_path(self) -> Path:
        """Current position, clamped in place when the tree changed under it."""
        self._state.position = self._recover(self._state.position)
        return self._state.position

    def _recover(self, path: Path) -> Path:
        """Clamp a stale path to its deepest surviving ancestor."""
        try:
            get_node_at_path(self._state.root, path)
        except PathNotFound as exc:
            _LOGGER.warning("%s; clamping to the nearest ancestor", exc)
            return exc.valid_prefix
        return path

    def _update_result_header(self, fen: str) -> None:
        result = rules.outcome_result(fen)
        if result is not None:
            self._state.headers["Result"] = result

    def _set_dirty(self, dirty: bool) -> None:
        if dirty == self._dirty:
            return
        self._dirty = dirty
        _LOGGER.debug("Tree store dirty=%s", dirty)
        for cb in self.events.on_dirty_changed:
            cb(dirty)

    def _emit_change(self) -> None:
        for cb in self.events.on_change:
            cb(self)
