"""Structural mutation primitives over a :class:`GameNode` tree.

These functions know nothing about stores, dirty flags or UI state; the
:class:`~pawnpath.tree.store.TreeStore` composes them.
"""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from dataclasses import dataclass
from enum import Enum

from pawnpath.errors import PathNotFound
from pawnpath.tree.node import GameNode
from pawnpath.tree.path import get_node_at_path


class InsertPolicy(Enum):
    """Where a new child enters its parent's children list."""

    MAINLINE = "mainline"  # index 0, existing children shift right
    VARIATION = "variation"  # appended after existing children


@dataclass(frozen=True, slots=True)
class TreeStats:
    """Whole-tree counters shown in the game info panel."""

    leafs: int
    depth: int
    total: int


def append_child(
    parent: GameNode,
    move: str,
    fen: str,
    *,
    san: str = "",
    policy: InsertPolicy = InsertPolicy.VARIATION,
) -> GameNode:
    """Create a node for *move* under *parent* and splice it in per *policy*."""
    child = GameNode(
        fen=fen,
        move=move,
        san=san,
        half_move_index=parent.half_move_index + 1,
    )
    if policy is InsertPolicy.MAINLINE:
        parent.children.insert(0, child)
    else:
        parent.children.append(child)
    return child


def find_child(parent: GameNode, move: str) -> int | None:
    """Index of the child reached by *move*, if one exists."""
    for idx, child in enumerate(parent.children):
        if child.move == move:
            return idx
    return None


def add_move(
    parent: GameNode,
    move: str,
    fen: str,
    *,
    san: str = "",
    policy: InsertPolicy = InsertPolicy.VARIATION,
) -> int:
    """Reuse the child already reached by *move*, or append a new one.

    An existing child is never duplicated nor reordered. Returns the index
    of the child under *parent*.
    """
    existing = find_child(parent, move)
    if existing is not None:
        return existing
    append_child(parent, move, fen, san=san, policy=policy)
    return 0 if policy is InsertPolicy.MAINLINE else len(parent.children) - 1


class MainlineView:
    """Restartable view of the nodes along ``children[0]`` from *start*.

    Each iteration yields ``start`` first and stops at a leaf; nothing is
    materialised up front.
    """

    __slots__ = ("_start",)

    def __init__(self, start: GameNode) -> None:
        self._start = start

    def __iter__(self) -> Iterator[GameNode]:
        node: GameNode | None = self._start
        while node is not None:
            yield node
            node = node.children[0] if node.children else None

    def moves(self) -> Iterator[str]:
        """UCI moves along the line, skipping the start node."""
        for node in self:
            if node is not self._start and node.move is not None:
                yield node.move


def iter_mainline(start: GameNode) -> MainlineView:
    return MainlineView(start)


def remove_subtree(root: GameNode, path: Sequence[int]) -> GameNode:
    """Detach the node at *path* (and its descendants); return it.

    The root cannot be removed.
    """
    if not path:
        raise PathNotFound(path, ())
    parent = get_node_at_path(root, path[:-1])
    idx = path[-1]
    if not 0 <= idx < len(parent.children):
        raise PathNotFound(path, path[:-1])
    return parent.children.pop(idx)


def promote_variation(root: GameNode, path: Sequence[int]) -> tuple[int, ...]:
    """Move the node at *path* to the front of its siblings.

    Returns the node's new path.
    """
    if not path:
        return ()
    parent = get_node_at_path(root, path[:-1])
    idx = path[-1]
    if not 0 <= idx < len(parent.children):
        raise PathNotFound(path, path[:-1])
    parent.children.insert(0, parent.children.pop(idx))
    return (*path[:-1], 0)


def tree_stats(root: GameNode) -> TreeStats:
    """Count leaves, deepest ply below *root*, and non-root nodes."""
    leafs = 0
    depth = 0
    total = 0
    stack: list[tuple[GameNode, int]] = [(root, 0)]
    while stack:
        node, level = stack.pop()
        if level > depth:
            depth = level
        if node.children:
            total += len(node.children)
            stack.extend((child, level + 1) for child in node.children)
        elif node is not root:
            leafs += 1
    return TreeStats(leafs=leafs, depth=depth, total=total)
