"""Index-path addressing of game-tree nodes.

A path is a tuple of child indices from the root; ``()`` is the root
itself. Paths are positional, so an edit that reorders or deletes siblings
may invalidate them; :func:`clamp_path` recovers the deepest surviving
ancestor.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TypeAlias

from pawnpath.errors import PathNotFound
from pawnpath.tree.node import GameNode

Path: TypeAlias = tuple[int, ...]

ROOT_PATH: Path = ()


def _walk(root: GameNode, path: Sequence[int]) -> tuple[GameNode, int]:
    """Descend as far as *path* allows; return (node, indices consumed)."""
    node = root
    for depth, idx in enumerate(path):
        if not 0 <= idx < len(node.children):
            return node, depth
        node = node.children[idx]
    return node, len(path)


def get_node_at_path(root: GameNode, path: Sequence[int]) -> GameNode:
    """Resolve *path* under *root*, raising :class:`PathNotFound` if stale."""
    node, consumed = _walk(root, path)
    if consumed != len(path):
        raise PathNotFound(path, path[:consumed])
    return node


def is_valid_path(root: GameNode, path: Sequence[int]) -> bool:
    return _walk(root, path)[1] == len(path)


def clamp_path(root: GameNode, path: Sequence[int]) -> Path:
    """Longest prefix of *path* that still resolves under *root*."""
    _node, consumed = _walk(root, path)
    return tuple(path[:consumed])


def parent_path(path: Sequence[int]) -> Path:
    return tuple(path[:-1])


def is_prefix(prefix: Sequence[int], path: Sequence[int]) -> bool:
    """Whether *prefix* addresses *path* or one of its ancestors."""
    return len(prefix) <= len(path) and tuple(path[: len(prefix)]) == tuple(prefix)


def mainline_end(root: GameNode, path: Sequence[int]) -> Path:
    """Path of the leaf reached by following ``children[0]`` from *path*."""
    node = get_node_at_path(root, path)
    end = list(path)
    while node.children:
        end.append(0)
        node = node.children[0]
    return tuple(end)


def nodes_along(root: GameNode, path: Sequence[int]) -> list[GameNode]:
    """Root plus every node visited on the way to *path*."""
    node = root
    nodes = [root]
    for idx in path:
        if not 0 <= idx < len(node.children):
            raise PathNotFound(path, path[: len(nodes) - 1])
        node = node.children[idx]
        nodes.append(node)
    return nodes
