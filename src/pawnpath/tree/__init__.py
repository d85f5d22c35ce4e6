"""Game-tree layer: nodes, paths, mutation primitives and the store.

Quick start::

    from pawnpath.tree import TreeStore

    store = TreeStore()
    store.make_moves(["e2e4", "e7e5", "g1f3"])
    store.go_to_move((0,))
    store.make_move("c7c5")  # recorded as a variation of 1...e5
"""

from pawnpath.tree.model import (
    InsertPolicy,
    MainlineView,
    TreeStats,
    add_move,
    append_child,
    find_child,
    iter_mainline,
    promote_variation,
    remove_subtree,
    tree_stats,
)
from pawnpath.tree.node import Annotation, Brush, GameNode, Shape
from pawnpath.tree.path import (
    ROOT_PATH,
    Path,
    clamp_path,
    get_node_at_path,
    is_valid_path,
    mainline_end,
)
from pawnpath.tree.session import (
    MemorySessionStorage,
    SessionStorage,
    dumps_state,
    loads_state,
    restore_session,
    save_session,
)
from pawnpath.tree.state import GameHeaders, TreeState, default_tree
from pawnpath.tree.store import TreeEvents, TreeStore

__all__ = [
    # Nodes
    "Annotation",
    "Brush",
    "GameNode",
    "Shape",
    # Paths
    "Path",
    "ROOT_PATH",
    "clamp_path",
    "get_node_at_path",
    "is_valid_path",
    "mainline_end",
    # Mutation
    "InsertPolicy",
    "MainlineView",
    "TreeStats",
    "add_move",
    "append_child",
    "find_child",
    "iter_mainline",
    "promote_variation",
    "remove_subtree",
    "tree_stats",
    # State / store
    "GameHeaders",
    "TreeEvents",
    "TreeState",
    "TreeStore",
    "default_tree",
    # Session
    "MemorySessionStorage",
    "SessionStorage",
    "dumps_state",
    "loads_state",
    "restore_session",
    "save_session",
]
