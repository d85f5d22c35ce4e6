"""TreeState: the unit a document persists and restores."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from pawnpath.config import DEFAULT_HEADERS, TreeSettings
from pawnpath.core.notation import STARTING_FEN
from pawnpath.tree.node import GameNode
from pawnpath.tree.path import Path

GameHeaders = dict[str, str]


@dataclass
class TreeState:
    """Root node, current path and game headers of one document."""

    root: GameNode
    position: Path = ()
    headers: GameHeaders = field(default_factory=lambda: dict(DEFAULT_HEADERS))

    def to_dict(self) -> dict[str, Any]:
        return {
            "root": self.root.to_dict(),
            "position": list(self.position),
            "headers": dict(self.headers),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> TreeState:
        return cls(
            root=GameNode.from_dict(data["root"]),
            position=tuple(int(i) for i in data.get("position", [])),
            headers={str(k): str(v) for k, v in data.get("headers", {}).items()},
        )


def default_tree(
    fen: str = STARTING_FEN, settings: TreeSettings | None = None
) -> TreeState:
    """Empty game starting from *fen*."""
    settings = settings or TreeSettings(start_fen=fen)
    return TreeState(root=GameNode(fen=fen), headers=settings.headers_for(fen))
