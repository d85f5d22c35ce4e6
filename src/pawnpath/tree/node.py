"""Game-tree node and the markup attached to it."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any


class Annotation(StrEnum):
    """Move-quality glyphs shown next to a move."""

    NONE = ""
    BRILLIANT = "!!"
    GOOD = "!"
    INTERESTING = "!?"
    DUBIOUS = "?!"
    MISTAKE = "?"
    BLUNDER = "??"

    @property
    def nag(self) -> int:
        """Numeric Annotation Glyph code used in PGN."""
        return _ANNOTATION_NAG[self]

    @classmethod
    def from_nag(cls, nag: int) -> Annotation:
        return _NAG_ANNOTATION.get(nag, cls.NONE)


_ANNOTATION_NAG: dict[Annotation, int] = {
    Annotation.NONE: 0,
    Annotation.GOOD: 1,
    Annotation.MISTAKE: 2,
    Annotation.BRILLIANT: 3,
    Annotation.BLUNDER: 4,
    Annotation.INTERESTING: 5,
    Annotation.DUBIOUS: 6,
}
_NAG_ANNOTATION: dict[int, Annotation] = {v: k for k, v in _ANNOTATION_NAG.items()}


class Brush(StrEnum):
    """Shape colours, matching the PGN ``[%cal]``/``[%csl]`` letters."""

    GREEN = "green"
    RED = "red"
    BLUE = "blue"
    YELLOW = "yellow"

    @property
    def letter(self) -> str:
        return self.value[0].upper()

    @classmethod
    def from_letter(cls, letter: str) -> Brush:
        for brush in cls:
            if brush.letter == letter.upper():
                return brush
        raise ValueError(f"Unknown brush letter: {letter!r}")


@dataclass(frozen=True, slots=True)
class Shape:
    """Arrow (``orig`` → ``dest``) or square highlight (``dest`` is None)."""

    orig: str
    dest: str | None = None
    brush: Brush = Brush.GREEN

    @property
    def is_arrow(self) -> bool:
        return self.dest is not None and self.dest != self.orig

    def to_dict(self) -> dict[str, Any]:
        return {"orig": self.orig, "dest": self.dest, "brush": self.brush.value}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Shape:
        return cls(data["orig"], data.get("dest"), Brush(data.get("brush", "green")))


@dataclass
class GameNode:
    """One position in the game tree.

    ``move`` is the UCI text of the move that produced this node from its
    parent and is ``None`` only for the root. ``children[0]`` is the
    mainline continuation; later children are variations.
    """

    fen: str
    move: str | None = None
    san: str = ""
    half_move_index: int = 0
    children: list[GameNode] = field(default_factory=list)
    annotation: Annotation = Annotation.NONE
    comment: str = ""
    shapes: list[Shape] = field(default_factory=list)

    @property
    def is_root(self) -> bool:
        return self.move is None

    @property
    def is_leaf(self) -> bool:
        return not self.children

    # ── Serialisation ────────────────────────────────────────────────────

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "fen": self.fen,
            "move": self.move,
            "san": self.san,
            "halfMoves": self.half_move_index,
            "children": [child.to_dict() for child in self.children],
        }
        if self.annotation:
            data["annotation"] = self.annotation.value
        if self.comment:
            data["comment"] = self.comment
        if self.shapes:
            data["shapes"] = [shape.to_dict() for shape in self.shapes]
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> GameNode:
        return cls(
            fen=data["fen"],
            move=data.get("move"),
            san=data.get("san", ""),
            half_move_index=int(data.get("halfMoves", 0)),
            children=[cls.from_dict(child) for child in data.get("children", [])],
            annotation=Annotation(data.get("annotation", "")),
            comment=data.get("comment", ""),
            shapes=[Shape.from_dict(s) for s in data.get("shapes", [])],
        )
