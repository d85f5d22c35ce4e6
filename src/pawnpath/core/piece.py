"""Piece value object."""

from __future__ import annotations

from dataclasses import dataclass

from pawnpath.core.enums import Color, PieceType

_TYPE_CHARS: dict[str, PieceType] = {
    "p": PieceType.PAWN,
    "n": PieceType.KNIGHT,
    "b": PieceType.BISHOP,
    "r": PieceType.ROOK,
    "q": PieceType.QUEEN,
    "k": PieceType.KING,
}
_CHAR_OF_TYPE: dict[PieceType, str] = {v: k for k, v in _TYPE_CHARS.items()}


@dataclass(frozen=True, slots=True)
class Piece:
    """Immutable (color, kind) pair."""

    color: Color
    piece_type: PieceType

    def __str__(self) -> str:
        """FEN letter (uppercase = white, lowercase = black)."""
        char = _CHAR_OF_TYPE[self.piece_type]
        return char.upper() if self.color == Color.WHITE else char

    @classmethod
    def from_char(cls, char: str) -> Piece:
        """Create piece from FEN letter, e.g. 'N' → white knight."""
        piece_type = _TYPE_CHARS.get(char.lower()) if len(char) == 1 else None
        if piece_type is None:
            raise ValueError(f"Invalid piece character: {char!r}")
        color = Color.WHITE if char.isupper() else Color.BLACK
        return cls(color, piece_type)

    def is_friend_of(self, other: Piece | None) -> bool:
        return other is not None and other.color == self.color

    def is_enemy_of(self, other: Piece | None) -> bool:
        return other is not None and other.color != self.color
