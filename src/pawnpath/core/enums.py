"""Side and piece-kind enumerations for the exercise board."""

from __future__ import annotations

from enum import IntEnum


class Color(IntEnum):
    WHITE = 0
    BLACK = 1

    @classmethod
    def from_token(cls, token: str) -> Color:
        """Side for a FEN side-to-move field; ValueError unless ``w``/``b``."""
        if token == "w":
            return cls.WHITE
        if token == "b":
            return cls.BLACK
        raise ValueError(f"Invalid side token: {token!r}")

    @property
    def opposite(self) -> Color:
        return Color(1 - self.value)

    @property
    def pawn_step(self) -> int:
        """Rank delta of a one-square pawn advance."""
        return 1 if self is Color.WHITE else -1

    @property
    def pawn_home_rank(self) -> int:
        return 1 if self is Color.WHITE else 6

    @property
    def en_passant_rank(self) -> int:
        """Rank of the en-passant targets this side may capture onto."""
        return 5 if self is Color.WHITE else 2


class PieceType(IntEnum):
    PAWN = 1
    KNIGHT = 2
    BISHOP = 3
    ROOK = 4
    QUEEN = 5
    KING = 6

    @property
    def is_slider(self) -> bool:
        return self in (PieceType.BISHOP, PieceType.ROOK, PieceType.QUEEN)
