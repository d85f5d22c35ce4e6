"""Position: an immutable board snapshot decoded from FEN."""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from types import MappingProxyType

from pawnpath.core.enums import Color
from pawnpath.core.piece import Piece
from pawnpath.core.types import Square, make_square


@dataclass(frozen=True, slots=True)
class Position:
    """Board occupancy plus the five FEN metadata fields.

    ``castling`` is kept as the raw FEN token (``"-"`` when nobody may
    castle) because the exercise generator never enforces castling rights.
    """

    placement: Mapping[Square, Piece]
    side_to_move: Color = Color.WHITE
    castling: str = "-"
    en_passant: Square | None = None
    halfmove_clock: int = 0
    fullmove_number: int = 1

    def __post_init__(self) -> None:
        object.__setattr__(self, "placement", MappingProxyType(dict(self.placement)))

    # ── Queries ──────────────────────────────────────────────────────────

    def piece_at(self, sq: Square) -> Piece | None:
        return self.placement.get(sq)

    def is_empty(self, sq: Square) -> bool:
        return sq not in self.placement

    def pieces(self, color: Color) -> Iterator[tuple[Square, Piece]]:
        """Occupied squares of *color* in ascending square order."""
        for sq in sorted(self.placement):
            piece = self.placement[sq]
            if piece.color == color:
                yield sq, piece

    def __repr__(self) -> str:
        rows: list[str] = []
        for rank in range(7, -1, -1):
            row = []
            for file in range(8):
                p = self.piece_at(make_square(file, rank))
                row.append(str(p) if p else ".")
            rows.append(f"{rank + 1} {' '.join(row)}")
        rows.append("  a b c d e f g h")
        rows.append(
            f"{self.side_to_move.name.lower()} to move, castling {self.castling}, "
            f"clocks {self.halfmove_clock}/{self.fullmove_number}"
        )
        return "\n".join(rows)
