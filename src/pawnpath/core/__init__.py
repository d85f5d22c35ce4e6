"""Board layer: FEN decoding and pseudo-legal move hints, no dependencies.

Quick start::

    from pawnpath.core import calculate_valid_moves, STARTING_FEN

    dests = calculate_valid_moves(STARTING_FEN)
    dests["e2"]  # ['e3', 'e4']
"""

from pawnpath.core.enums import Color, PieceType
from pawnpath.core.move_generator import MoveGenerator, calculate_valid_moves
from pawnpath.core.notation import STARTING_FEN, position_from_fen
from pawnpath.core.piece import Piece
from pawnpath.core.position import Position
from pawnpath.core.types import (
    Square,
    file_of,
    make_square,
    parse_square,
    rank_of,
    square_name,
)

__all__ = [
    # Enums
    "Color",
    "PieceType",
    # Types / helpers
    "Square",
    "file_of",
    "make_square",
    "parse_square",
    "rank_of",
    "square_name",
    # Domain objects
    "MoveGenerator",
    "Piece",
    "Position",
    # Notation
    "STARTING_FEN",
    "calculate_valid_moves",
    "position_from_fen",
]
