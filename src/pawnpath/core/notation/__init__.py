"""Notation package: FEN decoding for the board layer."""

from pawnpath.core.notation.fen import STARTING_FEN, position_from_fen

__all__ = [
    "STARTING_FEN",
    "position_from_fen",
]
