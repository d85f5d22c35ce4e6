"""Squares as integers and their algebraic names.

Squares count rank by rank from White's side: a1 is 0, h1 is 7, a8 is 56
and h8 is 63. Boards and move maps exchanged with UIs use the names.
"""

from __future__ import annotations

from typing import TypeAlias

Square: TypeAlias = int

FILE_NAMES = "abcdefgh"
RANK_NAMES = "12345678"

SQUARE_NAMES: tuple[str, ...] = tuple(
    file + rank for rank in RANK_NAMES for file in FILE_NAMES
)
_SQUARE_BY_NAME: dict[str, Square] = {
    name: sq for sq, name in enumerate(SQUARE_NAMES)
}


def file_of(sq: Square) -> int:
    return sq % 8


def rank_of(sq: Square) -> int:
    return sq // 8


def make_square(file: int, rank: int) -> Square:
    return rank * 8 + file


def on_board(file: int, rank: int) -> bool:
    return 0 <= file < 8 and 0 <= rank < 8


def square_name(sq: Square) -> str:
    return SQUARE_NAMES[sq]


def parse_square(name: str) -> Square:
    """Square for an algebraic name such as ``"e4"``; ValueError otherwise."""
    try:
        return _SQUARE_BY_NAME[name]
    except KeyError:
        raise ValueError(f"Not a square name: {name!r}") from None
