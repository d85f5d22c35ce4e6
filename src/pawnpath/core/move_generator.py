"""Pseudo-legal destination generator for exercise and lesson boards.

This generator follows piece movement, capture and blocking rules only. It
does not check king safety and never offers castling, so it must not be
used as a legality authority; the analysis board delegates that to the
rules adapter in :mod:`pawnpath.rules`.
"""

from __future__ import annotations

from pawnpath.core.enums import PieceType
from pawnpath.core.notation.fen import position_from_fen
from pawnpath.core.piece import Piece
from pawnpath.core.position import Position
from pawnpath.core.types import (
    Square,
    file_of,
    make_square,
    on_board,
    rank_of,
    square_name,
)

KNIGHT_OFFSETS: tuple[tuple[int, int], ...] = (
    (-2, -1),
    (-2, 1),
    (-1, -2),
    (-1, 2),
    (1, -2),
    (1, 2),
    (2, -1),
    (2, 1),
)

KING_OFFSETS: tuple[tuple[int, int], ...] = (
    (-1, -1),
    (-1, 0),
    (-1, 1),
    (0, -1),
    (0, 1),
    (1, -1),
    (1, 0),
    (1, 1),
)

BISHOP_DIRS: tuple[tuple[int, int], ...] = ((-1, -1), (-1, 1), (1, -1), (1, 1))
ROOK_DIRS: tuple[tuple[int, int], ...] = ((-1, 0), (1, 0), (0, -1), (0, 1))
QUEEN_DIRS: tuple[tuple[int, int], ...] = ROOK_DIRS + BISHOP_DIRS


# -- Precomputed lookup tables ---------------------------------------------


def _build_targets(
    offsets: tuple[tuple[int, int], ...],
) -> tuple[tuple[Square, ...], ...]:
    targets: list[tuple[Square, ...]] = []
    for sq in range(64):
        file_idx = file_of(sq)
        rank_idx = rank_of(sq)
        moves: list[Square] = []
        for df, dr in offsets:
            af = file_idx + df
            ar = rank_idx + dr
            if on_board(af, ar):
                moves.append(make_square(af, ar))
        targets.append(tuple(moves))
    return tuple(targets)


def _build_rays(
    directions: tuple[tuple[int, int], ...],
) -> tuple[tuple[tuple[Square, ...], ...], ...]:
    rays_per_square: list[tuple[tuple[Square, ...], ...]] = []
    for sq in range(64):
        square_rays: list[tuple[Square, ...]] = []
        for df, dr in directions:
            af = file_of(sq) + df
            ar = rank_of(sq) + dr
            ray: list[Square] = []
            while on_board(af, ar):
                ray.append(make_square(af, ar))
                af += df
                ar += dr
            square_rays.append(tuple(ray))
        rays_per_square.append(tuple(square_rays))
    return tuple(rays_per_square)


_KNIGHT_TARGETS = _build_targets(KNIGHT_OFFSETS)
_KING_TARGETS = _build_targets(KING_OFFSETS)

_BISHOP_RAYS = _build_rays(BISHOP_DIRS)
_ROOK_RAYS = _build_rays(ROOK_DIRS)
_QUEEN_RAYS = _build_rays(QUEEN_DIRS)

_SLIDER_RAYS = {
    PieceType.BISHOP: _BISHOP_RAYS,
    PieceType.ROOK: _ROOK_RAYS,
    PieceType.QUEEN: _QUEEN_RAYS,
}


class MoveGenerator:
    """Enumerates pseudo-legal destinations for the side to move.

    Querying an empty square, or one holding a piece of the side not to
    move, yields an empty list rather than an error.
    """

    __slots__ = ("_pos",)

    def __init__(self, position: Position) -> None:
        self._pos = position

    @classmethod
    def from_fen(cls, fen: str) -> MoveGenerator:
        return cls(position_from_fen(fen))

    @property
    def position(self) -> Position:
        return self._pos

    # -- Public API ---------------------------------------------------------

    def destinations(self, sq: Square) -> list[Square]:
        """Pseudo-legal destination squares for the piece on *sq*."""
        piece = self._pos.piece_at(sq)
        if piece is None or piece.color != self._pos.side_to_move:
            return []

        moves: list[Square] = []
        if piece.piece_type == PieceType.PAWN:
            self._gen_pawn(sq, piece, moves)
        elif piece.piece_type == PieceType.KNIGHT:
            self._gen_step(sq, piece, _KNIGHT_TARGETS[sq], moves)
        elif piece.piece_type == PieceType.KING:
            self._gen_step(sq, piece, _KING_TARGETS[sq], moves)
        elif piece.piece_type.is_slider:
            self._gen_sliding(sq, piece, _SLIDER_RAYS[piece.piece_type][sq], moves)
        return moves

    def all_destinations(self) -> dict[Square, list[Square]]:
        """Map every origin of the side to move to its destinations.

        Origins with no destination are omitted.
        """
        dests: dict[Square, list[Square]] = {}
        for sq, _piece in self._pos.pieces(self._pos.side_to_move):
            moves = self.destinations(sq)
            if moves:
                dests[sq] = moves
        return dests

    def destination_names(self) -> dict[str, list[str]]:
        """:meth:`all_destinations` keyed and valued by square names."""
        return {
            square_name(orig): [square_name(dest) for dest in moves]
            for orig, moves in self.all_destinations().items()
        }

    def can_move(self, orig: Square, dest: Square) -> bool:
        """Whether a drag from *orig* to *dest* is a pseudo-legal move."""
        return dest in self.destinations(orig)

    # -- Piece-specific generators (private) -------------------------------

    def _gen_pawn(self, sq: Square, piece: Piece, moves: list[Square]) -> None:
        pos = self._pos
        step = piece.color.pawn_step
        file_idx = file_of(sq)
        ahead = rank_of(sq) + step
        if not 0 <= ahead < 8:
            return

        one_step = make_square(file_idx, ahead)
        if pos.is_empty(one_step):
            moves.append(one_step)
            if rank_of(sq) == piece.color.pawn_home_rank:
                two_step = make_square(file_idx, ahead + step)
                if pos.is_empty(two_step):
                    moves.append(two_step)

        for cap_file in (file_idx - 1, file_idx + 1):
            if not 0 <= cap_file < 8:
                continue
            cap_sq = make_square(cap_file, ahead)
            if piece.is_enemy_of(pos.piece_at(cap_sq)):
                moves.append(cap_sq)
            elif (
                cap_sq == pos.en_passant
                and ahead == piece.color.en_passant_rank
                and pos.is_empty(cap_sq)
            ):
                moves.append(cap_sq)

    def _gen_step(
        self,
        sq: Square,
        piece: Piece,
        targets: tuple[Square, ...],
        moves: list[Square],
    ) -> None:
        pos = self._pos
        for to_sq in targets:
            if not piece.is_friend_of(pos.piece_at(to_sq)):
                moves.append(to_sq)

    def _gen_sliding(
        self,
        sq: Square,
        piece: Piece,
        rays: tuple[tuple[Square, ...], ...],
        moves: list[Square],
    ) -> None:
        pos = self._pos
        for ray in rays:
            for to_sq in ray:
                target = pos.piece_at(to_sq)
                if target is None:
                    moves.append(to_sq)
                    continue
                if target.color != piece.color:
                    moves.append(to_sq)
                break


def calculate_valid_moves(fen: str) -> dict[str, list[str]]:
    """Origin → destinations hint map for a board given as FEN."""
    return MoveGenerator.from_fen(fen).destination_names()

