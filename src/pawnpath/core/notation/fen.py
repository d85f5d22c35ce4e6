"""FEN decoding for exercise and lesson boards."""

from __future__ import annotations

from pawnpath.core.enums import Color
from pawnpath.core.piece import Piece
from pawnpath.core.position import Position
from pawnpath.core.types import Square, make_square, parse_square, rank_of
from pawnpath.errors import MalformedPositionEncoding

STARTING_FEN = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1"

_CASTLING_CHARS = frozenset("KQkq")


def position_from_fen(fen: str) -> Position:
    """Parse a six-field FEN string into a :class:`Position`.

    Raises :class:`MalformedPositionEncoding` on any structural problem;
    nothing is defaulted.
    """
    parts = fen.split()
    if len(parts) != 6:
        raise MalformedPositionEncoding("FEN must have exactly 6 fields", fen)

    placement_part, side_part, castling_part, ep_part, half_part, full_part = parts

    placement = _parse_placement(placement_part, fen)

    try:
        side = Color.from_token(side_part)
    except ValueError:
        raise MalformedPositionEncoding(
            f"Invalid side-to-move field {side_part!r}", fen
        ) from None

    # Castling token is kept verbatim once validated
    if castling_part != "-":
        if not set(castling_part) <= _CASTLING_CHARS or len(set(castling_part)) != len(
            castling_part
        ):
            raise MalformedPositionEncoding(
                f"Invalid castling field {castling_part!r}", fen
            )

    # En passant
    ep: Square | None = None
    if ep_part != "-":
        try:
            ep = parse_square(ep_part)
        except ValueError:
            raise MalformedPositionEncoding(
                f"Invalid en-passant square {ep_part!r}", fen
            ) from None
        if rank_of(ep) not in (2, 5):
            raise MalformedPositionEncoding(
                f"En-passant square {ep_part!r} is not on rank 3 or 6", fen
            )
        if rank_of(ep) != side.en_passant_rank:
            raise MalformedPositionEncoding(
                f"En-passant square {ep_part!r} does not fit the side to move",
                fen,
            )

    halfmove = _parse_counter(half_part, "halfmove clock", 0, fen)
    fullmove = _parse_counter(full_part, "fullmove number", 1, fen)

    return Position(placement, side, castling_part, ep, halfmove, fullmove)


def _parse_placement(text: str, fen: str) -> dict[Square, Piece]:
    ranks = text.split("/")
    if len(ranks) != 8:
        raise MalformedPositionEncoding("Board must contain 8 ranks", fen)

    placement: dict[Square, Piece] = {}
    for rank_idx, rank_text in enumerate(ranks):
        rank = 7 - rank_idx
        file = 0
        for ch in rank_text:
            if ch.isdigit():
                step = int(ch)
                if not (1 <= step <= 8):
                    raise MalformedPositionEncoding(f"Invalid digit {ch!r}", fen)
                file += step
            else:
                if file >= 8:
                    raise MalformedPositionEncoding(
                        f"Rank {rank + 1} is wider than 8 files", fen
                    )
                try:
                    placement[make_square(file, rank)] = Piece.from_char(ch)
                except ValueError:
                    raise MalformedPositionEncoding(
                        f"Invalid piece letter {ch!r}", fen
                    ) from None
                file += 1
        if file != 8:
            raise MalformedPositionEncoding(
                f"Rank {rank + 1} spans {file} files, expected 8", fen
            )
    return placement


def _parse_counter(text: str, name: str, minimum: int, fen: str) -> int:
    if not text.isdigit():
        raise MalformedPositionEncoding(f"Invalid {name} {text!r}", fen)
    value = int(text)
    if value < minimum:
        raise MalformedPositionEncoding(f"Invalid {name} {text!r}", fen)
    return value
