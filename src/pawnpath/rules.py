"""Full chess-rules collaborator backed by python-chess.

The tree store accepts only moves validated here. Exercise boards use the
lighter :mod:`pawnpath.core.move_generator` instead.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

import chess

_LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class PlayedMove:
    """A legal move together with the notation and position it yields."""

    uci: str
    san: str
    fen: str


def _board(fen: str) -> chess.Board | None:
    try:
        return chess.Board(fen)
    except ValueError:
        _LOGGER.warning("Rules engine rejected FEN %r", fen)
        return None


def play_uci(fen: str, uci: str) -> PlayedMove | None:
    """Play *uci* from *fen*; ``None`` if the move is illegal or unparsable."""
    board = _board(fen)
    if board is None:
        return None
    try:
        move = board.parse_uci(uci)
    except ValueError:
        _LOGGER.debug("Illegal move %s in %s", uci, fen)
        return None
    if not move:
        _LOGGER.debug("Null move %s ignored in %s", uci, fen)
        return None
    san = board.san(move)
    board.push(move)
    return PlayedMove(uci=move.uci(), san=san, fen=board.fen())


def play_line(fen: str, moves: list[str]) -> list[PlayedMove] | None:
    """Play a UCI sequence from *fen*; ``None`` if any move is illegal."""
    played: list[PlayedMove] = []
    current = fen
    for uci in moves:
        result = play_uci(current, uci)
        if result is None:
            return None
        played.append(result)
        current = result.fen
    return played


def is_checkmate(fen: str) -> bool:
    board = _board(fen)
    return board is not None and board.is_checkmate()


def is_check(fen: str) -> bool:
    board = _board(fen)
    return board is not None and board.is_check()


def legal_destinations(fen: str) -> dict[str, list[str]]:
    """Strictly legal origin → destinations map for the analysis board."""
    board = _board(fen)
    if board is None:
        return {}
    dests: dict[str, list[str]] = {}
    for move in board.legal_moves:
        orig = chess.square_name(move.from_square)
        dest = chess.square_name(move.to_square)
        targets = dests.setdefault(orig, [])
        if dest not in targets:
            targets.append(dest)
    return dests


def outcome_result(fen: str) -> str | None:
    """PGN result token if the game is over in *fen*, else ``None``."""
    board = _board(fen)
    if board is None:
        return None
    outcome = board.outcome()
    return outcome.result() if outcome is not None else None
