"""PGN import/export of game trees through python-chess.

Glyphs map to NAGs 1-6. Shapes travel inside move comments as
``[%csl ...]`` (square highlights) and ``[%cal ...]`` (arrows) commands.
"""

from __future__ import annotations

import io
import logging

import chess
import chess.pgn
import chess.svg

from pawnpath.core.notation import STARTING_FEN
from pawnpath.errors import PgnImportError
from pawnpath.tree.model import append_child
from pawnpath.tree.node import Annotation, Brush, GameNode, Shape
from pawnpath.tree.state import TreeState

_LOGGER = logging.getLogger(__name__)


# ── Import ───────────────────────────────────────────────────────────────────


def tree_from_pgn(text: str) -> TreeState:
    """Parse the first game in *text* into a tree, variations included.

    Raises :class:`~pawnpath.errors.PgnImportError` when there is no game
    or the movetext contains an illegal move.
    """
    game = chess.pgn.read_game(io.StringIO(text))
    if game is None:
        raise PgnImportError("PGN: no game found")
    if game.errors:
        raise PgnImportError(f"PGN: {game.errors[0]}")

    board = game.board()
    root = GameNode(fen=board.fen())
    _import_markup(game, root)
    _import_variations(game, root, board)

    headers = {str(k): str(v) for k, v in game.headers.items()}
    _LOGGER.debug(
        "Imported PGN game %s - %s", headers.get("White"), headers.get("Black")
    )
    return TreeState(root=root, headers=headers)


def _import_variations(
    source: chess.pgn.GameNode, target: GameNode, board: chess.Board
) -> None:
    for variation in source.variations:
        move = variation.move
        san = board.san(move)
        board.push(move)
        node = append_child(target, move.uci(), board.fen(), san=san)
        node.annotation = _annotation_from_nags(variation.nags)
        _import_markup(variation, node)
        _import_variations(variation, node, board)
        board.pop()


def _import_markup(source: chess.pgn.GameNode, target: GameNode) -> None:
    target.shapes = [_shape_from_arrow(arrow) for arrow in source.arrows()]
    target.comment = _plain_comment(source)


def _annotation_from_nags(nags: set[int]) -> Annotation:
    for nag in sorted(nags):
        annotation = Annotation.from_nag(nag)
        if annotation:
            return annotation
    return Annotation.NONE


def _shape_from_arrow(arrow: chess.svg.Arrow) -> Shape:
    orig = chess.square_name(arrow.tail)
    dest = None if arrow.head == arrow.tail else chess.square_name(arrow.head)
    try:
        brush = Brush(arrow.color)
    except ValueError:
        brush = Brush.GREEN
    return Shape(orig, dest, brush)


def _plain_comment(node: chess.pgn.GameNode) -> str:
    """Comment text with the shape commands stripped out."""
    node.set_arrows([])
    return node.comment.strip()


# ── Export ───────────────────────────────────────────────────────────────────


def tree_to_pgn(
    state: TreeState,
    *,
    comments: bool = True,
    glyphs: bool = True,
    variations: bool = True,
) -> str:
    """Render *state* as PGN text."""
    game = chess.pgn.Game()
    if state.root.fen != STARTING_FEN:
        game.setup(state.root.fen)
    for key, value in state.headers.items():
        game.headers[key] = value
    _export_markup(state.root, game)

    _export_children(state.root, game, glyphs=glyphs)

    exporter = chess.pgn.StringExporter(
        headers=True, variations=variations, comments=comments
    )
    return game.accept(exporter)


def _export_children(
    source: GameNode, target: chess.pgn.GameNode, *, glyphs: bool
) -> None:
    for child in source.children:
        assert child.move is not None
        nags = [child.annotation.nag] if glyphs and child.annotation else []
        variation = target.add_variation(chess.Move.from_uci(child.move), nags=nags)
        _export_markup(child, variation)
        _export_children(child, variation, glyphs=glyphs)


def _export_markup(source: GameNode, target: chess.pgn.GameNode) -> None:
    """Comment text followed by the shape commands of *source*."""
    target.comment = source.comment
    if source.shapes:
        target.set_arrows(_arrow_from_shape(shape) for shape in source.shapes)


def _arrow_from_shape(shape: Shape) -> chess.svg.Arrow:
    tail = chess.parse_square(shape.orig)
    head = chess.parse_square(shape.dest) if shape.dest else tail
    return chess.svg.Arrow(tail, head, color=shape.brush.value)
