"""Puzzle and practice-exercise validation on top of a :class:`TreeStore`.

A puzzle is a start FEN plus the full solution line in UCI. The solver's
replies are checked against the line; correct replies pull the next
solution pair onto the mainline, wrong ones are recorded as a variation
without moving the board.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import StrEnum

from pawnpath import rules
from pawnpath.core.enums import Color
from pawnpath.core.notation import position_from_fen
from pawnpath.tree.model import iter_mainline
from pawnpath.tree.store import TreeStore

_LOGGER = logging.getLogger(__name__)

DEFAULT_PLAYER_RATING = 1500
ELO_K_FACTOR = 40

# Expected-success window puzzles are drawn from, and the easier window
# used after a run of failures.
PROGRESSIVE_PROBABILITIES: tuple[float, float] = (0.4, 0.6)
EASY_PROBABILITIES: tuple[float, float] = (0.6, 0.8)
ADAPTIVE_CONSECUTIVE_FAILURES = 3


class Completion(StrEnum):
    CORRECT = "correct"
    INCORRECT = "incorrect"
    INCOMPLETE = "incomplete"


@dataclass
class Puzzle:
    fen: str
    moves: list[str] = field(default_factory=list)
    rating: int = 0
    completion: Completion = Completion.INCOMPLETE

    @property
    def player_color(self) -> Color:
        """Side the solver plays.

        With an even-length solution the opponent moves first.
        """
        to_move = position_from_fen(self.fen).side_to_move
        return to_move.opposite if len(self.moves) % 2 == 0 else to_move


@dataclass(frozen=True, slots=True)
class MoveCheck:
    """Outcome of one solver move."""

    accepted: bool
    solved: bool = False
    recorded: bool = False


class PuzzleSession:
    """Drives one :class:`Puzzle` through a tree store."""

    __slots__ = ("_store", "_puzzle", "_player_rating")

    def __init__(
        self,
        store: TreeStore,
        puzzle: Puzzle,
        *,
        player_rating: int = DEFAULT_PLAYER_RATING,
    ) -> None:
        self._store = store
        self._puzzle = puzzle
        self._player_rating = player_rating

    @property
    def puzzle(self) -> Puzzle:
        return self._puzzle

    @property
    def store(self) -> TreeStore:
        return self._store

    @property
    def player_rating(self) -> int:
        return self._player_rating

    def start(self) -> None:
        """Load the puzzle position, playing the opponent's opening move."""
        self._store.set_fen(self._puzzle.fen)
        if self._puzzle.moves and len(self._puzzle.moves) % 2 == 0:
            self._store.make_move(self._puzzle.moves[0], change_headers=False)

    def expected_index(self) -> int:
        """Number of leading mainline moves that follow the solution."""
        solution = self._puzzle.moves
        idx = 0
        for move in iter_mainline(self._store.root).moves():
            if idx >= len(solution) or move != solution[idx]:
                break
            idx += 1
        return idx

    def is_finished(self) -> bool:
        return self.expected_index() >= len(self._puzzle.moves)

    def check_move(self, uci: str) -> MoveCheck:
        """Judge the solver's *uci* move played at the solution frontier."""
        puzzle = self._puzzle
        idx = self.expected_index()
        if idx >= len(puzzle.moves) or self._store.position != (0,) * idx:
            _LOGGER.debug("Puzzle move %s ignored off the solution frontier", uci)
            return MoveCheck(accepted=False)

        played = rules.play_uci(self._store.current_node.fen, uci)
        if played is None:
            return MoveCheck(accepted=False)

        if played.uci == puzzle.moves[idx] or rules.is_checkmate(played.fen):
            solved = idx == len(puzzle.moves) - 1
            if solved and puzzle.completion is Completion.INCOMPLETE:
                self._complete(Completion.CORRECT)
            self._store.make_moves(
                puzzle.moves[idx : idx + 2], mainline=True, change_headers=False
            )
            return MoveCheck(accepted=True, solved=solved)

        self._store.make_move(uci, change_position=False, change_headers=False)
        if puzzle.completion is Completion.INCOMPLETE:
            self._complete(Completion.INCORRECT)
        return MoveCheck(accepted=False, recorded=True)

    def _complete(self, completion: Completion) -> None:
        """Record the verdict and move the player rating toward it.

        Unrated puzzles (rating 0) leave the player rating alone.
        """
        puzzle = self._puzzle
        puzzle.completion = completion
        if not puzzle.rating:
            return
        old = self._player_rating
        self._player_rating = update_elo(
            old, puzzle.rating, completion is Completion.CORRECT
        )
        _LOGGER.debug(
            "Puzzle %s: rating %d -> %d (puzzle %d)",
            completion,
            old,
            self._player_rating,
            puzzle.rating,
        )


# ── Rating ───────────────────────────────────────────────────────────────────


def expected_score(player_rating: float, puzzle_rating: float) -> float:
    """Elo probability that the player solves a puzzle of *puzzle_rating*."""
    return 1 / (1 + 10 ** ((puzzle_rating - player_rating) / 400))


def update_elo(
    player_rating: float,
    puzzle_rating: float,
    solved: bool,
    k_factor: float = ELO_K_FACTOR,
) -> int:
    score = 1.0 if solved else 0.0
    expected = expected_score(player_rating, puzzle_rating)
    return round(player_rating + k_factor * (score - expected))


def puzzle_range(
    player_rating: float,
    probabilities: tuple[float, float] = PROGRESSIVE_PROBABILITIES,
) -> tuple[int, int]:
    """Puzzle ratings whose expected score falls inside *probabilities*.

    The likelier bound gives the easy (low) end of the range.
    """
    min_prob, max_prob = probabilities
    if not 0 < min_prob <= max_prob < 1:
        raise ValueError(f"Invalid probability window: {probabilities!r}")

    def rating_for(expected: float) -> int:
        return round(player_rating + 400 * math.log10(1 / expected - 1))

    return rating_for(max_prob), rating_for(min_prob)


def adaptive_probabilities(recent: Sequence[Completion]) -> tuple[float, float]:
    """Switch to the easy window after a run of unsolved puzzles.

    The run counts trailing results since the last correct one.
    """
    failures = 0
    for completion in reversed(recent):
        if completion is Completion.CORRECT:
            break
        failures += 1
    if failures >= ADAPTIVE_CONSECUTIVE_FAILURES:
        return EASY_PROBABILITIES
    return PROGRESSIVE_PROBABILITIES


def adaptive_puzzle_range(
    player_rating: float, recent: Sequence[Completion]
) -> tuple[int, int]:
    return puzzle_range(player_rating, adaptive_probabilities(recent))


# ── Practice exercises ───────────────────────────────────────────────────────


@dataclass(frozen=True, slots=True)
class ExerciseCheck:
    correct: bool
    message: str


def check_exercise_move(
    orig: str, dest: str, correct_moves: Sequence[str]
) -> ExerciseCheck:
    """Compare a board gesture against an exercise's accepted moves."""
    if f"{orig}{dest}" in correct_moves:
        return ExerciseCheck(correct=True, message="Correct!")
    return ExerciseCheck(correct=False, message="Incorrect. Try again.")


class EvaluationType(StrEnum):
    OPTIMAL = "optimal"
    SUBOPTIMAL = "suboptimal"
    INCORRECT = "incorrect"


@dataclass(frozen=True, slots=True)
class MoveEvaluation:
    type: EvaluationType
    move_count: int
    is_checkmate: bool
    message: str


def evaluate_checkmate_moves(
    fen: str, moves: Sequence[str], target: int
) -> MoveEvaluation:
    """Grade a mating attempt of *moves* against a mate in *target*.

    Mating at or under *target* moves is optimal, mating later is
    suboptimal, and an illegal move or a non-mating line is incorrect.
    """
    count = len(moves)
    current = fen
    for move in moves:
        played = rules.play_uci(current, move)
        if played is None:
            return MoveEvaluation(
                EvaluationType.INCORRECT,
                count,
                False,
                f"Invalid move: {move}. Please make a legal move.",
            )
        current = played.fen

    if not rules.is_checkmate(current):
        return MoveEvaluation(
            EvaluationType.INCORRECT,
            count,
            False,
            "Position is not checkmate. Keep trying!",
        )
    if count == target:
        return MoveEvaluation(
            EvaluationType.OPTIMAL,
            count,
            True,
            f"Perfect! Checkmate in {count} moves - optimal solution!",
        )
    if count < target:
        return MoveEvaluation(
            EvaluationType.OPTIMAL,
            count,
            True,
            f"Excellent! Checkmate in {count} moves - even better than expected!",
        )
    return MoveEvaluation(
        EvaluationType.SUBOPTIMAL,
        count,
        True,
        f"Checkmate in {count} moves, but there is a faster solution "
        f"in {target} moves.",
    )
