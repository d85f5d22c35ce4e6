"""Exception hierarchy shared by the board and tree layers."""

from __future__ import annotations

from collections.abc import Sequence


class PawnpathError(Exception):
    """Base class for all library errors."""


class MalformedPositionEncoding(PawnpathError, ValueError):
    """A board-position string failed structural validation."""

    def __init__(self, message: str, fen: str) -> None:
        super().__init__(f"{message}: {fen!r}")
        self.fen = fen


class PathNotFound(PawnpathError, LookupError):
    """A path addressed a node that does not exist in the tree.

    ``valid_prefix`` is the longest leading part of ``path`` that still
    resolves, so callers can clamp to the nearest surviving ancestor.
    """

    def __init__(self, path: Sequence[int], valid_prefix: Sequence[int]) -> None:
        self.path = tuple(path)
        self.valid_prefix = tuple(valid_prefix)
        super().__init__(
            f"No node at path {list(self.path)} "
            f"(deepest valid prefix {list(self.valid_prefix)})"
        )


class SessionFormatError(PawnpathError, ValueError):
    """A persisted session payload could not be decoded into a tree."""


class PgnImportError(PawnpathError, ValueError):
    """PGN text contained no game, or a game the tree cannot hold."""
