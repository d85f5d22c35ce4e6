"""Tree-store settings."""

from __future__ import annotations

from dataclasses import dataclass, field

from pawnpath.core.notation import STARTING_FEN

# Seven Tag Roster defaults for a fresh game.
DEFAULT_HEADERS: dict[str, str] = {
    "Event": "?",
    "Site": "?",
    "Date": "????.??.??",
    "Round": "?",
    "White": "?",
    "Black": "?",
    "Result": "*",
}

SESSION_VERSION = 0


@dataclass
class TreeSettings:
    """Defaults a :class:`~pawnpath.tree.store.TreeStore` starts from."""

    start_fen: str = STARTING_FEN
    default_headers: dict[str, str] = field(
        default_factory=lambda: dict(DEFAULT_HEADERS)
    )

    def headers_for(self, fen: str) -> dict[str, str]:
        """Fresh header map, adding ``SetUp``/``FEN`` for custom starts."""
        headers = dict(self.default_headers)
        if fen != STARTING_FEN:
            headers["SetUp"] = "1"
            headers["FEN"] = fen
        return headers
