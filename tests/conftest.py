"""Shared pytest fixtures used across the test suite."""

from __future__ import annotations

import os
import sys
from collections.abc import Iterator

import pytest

from pawnpath.tree.store import TreeStore

# Linux CI runners are often headless. Force an offscreen backend only there.
if (
    sys.platform.startswith("linux")
    and "QT_QPA_PLATFORM" not in os.environ
    and "DISPLAY" not in os.environ
    and "WAYLAND_DISPLAY" not in os.environ
):
    os.environ["QT_QPA_PLATFORM"] = "offscreen"


@pytest.fixture(scope="session")
def qapp() -> Iterator[object]:
    """Provide a singleton QCoreApplication for signal tests."""
    from PyQt6.QtCore import QCoreApplication

    app = QCoreApplication.instance()
    if app is None:
        app = QCoreApplication([])
    yield app


@pytest.fixture
def store() -> TreeStore:
    return TreeStore()


@pytest.fixture
def branched_store() -> TreeStore:
    """1. e4 e5 (1... c5 2. Nf3) (1... e6) 2. Nf3 Nc6, positioned at the root."""
    s = TreeStore()
    s.make_moves(["e2e4", "e7e5", "g1f3", "b8c6"])
    s.go_to_move((0,))
    s.make_moves(["c7c5", "g1f3"])
    s.go_to_move((0,))
    s.make_move("e7e6")
    s.go_to_start()
    s.save()
    return s
