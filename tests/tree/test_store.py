"""Tests for TreeStore moves, navigation, edits and the dirty flag."""

from __future__ import annotations

import logging

import pytest

from pawnpath.config import TreeSettings
from pawnpath.core.notation import STARTING_FEN
from pawnpath.errors import MalformedPositionEncoding
from pawnpath.tree import model
from pawnpath.tree.model import TreeStats
from pawnpath.tree.node import Annotation, Brush, GameNode, Shape
from pawnpath.tree.state import TreeState
from pawnpath.tree.store import TreeStore

FOOLS_MATE = ["f2f3", "e7e5", "g2g4", "d8h4"]
AFTER_E4 = "rnbqkbnr/pppppppp/8/8/4P3/8/PPPP1PPP/RNBQKBNR b KQkq - 0 1"


def _moves(node: GameNode) -> list[str | None]:
    return [child.move for child in node.children]


# ── Making moves ─────────────────────────────────────────────────────────────


class TestMakeMove:
    def test_first_move_becomes_mainline(self, store: TreeStore) -> None:
        assert store.make_move("e2e4")
        assert _moves(store.root) == ["e2e4"]
        assert store.position == (0,)
        assert store.current_node.san == "e4"
        assert store.current_node.fen == AFTER_E4
        assert store.current_node.half_move_index == 1

    def test_later_move_is_trailing_variation(self, store: TreeStore) -> None:
        store.make_move("e2e4")
        store.go_to_start()
        store.make_move("d2d4")
        assert _moves(store.root) == ["e2e4", "d2d4"]
        assert store.position == (1,)

    def test_mainline_flag_splices_at_front(self, store: TreeStore) -> None:
        store.make_move("e2e4")
        store.go_to_start()
        store.make_move("d2d4", mainline=True)
        assert _moves(store.root) == ["d2d4", "e2e4"]
        assert store.position == (0,)

    def test_first_move_ever_played_stays_mainline(self, store: TreeStore) -> None:
        for move in ("e2e4", "d2d4", "c2c4", "g1f3"):
            store.go_to_start()
            store.make_move(move)
        assert store.root.children[0].move == "e2e4"

    def test_existing_variation_is_reused_not_promoted(
        self, branched_store: TreeStore
    ) -> None:
        branched_store.go_to_move((0,))
        branched_store.make_move("c7c5")
        assert _moves(branched_store.current_node) == ["g1f3"]
        assert branched_store.position == (0, 1)
        assert _moves(branched_store.root.children[0]) == ["e7e5", "c7c5", "e7e6"]

    def test_existing_child_reused_with_mainline_flag(
        self, branched_store: TreeStore
    ) -> None:
        branched_store.go_to_move((0,))
        branched_store.make_move("e7e6", mainline=True)
        assert branched_store.position == (0, 2)
        assert _moves(branched_store.root.children[0]) == ["e7e5", "c7c5", "e7e6"]

    def test_without_changing_position(self, store: TreeStore) -> None:
        store.make_move("e2e4", change_position=False)
        assert store.position == ()
        assert _moves(store.root) == ["e2e4"]
        assert store.dirty

    def test_illegal_move_is_noop(
        self, store: TreeStore, caplog: pytest.LogCaptureFixture
    ) -> None:
        with caplog.at_level(logging.WARNING, logger="pawnpath.tree.store"):
            assert not store.make_move("e2e5")
        assert store.root.children == []
        assert not store.dirty
        assert "Rejected move e2e5" in caplog.text

    def test_garbage_move_is_noop(self, store: TreeStore) -> None:
        assert not store.make_move("hello")
        assert store.root.children == []

    def test_checkmate_sets_result_header(self, store: TreeStore) -> None:
        store.make_moves(FOOLS_MATE)
        assert store.headers["Result"] == "0-1"

    def test_result_header_untouched_when_disabled(self, store: TreeStore) -> None:
        store.make_moves(FOOLS_MATE, change_headers=False)
        assert store.headers["Result"] == "*"

    def test_change_event_fires(self, store: TreeStore) -> None:
        seen: list[tuple[int, ...]] = []
        store.events.on_change.append(lambda s: seen.append(s.position))
        store.make_move("e2e4")
        assert seen == [(0,)]


class TestMakeMoves:
    def test_plays_in_order(self, store: TreeStore) -> None:
        assert store.make_moves(["e2e4", "e7e5", "g1f3"]) == 3
        assert store.position == (0, 0, 0)
        assert store.current_node.san == "Nf3"

    def test_stops_at_first_illegal_move(self, store: TreeStore) -> None:
        assert store.make_moves(["e2e4", "e7e5", "e1e3", "g1f3"]) == 2
        assert store.position == (0, 0)

    def test_mainline_bulk_insert(self, branched_store: TreeStore) -> None:
        branched_store.go_to_move((0,))
        branched_store.make_moves(["d7d5", "e4d5"], mainline=True)
        assert branched_store.position == (0, 0, 0)
        assert _moves(branched_store.root.children[0]) == [
            "d7d5",
            "e7e5",
            "c7c5",
            "e7e6",
        ]


# ── Navigation ───────────────────────────────────────────────────────────────


class TestNavigation:
    def test_go_to_move_is_idempotent_and_clean(
        self, branched_store: TreeStore
    ) -> None:
        branched_store.go_to_move((0, 1, 0))
        branched_store.go_to_move((0, 1, 0))
        assert branched_store.position == (0, 1, 0)
        assert not branched_store.dirty

    def test_go_to_move_clamps_stale_path(
        self, branched_store: TreeStore, caplog: pytest.LogCaptureFixture
    ) -> None:
        with caplog.at_level(logging.WARNING, logger="pawnpath.tree.store"):
            branched_store.go_to_move((0, 0, 9, 1))
        assert branched_store.position == (0, 0)
        assert "clamping" in caplog.text

    def test_step_forward_and_back(self, branched_store: TreeStore) -> None:
        branched_store.go_to_next()
        branched_store.go_to_next()
        assert branched_store.position == (0, 0)
        branched_store.go_to_previous()
        assert branched_store.position == (0,)

    def test_boundaries_are_noops(self, branched_store: TreeStore) -> None:
        calls: list[object] = []
        branched_store.events.on_change.append(calls.append)
        branched_store.go_to_previous()
        branched_store.go_to_start()
        assert branched_store.position == ()
        branched_store.go_to_end()
        calls.clear()
        branched_store.go_to_next()
        branched_store.go_to_end()
        assert branched_store.position == (0, 0, 0, 0)
        assert calls == []

    def test_go_to_end_follows_current_line(self, branched_store: TreeStore) -> None:
        branched_store.go_to_move((0, 1))
        branched_store.go_to_end()
        assert branched_store.position == (0, 1, 0)

    def test_branch_end(self, branched_store: TreeStore) -> None:
        branched_store.go_to_move((0, 0))
        branched_store.go_to_branch_end()
        assert branched_store.position == (0, 0, 0, 0)

    def test_branch_start_walks_out_of_variation(
        self, branched_store: TreeStore
    ) -> None:
        branched_store.go_to_move((0, 1, 0))
        branched_store.go_to_branch_start()
        assert branched_store.position == (0, 1)
        branched_store.go_to_branch_start()
        assert branched_store.position == (0,)
        branched_store.go_to_branch_start()
        assert branched_store.position == ()

    def test_branch_start_on_mainline_goes_to_root(
        self, branched_store: TreeStore
    ) -> None:
        branched_store.go_to_end()
        branched_store.go_to_branch_start()
        assert branched_store.position == ()

    def test_next_and_previous_branch_cycle(self, branched_store: TreeStore) -> None:
        branched_store.go_to_move((0, 0, 0))
        branched_store.next_branch()
        assert branched_store.position == (0, 1)
        branched_store.next_branch()
        assert branched_store.position == (0, 2)
        branched_store.next_branch()
        assert branched_store.position == (0, 0)
        branched_store.previous_branch()
        assert branched_store.position == (0, 2)

    def test_branch_cycle_without_alternatives(self, store: TreeStore) -> None:
        store.make_moves(["e2e4", "e7e5"])
        store.next_branch()
        store.previous_branch()
        assert store.position == (0, 0)

    def test_next_branching(self, branched_store: TreeStore) -> None:
        branched_store.next_branching()
        assert branched_store.position == (0,)
        branched_store.next_branching()
        assert branched_store.position == (0, 0, 0, 0)
        branched_store.next_branching()
        assert branched_store.position == (0, 0, 0, 0)

    def test_previous_branching(self, branched_store: TreeStore) -> None:
        branched_store.go_to_end()
        branched_store.previous_branching()
        assert branched_store.position == (0,)
        branched_store.previous_branching()
        assert branched_store.position == ()
        branched_store.previous_branching()
        assert branched_store.position == ()

    def test_navigation_never_dirties(self, branched_store: TreeStore) -> None:
        branched_store.go_to_end()
        branched_store.go_to_branch_start()
        branched_store.next_branching()
        branched_store.next_branch()
        branched_store.previous_branching()
        assert not branched_store.dirty


# ── Structural edits ─────────────────────────────────────────────────────────


class TestDeleteMove:
    def test_deleting_viewed_branch_clamps_to_ancestor(
        self, branched_store: TreeStore
    ) -> None:
        branched_store.go_to_end()
        branched_store.delete_move((0, 0))
        assert branched_store.position == (0,)
        assert _moves(branched_store.current_node) == ["c7c5", "e7e6"]
        assert branched_store.dirty

    def test_deletes_current_node_by_default(self, branched_store: TreeStore) -> None:
        branched_store.go_to_move((0, 1, 0))
        branched_store.delete_move()
        assert branched_store.position == (0, 1)
        assert branched_store.current_node.children == []

    def test_earlier_sibling_removal_keeps_current_node(
        self, branched_store: TreeStore
    ) -> None:
        branched_store.go_to_move((0, 2))
        branched_store.delete_move((0, 1))
        assert branched_store.position == (0, 1)
        assert branched_store.current_node.move == "e7e6"

    def test_later_sibling_removal_keeps_position(
        self, branched_store: TreeStore
    ) -> None:
        branched_store.go_to_move((0, 1, 0))
        branched_store.delete_move((0, 2))
        assert branched_store.position == (0, 1, 0)
        assert branched_store.current_node.move == "g1f3"

    def test_root_cannot_be_deleted(self, branched_store: TreeStore) -> None:
        branched_store.delete_move()
        assert branched_store.stats().total == 7
        assert not branched_store.dirty

    def test_stale_path_is_noop(
        self, branched_store: TreeStore, caplog: pytest.LogCaptureFixture
    ) -> None:
        with caplog.at_level(logging.WARNING, logger="pawnpath.tree.store"):
            branched_store.delete_move((0, 7))
        assert branched_store.stats().total == 7
        assert not branched_store.dirty
        assert "Cannot delete move" in caplog.text


class TestPromoteVariation:
    def test_promote_current(self, branched_store: TreeStore) -> None:
        branched_store.go_to_move((0, 2))
        branched_store.promote_variation()
        assert _moves(branched_store.root.children[0]) == ["e7e6", "e7e5", "c7c5"]
        assert branched_store.position == (0, 0)
        assert branched_store.current_node.move == "e7e6"
        assert branched_store.dirty

    def test_position_follows_shifted_sibling(
        self, branched_store: TreeStore
    ) -> None:
        branched_store.go_to_move((0, 0, 0))
        fen = branched_store.current_node.fen
        branched_store.promote_variation((0, 1))
        assert branched_store.position == (0, 1, 0)
        assert branched_store.current_node.fen == fen

    def test_mainline_is_noop(self, branched_store: TreeStore) -> None:
        branched_store.promote_variation((0, 0))
        assert not branched_store.dirty


# ── Annotations ──────────────────────────────────────────────────────────────


class TestAnnotations:
    def test_toggle(self, store: TreeStore) -> None:
        store.make_move("e2e4")
        store.set_annotation("!")
        assert store.current_node.annotation is Annotation.GOOD
        store.set_annotation(Annotation.GOOD)
        assert store.current_node.annotation is Annotation.NONE

    def test_replace(self, store: TreeStore) -> None:
        store.make_move("e2e4")
        store.set_annotation("!")
        store.set_annotation("??")
        assert store.current_node.annotation is Annotation.BLUNDER

    def test_root_is_not_annotated(self, store: TreeStore) -> None:
        store.set_annotation("!!")
        assert store.root.annotation is Annotation.NONE
        assert not store.dirty

    def test_unknown_glyph(self, store: TreeStore) -> None:
        store.make_move("e2e4")
        with pytest.raises(ValueError):
            store.set_annotation("!!!")

    def test_comment(self, store: TreeStore) -> None:
        store.make_move("e2e4")
        store.set_comment("King's pawn")
        assert store.current_node.comment == "King's pawn"

    def test_add_shape_toggles(self, store: TreeStore) -> None:
        arrow = Shape("g1", "f3", Brush.BLUE)
        store.add_shape(arrow)
        store.add_shape(Shape("e4"))
        assert store.current_node.shapes == [arrow, Shape("e4")]
        store.add_shape(arrow)
        assert store.current_node.shapes == [Shape("e4")]

    def test_set_and_clear_shapes(self, store: TreeStore) -> None:
        store.set_shapes([Shape("d4"), Shape("d5", brush=Brush.RED)])
        assert len(store.current_node.shapes) == 2
        store.clear_shapes()
        assert store.current_node.shapes == []


# ── Dirty flag and lifecycle ─────────────────────────────────────────────────


class TestDirtyFlag:
    def test_save_then_mutations(self, store: TreeStore) -> None:
        assert not store.dirty
        store.make_move("e2e4")
        assert store.dirty
        store.save()
        assert not store.dirty
        store.set_annotation("!?")
        assert store.dirty
        store.save()
        store.clear_shapes()
        assert store.dirty
        store.save()
        store.make_move("e7e5")
        assert store.dirty

    def test_dirty_event_fires_on_transitions_only(self, store: TreeStore) -> None:
        seen: list[bool] = []
        store.events.on_dirty_changed.append(seen.append)
        store.make_move("e2e4")
        store.make_move("e7e5")
        store.save()
        store.save()
        store.set_comment("x")
        assert seen == [True, False, True]


class TestLifecycle:
    def test_reset(self, branched_store: TreeStore) -> None:
        branched_store.make_move("e2e4")
        branched_store.reset()
        assert branched_store.stats() == TreeStats(leafs=0, depth=0, total=0)
        assert branched_store.position == ()
        assert not branched_store.dirty

    def test_set_state_clamps_position(self, branched_store: TreeStore) -> None:
        state = branched_store.snapshot()
        state.position = (0, 2, 5)
        fresh = TreeStore()
        fresh.make_move("e2e4")
        fresh.set_state(state)
        assert fresh.position == (0, 2)
        assert not fresh.dirty

    def test_set_fen(self, store: TreeStore) -> None:
        fen = "4k3/8/8/8/8/8/8/4K2R w K - 0 1"
        store.make_move("e2e4")
        store.set_fen(fen)
        assert store.root.fen == fen
        assert store.root.children == []
        assert store.headers["FEN"] == fen
        assert store.headers["SetUp"] == "1"
        assert store.dirty

    def test_set_fen_rejects_malformed(self, store: TreeStore) -> None:
        store.make_move("e2e4")
        with pytest.raises(MalformedPositionEncoding):
            store.set_fen("4k3/8/8 w - - 0 1")
        assert _moves(store.root) == ["e2e4"]

    def test_set_headers(self, store: TreeStore) -> None:
        store.set_headers({"White": "Morphy", "Black": "Duke"})
        assert store.headers == {"White": "Morphy", "Black": "Duke"}
        assert store.dirty

    def test_snapshot_is_independent(self, branched_store: TreeStore) -> None:
        snap = branched_store.snapshot()
        snap.root.children.clear()
        assert branched_store.stats().total == 7

    def test_initial_state_and_settings(self) -> None:
        fen = "4k3/8/8/8/8/8/8/4K2R w K - 0 1"
        settings = TreeSettings(start_fen=fen)
        s = TreeStore(settings=settings)
        assert s.root.fen == fen
        s.make_move("e1g1")
        s.reset()
        assert s.root.fen == fen

    def test_stale_initial_position_is_clamped(self) -> None:
        state = TreeState(root=GameNode(fen=STARTING_FEN), position=(0, 0))
        assert TreeStore(state).position == ()


# ── Shared tree edited elsewhere ─────────────────────────────────────────────


class TestStalePosition:
    def test_navigation_after_external_removal(
        self, store: TreeStore, caplog: pytest.LogCaptureFixture
    ) -> None:
        store.make_moves(["e2e4", "e7e5"])
        model.remove_subtree(store.root, (0, 0))
        with caplog.at_level(logging.WARNING, logger="pawnpath.tree.store"):
            store.go_to_next()
        assert store.position == (0,)
        assert "clamping" in caplog.text

    def test_move_from_out_of_range_position(self, store: TreeStore) -> None:
        store.make_move("e2e4")
        store.state.position = (0, 5)
        assert store.make_move("e7e5")
        assert store.position == (0, 0)
        assert _moves(store.root.children[0]) == ["e7e5"]

    def test_markup_lands_on_surviving_ancestor(self, store: TreeStore) -> None:
        store.make_moves(["e2e4", "e7e5"])
        store.root.children[0].children.clear()
        store.set_comment("king pawn")
        store.add_shape(Shape("e2", "e4"))
        node = store.root.children[0]
        assert node.comment == "king pawn"
        assert node.shapes == [Shape("e2", "e4")]

    def test_branch_moves_with_stale_position(
        self, branched_store: TreeStore
    ) -> None:
        branched_store.go_to_move((0, 1, 0))
        del branched_store.root.children[0].children[1]
        branched_store.previous_branching()
        assert branched_store.position == (0,)
        branched_store.state.position = (0, 0, 9)
        branched_store.next_branch()
        assert branched_store.position == (0, 1)
        branched_store.state.position = (3,)
        branched_store.go_to_end()
        assert branched_store.position == (0, 0, 0, 0)
