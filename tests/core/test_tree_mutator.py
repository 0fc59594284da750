"""
Tests for deletion sets and moves.
"""
from datetime import datetime

import pytest

from notetree.core.errors import InvalidMoveError
from notetree.core.tree_builder import build_tree
from notetree.core.tree_mutator import deletion_set, is_descendant_or_self, move_notebook


def _by_id(notebooks):
    return {n.id: n for n in notebooks}


def test_deletion_set_is_complete(tree):
    assert deletion_set("A", tree) == {"A", "B", "C", "D"}


def test_deletion_set_of_subtree_and_leaf(tree):
    assert deletion_set("B", tree) == {"B", "C"}
    assert deletion_set("D", tree) == {"D"}


def test_deletion_set_of_unknown_id(tree):
    assert deletion_set("missing", tree) == {"missing"}


def test_is_descendant_or_self(tree):
    assert is_descendant_or_self("C", "A", tree)
    assert is_descendant_or_self("A", "A", tree)
    assert not is_descendant_or_self("D", "B", tree)


def test_move_updates_whole_subtree(tree):
    moved = _by_id(move_notebook("B", "D", tree))

    assert moved["B"].parent_id == "D"
    assert moved["B"].path == "A/D/B"
    assert moved["C"].path == "A/D/B/C"
    assert moved["B"].level == 2
    assert moved["C"].level == 3
    assert moved["A"].children == ["D"]
    assert moved["D"].children == ["B"]


def test_move_to_root(tree):
    moved = _by_id(move_notebook("B", None, tree))
    assert moved["B"].parent_id is None
    assert moved["B"].path == "B"
    assert moved["C"].path == "B/C"
    assert moved["C"].level == 1
    assert moved["A"].children == ["D"]


def test_move_bumps_updated_at(tree):
    when = datetime(2026, 5, 1, 9, 30)
    moved = _by_id(move_notebook("B", "D", tree, now=when))
    assert moved["B"].updated_at == when
    assert moved["D"].updated_at != when


def test_move_result_is_a_fixed_point(tree):
    moved = move_notebook("B", "D", tree)
    rebuilt = _by_id(build_tree(moved))
    for notebook in moved:
        assert rebuilt[notebook.id].path == notebook.path
        assert rebuilt[notebook.id].level == notebook.level
        assert rebuilt[notebook.id].children == notebook.children


def test_move_under_own_descendant_is_rejected(tree):
    before = [(n.id, n.parent_id, n.path) for n in tree]
    with pytest.raises(InvalidMoveError):
        move_notebook("A", "C", tree)
    assert [(n.id, n.parent_id, n.path) for n in tree] == before


def test_move_under_itself_is_rejected(tree):
    with pytest.raises(InvalidMoveError) as excinfo:
        move_notebook("B", "B", tree)
    assert excinfo.value.notebook_id == "B"
    assert excinfo.value.new_parent_id == "B"


def test_move_does_not_mutate_input(tree):
    move_notebook("B", "D", tree)
    by_id = _by_id(tree)
    assert by_id["B"].parent_id == "A"
    assert by_id["A"].children == ["B", "D"]


def test_move_unknown_notebook_returns_tree_unchanged(tree):
    result = move_notebook("missing", "A", tree)
    assert [(n.id, n.parent_id, n.path) for n in result] == [(n.id, n.parent_id, n.path) for n in tree]
