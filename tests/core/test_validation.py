"""
Tests for notebook name, nesting and move validation.
"""
from notetree.core.validation import (
    MAX_NAME_LENGTH,
    validate_notebook_move,
    validate_notebook_name,
    validate_notebook_nesting,
)


def test_valid_name(tree):
    assert validate_notebook_name("Research", tree).is_valid


def test_blank_name(tree):
    result = validate_notebook_name("   ", tree)
    assert not result.is_valid
    assert "empty" in result.error


def test_name_too_long(tree):
    assert not validate_notebook_name("x" * (MAX_NAME_LENGTH + 1), tree).is_valid


def test_name_with_separator(tree):
    assert not validate_notebook_name("a/b", tree).is_valid


def test_duplicate_name_ignores_case(tree):
    result = validate_notebook_name("b", tree)
    assert not result.is_valid
    assert "already exists" in result.error


def test_renaming_to_own_name_is_allowed(tree):
    assert validate_notebook_name("b", tree, exclude_id="B").is_valid


def test_nesting(tree):
    assert validate_notebook_nesting(None, tree).is_valid
    assert validate_notebook_nesting("C", tree, max_depth=4).is_valid
    assert not validate_notebook_nesting("C", tree, max_depth=3).is_valid
    assert not validate_notebook_nesting("missing", tree).is_valid


def test_move_checks(tree):
    assert validate_notebook_move("B", "D", tree).is_valid
    assert validate_notebook_move("B", None, tree).is_valid
    assert not validate_notebook_move("missing", "A", tree).is_valid
    assert not validate_notebook_move("B", "missing", tree).is_valid

    cycle = validate_notebook_move("A", "C", tree)
    assert not cycle.is_valid
    assert "descendants" in cycle.error


def test_move_checks_depth_of_whole_subtree(tree):
    # B has a child, so under D it reaches level 3
    assert validate_notebook_move("B", "D", tree, max_depth=4).is_valid
    assert not validate_notebook_move("B", "D", tree, max_depth=3).is_valid
