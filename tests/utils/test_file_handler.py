"""
Tests for the notebook store and note file helpers.
"""
import os

from notetree.core.tree_builder import build_tree
from notetree.utils.file_handler import (
    list_note_files,
    load_notebooks,
    load_notes,
    parse_frontmatter,
    save_notebooks,
)


def _write(path, text):
    os.makedirs(os.path.dirname(path), exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        f.write(text)


def test_parse_frontmatter():
    metadata, content = parse_frontmatter("---\ntitle: Hello\nnotebook: Work\n---\n\nBody")
    assert metadata == {"title": "Hello", "notebook": "Work"}
    assert content == "Body"


def test_parse_without_frontmatter():
    metadata, content = parse_frontmatter("Just text")
    assert metadata == {}
    assert content == "Just text"


def test_load_notes(temp_dir):
    _write(os.path.join(temp_dir, "a.md"), "---\ntitle: A\nnotebook: Work\nstatus: archived\n---\nA body")
    _write(os.path.join(temp_dir, "sub", "b.md"), "---\nnotebook: Work\nis_trashed: true\n---\nB body")
    _write(os.path.join(temp_dir, "ignored.txt"), "not a note")

    assert len(list_note_files(temp_dir)) == 2
    notes = {note.title: note for note in load_notes(temp_dir)}
    assert notes["A"].status == "archived"
    assert notes["A"].content == "A body"
    assert notes["b"].is_trashed


def test_missing_notes_dir(temp_dir):
    assert load_notes(os.path.join(temp_dir, "nothing")) == []


def test_store_round_trip(temp_dir, tree):
    store_path = os.path.join(temp_dir, "data", "notebooks.yaml")
    assert load_notebooks(store_path) is None

    save_notebooks(store_path, tree)
    loaded = {n.id: n for n in load_notebooks(store_path)}

    assert loaded["C"].parent_id == "B"
    assert loaded["C"].path == "A/B/C"
    assert loaded["A"].children == ["B", "D"]
    assert loaded["A"].created_at == tree[0].created_at


def test_store_with_legacy_records(temp_dir):
    store_path = os.path.join(temp_dir, "notebooks.yaml")
    _write(store_path, "- id: personal\n  name: personal\n- id: child\n  name: child\n  parentId: personal\n")

    rebuilt = {n.id: n for n in build_tree(load_notebooks(store_path))}
    assert rebuilt["child"].path == "personal/child"
