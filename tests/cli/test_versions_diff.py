"""
Tests for the 'notetree versions' commands and 'notetree compare'.
"""
import json
import os
from unittest.mock import patch, MagicMock

from notetree.core.diff_engine import compare_revisions
from notetree.models.revision import Revision


class TestVersionsCommands:
    """Tests for saving, listing and diffing revisions."""

    def _note(self, temp_dir, body):
        path = os.path.join(temp_dir, "draft.md")
        with open(path, "w", encoding="utf-8") as f:
            f.write(f"---\ntitle: Draft\nnotebook: work\n---\n{body}")
        return path

    def test_save_list_and_diff(self, invoke, temp_dir):
        note_path = self._note(temp_dir, "a\nb\nc")
        result = invoke("versions", "save", note_path, "-m", "first draft")
        assert result.exit_code == 0, f"Command failed with output: {result.output}"
        assert "work-draft" in result.output

        self._note(temp_dir, "a\nx\nc")
        assert invoke("versions", "save", note_path).exit_code == 0

        listing = invoke("versions", "list", "work-draft")
        assert listing.exit_code == 0
        assert "first draft" in listing.output
        assert "v2" in listing.output

        diff = invoke("versions", "diff", "work-draft", "v1", "v2")
        assert diff.exit_code == 0, f"Command failed with output: {diff.output}"
        assert "~" in diff.output
        assert "b → x" in diff.output
        assert "Similarity" in diff.output

    def test_diff_defaults_to_latest(self, invoke, temp_dir):
        note_path = self._note(temp_dir, "one")
        invoke("versions", "save", note_path, "--note-id", "draft")
        self._note(temp_dir, "one\ntwo")
        invoke("versions", "save", note_path, "--note-id", "draft")

        result = invoke("versions", "diff", "draft", "v1")
        assert result.exit_code == 0
        assert "+" in result.output
        assert "two" in result.output

    def test_diff_same_version(self, invoke, temp_dir):
        invoke("versions", "save", self._note(temp_dir, "same"), "--note-id", "draft")

        result = invoke("versions", "diff", "draft", "v1", "v1")
        assert result.exit_code == 0
        assert "No differences found" in result.output

    def test_diff_version_not_found(self, invoke, temp_dir):
        invoke("versions", "save", self._note(temp_dir, "text"), "--note-id", "draft")

        result = invoke("versions", "diff", "draft", "v1", "v999")
        assert result.exit_code == 1
        assert "Revision v999 not found" in result.output

    def test_list_without_revisions(self, invoke):
        result = invoke("versions", "list", "nothing")
        assert result.exit_code == 0
        assert "No revisions found" in result.output

    def test_diff_uses_version_manager(self, invoke):
        comparison = compare_revisions(
            Revision(id="v1_x", note_id="n", content="old"),
            Revision(id="v2_y", note_id="n", content="new"),
        )
        with patch("notetree.cli.commands.create_version_manager") as mock_create:
            mock_vm = MagicMock()
            mock_vm.compare_revisions.return_value = comparison
            mock_create.return_value = mock_vm

            result = invoke("versions", "diff", "n", "v1", "v2")

        assert result.exit_code == 0
        mock_vm.compare_revisions.assert_called_once_with("n", "v1", "v2")
        assert "old → new" in result.output


class TestCompareCommand:
    """Tests for comparing two files directly."""

    def _write(self, temp_dir, name, text):
        path = os.path.join(temp_dir, name)
        with open(path, "w", encoding="utf-8") as f:
            f.write(text)
        return path

    def test_compare_json(self, invoke, temp_dir):
        old = self._write(temp_dir, "old.md", "a\nb")
        new = self._write(temp_dir, "new.md", "a\nb\nc")

        result = invoke("compare", old, new, "--json")
        assert result.exit_code == 0, f"Command failed with output: {result.output}"

        data = json.loads(result.output)
        assert data["diff"]["added"] == ["+3: c"]
        assert data["diff"]["unchanged"] == 2
        assert 0 < data["similarity"] < 100

    def test_compare_identical_files(self, invoke, temp_dir):
        old = self._write(temp_dir, "old.md", "same")
        new = self._write(temp_dir, "new.md", "same")

        result = invoke("compare", old, new)
        assert result.exit_code == 0
        assert "100%" in result.output
        assert "No differences found" in result.output

    def test_compare_missing_file(self, invoke, temp_dir):
        result = invoke("compare", os.path.join(temp_dir, "nope.md"), os.path.join(temp_dir, "nope2.md"))
        assert result.exit_code == 2

    def test_compare_undecodable_file(self, invoke, temp_dir):
        old = os.path.join(temp_dir, "old.md")
        with open(old, "wb") as f:
            f.write(b"\xff\xfe")
        new = self._write(temp_dir, "new.md", "text")

        result = invoke("compare", old, new)
        assert result.exit_code == 1
        assert "Error:" in result.output


class TestVersionsErrors:
    """Tests for rejected note ids."""

    def test_list_rejects_path_like_note_id(self, invoke, temp_dir):
        result = invoke("versions", "list", "../outside")
        assert result.exit_code == 1
        assert "Invalid note ID" in result.output
        assert not os.path.exists(os.path.join(temp_dir, "outside"))
