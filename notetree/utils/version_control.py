"""
Revision history for notes.

Revisions are stored per note in their own directory: one Markdown file per
revision plus a ``version_info.json`` index.
"""
import json
import logging
import os
import shutil
from datetime import datetime
from typing import Dict, List, Optional, Any

from slugify import slugify

from notetree.core.diff_engine import compare_revisions
from notetree.models.revision import Revision, RevisionComparison

logger = logging.getLogger(__name__)


class VersionControlManager:
    """
    Manages revision history for notes.

    This class provides version control functionality by:
    - Storing revisions of a note's content
    - Listing and loading stored revisions
    - Comparing two revisions with the diff engine
    """

    def __init__(self, base_dir: Optional[str] = None):
        """
        Initialize the VersionControlManager.

        Args:
            base_dir: Base directory for storing revision history.
                     If None, uses default location.
        """
        if base_dir is None:
            # Default location: ~/.notetree/versions
            home = os.path.expanduser("~")
            base_dir = os.path.join(home, ".notetree", "versions")

        self.base_dir = base_dir
        self._ensure_version_dir()

    def _ensure_version_dir(self) -> None:
        """Ensure the version directory exists."""
        if not os.path.exists(self.base_dir):
            os.makedirs(self.base_dir, exist_ok=True)

    def _get_note_version_dir(self, note_id: str) -> str:
        """
        Get the directory holding the revisions of a note.

        Raises:
            ValueError: If the note ID is empty or contains a path separator
        """
        separators = [sep for sep in (os.sep, os.altsep, "/") if sep]
        if not note_id or note_id in (".", "..") or any(sep in note_id for sep in separators):
            raise ValueError(f"Invalid note ID: {note_id!r}")
        return os.path.join(self.base_dir, note_id)

    def _get_version_info_path(self, note_id: str) -> str:
        """Get path to version info file for a note."""
        return os.path.join(self._get_note_version_dir(note_id), "version_info.json")

    def _read_version_info(self, note_id: str) -> Dict[str, Any]:
        version_info_path = self._get_version_info_path(note_id)
        if not os.path.exists(version_info_path):
            return {"note_id": note_id, "versions": []}
        with open(version_info_path, 'r', encoding='utf-8') as f:
            return json.load(f)

    def generate_note_id(self, title: str, notebook: Optional[str] = None) -> str:
        """
        Generate a stable identifier for a note.

        Args:
            title: Title of the note
            notebook: Optional notebook, so equal titles in different notebooks differ

        Returns:
            A filesystem-safe ID for the note
        """
        if notebook:
            return slugify(f"{notebook} {title}")
        return slugify(title)

    def save_revision(self, note_id: str, content: str, title: str = "",
                      notebook: Optional[str] = None, tags: Optional[List[str]] = None,
                      change_type: str = "manual", message: Optional[str] = None) -> Revision:
        """
        Save a new revision of a note.

        Args:
            note_id: Unique identifier for the note
            content: Current content of the note
            title: Title of the note
            notebook: Notebook the note belongs to
            tags: Tags of the note
            change_type: How the revision was made ("manual", "auto" or "restore")
            message: Optional message describing the change

        Returns:
            The stored Revision
        """
        self._ensure_version_dir()
        note_version_dir = self._get_note_version_dir(note_id)
        os.makedirs(note_version_dir, exist_ok=True)
        version_info = self._read_version_info(note_id)
        version_info["title"] = title

        now = datetime.now()
        revision_id = f"v{len(version_info['versions']) + 1}_{now.isoformat().replace(':', '-')}"

        version_path = os.path.join(note_version_dir, f"{revision_id}.md")
        with open(version_path, 'w', encoding='utf-8') as f:
            f.write(content)

        revision = Revision(
            id=revision_id,
            note_id=note_id,
            content=content,
            title=title,
            notebook=notebook,
            tags=list(tags or []),
            created_at=now,
            change_type=change_type,
            message=message or "Update note",
        )
        entry = revision.to_dict()
        entry["path"] = version_path
        version_info["versions"].append(entry)

        with open(self._get_version_info_path(note_id), 'w', encoding='utf-8') as f:
            json.dump(version_info, f, indent=2)

        logger.info(f"Saved revision {revision_id} of note {note_id}")
        return revision

    def _load_revision(self, entry: Dict[str, Any]) -> Revision:
        path = entry.get("path")
        if not path or not os.path.exists(path):
            raise FileNotFoundError(f"Revision {entry.get('id')} not found")
        with open(path, 'r', encoding='utf-8') as f:
            content = f.read()
        return Revision(
            id=entry["id"],
            note_id=entry["note_id"],
            content=content,
            title=entry.get("title", ""),
            notebook=entry.get("notebook"),
            tags=list(entry.get("tags") or []),
            created_at=datetime.fromisoformat(entry["created_at"]),
            change_type=entry.get("change_type", "manual"),
            message=entry.get("message"),
        )

    def get_revision_history(self, note_id: str) -> List[Revision]:
        """
        Get the revision history for a note, oldest first.
        """
        return [self._load_revision(entry) for entry in self._read_version_info(note_id)["versions"]]

    def get_revision(self, note_id: str, revision_id: str) -> Revision:
        """
        Get a specific revision.

        Args:
            note_id: Unique identifier for the note
            revision_id: Full revision ID, or its ordinal prefix such as ``v2``

        Raises:
            FileNotFoundError: If the revision doesn't exist
        """
        entries = self._read_version_info(note_id)["versions"]
        entry = next((e for e in entries
                      if e["id"] == revision_id or e["id"].startswith(f"{revision_id}_")), None)
        if entry is None:
            raise FileNotFoundError(f"Revision {revision_id} not found")
        return self._load_revision(entry)

    def get_latest_revision(self, note_id: str) -> Optional[Revision]:
        entries = self._read_version_info(note_id)["versions"]
        if not entries:
            return None
        return self._load_revision(entries[-1])

    def compare_revisions(self, note_id: str, old_revision_id: str,
                          new_revision_id: Optional[str] = None) -> RevisionComparison:
        """
        Compare two revisions of a note.

        Args:
            note_id: Unique identifier for the note
            old_revision_id: ID of the older revision
            new_revision_id: ID of the newer revision. If None, uses the latest revision.

        Returns:
            The comparison of the two revisions

        Raises:
            FileNotFoundError: If either revision doesn't exist
            ValueError: If the note has no revisions
        """
        old_revision = self.get_revision(note_id, old_revision_id)

        if new_revision_id:
            new_revision = self.get_revision(note_id, new_revision_id)
        else:
            new_revision = self.get_latest_revision(note_id)
            if new_revision is None:
                raise ValueError("No versions available")

        return compare_revisions(old_revision, new_revision)

    def purge_history(self, note_id: str) -> int:
        """
        Delete every stored revision of a note.

        Returns:
            The number of revisions removed
        """
        count = len(self._read_version_info(note_id)["versions"])
        note_version_dir = self._get_note_version_dir(note_id)
        if os.path.isdir(note_version_dir):
            shutil.rmtree(note_version_dir)
        logger.info(f"Purged {count} revisions of note {note_id}")
        return count
