"""
Revision and diff result models for Notetree.
"""
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Dict, Any, Optional


@dataclass
class Revision:
    """
    A snapshot of a note's content at one point in time.
    """
    id: str
    note_id: str
    content: str
    title: str = ""
    notebook: Optional[str] = None
    tags: List[str] = field(default_factory=list)
    created_at: datetime = field(default_factory=datetime.now)
    change_type: str = "manual"
    message: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert the revision metadata to a dictionary. Content is stored separately.
        """
        return {
            "id": self.id,
            "note_id": self.note_id,
            "title": self.title,
            "notebook": self.notebook,
            "tags": list(self.tags),
            "created_at": self.created_at.isoformat(),
            "change_type": self.change_type,
            "message": self.message,
        }


@dataclass
class DiffResult:
    """
    Positional line diff between two texts.
    """
    added: List[str] = field(default_factory=list)
    removed: List[str] = field(default_factory=list)
    modified: List[str] = field(default_factory=list)
    unchanged: int = 0

    def has_changes(self) -> bool:
        return bool(self.added or self.removed or self.modified)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "added": list(self.added),
            "removed": list(self.removed),
            "modified": list(self.modified),
            "unchanged": self.unchanged,
        }


@dataclass
class RevisionComparison:
    """
    Result of comparing two revisions, with both inputs kept for display.
    """
    old_revision: Any
    new_revision: Any
    diff: DiffResult
    similarity: int
