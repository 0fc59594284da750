"""
Note model for Notetree.

Notes are owned by the storage layer; the tree code only reads the
``notebook``, ``status`` and ``is_trashed`` fields when counting.
"""
from dataclasses import dataclass, field
from typing import List, Dict, Any, Optional

# Notes in these statuses are finished and no longer count towards a notebook
TERMINAL_STATUSES = ("completed", "archived")


@dataclass
class Note:
    """
    Represents a Markdown note in the system.
    """
    title: str
    notebook: str
    status: str = "active"
    is_trashed: bool = False
    content: str = ""
    tags: List[str] = field(default_factory=list)
    id: Optional[str] = None

    def is_active(self, terminal_statuses=TERMINAL_STATUSES) -> bool:
        """
        Check if the note should be counted in its notebook.

        Args:
            terminal_statuses: Statuses that take a note out of the count.

        Returns:
            True if the note is neither trashed nor finished.
        """
        return not self.is_trashed and self.status not in terminal_statuses

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Note":
        """
        Create a note from frontmatter or another serialized dictionary.
        """
        tags = data.get("tags") or []
        if isinstance(tags, str):
            tags = [tag.strip() for tag in tags.split(",") if tag.strip()]
        return cls(
            title=str(data.get("title", "")),
            notebook=str(data.get("notebook") or data.get("category") or ""),
            status=str(data.get("status") or "active"),
            is_trashed=bool(data.get("is_trashed", data.get("isTrashed", False))),
            content=data.get("content", ""),
            tags=list(tags),
            id=data.get("id"),
        )
