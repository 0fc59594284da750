"""
Notebook (category) model for Notetree.
"""
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Dict, Any, Optional


def _parse_timestamp(value: Any) -> datetime:
    if isinstance(value, datetime):
        return value
    if value:
        try:
            return datetime.fromisoformat(str(value).replace("Z", "+00:00"))
        except ValueError:
            pass
    return datetime.now()


@dataclass
class Notebook:
    """
    A node in the notebook hierarchy.

    Only ``id``, ``name`` and ``parent_id`` are authoritative. ``children``,
    ``level`` and ``path`` are derived and rewritten by ``build_tree``.
    """
    id: str
    name: str
    parent_id: Optional[str] = None
    children: List[str] = field(default_factory=list)
    level: int = 0
    path: str = ""
    color: str = "blue"
    description: str = ""
    created_at: datetime = field(default_factory=datetime.now)
    updated_at: datetime = field(default_factory=datetime.now)

    def __post_init__(self):
        # An empty parent reference means "no parent"
        if not self.parent_id:
            self.parent_id = None
        if not self.path:
            self.path = self.name

    def is_root(self) -> bool:
        """
        Check if the notebook has no parent.
        """
        return self.parent_id is None

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert the notebook to a dictionary for serialization.
        """
        return {
            "id": self.id,
            "name": self.name,
            "parent_id": self.parent_id,
            "children": list(self.children),
            "level": self.level,
            "path": self.path,
            "color": self.color,
            "description": self.description,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Notebook":
        """
        Create a notebook from a serialized dictionary.

        Accepts both ``parent_id`` and ``parentId`` spellings. Records written
        before nesting existed have no parent field at all and load as roots.

        Args:
            data: The serialized notebook.

        Returns:
            A new Notebook instance.
        """
        parent_id = data.get("parent_id", data.get("parentId"))
        return cls(
            id=str(data["id"]),
            name=data["name"],
            parent_id=parent_id,
            children=list(data.get("children") or []),
            level=int(data.get("level") or 0),
            path=data.get("path") or data["name"],
            color=data.get("color") or "blue",
            description=data.get("description") or "",
            created_at=_parse_timestamp(data.get("created_at", data.get("createdAt"))),
            updated_at=_parse_timestamp(data.get("updated_at", data.get("updatedAt"))),
        )


@dataclass
class NotebookWithCounts(Notebook):
    """
    A notebook annotated with note counts.
    """
    direct_count: int = 0
    total_count: int = 0

    @property
    def count(self) -> int:
        # Older callers read a single "count" value
        return self.total_count

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["direct_count"] = self.direct_count
        data["total_count"] = self.total_count
        return data
