"""
Read-only queries over the notebook hierarchy.
"""
import logging
from collections import Counter
from dataclasses import dataclass, fields
from typing import Dict, Iterable, List, Optional, Sequence, Set

from notetree.core.tree_math import effective_parent_id, index_notebooks
from notetree.models.note import Note, TERMINAL_STATUSES
from notetree.models.notebook import Notebook, NotebookWithCounts

logger = logging.getLogger(__name__)


@dataclass
class TreeStats:
    """
    Summary figures for a notebook hierarchy.
    """
    total_categories: int
    total_notes: int
    empty_categories: int
    max_depth: int


def _group_by_parent(notebooks: Sequence[Notebook]) -> Dict[Optional[str], List[Notebook]]:
    by_id = index_notebooks(notebooks)
    groups: Dict[Optional[str], List[Notebook]] = {}
    for notebook in notebooks:
        groups.setdefault(effective_parent_id(notebook, by_id), []).append(notebook)
    return groups


def root_notebooks(notebooks: Iterable[Notebook]) -> List[Notebook]:
    """
    Get the notebooks that have no (existing) parent.
    """
    return _group_by_parent(list(notebooks)).get(None, [])


def children_of(notebook_id: str, notebooks: Iterable[Notebook]) -> List[Notebook]:
    """
    Get the direct children of a notebook.
    """
    return [notebook for notebook in notebooks if notebook.parent_id == notebook_id]


def find_by_name(name: str, notebooks: Iterable[Notebook]) -> Optional[Notebook]:
    """
    Find a notebook by name, ignoring case.

    Returns:
        The first matching notebook, or None.
    """
    wanted = name.strip().lower()
    return next((n for n in notebooks if n.name.lower() == wanted), None)


def flatten_tree(notebooks: Iterable[Notebook],
                 parent_id: Optional[str] = None,
                 include_descendants: bool = True) -> List[Notebook]:
    """
    List notebooks in pre-order, each parent followed by its whole subtree.

    Args:
        notebooks: All notebooks.
        parent_id: Start from the children of this notebook. None starts
                   from the roots.
        include_descendants: If False, only the immediate children are returned.

    Returns:
        The notebooks in traversal order.
    """
    groups = _group_by_parent(list(notebooks))
    result: List[Notebook] = []

    def visit(current_parent: Optional[str]) -> None:
        for notebook in groups.get(current_parent, []):
            result.append(notebook)
            if include_descendants:
                visit(notebook.id)

    visit(parent_id)
    return result


def direct_note_counts(notes: Iterable[Note],
                       terminal_statuses: Sequence[str] = TERMINAL_STATUSES) -> Counter:
    """
    Count active notes per notebook name.
    """
    return Counter(
        note.notebook for note in notes
        if note.is_active(terminal_statuses)
    )


def with_counts(notebooks: Iterable[Notebook],
                notes: Iterable[Note],
                terminal_statuses: Sequence[str] = TERMINAL_STATUSES) -> List[NotebookWithCounts]:
    """
    Annotate every notebook with its direct and total note counts.

    A note counts towards the notebook whose name it carries, unless it is
    trashed or in a terminal status. The total of a notebook is its direct
    count plus the totals of all its descendants.

    Args:
        notebooks: All notebooks.
        notes: All notes.
        terminal_statuses: Statuses excluded from the counts.

    Returns:
        One NotebookWithCounts per notebook, in input order.
    """
    source = list(notebooks)
    counts = direct_note_counts(notes, terminal_statuses)
    children: Dict[str, List[str]] = {}
    for notebook in source:
        if notebook.parent_id:
            children.setdefault(notebook.parent_id, []).append(notebook.id)
    by_id = index_notebooks(source)
    totals: Dict[str, int] = {}

    def total(notebook_id: str, visited: Set[str]) -> int:
        if notebook_id in visited:
            logger.warning(f"Circular reference detected in notebook hierarchy: {notebook_id}")
            return 0
        if notebook_id in totals:
            return totals[notebook_id]
        visited = visited | {notebook_id}
        value = counts.get(by_id[notebook_id].name, 0)
        for child_id in children.get(notebook_id, []):
            value += total(child_id, visited)
        totals[notebook_id] = value
        return value

    result = []
    for notebook in source:
        values = {f.name: getattr(notebook, f.name) for f in fields(Notebook)}
        values["children"] = list(notebook.children)
        result.append(NotebookWithCounts(
            **values,
            direct_count=counts.get(notebook.name, 0),
            total_count=total(notebook.id, set()),
        ))
    return result


def tree_stats(notebooks: Iterable[Notebook],
               notes: Iterable[Note],
               terminal_statuses: Sequence[str] = TERMINAL_STATUSES) -> TreeStats:
    """
    Summarize a hierarchy: size, note total, empty notebooks and depth.
    """
    counted = with_counts(notebooks, notes, terminal_statuses)
    if not counted:
        return TreeStats(total_categories=0, total_notes=0, empty_categories=0, max_depth=0)

    return TreeStats(
        total_categories=len(counted),
        total_notes=sum(n.direct_count for n in counted),
        empty_categories=sum(1 for n in counted if n.total_count == 0),
        max_depth=max(n.level for n in counted) + 1,
    )


def subtree_depth(notebook_id: str, notebooks: Iterable[Notebook]) -> int:
    """
    Number of levels below a notebook. A leaf has depth 0.
    """
    groups = _group_by_parent(list(notebooks))

    def depth(current_id: str) -> int:
        kids = groups.get(current_id, [])
        if not kids:
            return 0
        return 1 + max(depth(kid.id) for kid in kids)

    return depth(notebook_id)
