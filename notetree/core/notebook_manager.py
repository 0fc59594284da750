"""
Notebook management on top of the tree functions.

The tree functions are pure. NotebookManager owns the current flat list,
applies the policies around it (name rules, nesting depth, the last root
notebook) and persists the result.
"""
import logging
import secrets
import threading
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional, Sequence, Set

from slugify import slugify

from notetree.core.errors import (
    DegenerateTreeError,
    InvalidMoveError,
    NotebookNotFoundError,
    NotebookValidationError,
)
from notetree.core.tree_builder import build_tree
from notetree.core.tree_mutator import deletion_set, move_notebook
from notetree.core.tree_query import (
    TreeStats,
    children_of,
    find_by_name,
    flatten_tree,
    root_notebooks,
    tree_stats,
    with_counts,
)
from notetree.core.validation import (
    DEFAULT_MAX_DEPTH,
    validate_notebook_move,
    validate_notebook_name,
    validate_notebook_nesting,
)
from notetree.models.note import Note, TERMINAL_STATUSES
from notetree.models.notebook import Notebook, NotebookWithCounts
from notetree.utils.file_handler import load_notebooks, save_notebooks


def generate_notebook_id(name: str) -> str:
    return f"notebook_{slugify(name) or 'untitled'}_{secrets.token_hex(4)}"


class NotebookManager:
    """
    Manages the notebook hierarchy.
    """

    def __init__(self, store_path: Optional[str] = None,
                 notebooks: Optional[Iterable[Notebook]] = None,
                 max_depth: int = DEFAULT_MAX_DEPTH,
                 terminal_statuses: Sequence[str] = TERMINAL_STATUSES,
                 default_notebooks: Optional[List[Dict[str, Any]]] = None):
        """
        Initialize the NotebookManager.

        Args:
            store_path: YAML file the notebooks are loaded from and saved to.
                        If None, the manager only keeps them in memory.
            notebooks: Initial notebooks. If omitted they are loaded from the store.
            max_depth: Maximum number of nesting levels.
            terminal_statuses: Note statuses excluded from the counts.
            default_notebooks: Records seeded when the store does not exist.
        """
        self.store_path = store_path
        self.max_depth = max_depth
        self.terminal_statuses = tuple(terminal_statuses)
        self.default_notebooks = default_notebooks or []
        self.logger = logging.getLogger(__name__)
        self._lock = threading.RLock()
        self._notebooks: List[Notebook] = []

        if notebooks is not None:
            self._notebooks = build_tree(notebooks)
        else:
            self.load()

    @property
    def notebooks(self) -> List[Notebook]:
        return list(self._notebooks)

    def load(self) -> List[Notebook]:
        """
        Load notebooks from the store, seeding the defaults if it does not exist.
        """
        with self._lock:
            stored = load_notebooks(self.store_path) if self.store_path else None
            if stored is None:
                self.logger.info("No notebook store found, using default notebooks")
                stored = [Notebook.from_dict(record) for record in self.default_notebooks]
            self._notebooks = build_tree(stored)
            return self.notebooks

    def save(self) -> None:
        if not self.store_path:
            return
        with self._lock:
            save_notebooks(self.store_path, self._notebooks)

    def _commit(self, notebooks: List[Notebook]) -> None:
        self._notebooks = notebooks
        self.save()

    def get_notebook(self, notebook_id: str) -> Notebook:
        """
        Get a notebook by id.

        Raises:
            NotebookNotFoundError: If no notebook has this id.
        """
        notebook = next((n for n in self._notebooks if n.id == notebook_id), None)
        if notebook is None:
            raise NotebookNotFoundError(f"Notebook '{notebook_id}' not found")
        return notebook

    def get_notebook_by_name(self, name: str) -> Notebook:
        """
        Get a notebook by name, ignoring case.

        Raises:
            NotebookNotFoundError: If no notebook has this name.
        """
        notebook = find_by_name(name, self._notebooks)
        if notebook is None:
            raise NotebookNotFoundError(f"Notebook '{name}' not found")
        return notebook

    def get_root_notebooks(self) -> List[Notebook]:
        """Get the top-level notebooks, including those with a missing parent."""
        return root_notebooks(self._notebooks)

    def get_children(self, notebook_id: str) -> List[Notebook]:
        return children_of(notebook_id, self._notebooks)

    def create_notebook(self, name: str, parent_id: Optional[str] = None,
                        color: str = "blue", description: str = "") -> Notebook:
        """
        Create a notebook.

        Args:
            name: Name of the notebook.
            parent_id: Optional parent notebook id.
            color: Display color.
            description: Optional description.

        Returns:
            The created notebook with its derived fields filled in.

        Raises:
            NotebookValidationError: If the name or the nesting is invalid.
        """
        with self._lock:
            result = validate_notebook_name(name, self._notebooks)
            if not result.is_valid:
                raise NotebookValidationError(result.error)
            result = validate_notebook_nesting(parent_id, self._notebooks, self.max_depth)
            if not result.is_valid:
                raise NotebookValidationError(result.error)

            now = datetime.now()
            notebook = Notebook(
                id=generate_notebook_id(name),
                name=name.strip(),
                parent_id=parent_id,
                color=color,
                description=description,
                created_at=now,
                updated_at=now,
            )
            self._commit(build_tree(self._notebooks + [notebook]))
            self.logger.info(f"Created notebook '{notebook.name}'")
            return self.get_notebook(notebook.id)

    def rename_notebook(self, notebook_id: str, new_name: str) -> Notebook:
        """
        Rename a notebook. The paths of its whole subtree change with it.

        Raises:
            NotebookNotFoundError: If the notebook does not exist.
            NotebookValidationError: If the new name is invalid.
        """
        with self._lock:
            self.get_notebook(notebook_id)
            result = validate_notebook_name(new_name, self._notebooks, exclude_id=notebook_id)
            if not result.is_valid:
                raise NotebookValidationError(result.error)

            updated = []
            for notebook in build_tree(self._notebooks):
                if notebook.id == notebook_id:
                    notebook.name = new_name.strip()
                    notebook.updated_at = datetime.now()
                updated.append(notebook)
            self._commit(build_tree(updated))
            return self.get_notebook(notebook_id)

    def move_notebook(self, notebook_id: str, new_parent_id: Optional[str]) -> Notebook:
        """
        Move a notebook and its subtree under a new parent.

        Args:
            notebook_id: The notebook to move.
            new_parent_id: The new parent, or None to make it a root.

        Returns:
            The moved notebook.

        Raises:
            InvalidMoveError: If the target is inside the moved subtree.
            NotebookNotFoundError: If the notebook does not exist.
            NotebookValidationError: If the target does not exist or the
                subtree would be nested too deep.
        """
        with self._lock:
            self.get_notebook(notebook_id)
            result = validate_notebook_move(notebook_id, new_parent_id, self._notebooks, self.max_depth)
            if not result.is_valid:
                self.logger.warning(f"Invalid move: {result.error}")
                if new_parent_id and new_parent_id in deletion_set(notebook_id, self._notebooks):
                    raise InvalidMoveError(notebook_id, new_parent_id)
                raise NotebookValidationError(result.error)

            self._commit(move_notebook(notebook_id, new_parent_id, self._notebooks))
            return self.get_notebook(notebook_id)

    def can_delete(self, notebook_id: str) -> bool:
        """
        Check whether deleting a notebook leaves at least one root notebook.

        A notebook whose parent no longer exists counts as a root.
        """
        self.get_notebook(notebook_id)
        roots = [n.id for n in self.get_root_notebooks()]
        if notebook_id not in roots:
            return True
        return len(roots) > 1

    def delete_notebook(self, notebook_id: str) -> Set[str]:
        """
        Delete a notebook with all of its descendants.

        Notes referring to the deleted notebooks are not touched.

        Returns:
            The ids of the deleted notebooks.

        Raises:
            NotebookNotFoundError: If the notebook does not exist.
            DegenerateTreeError: If it is the last root notebook.
        """
        with self._lock:
            if not self.can_delete(notebook_id):
                self.logger.warning("Cannot delete the last root notebook")
                raise DegenerateTreeError("Cannot delete the last root notebook")

            to_delete = deletion_set(notebook_id, self._notebooks)
            self._commit(build_tree(n for n in self._notebooks if n.id not in to_delete))
            self.logger.info(f"Deleted {len(to_delete)} notebooks")
            return to_delete

    def flatten(self, parent_id: Optional[str] = None,
                include_descendants: bool = True) -> List[Notebook]:
        return flatten_tree(self._notebooks, parent_id, include_descendants)

    def with_counts(self, notes: Iterable[Note]) -> List[NotebookWithCounts]:
        return with_counts(self._notebooks, notes, self.terminal_statuses)

    def stats(self, notes: Iterable[Note]) -> TreeStats:
        return tree_stats(self._notebooks, notes, self.terminal_statuses)
