"""
Structural changes to the notebook hierarchy.

These functions decide which notebooks are affected and what the new parent
links are. They never touch the caller's objects, and every result that
contains notebooks has been passed through ``build_tree``.
"""
import logging
from datetime import datetime
from typing import Iterable, List, Optional, Set

from notetree.core.errors import InvalidMoveError
from notetree.core.tree_builder import build_tree, clone_notebook
from notetree.models.notebook import Notebook

logger = logging.getLogger(__name__)


def deletion_set(notebook_id: str, notebooks: Iterable[Notebook]) -> Set[str]:
    """
    Collect a notebook and all of its descendants.

    Nothing is deleted here. The caller removes the notebooks and decides
    what happens to their notes.

    Args:
        notebook_id: The notebook being deleted.
        notebooks: All notebooks.

    Returns:
        The ids to delete, including ``notebook_id`` itself.
    """
    source = list(notebooks)
    to_delete = {notebook_id}
    pending = [notebook_id]
    while pending:
        parent_id = pending.pop()
        for notebook in source:
            if notebook.parent_id == parent_id and notebook.id not in to_delete:
                to_delete.add(notebook.id)
                pending.append(notebook.id)
    return to_delete


def is_descendant_or_self(candidate_id: str, notebook_id: str, notebooks: Iterable[Notebook]) -> bool:
    """
    Check whether ``candidate_id`` is ``notebook_id`` or lies somewhere below it.
    """
    return candidate_id in deletion_set(notebook_id, notebooks)


def move_notebook(notebook_id: str,
                  new_parent_id: Optional[str],
                  notebooks: Iterable[Notebook],
                  now: Optional[datetime] = None) -> List[Notebook]:
    """
    Reparent a notebook together with its whole subtree.

    Args:
        notebook_id: The notebook to move.
        new_parent_id: The new parent, or None to make it a root.
        notebooks: All notebooks.
        now: Timestamp recorded as the moved notebook's ``updated_at``.

    Returns:
        The rebuilt notebooks. If ``notebook_id`` does not exist the input
        is returned rebuilt but otherwise unchanged.

    Raises:
        InvalidMoveError: If the new parent is the notebook itself or one of
            its descendants.
    """
    source = list(notebooks)
    if not any(n.id == notebook_id for n in source):
        logger.debug(f"Notebook '{notebook_id}' not found, nothing to move")
        return build_tree(source)

    if new_parent_id and is_descendant_or_self(new_parent_id, notebook_id, source):
        logger.warning(f"Rejected move of '{notebook_id}' under its own subtree '{new_parent_id}'")
        raise InvalidMoveError(notebook_id, new_parent_id)

    updated = [clone_notebook(n) for n in source]
    for notebook in updated:
        if notebook.id == notebook_id:
            notebook.parent_id = new_parent_id or None
            notebook.updated_at = now or datetime.now()
        notebook.children = [child for child in notebook.children if child != notebook_id]

    if new_parent_id:
        for notebook in updated:
            if notebook.id == new_parent_id:
                notebook.children.append(notebook_id)
                break

    logger.debug(f"Moved notebook '{notebook_id}' under '{new_parent_id or 'root'}'")
    return build_tree(updated)
