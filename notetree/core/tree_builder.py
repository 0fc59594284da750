"""
Materialize the notebook hierarchy from a flat list of records.
"""
import logging
from dataclasses import replace
from typing import Dict, Iterable, List

from notetree.core.tree_math import index_notebooks, level_of, path_of
from notetree.models.notebook import Notebook

logger = logging.getLogger(__name__)


def clone_notebook(notebook: Notebook) -> Notebook:
    """
    Copy a notebook so that the caller's object and its children list stay untouched.
    """
    return replace(notebook, children=list(notebook.children))


def build_tree(notebooks: Iterable[Notebook]) -> List[Notebook]:
    """
    Rebuild the derived fields of every notebook.

    Every notebook is cloned, its ``path`` and ``level`` are recomputed from
    the input parent links, and ``children`` is rebuilt from scratch as
    the ids of the notebooks pointing at it. Notebooks whose parent does
    not exist are treated as roots.

    Running ``build_tree`` on its own output changes nothing.

    Args:
        notebooks: The flat list of notebooks.

    Returns:
        A new list of consistent notebooks.
    """
    source = list(notebooks)
    by_id = index_notebooks(source)

    rebuilt: Dict[str, Notebook] = {}
    for notebook in source:
        updated = clone_notebook(notebook)
        updated.children = []
        updated.path = path_of(notebook.id, by_id)
        updated.level = level_of(notebook.id, by_id)
        rebuilt[notebook.id] = updated

    for notebook in source:
        if not notebook.parent_id:
            continue
        parent = rebuilt.get(notebook.parent_id)
        if parent is None:
            logger.debug(f"Parent '{notebook.parent_id}' of '{notebook.name}' not found, treating as root")
            continue
        if notebook.id not in parent.children:
            parent.children.append(notebook.id)

    logger.debug(f"Built notebook tree with {len(rebuilt)} notebooks")
    return list(rebuilt.values())
