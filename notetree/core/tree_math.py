"""
Path and depth calculations for the notebook hierarchy.

All functions look parents up by id and never follow object references.
Callers guarantee the parent graph is acyclic.
"""
from typing import Dict, Iterable, Mapping, Optional, Union

from notetree.models.notebook import Notebook

NotebookCollection = Union[Mapping[str, Notebook], Iterable[Notebook]]

PATH_SEPARATOR = "/"


def index_notebooks(notebooks: NotebookCollection) -> Mapping[str, Notebook]:
    """
    Index notebooks by id.

    Args:
        notebooks: A flat list of notebooks, or an existing id index.

    Returns:
        A mapping from notebook id to notebook.
    """
    if isinstance(notebooks, Mapping):
        return notebooks
    index: Dict[str, Notebook] = {}
    for notebook in notebooks:
        index[notebook.id] = notebook
    return index


def effective_parent_id(notebook: Notebook, notebooks: NotebookCollection) -> Optional[str]:
    """
    Get the parent id of a notebook, or None when the parent does not exist.

    A notebook whose parent is missing behaves as a root.
    """
    by_id = index_notebooks(notebooks)
    if notebook.parent_id and notebook.parent_id in by_id:
        return notebook.parent_id
    return None


def path_of(notebook_id: str, notebooks: NotebookCollection) -> str:
    """
    Compute the slash-joined path of a notebook.

    Args:
        notebook_id: The notebook to compute the path for.
        notebooks: All notebooks, as a list or an id index.

    Returns:
        ``name`` for a root, ``path(parent)/name`` otherwise. An unknown
        id yields an empty string.
    """
    by_id = index_notebooks(notebooks)
    notebook = by_id.get(notebook_id)
    if notebook is None:
        return ""

    parent_id = effective_parent_id(notebook, by_id)
    if parent_id is None:
        return notebook.name

    return f"{path_of(parent_id, by_id)}{PATH_SEPARATOR}{notebook.name}"


def level_of(notebook_id: str, notebooks: NotebookCollection) -> int:
    """
    Compute the depth of a notebook. Roots are at level 0.
    """
    by_id = index_notebooks(notebooks)
    notebook = by_id.get(notebook_id)
    if notebook is None:
        return 0

    parent_id = effective_parent_id(notebook, by_id)
    if parent_id is None:
        return 0

    return 1 + level_of(parent_id, by_id)
