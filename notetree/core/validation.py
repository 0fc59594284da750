"""
Validation rules applied before notebooks are created, renamed or moved.
"""
from dataclasses import dataclass
from typing import Iterable, Optional

from notetree.core.tree_math import PATH_SEPARATOR, index_notebooks, level_of
from notetree.core.tree_mutator import is_descendant_or_self
from notetree.core.tree_query import subtree_depth
from notetree.models.notebook import Notebook

MAX_NAME_LENGTH = 50
DEFAULT_MAX_DEPTH = 5


@dataclass
class ValidationResult:
    is_valid: bool
    error: Optional[str] = None


VALID = ValidationResult(True)


def validate_notebook_name(name: str, notebooks: Iterable[Notebook],
                           exclude_id: Optional[str] = None) -> ValidationResult:
    """
    Check a notebook name.

    Args:
        name: The proposed name.
        notebooks: All notebooks.
        exclude_id: A notebook to ignore in the duplicate check (the one being renamed).

    Returns:
        A ValidationResult.
    """
    cleaned = (name or "").strip()
    if not cleaned:
        return ValidationResult(False, "Notebook name cannot be empty")
    if len(cleaned) > MAX_NAME_LENGTH:
        return ValidationResult(False, f"Notebook name cannot exceed {MAX_NAME_LENGTH} characters")
    if PATH_SEPARATOR in cleaned:
        return ValidationResult(False, f"Notebook name cannot contain '{PATH_SEPARATOR}'")

    for notebook in notebooks:
        if notebook.id != exclude_id and notebook.name.lower() == cleaned.lower():
            return ValidationResult(False, f"A notebook named '{notebook.name}' already exists")

    return VALID


def validate_notebook_nesting(parent_id: Optional[str], notebooks: Iterable[Notebook],
                              max_depth: int = DEFAULT_MAX_DEPTH) -> ValidationResult:
    """
    Check that a new notebook can be created under ``parent_id``.
    """
    if not parent_id:
        return VALID

    by_id = index_notebooks(list(notebooks))
    if parent_id not in by_id:
        return ValidationResult(False, f"Parent notebook '{parent_id}' not found")
    if level_of(parent_id, by_id) + 1 >= max_depth:
        return ValidationResult(False, f"Invalid nesting level: notebooks can be nested at most {max_depth} levels deep")

    return VALID


def validate_notebook_move(notebook_id: str, new_parent_id: Optional[str],
                           notebooks: Iterable[Notebook],
                           max_depth: int = DEFAULT_MAX_DEPTH) -> ValidationResult:
    """
    Check that a notebook and its subtree can move under ``new_parent_id``.
    """
    source = list(notebooks)
    by_id = index_notebooks(source)
    if notebook_id not in by_id:
        return ValidationResult(False, f"Notebook '{notebook_id}' not found")
    if not new_parent_id:
        return VALID
    if new_parent_id not in by_id:
        return ValidationResult(False, f"Parent notebook '{new_parent_id}' not found")
    if is_descendant_or_self(new_parent_id, notebook_id, source):
        return ValidationResult(False, "Cannot move a notebook into itself or one of its descendants")

    deepest = level_of(new_parent_id, by_id) + 1 + subtree_depth(notebook_id, source)
    if deepest >= max_depth:
        return ValidationResult(False, f"Invalid nesting level: notebooks can be nested at most {max_depth} levels deep")

    return VALID
