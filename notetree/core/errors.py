"""
Exceptions raised by Notetree.
"""


class NotebookError(Exception):
    """Base class for notebook hierarchy errors."""


class InvalidMoveError(NotebookError):
    """
    Raised when a move would make a notebook its own ancestor.
    """

    def __init__(self, notebook_id: str, new_parent_id: str):
        self.notebook_id = notebook_id
        self.new_parent_id = new_parent_id
        super().__init__(
            f"Cannot move notebook '{notebook_id}' under '{new_parent_id}': "
            f"the target is the notebook itself or one of its descendants"
        )


class DegenerateTreeError(NotebookError):
    """
    Raised by the orchestrator when deleting would leave no root notebook.
    """


class NotebookNotFoundError(NotebookError, KeyError):
    """Raised when a notebook id or name does not exist."""

    def __str__(self) -> str:
        # KeyError quotes its argument; keep the plain message
        return str(self.args[0]) if self.args else ""


class NotebookValidationError(NotebookError, ValueError):
    """Raised when a create, rename or move request fails validation."""
