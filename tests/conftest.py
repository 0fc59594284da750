"""
Shared fixtures for the Notetree tests.
"""
import shutil
import tempfile
from datetime import datetime

import pytest

from notetree.core.tree_builder import build_tree
from notetree.models.notebook import Notebook

CREATED = datetime(2025, 1, 1, 12, 0, 0)


def _make_notebook(notebook_id, name=None, parent_id=None):
    return Notebook(
        id=notebook_id,
        name=name or notebook_id,
        parent_id=parent_id,
        created_at=CREATED,
        updated_at=CREATED,
    )


@pytest.fixture
def flat_notebooks():
    """A > B > C and A > D, with no derived fields filled in."""
    return [
        _make_notebook("A"),
        _make_notebook("B", parent_id="A"),
        _make_notebook("C", parent_id="B"),
        _make_notebook("D", parent_id="A"),
    ]


@pytest.fixture
def tree(flat_notebooks):
    """The sample hierarchy after build_tree."""
    return build_tree(flat_notebooks)


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    temp_dir = tempfile.mkdtemp()
    yield temp_dir
    shutil.rmtree(temp_dir)


@pytest.fixture
def make_notebook():
    """Factory for notebooks with fixed timestamps."""
    return _make_notebook
