"""
Fixtures for the CLI tests.
"""
import os

import pytest
import yaml
from click.testing import CliRunner

from notetree.cli.commands import cli, register_notebook_commands, register_version_commands


@pytest.fixture
def runner():
    """Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def app():
    """The CLI group with every command group registered."""
    register_notebook_commands(cli)
    register_version_commands(cli)
    return cli


@pytest.fixture
def config_file(temp_dir):
    """A config file that keeps all data inside the temporary directory."""
    path = os.path.join(temp_dir, "config.yaml")
    with open(path, "w") as f:
        yaml.dump({
            "notebooks_file": os.path.join(temp_dir, "notebooks.yaml"),
            "notes_dir": os.path.join(temp_dir, "notes"),
            "versions_dir": os.path.join(temp_dir, "versions"),
            "default_notebooks": [
                {"id": "personal", "name": "personal"},
                {"id": "work", "name": "work"},
            ],
        }, f)
    return path


@pytest.fixture
def invoke(runner, app, config_file):
    """Run a CLI command against the temporary configuration."""
    def _invoke(*args, **kwargs):
        return runner.invoke(app, ["--config", config_file, *args], **kwargs)
    return _invoke


@pytest.fixture
def write_note(temp_dir):
    """Write a note with frontmatter into the notes directory."""
    def _write(filename, notebook, status="active", trashed=False, body="Body"):
        notes_dir = os.path.join(temp_dir, "notes")
        os.makedirs(notes_dir, exist_ok=True)
        path = os.path.join(notes_dir, filename)
        with open(path, "w", encoding="utf-8") as f:
            f.write(f"---\ntitle: {filename}\nnotebook: {notebook}\nstatus: {status}\n"
                    f"is_trashed: {'true' if trashed else 'false'}\n---\n\n{body}\n")
        return path
    return _write
