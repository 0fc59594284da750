"""
File handling utilities for Notetree: the notebook store and Markdown note files.
"""
import logging
import os
import yaml
from typing import Dict, Any, Tuple, Optional, List

from notetree.models.note import Note
from notetree.models.notebook import Notebook

logger = logging.getLogger(__name__)


def ensure_dir(directory: str) -> str:
    """
    Ensure a directory exists.

    Args:
        directory: Directory path. ``~`` is expanded and relative paths are
                   made absolute from the current directory.

    Returns:
        The absolute path to the directory.
    """
    directory = os.path.abspath(os.path.expanduser(directory))
    if not os.path.exists(directory):
        try:
            os.makedirs(directory, exist_ok=True)
        except PermissionError:
            raise PermissionError(f"Permission denied when creating directory: {directory}")
        logger.debug(f"Created directory: {directory}")
    return directory


def parse_frontmatter(content: str) -> Tuple[Dict[str, Any], str]:
    """
    Parse YAML frontmatter from markdown content.

    Args:
        content: Markdown content with optional frontmatter.

    Returns:
        A tuple of (metadata, content_without_frontmatter)
    """
    metadata = {}
    content_without_frontmatter = content

    if content.startswith('---'):
        end_index = content.find('---', 3)
        if end_index != -1:
            frontmatter = content[3:end_index].strip()
            try:
                metadata = yaml.safe_load(frontmatter) or {}
                content_without_frontmatter = content[end_index + 3:].strip()
            except yaml.YAMLError as e:
                logger.warning(f"Invalid frontmatter ignored: {str(e)}")

    if not isinstance(metadata, dict):
        metadata = {}
    return metadata, content_without_frontmatter


def list_note_files(notes_dir: str) -> List[str]:
    """
    List all markdown files in the notes directory.

    Args:
        notes_dir: Directory to search recursively.

    Returns:
        Sorted list of file paths to markdown files.
    """
    if not os.path.exists(notes_dir):
        return []

    markdown_files = []
    for root, _, files in os.walk(notes_dir):
        for file in files:
            if file.endswith('.md'):
                markdown_files.append(os.path.join(root, file))

    return sorted(markdown_files)


def read_note_file(file_path: str) -> Tuple[Dict[str, Any], str]:
    """
    Read a note file and parse its frontmatter and content.

    Args:
        file_path: Path to the note file.

    Returns:
        A tuple of (metadata, content)
    """
    if not os.path.exists(file_path):
        raise FileNotFoundError(f"Note file not found: {file_path}")

    with open(file_path, 'r', encoding='utf-8') as f:
        content = f.read()

    return parse_frontmatter(content)


def load_notes(notes_dir: str) -> List[Note]:
    """
    Load every note in a directory.

    The notebook of a note comes from its ``notebook`` frontmatter field
    (``category`` is accepted too). The title falls back to the file name.
    """
    notes = []
    for path in list_note_files(notes_dir):
        metadata, content = read_note_file(path)
        data = dict(metadata)
        data.setdefault("title", os.path.splitext(os.path.basename(path))[0])
        data["content"] = content
        notes.append(Note.from_dict(data))
    logger.debug(f"Loaded {len(notes)} notes from {notes_dir}")
    return notes


def load_notebooks(store_path: str) -> Optional[List[Notebook]]:
    """
    Read the notebook store.

    Args:
        store_path: Path to the YAML store.

    Returns:
        The stored notebooks, or None if the store does not exist yet.
    """
    if not os.path.exists(store_path):
        return None

    with open(store_path, 'r', encoding='utf-8') as f:
        data = yaml.safe_load(f) or {}

    records = data.get("notebooks", []) if isinstance(data, dict) else data
    return [Notebook.from_dict(record) for record in records or []]


def save_notebooks(store_path: str, notebooks: List[Notebook]) -> None:
    """
    Write the notebook store.
    """
    directory = os.path.dirname(os.path.abspath(store_path))
    ensure_dir(directory)

    with open(store_path, 'w', encoding='utf-8') as f:
        yaml.safe_dump({"notebooks": [n.to_dict() for n in notebooks]}, f,
                       default_flow_style=False, sort_keys=False)
    logger.debug(f"Saved {len(notebooks)} notebooks to {store_path}")
