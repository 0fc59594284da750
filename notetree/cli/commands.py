"""
CLI commands for Notetree
"""
import json
import logging
import sys
from typing import List, NoReturn, Optional

import click
import yaml
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel
from rich.prompt import Confirm
from rich.table import Table
from rich.text import Text
from rich.tree import Tree

from notetree import __version__
from notetree.config.config_manager import ConfigManager, get_config_manager
from notetree.core.diff_engine import compare_revisions
from notetree.core.errors import NotebookError, NotebookNotFoundError
from notetree.core.notebook_manager import NotebookManager
from notetree.models.note import Note
from notetree.models.notebook import Notebook, NotebookWithCounts
from notetree.models.revision import RevisionComparison
from notetree.utils.file_handler import load_notes, read_note_file
from notetree.utils.version_control import VersionControlManager

console = Console()

# Errors reported to the user instead of a traceback
CLI_ERRORS = (NotebookError, FileNotFoundError, ValueError, OSError, yaml.YAMLError)


def setup_logging(level: str, verbose: bool = False) -> None:
    """
    Send the package's log records to stderr through rich.
    """
    package_logger = logging.getLogger("notetree")
    for handler in list(package_logger.handlers):
        if isinstance(handler, RichHandler):
            package_logger.removeHandler(handler)
    package_logger.addHandler(RichHandler(console=Console(stderr=True), show_path=False))
    if verbose:
        package_logger.setLevel(logging.DEBUG)
        return
    try:
        package_logger.setLevel(str(level).upper())
    except ValueError:
        package_logger.setLevel(logging.WARNING)
        package_logger.warning(f"Invalid log_level {level!r}, using WARNING")


def fail(message: str) -> NoReturn:
    console.print(f"[bold red]Error:[/bold red] {escape(message)}", highlight=False)
    sys.exit(1)


def create_notebook_manager(config: ConfigManager) -> NotebookManager:
    """
    Create a NotebookManager backed by the configured store.
    """
    return NotebookManager(
        store_path=config.get_path("notebooks_file"),
        max_depth=config.get_max_nesting_depth(),
        terminal_statuses=config.get_terminal_statuses(),
        default_notebooks=config.get_default_notebooks(),
    )


def create_version_manager(config: ConfigManager) -> VersionControlManager:
    return VersionControlManager(config.get_path("versions_dir"))


def load_configured_notes(config: ConfigManager) -> List[Note]:
    return load_notes(config.get_path("notes_dir"))


def resolve_notebook(manager: NotebookManager, reference: str) -> Notebook:
    """
    Find a notebook by id, by path (``work/projects``) or by name.

    Raises:
        NotebookNotFoundError: If nothing matches.
    """
    for notebook in manager.notebooks:
        if notebook.id == reference:
            return notebook
    if "/" in reference:
        wanted = reference.strip("/").lower()
        for notebook in manager.notebooks:
            if notebook.path.lower() == wanted:
                return notebook
        raise NotebookNotFoundError(f"Notebook '{reference}' not found")
    return manager.get_notebook_by_name(reference)


@click.group()
@click.version_option(version=__version__)
@click.option("--config", "config_file", type=click.Path(dir_okay=False),
              help="Path to the configuration file.")
@click.option("--verbose", "-v", is_flag=True, help="Show debug logging.")
@click.pass_context
def cli(ctx, config_file: Optional[str], verbose: bool):
    """Notetree - Organize Markdown notes in nested notebooks and compare their revisions."""
    config = get_config_manager(config_file)
    setup_logging(config.get_config("log_level") or "WARNING", verbose)
    ctx.obj = config


@click.group(name="notebooks")
def notebooks():
    """Commands for managing the notebook hierarchy."""
    pass


def _render_tree(counted: List[NotebookWithCounts], flat: List[Notebook]) -> Tree:
    by_id = {n.id: n for n in counted}
    root = Tree("[bold]Notebooks[/bold]")
    branches = {}
    for notebook in flat:
        counts = by_id[notebook.id]
        label = Text(notebook.name, style="cyan")
        label.append(f"  {counts.direct_count}/{counts.total_count}", style="dim")
        parent = branches.get(notebook.parent_id, root)
        branches[notebook.id] = parent.add(label)
    return root


@notebooks.command(name="list")
@click.option("--output", "-o", type=click.Choice(["tree", "table", "json"]), default="tree",
              help="Output format.")
@click.option("--parent", "-p", help="Only list notebooks below this notebook.")
@click.option("--flat/--nested", default=False,
              help="List only the immediate children instead of whole subtrees.")
@click.pass_obj
def list_notebooks(config: ConfigManager, output: str, parent: Optional[str], flat: bool):
    """List notebooks with their note counts."""
    try:
        manager = create_notebook_manager(config)
        parent_id = resolve_notebook(manager, parent).id if parent else None
        ordered = manager.flatten(parent_id, include_descendants=not flat)
        counted = manager.with_counts(load_configured_notes(config))
    except CLI_ERRORS as e:
        fail(str(e))

    if not ordered:
        console.print("No notebooks found.", style="yellow")
        return

    by_id = {n.id: n for n in counted}
    if output == "json":
        click.echo(json.dumps([by_id[n.id].to_dict() for n in ordered], indent=2))
    elif output == "table":
        table = Table(title="Notebooks")
        table.add_column("Path", style="cyan")
        table.add_column("Level", justify="right")
        table.add_column("Notes", style="green", justify="right")
        table.add_column("Total", style="green", justify="right")
        for notebook in ordered:
            counts = by_id[notebook.id]
            table.add_row(notebook.path, str(notebook.level),
                          str(counts.direct_count), str(counts.total_count))
        console.print(table)
    else:
        console.print(_render_tree(counted, ordered))


@notebooks.command(name="create")
@click.argument("name")
@click.option("--parent", "-p", help="Parent notebook (name, path or id).")
@click.option("--color", default="blue", help="Display color.")
@click.option("--description", "-d", default="", help="Description of the notebook.")
@click.pass_obj
def create_notebook(config: ConfigManager, name: str, parent: Optional[str],
                    color: str, description: str):
    """Create a notebook called NAME."""
    try:
        manager = create_notebook_manager(config)
        parent_id = resolve_notebook(manager, parent).id if parent else None
        notebook = manager.create_notebook(name, parent_id, color=color, description=description)
    except CLI_ERRORS as e:
        fail(str(e))

    console.print(f"[bold green]Success:[/bold green] Created notebook '{notebook.path}'")


@notebooks.command(name="rename")
@click.argument("notebook")
@click.argument("new_name")
@click.pass_obj
def rename_notebook(config: ConfigManager, notebook: str, new_name: str):
    """Rename NOTEBOOK to NEW_NAME."""
    try:
        manager = create_notebook_manager(config)
        renamed = manager.rename_notebook(resolve_notebook(manager, notebook).id, new_name)
    except CLI_ERRORS as e:
        fail(str(e))

    console.print(f"[bold green]Success:[/bold green] Renamed notebook to '{renamed.path}'")


@notebooks.command(name="move")
@click.argument("notebook")
@click.option("--to", "target", help="New parent notebook. Omit to move to the top level.")
@click.pass_obj
def move_notebook(config: ConfigManager, notebook: str, target: Optional[str]):
    """Move NOTEBOOK, with everything inside it, under another notebook."""
    try:
        manager = create_notebook_manager(config)
        notebook_id = resolve_notebook(manager, notebook).id
        target_id = resolve_notebook(manager, target).id if target else None
        moved = manager.move_notebook(notebook_id, target_id)
    except CLI_ERRORS as e:
        fail(str(e))

    console.print(f"[bold green]Success:[/bold green] Moved notebook to '{moved.path}'")


@notebooks.command(name="delete")
@click.argument("notebook")
@click.option("--yes", "-y", is_flag=True, help="Do not ask for confirmation.")
@click.pass_obj
def delete_notebook(config: ConfigManager, notebook: str, yes: bool):
    """Delete NOTEBOOK and every notebook inside it."""
    try:
        manager = create_notebook_manager(config)
        target = resolve_notebook(manager, notebook)
        affected = [target] + manager.flatten(target.id)
        if not yes:
            console.print("The following notebooks will be deleted:")
            for item in affected:
                console.print(f"  {item.path}", style="red")
            if not Confirm.ask("Continue?", default=False):
                console.print("Cancelled.", style="yellow")
                return
        deleted = manager.delete_notebook(target.id)
    except CLI_ERRORS as e:
        fail(str(e))

    console.print(f"[bold green]Success:[/bold green] Deleted {len(deleted)} notebook(s)")
    console.print("[dim]Notes in deleted notebooks were left in place.[/dim]")


@notebooks.command(name="stats")
@click.pass_obj
def notebook_stats(config: ConfigManager):
    """Show statistics about the notebook hierarchy."""
    try:
        manager = create_notebook_manager(config)
        stats = manager.stats(load_configured_notes(config))
    except CLI_ERRORS as e:
        fail(str(e))

    table = Table(title="Notebook Statistics")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", style="green", justify="right")
    table.add_row("Notebooks", str(stats.total_categories))
    table.add_row("Notes", str(stats.total_notes))
    table.add_row("Empty notebooks", str(stats.empty_categories))
    table.add_row("Depth", str(stats.max_depth))
    console.print(table)


def print_comparison(comparison: RevisionComparison, old_label: str, new_label: str) -> None:
    """
    Print a comparison as a summary panel followed by the changed lines.
    """
    diff = comparison.diff
    console.print(Panel(
        f"[bold]From:[/bold] {old_label}\n"
        f"[bold]To:[/bold] {new_label}\n"
        f"[green]+{len(diff.added)} additions[/green]  "
        f"[red]-{len(diff.removed)} deletions[/red]  "
        f"[yellow]~{len(diff.modified)} changes[/yellow]  "
        f"{diff.unchanged} unchanged\n"
        f"[bold]Similarity:[/bold] {comparison.similarity}%",
        title="Comparing versions",
        border_style="yellow"
    ))

    if not diff.has_changes():
        console.print("[yellow]No differences found between versions.[/yellow]")
        return

    for line in diff.modified:
        console.print(Text(line, style="yellow"))
    for line in diff.removed:
        console.print(Text(line, style="red"))
    for line in diff.added:
        console.print(Text(line, style="green"))


@cli.command(name="compare")
@click.argument("old_file", type=click.Path(exists=True, dir_okay=False))
@click.argument("new_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--json", "as_json", is_flag=True, help="Print the result as JSON.")
def compare_files(old_file: str, new_file: str, as_json: bool):
    """Compare two snapshots of a note, OLD_FILE and NEW_FILE."""
    try:
        with open(old_file, "r", encoding="utf-8") as f:
            old_text = f.read()
        with open(new_file, "r", encoding="utf-8") as f:
            new_text = f.read()
    except CLI_ERRORS as e:
        fail(f"Could not read note: {e}")

    comparison = compare_revisions(old_text, new_text)
    if as_json:
        click.echo(json.dumps({"diff": comparison.diff.to_dict(),
                               "similarity": comparison.similarity}, indent=2))
        return
    print_comparison(comparison, old_file, new_file)


@click.group(name="versions")
def versions():
    """Commands for managing note revisions."""
    pass


@versions.command(name="save")
@click.argument("note_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--note-id", help="Identifier of the note. Derived from the title by default.")
@click.option("--message", "-m", help="Message describing this revision.")
@click.pass_obj
def save_version(config: ConfigManager, note_file: str, note_id: Optional[str], message: Optional[str]):
    """Store the current content of NOTE_FILE as a new revision."""
    try:
        metadata, _ = read_note_file(note_file)
        with open(note_file, "r", encoding="utf-8") as f:
            content = f.read()
        note = Note.from_dict(dict(metadata))
        version_manager = create_version_manager(config)
        title = note.title or note_file
        note_id = note_id or version_manager.generate_note_id(title, note.notebook or None)
        revision = version_manager.save_revision(
            note_id, content, title=title, notebook=note.notebook or None,
            tags=note.tags, message=message,
        )
    except CLI_ERRORS as e:
        fail(str(e))

    console.print(f"[bold green]Success:[/bold green] Saved revision {revision.id} of '{note_id}'")


@versions.command(name="list")
@click.argument("note_id")
@click.pass_obj
def list_versions(config: ConfigManager, note_id: str):
    """List the stored revisions of NOTE_ID."""
    try:
        history = create_version_manager(config).get_revision_history(note_id)
    except CLI_ERRORS as e:
        fail(str(e))

    if not history:
        console.print(f"No revisions found for '{note_id}'.", style="yellow")
        return

    table = Table(title=f"Revisions of '{note_id}'")
    table.add_column("Revision", style="cyan")
    table.add_column("Date")
    table.add_column("Type")
    table.add_column("Message")
    for revision in history:
        table.add_row(revision.id.split("_")[0], revision.created_at.strftime("%Y-%m-%d %H:%M"),
                      revision.change_type, revision.message or "")
    console.print(table)


@versions.command(name="diff")
@click.argument("note_id")
@click.argument("old_version")
@click.argument("new_version", required=False)
@click.pass_obj
def diff_versions(config: ConfigManager, note_id: str, old_version: str, new_version: Optional[str]):
    """
    Show the differences between two revisions of a note.

    OLD_VERSION is the ID of the base revision. NEW_VERSION defaults to the
    latest revision.
    """
    try:
        version_manager = create_version_manager(config)
        comparison = version_manager.compare_revisions(note_id, old_version, new_version)
    except CLI_ERRORS as e:
        fail(str(e))

    print_comparison(comparison, comparison.old_revision.id, comparison.new_revision.id)


def register_notebook_commands(cli_group):
    """Register notebook commands with the main CLI group."""
    cli_group.add_command(notebooks)


def register_version_commands(cli_group):
    """Register version commands with the main CLI group."""
    cli_group.add_command(versions)
