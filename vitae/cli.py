"""
Command-line interface for vitae.

Works against a local document store (VITAE_DATA_PATH, or --store).

Commands:
    resolve        - Resolve a variant (or the master) to markdown or JSON
    diff           - Show how a variant differs from the master
    export-section - Export one master section to a JSON file
    import-section - Import a section export into the master
    clear-section  - Reset one master section to empty
    backup         - Write a zip backup of the store
    restore        - Restore the store from a zip backup
"""

import json
import os
from pathlib import Path
from typing import Optional

import typer
from dotenv import load_dotenv

from vitae.contexts.documents.exceptions import (
    BackupError,
    ImportValidationError,
    InvalidDocumentError,
    SectionMismatchError,
    UnknownSectionError,
)
from vitae.contexts.documents.resume_data_structure import ResumeMaster
from vitae.contexts.portability.backup import export_backup, import_backup
from vitae.contexts.portability.logger import setup_portability_logger
from vitae.contexts.portability.section_transfer import (
    IMPORT_MODES,
    clear_section_data,
    export_single_section,
    import_single_section,
    section_export_filename,
)
from vitae.contexts.portability.storage import DocumentStore
from vitae.contexts.resolution.diff import generate_diff
from vitae.contexts.resolution.logger import setup_resolution_logger
from vitae.contexts.resolution.resolver import resolve_by_id
from vitae.utils.markdown import render_markdown
from vitae.utils.timestamp import now

load_dotenv()
LOGS_PATH = Path(os.getenv("LOGS_PATH", "outs/logs"))

app = typer.Typer(
    add_completion=False,
    help="Resolve resume variants and move master resume sections in and out of the store",
    invoke_without_command=True,
)

STORE_OPTION = typer.Option(None, "--store", "-s", help="Document store directory (default: VITAE_DATA_PATH)")

RESOLUTION_COMMANDS = ("resolve", "diff")


@app.callback()
def main(
    ctx: typer.Context,
    log: bool = typer.Option(False, "--log", help="Write a session log under LOGS_PATH"),
):
    """Show help by default when no command is provided."""
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()

    if log:
        stamp = now().replace(":", "").replace("-", "")
        log_dir = LOGS_PATH / f"{ctx.invoked_subcommand}_{stamp}"
        if ctx.invoked_subcommand in RESOLUTION_COMMANDS:
            log_file = setup_resolution_logger(log_dir)
        else:
            log_file = setup_portability_logger(log_dir, operation=ctx.invoked_subcommand)
        typer.echo(f"Log file: {log_file}")


def _fail(message: str) -> None:
    typer.secho(message, fg=typer.colors.RED, err=True)
    raise typer.Exit(code=1)


def _open_store(store: Optional[Path]) -> DocumentStore:
    return DocumentStore(store)


def _require_master(document_store: DocumentStore) -> ResumeMaster:
    try:
        master = document_store.get_master()
    except InvalidDocumentError as e:
        _fail(f"Error: stored master resume is invalid\n{e}")
    if master is None:
        _fail(f"No master resume in {document_store.root}")
    return master


@app.command("resolve")
def resolve_command(
    variant_id: Optional[str] = typer.Argument(None, help="Variant id (omit to resolve the master as-is)"),
    output_format: str = typer.Option("markdown", "--format", "-f", help="markdown or json"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Write to file instead of stdout"),
    store: Optional[Path] = STORE_OPTION,
):
    """
    Resolve a variant against the master resume.

    Examples:\n

        $ vitae resolve                       # Master as markdown

        $ vitae resolve v-platform -f json    # Variant as JSON
    """
    if output_format not in ("markdown", "json"):
        _fail(f"Unknown format '{output_format}'. Expected markdown or json")

    document_store = _open_store(store)
    master = _require_master(document_store)

    if variant_id and document_store.get_variant(variant_id) is None:
        typer.secho(f"Variant '{variant_id}' not found, resolving master", fg=typer.colors.YELLOW, err=True)

    resolved = resolve_by_id(master, document_store.get_variants(), variant_id, templates=document_store.get_templates())

    if output_format == "json":
        text = json.dumps(resolved.to_dict(), indent=2)
    else:
        text = render_markdown(resolved)

    if output is None:
        typer.echo(text)
    else:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(text, encoding="utf-8")
        typer.secho(f"✓ Wrote {output}", fg=typer.colors.GREEN)


@app.command("diff")
def diff_command(
    variant_id: str = typer.Argument(..., help="Variant id"),
    as_json: bool = typer.Option(False, "--json", help="Print the full diff as JSON"),
    store: Optional[Path] = STORE_OPTION,
):
    """Show how a variant's resolution differs from the master."""
    document_store = _open_store(store)
    master = _require_master(document_store)

    variant = document_store.get_variant(variant_id)
    if variant is None:
        _fail(f"Variant '{variant_id}' not found")

    diff = generate_diff(resolve_by_id(master, [variant], variant_id))

    if as_json:
        typer.echo(json.dumps(diff.to_dict(), indent=2))
        return

    typer.secho(f"\nVariant: {variant.name or variant.id}", fg=typer.colors.BLUE, bold=True)
    typer.echo(
        f"Experiences: {diff.stats.master_experiences} -> {diff.stats.resolved_experiences}, "
        f"bullets: {diff.stats.total_bullets_original} -> {diff.stats.total_bullets_resolved}"
    )
    for label in diff.sections.removed:
        typer.echo(f"  - section {label}")
    for label in diff.sections.added:
        typer.echo(f"  + section {label}")
    for label in diff.sections.reordered:
        typer.echo(f"  ~ {label}")
    for removed in diff.experiences.removed:
        typer.echo(f"  - {removed.company} - {removed.title}: {removed.reason}")
    for modified in diff.experiences.modified:
        typer.echo(f"  ~ {modified.company} - {modified.title}: {'; '.join(modified.changes)}")
    for rule in diff.rules:
        typer.echo(f"  rule: {rule.description} ({rule.impact})")
    for override in diff.overrides:
        typer.echo(f"  override: {override.description}")


@app.command("export-section")
def export_section_command(
    section: str = typer.Argument(..., help="Section key (e.g., experience)"),
    output: Path = typer.Option(Path("."), "--output", "-o", help="Directory or .json file to write"),
    store: Optional[Path] = STORE_OPTION,
):
    """Export one master section as resume-<section>-<date>.json."""
    document_store = _open_store(store)
    master = _require_master(document_store)

    try:
        export = export_single_section(master, section)
    except UnknownSectionError as e:
        _fail(f"Error: {e}")

    path = output if output.suffix == ".json" else output / section_export_filename(section)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(export.to_dict(), indent=2), encoding="utf-8")
    typer.secho(f"✓ Exported '{section}' to {path}", fg=typer.colors.GREEN)


@app.command("import-section")
def import_section_command(
    file: Path = typer.Argument(..., help="Section export (.json)"),
    mode: str = typer.Option("merge", "--mode", "-m", help="merge or replace"),
    section: Optional[str] = typer.Option(None, "--section", help="Reject the file unless it holds this section"),
    dry_run: bool = typer.Option(False, "--dry-run", "-n", help="Validate and report without saving"),
    store: Optional[Path] = STORE_OPTION,
):
    """
    Import a section export into the master resume.

    Examples:\n

        $ vitae import-section resume-experience-2025-11-13.json

        $ vitae import-section skills.json --section skills --mode replace
    """
    if mode not in IMPORT_MODES:
        _fail(f"Unknown mode '{mode}'. Expected one of: {', '.join(IMPORT_MODES)}")
    if not file.exists():
        _fail(f"File not found: {file}")

    try:
        import_data = json.loads(file.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        _fail(f"Error: {file} is not valid JSON ({e})")

    document_store = _open_store(store)
    master = _require_master(document_store)

    try:
        updated = import_single_section(master, import_data, mode=mode, expected_section=section)
    except SectionMismatchError as e:
        _fail(f"Error: {e}")
    except ImportValidationError as e:
        typer.secho(f"Import rejected ({len(e.errors)} problem(s)):", fg=typer.colors.RED, err=True)
        for error in e.errors:
            typer.secho(f"  - {error}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    imported_section = import_data["section"]
    if dry_run:
        typer.echo(f"Dry run: '{imported_section}' would be imported ({mode})")
        return

    document_store.save_master(updated)
    typer.secho(f"✓ Imported '{imported_section}' ({mode})", fg=typer.colors.GREEN)


@app.command("clear-section")
def clear_section_command(
    section: str = typer.Argument(..., help="Section key to reset"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
    store: Optional[Path] = STORE_OPTION,
):
    """Reset one master section to empty."""
    document_store = _open_store(store)
    master = _require_master(document_store)

    try:
        cleared = clear_section_data(master, section)
    except UnknownSectionError as e:
        _fail(f"Error: {e}")

    if not yes and not typer.confirm(f"Clear '{section}' from the master resume?"):
        typer.echo("Cancelled")
        raise typer.Exit()

    document_store.save_master(cleared)
    typer.secho(f"✓ Cleared '{section}'", fg=typer.colors.GREEN)


@app.command("backup")
def backup_command(
    destination: Path = typer.Argument(Path("."), help="Directory or .zip path"),
    store: Optional[Path] = STORE_OPTION,
):
    """Write a zip backup of the master, variants, jobs and cover letters."""
    document_store = _open_store(store)

    try:
        data = document_store.to_backup()
    except InvalidDocumentError as e:
        _fail(f"Error: store contains an invalid document\n{e}")

    if destination.suffix != ".zip":
        destination.mkdir(parents=True, exist_ok=True)
    path = export_backup(data, destination)
    typer.secho(f"✓ Backup written to {path}", fg=typer.colors.GREEN)
    typer.echo(f"  Data types: {', '.join(data.data_types) or '(none)'}")


@app.command("restore")
def restore_command(
    archive: Path = typer.Argument(..., help="Backup .zip"),
    store: Optional[Path] = STORE_OPTION,
):
    """Restore documents from a zip backup. Kinds absent from the backup are left alone."""
    try:
        data = import_backup(archive)
    except BackupError as e:
        _fail(f"Error: {e}")

    restored = _open_store(store).restore(data)
    typer.secho(f"✓ Restored {', '.join(restored) or 'nothing'}", fg=typer.colors.GREEN)


if __name__ == "__main__":
    app()
