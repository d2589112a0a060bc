"""
tokenvars command line.

Commands:
- import: load a token document into a variable store snapshot
- export: write CSS (or JSON) for the variables in a store snapshot
- modes: list collections and their modes
"""

from __future__ import annotations

import asyncio
import logging
import sys
from pathlib import Path

import typer

from tokenvars import __version__
from tokenvars.cli_ui import (
    print_collections,
    print_diagnostics,
    print_error,
    print_info,
    print_success,
    print_warning,
)
from tokenvars.core.config_loader import load_config, load_token_document
from tokenvars.core.errors import TokenVarsError
from tokenvars.core.ir.config import ExportFormat, ExportStrategy
from tokenvars.export.exporter import export_variables
from tokenvars.export.json_export import write_json_export
from tokenvars.importer import import_tokens
from tokenvars.store.memory import InMemoryVariableStore

app = typer.Typer(
    help="Import design tokens into variable collections and export them as CSS.",
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    if value:
        typer.echo(f"tokenvars {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    version: bool | None = typer.Option(
        None,
        "--version",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    """tokenvars CLI main callback for global options."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


@app.command("import")
def import_command(
    tokens: Path = typer.Argument(..., help="Token document (.json, .yaml, .yml)"),  # noqa: B008
    store_path: Path = typer.Option(  # noqa: B008
        Path("tokenvars-store.json"), "--store", "-s", help="Store snapshot to update"
    ),
    collection: str | None = typer.Option(
        None, "--collection", "-c", help="Collection name (default: token file name)"
    ),
    mode: str | None = typer.Option(None, "--mode", "-m", help="Mode to import into"),
    config_path: Path = typer.Option(  # noqa: B008
        Path("."), "--config", help="tokenvars.toml or its directory"
    ),
) -> None:
    """Import a token document into a collection."""
    try:
        project = load_config(config_path)
        document = load_token_document(tokens)
        store = InMemoryVariableStore.load(store_path)
        import_config = project.import_.model_copy(
            update={
                "collection_name": collection or project.import_.collection_name or tokens.stem,
                "mode_name": mode or project.import_.mode_name,
            }
        )
        result = asyncio.run(import_tokens(store, document, import_config))
        store.save(store_path)
    except TokenVarsError as e:
        print_error(str(e))
        raise typer.Exit(code=1)

    print_success(f"Imported {result.created_count} variable(s) into {import_config.collection_name}")
    if result.unresolved:
        print_warning(f"{len(result.unresolved)} alias(es) could not be resolved")
    print_diagnostics(result.diagnostics)
    print_info(f"Store saved to {store_path}")


@app.command("export")
def export_command(
    store_path: Path = typer.Option(  # noqa: B008
        Path("tokenvars-store.json"), "--store", "-s", help="Store snapshot to read"
    ),
    out: Path = typer.Option(Path("."), "--out", "-o", help="Output directory"),  # noqa: B008
    output_format: ExportFormat = typer.Option(  # noqa: B008
        ExportFormat.CSS, "--format", "-f", help="Output format"
    ),
    modes: list[str] | None = typer.Option(  # noqa: B008
        None, "--mode", "-m", help="Mode to export (repeatable, default: all)"
    ),
    exclude: list[str] | None = typer.Option(  # noqa: B008
        None, "--exclude", "-x", help="Extra exclusion pattern (repeatable)"
    ),
    strategy: ExportStrategy | None = typer.Option(  # noqa: B008
        None, "--strategy", help="Store read strategy"
    ),
    config_path: Path = typer.Option(  # noqa: B008
        Path("."), "--config", help="tokenvars.toml or its directory"
    ),
) -> None:
    """Export variables as CSS files (one per mode) or as JSON."""
    try:
        project = load_config(config_path)
        if not store_path.exists():
            print_error(f"Store not found: {store_path}")
            raise typer.Exit(code=1)
        store = InMemoryVariableStore.load(store_path)

        updates: dict[str, object] = {}
        if modes:
            updates["selected_modes"] = list(modes)
        if exclude:
            updates["exclusion_patterns"] = [*project.export.exclusion_patterns, *exclude]
        if strategy:
            updates["strategy"] = strategy
        config = project.export.model_validate({**project.export.model_dump(), **updates})

        result = asyncio.run(export_variables(store, config, output_format))
    except TokenVarsError as e:
        print_error(str(e))
        raise typer.Exit(code=1)

    out.mkdir(parents=True, exist_ok=True)
    if output_format == ExportFormat.JSON:
        path = write_json_export(result.data, out / "variables.json")
        print_success(f"Wrote {path}")
    else:
        for file_name, body in result.files.items():
            (out / file_name).write_text(body, encoding="utf-8")
            print_success(f"Wrote {out / file_name}")
        if not result.files:
            print_warning("No variables exported")

    print_info(f"{result.processed} value(s) exported, {result.skipped} skipped")
    print_diagnostics(result.diagnostics)


@app.command("modes")
def modes_command(
    store_path: Path = typer.Option(  # noqa: B008
        Path("tokenvars-store.json"), "--store", "-s", help="Store snapshot to read"
    ),
) -> None:
    """List collections and their modes."""
    try:
        store = InMemoryVariableStore.load(store_path)
        collections = asyncio.run(store.list_collections())
    except TokenVarsError as e:
        print_error(str(e))
        raise typer.Exit(code=1)

    if not collections:
        print_warning("No collections found")
        return
    print_collections(collections)


def main(argv: list[str] | None = None) -> None:
    app(args=argv, standalone_mode=True)


if __name__ == "__main__":
    main(sys.argv[1:])
