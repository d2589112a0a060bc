"""
Rich output helpers for the tokenvars CLI.
"""

from rich import box
from rich.console import Console
from rich.style import Style
from rich.table import Table
from rich.text import Text

from tokenvars.core.diagnostics import Diagnostic
from tokenvars.core.ir.variables import Collection

console = Console()

# Style definitions
STYLES = {
    "success": Style(color="green", bold=True),
    "error": Style(color="red", bold=True),
    "warning": Style(color="yellow"),
    "info": Style(color="cyan"),
    "muted": Style(color="bright_black"),
}


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(Text(f"✓ {message}", style=STYLES["success"]))


def print_error(message: str) -> None:
    """Print an error message."""
    console.print(Text(f"✗ {message}", style=STYLES["error"]))


def print_warning(message: str) -> None:
    """Print a warning message."""
    console.print(Text(f"⚠ {message}", style=STYLES["warning"]))


def print_info(message: str) -> None:
    """Print an info message."""
    console.print(Text(message, style=STYLES["info"]))


def print_diagnostics(diagnostics: list[Diagnostic], limit: int = 50) -> None:
    """Print skipped items as a table, capped at ``limit`` rows."""
    if not diagnostics:
        return
    table = Table(title=f"Diagnostics ({len(diagnostics)})", box=box.SIMPLE)
    table.add_column("Kind", style="yellow")
    table.add_column("Item")
    table.add_column("Mode", style="bright_black")
    table.add_column("Reason")
    for diagnostic in diagnostics[:limit]:
        table.add_row(
            diagnostic.kind.value,
            diagnostic.name or diagnostic.id,
            diagnostic.mode or "",
            diagnostic.reason,
        )
    console.print(table)
    if len(diagnostics) > limit:
        console.print(Text(f"... {len(diagnostics) - limit} more", style=STYLES["muted"]))


def print_collections(collections: list[Collection]) -> None:
    """Print collections with their modes and variable counts."""
    table = Table(title="Collections", box=box.SIMPLE)
    table.add_column("Collection", style="bright_cyan")
    table.add_column("Modes")
    table.add_column("Variables", justify="right")
    for collection in collections:
        table.add_row(
            collection.name,
            ", ".join(mode.name for mode in collection.modes),
            str(len(collection.variable_ids)),
        )
    console.print(table)
