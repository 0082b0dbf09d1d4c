"""Shared CLI utilities: the Rich console, error mapping and result reporting."""

from contextlib import contextmanager

import rich_click as click
from rich.console import Console
from rich.markup import escape

from ..config import get_config_path, load_settings
from ..errors import CsvfindError
from ..models import CsvfindConfig
from ..search import FilterResult

console = Console()


def status_icon(ok: bool) -> str:
    """Return a colored checkmark or cross for doctor/init output."""
    return "[green]✓[/green]" if ok else "[red]✗[/red]"


@contextmanager
def cli_errors():
    """Turn csvfind failures into a clean ClickException (exit code 1)."""
    try:
        yield
    except CsvfindError as e:
        raise click.ClickException(str(e)) from e


def load_cli_settings() -> CsvfindConfig:
    """Load validated settings, reporting a broken config file as a ClickException."""
    try:
        return load_settings()
    except (OSError, ValueError) as e:
        raise click.ClickException(f"Invalid config {get_config_path()}: {e}") from e


def report_result(result: FilterResult, term: str) -> None:
    """Print the match summary shared by ``search`` and ``lookup``."""
    if result.match_count == 0:
        console.print(f"No matches found for '{escape(term)}'.")
        return
    console.print(f"Found {result.match_count} matching rows ({result.backend} backend)")
    console.print(f"Results saved to {escape(str(result.output_path))}", soft_wrap=True)
