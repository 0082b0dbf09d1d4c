"""Lookup command: download, search and print in one go."""

from datetime import datetime

import rich_click as click
from rich.markup import escape

from ..config import get_backup_dir, get_processed_dir, get_source_path
from ..fetcher import download, is_valid_url
from ..render import render
from ..search import BACKEND_CHOICES, RowFilter
from ..workspace import prepare_directories, results_path
from ._helpers import cli_errors, console, load_cli_settings, report_result


@click.command()
@click.argument("url")
@click.argument("term")
@click.option("--backend", "-b", type=click.Choice(BACKEND_CHOICES), default=None, help="Match backend")
@click.option("--table/--no-table", "show_table", default=True, help="Print the results as a table")
def lookup(url: str, term: str, backend: str | None, show_table: bool):
    """
    Download the CSV at URL and show the rows whose first column contains TERM.

    \b
    The previous download is moved to the backup directory first.
    Results are kept under <data>/processed/results_<term>_<timestamp>.csv.

    \b
    EXAMPLE:
      csvfind lookup https://example.com/countries.csv "cabo verde"
    """
    if not is_valid_url(url):
        raise click.UsageError(f"Invalid URL format: '{url}'")
    if not term.strip():
        raise click.UsageError("Search term must not be empty.")

    settings = load_cli_settings()
    now = datetime.now()
    source_path = get_source_path()
    output_path = results_path(get_processed_dir(), term, now.strftime("%Y%m%d%H%M%S"))

    with cli_errors():
        try:
            backup = prepare_directories(
                source_path.parent, get_backup_dir(), source_path, now.strftime("%Y%m%d%H%M")
            )
        except OSError as e:
            raise click.ClickException(f"Failed to prepare directories: {e}") from e
        if backup:
            console.print(f"Previous source backed up to {escape(str(backup))}", soft_wrap=True)

        console.print(f"Downloading {escape(url)}...", soft_wrap=True)
        download(
            url,
            source_path,
            timeout=settings.fetch.timeout_seconds,
            max_attempts=settings.fetch.retry_max_attempts,
            base_seconds=settings.fetch.retry_base_seconds,
            max_seconds=settings.fetch.retry_max_seconds,
        )

        row_filter = RowFilter(
            preference=backend or settings.search.backend,
            executable=settings.search.ripgrep_path,
            timeout=settings.search.timeout_seconds,
        )
        result = row_filter.filter(source_path, term, output_path)

        report_result(result, term)
        if result.match_count and show_table:
            text = render(result.output_path, ",")
            click.echo("")
            click.echo(text, nl=False)
