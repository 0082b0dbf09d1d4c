"""Table command."""

import rich_click as click

from ..render import render
from ._helpers import cli_errors, load_cli_settings


@click.command()
@click.argument("csv_file", type=click.Path(dir_okay=False))
@click.option("--delimiter", "-d", default=None, help="Field delimiter (default: render.delimiter from config)")
def table(csv_file: str, delimiter: str | None):
    """Print CSV_FILE as an aligned table with an upper-cased header."""
    if not delimiter:
        delimiter = load_cli_settings().render.delimiter

    with cli_errors():
        text = render(csv_file, delimiter)

    click.echo(text, nl=False)
