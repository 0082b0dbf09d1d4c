"""Search command."""

import rich_click as click
from ..search import BACKEND_CHOICES, RowFilter
from ..workspace import search_output_path
from ._helpers import cli_errors, load_cli_settings, report_result


@click.command()
@click.option("--input", "-i", "input_file", required=True, help="Path to the input CSV file")
@click.option("--search", "-s", "search_term", required=True, help="Term to look for in the first column")
@click.option("--output", "-o", "output_prefix", required=True, help="Output prefix; writes <prefix>_<term>.csv")
@click.option(
    "--backend",
    "-b",
    type=click.Choice(BACKEND_CHOICES),
    default=None,
    help="Match backend (default: search.backend from config)",
)
@click.option("--regex", is_flag=True, help="Treat the search term as a regular expression")
def search(input_file: str, search_term: str, output_prefix: str, backend: str | None, regex: bool):
    """
    Copy the header and every row whose first column contains TERM.

    \b
    Matching is case-insensitive. Quotes around the first column are ignored.
    No output file is left behind when nothing matches.

    \b
    EXAMPLES:
      csvfind search -i countries.csv -s verde -o out/results
      csvfind search -i countries.csv -s "^cabo" -o out/results --regex -b python
    """
    settings = load_cli_settings().search
    output_path = search_output_path(output_prefix, search_term)

    with cli_errors():
        row_filter = RowFilter(
            preference=backend or settings.backend,
            regex=regex,
            executable=settings.ripgrep_path,
            timeout=settings.timeout_seconds,
        )
        result = row_filter.filter(input_file, search_term, output_path)

    report_result(result, search_term)
