"""Fixed-width table rendering for CSV files."""

import logging
from pathlib import Path

from .errors import InputUnavailable, InvalidArgument
from .fields import normalize_field, split_row

log = logging.getLogger(__name__)

# Extra padding added to every column width.
PADDING = 2


def read_table(path: str | Path, delimiter: str = ",") -> list[list[str]]:
    """Read a delimited file into rows of normalized fields."""
    if len(delimiter) != 1:
        raise InvalidArgument(f"Delimiter must be a single character, got {delimiter!r}")

    path = Path(path)
    try:
        if not path.is_file() or path.stat().st_size == 0:
            raise InputUnavailable(f"'{path}' not found or empty")
        with open(path, encoding="utf-8", newline="") as f:
            lines = f.readlines()
    except (OSError, UnicodeDecodeError) as e:
        raise InputUnavailable(f"Cannot read '{path}': {e}") from e

    return [[normalize_field(field) for field in split_row(line, delimiter)] for line in lines]


def column_widths(rows: list[list[str]]) -> list[int]:
    """Maximum field length per column across all rows, header included."""
    widths: list[int] = []
    for row in rows:
        for i, field in enumerate(row):
            if i == len(widths):
                widths.append(0)
            widths[i] = max(widths[i], len(field))
    return widths


def _format_line(cells: list[str], widths: list[int]) -> str:
    return "".join(cell.ljust(width + PADDING) + " " for cell, width in zip(cells, widths)) + "\n"


def render_table(rows: list[list[str]]) -> str:
    """Render rows as an aligned text table.

    The first row is the header and is upper-cased, followed by a dash rule.
    Short rows are padded with empty fields up to the widest row.
    """
    if not rows:
        return ""

    widths = column_widths(rows)

    def cells(row: list[str]) -> list[str]:
        return list(row) + [""] * (len(widths) - len(row))

    header, *data = rows
    lines = [
        _format_line([field.upper() for field in cells(header)], widths),
        "".join("-" * (width + PADDING) + " " for width in widths) + "\n",
    ]
    lines.extend(_format_line(cells(row), widths) for row in data)
    return "".join(lines)


def render(table_path: str | Path, delimiter: str = ",") -> str:
    """Read ``table_path`` and return its rendered table."""
    rows = read_table(table_path, delimiter)
    log.debug("Rendering %d rows from %s", len(rows), table_path)
    return render_table(rows)
