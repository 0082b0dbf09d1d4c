"""Field extraction shared by the row filter and the table renderer.

Rows are split naively on the delimiter. A delimiter inside a quoted field is
not protected; only one layer of surrounding double quotes is removed.
"""

QUOTE = '"'


def strip_line_ending(line: str) -> str:
    """Drop a trailing ``\\n``, ``\\r\\n`` or ``\\r``."""
    return line.rstrip("\r\n")


def strip_quotes(field: str) -> str:
    """Remove one leading and one trailing double quote when present."""
    if field.startswith(QUOTE):
        field = field[1:]
    if field.endswith(QUOTE):
        field = field[:-1]
    return field


def split_row(line: str, delimiter: str = ",") -> list[str]:
    """Split a raw line into fields without touching quotes."""
    return strip_line_ending(line).split(delimiter)


def first_field(line: str, delimiter: str = ",") -> str:
    """Return the quote-stripped first field of a raw line."""
    return strip_quotes(strip_line_ending(line).split(delimiter, 1)[0])


def normalize_field(field: str) -> str:
    """Normalize a field for display: no carriage returns, no surrounding quotes."""
    return strip_quotes(field.replace("\r", ""))
