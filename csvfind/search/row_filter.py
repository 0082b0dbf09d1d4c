"""Filter CSV rows whose first column contains a search term."""

import logging
import os
import shutil
import tempfile
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from ..errors import BackendError, InputUnavailable, InvalidArgument, OutputWriteFailure
from ..fields import first_field
from ..workspace import LocalFileSystem
from .backends import FieldSplitBackend, MatchBackend, select_backend

log = logging.getLogger(__name__)

# Column 0 is always located with a comma, whatever the renderer delimiter is.
SEARCH_DELIMITER = ","


@dataclass
class FilterResult:
    """Outcome of a filter run. ``output_path`` is None when nothing matched."""

    match_count: int
    output_path: Path | None
    backend: str


class RowFilter:
    """Copies the header and every matching data row to an output table."""

    def __init__(
        self,
        backend: MatchBackend | None = None,
        fs: LocalFileSystem | None = None,
        probe: Callable[[str], str | None] = shutil.which,
        preference: str = "auto",
        regex: bool = False,
        executable: str = "rg",
        timeout: int = 60,
    ):
        self.fs = fs or LocalFileSystem()
        self.regex = regex
        self.backend = backend or select_backend(
            preference, which=probe, regex=regex, executable=executable, timeout=timeout
        )

    def filter(self, input_path: str | Path, search_term: str, output_path: str | Path) -> FilterResult:
        if not search_term:
            raise InvalidArgument("Search term must not be empty")
        if not input_path or not output_path:
            raise InvalidArgument("Input and output paths must not be empty")

        input_path = Path(input_path)
        output_path = Path(output_path)
        log.info("Searching for '%s' in CSV: %s", search_term, input_path)

        lines = self._read_lines(input_path)
        header, data_rows = lines[0], lines[1:]

        fields = [first_field(row, SEARCH_DELIMITER) for row in data_rows]
        indices, backend_name = self._select(fields, search_term)

        if not indices:
            log.warning("No matches found for '%s' in %s", search_term, input_path)
            self._remove_stale(output_path)
            return FilterResult(match_count=0, output_path=None, backend=backend_name)

        self._write(output_path, header, [data_rows[i] for i in indices])
        log.info("Search completed. %d rows saved to %s", len(indices), output_path)
        return FilterResult(match_count=len(indices), output_path=output_path, backend=backend_name)

    def _read_lines(self, input_path: Path) -> list[str]:
        try:
            usable = self.fs.is_regular_file(input_path) and not self.fs.is_empty(input_path)
        except OSError as e:
            raise InputUnavailable(f"Input file '{input_path}' is not accessible: {e}") from e
        if not usable:
            raise InputUnavailable(f"Input file '{input_path}' not found or empty")

        try:
            with open(input_path, encoding="utf-8", newline="") as f:
                lines = f.readlines()
        except (OSError, UnicodeDecodeError) as e:
            raise InputUnavailable(f"Cannot read input file '{input_path}': {e}") from e

        if not lines:
            raise InputUnavailable(f"Input file '{input_path}' is empty")
        return lines

    def _select(self, fields: list[str], term: str) -> tuple[list[int], str]:
        try:
            return self.backend.select(fields, term), self.backend.name
        except BackendError as e:
            if isinstance(self.backend, FieldSplitBackend):
                raise
            log.warning("%s backend failed (%s). Falling back to Python search.", self.backend.name, e)
            fallback = FieldSplitBackend(regex=getattr(self.backend, "regex", self.regex))
            return fallback.select(fields, term), fallback.name

    def _remove_stale(self, output_path: Path) -> None:
        try:
            output_path.unlink(missing_ok=True)
        except OSError as e:
            raise OutputWriteFailure(f"Cannot remove stale output file '{output_path}': {e}") from e

    def _write(self, output_path: Path, header: str, rows: list[str]) -> None:
        try:
            self.fs.ensure_directory(output_path.parent)
        except OSError as e:
            raise OutputWriteFailure(f"Failed to create output directory '{output_path.parent}': {e}") from e

        tmp_name = None
        try:
            with tempfile.NamedTemporaryFile(
                "w",
                encoding="utf-8",
                newline="",
                dir=output_path.parent,
                prefix=f".{output_path.name}.",
                suffix=".tmp",
                delete=False,
            ) as tmp:
                tmp_name = tmp.name
                for line in [header, *rows]:
                    tmp.write(line if line.endswith(("\n", "\r")) else line + "\n")
            os.replace(tmp_name, output_path)
        except OSError as e:
            if tmp_name:
                Path(tmp_name).unlink(missing_ok=True)
            raise OutputWriteFailure(f"Failed to write output file '{output_path}': {e}") from e


def filter_rows(
    input_path: str | Path,
    search_term: str,
    output_path: str | Path,
    backend: MatchBackend | None = None,
    preference: str = "auto",
    regex: bool = False,
) -> FilterResult:
    """Convenience wrapper around :class:`RowFilter`."""
    return RowFilter(backend=backend, preference=preference, regex=regex).filter(input_path, search_term, output_path)
