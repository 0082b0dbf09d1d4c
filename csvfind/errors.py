"""Exception hierarchy shared by the filter, renderer and fetcher."""


class CsvfindError(Exception):
    """Base class for all csvfind failures."""


class InvalidArgument(CsvfindError):
    """An argument is empty or malformed (search term, path, delimiter)."""


class InputUnavailable(CsvfindError):
    """The input file is missing, not a regular file, empty or unreadable."""


class OutputWriteFailure(CsvfindError):
    """The output directory or file could not be created or written."""


class BackendError(CsvfindError):
    """A match backend failed to run (missing tool, crash, timeout)."""


class FetchError(CsvfindError):
    """The source file could not be retrieved."""
