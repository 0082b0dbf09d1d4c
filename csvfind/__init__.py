"""csvfind - search the first column of CSV files and print aligned tables."""

try:
    from importlib.metadata import version

    __version__ = version("csvfind")
except Exception:
    __version__ = "0.0.0-dev"
