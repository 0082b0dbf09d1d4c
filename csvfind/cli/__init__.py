"""CLI entry point for csvfind."""

import rich_click as click

from .. import __version__
from ..config import get_logs_dir, load_settings
from ..logs import log_file_path, setup_logging
from ..models import CsvfindConfig

# Import command modules; avoid shadowing module names with command objects
# so that `import csvfind.cli.<module>` still resolves to the module.
from . import config_cmd as _config_mod
from . import init_cmd as _init_mod
from . import lookup as _lookup_mod
from . import search as _search_mod
from . import table as _table_mod

# Commands that only report state do not get a log file.
_NO_LOG_FILE = {"config", "doctor"}


@click.group()
@click.version_option(version=__version__)
@click.option("--verbose", "-v", is_flag=True, help="Show debug logging on stderr")
@click.pass_context
def cli(ctx: click.Context, verbose: bool):
    """Search the first column of CSV files and print the matches as a table."""
    try:
        settings = load_settings()
    except (OSError, ValueError):
        # doctor reports the broken config; everything else runs on defaults
        settings = CsvfindConfig(logging={"file_enabled": False})

    level = "DEBUG" if verbose else settings.logging.level
    log_file = None
    if settings.logging.file_enabled and ctx.invoked_subcommand not in _NO_LOG_FILE:
        log_file = log_file_path(get_logs_dir(), ctx.invoked_subcommand or "csvfind")
    setup_logging(level, log_file)


# Register commands
cli.add_command(_init_mod.init)
cli.add_command(_init_mod.doctor)
cli.add_command(_search_mod.search)
cli.add_command(_table_mod.table)
cli.add_command(_lookup_mod.lookup)
cli.add_command(_config_mod.config)


if __name__ == "__main__":
    cli()
