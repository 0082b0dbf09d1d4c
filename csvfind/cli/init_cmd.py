"""Init and doctor commands."""

import shutil
import sys

import rich_click as click
from rich.panel import Panel

from ..config import (
    get_backup_dir,
    get_config_path,
    get_data_dir,
    get_logs_dir,
    get_processed_dir,
    get_source_path,
    load_config,
    load_settings,
    save_config,
)
from ._helpers import console, status_icon


@click.command()
@click.option("--force", is_flag=True, help="Overwrite existing config file")
def init(force: bool):
    """Initialize csvfind data directories and configuration.

    Creates:
    - Data directory (~/.local/share/csvfind/ or CSVFIND_DATA_DIR)
    - source/, processed/, backup/ and logs/ below it
    - Config file (~/.config/csvfind/config.json)
    """
    data_dir = get_data_dir()
    config_path = get_config_path()

    console.print("Initializing csvfind...")
    console.print(f"  Data directory: {data_dir}", soft_wrap=True)
    console.print(f"  Config file: {config_path}", soft_wrap=True)

    for label, path in (
        ("Source", get_source_path().parent),
        ("Processed", get_processed_dir()),
        ("Backup", get_backup_dir()),
        ("Logs", get_logs_dir()),
    ):
        path.mkdir(parents=True, exist_ok=True)
        console.print(f"  {status_icon(True)} {label} directory created")

    if config_path.exists() and not force:
        console.print("  [yellow]SKIP[/yellow] Config already exists (use --force to overwrite)")
    else:
        save_config(load_config())
        console.print(f"  {status_icon(True)} Config file created")

    console.print("")
    console.print("Initialization complete! Next steps:")
    console.print("  1. Run: csvfind doctor")
    console.print("  2. Look something up: csvfind lookup <csv_url> <term>")


@click.command()
def doctor():
    """Check csvfind dependencies and configuration.

    Verifies:
    - Data directory exists
    - Config file is valid
    - ripgrep is available (optional, enables the fast backend)
    """
    issues = []
    warnings = []
    ripgrep_path = "rg"

    console.print("Checking csvfind configuration...\n")

    # 1. Check data directory
    data_dir = get_data_dir()
    console.print(f"Data directory: {data_dir}", soft_wrap=True)
    if data_dir.exists():
        console.print(f"  {status_icon(True)} Directory exists")
    else:
        console.print(f"  {status_icon(False)} Directory does not exist")
        issues.append("Run 'csvfind init' to create the data directory")

    # 2. Check config file
    config_path = get_config_path()
    console.print(f"\nConfig file: {config_path}", soft_wrap=True)
    if config_path.exists():
        try:
            settings = load_settings()
            ripgrep_path = settings.search.ripgrep_path
            console.print(f"  {status_icon(True)} Config file valid")
        except (OSError, ValueError) as e:
            console.print(f"  {status_icon(False)} Config file invalid: {e}")
            issues.append("Fix or delete config file")
    else:
        console.print("  [yellow]WARN[/yellow] Config file not found (using defaults)")
        warnings.append("Run 'csvfind init' to create config file")

    # 3. Check ripgrep
    console.print("\nripgrep:")
    rg = shutil.which(ripgrep_path)
    if rg:
        console.print(f"  {status_icon(True)} Found at {rg}", soft_wrap=True)
    else:
        console.print("  [yellow]WARN[/yellow] ripgrep not found in PATH (Python search will be used)")
        warnings.append("Install ripgrep for faster searches")

    console.print("\n" + "=" * 50)

    if issues:
        console.print(
            Panel(
                "\n".join(f"  - {issue}" for issue in issues),
                title=f"{len(issues)} issue(s) found",
                border_style="red",
            )
        )
        sys.exit(1)
    elif warnings:
        console.print(
            Panel(
                "\n".join(f"  - {w}" for w in warnings),
                title=f"All checks passed with {len(warnings)} warning(s)",
                border_style="yellow",
            )
        )
    else:
        console.print("\n[green]All checks passed![/green]")
