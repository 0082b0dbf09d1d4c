"""Filesystem capabilities and data-directory bookkeeping."""

import logging
import shutil
from pathlib import Path

log = logging.getLogger(__name__)


class LocalFileSystem:
    """Create-if-missing helpers and path predicates backed by the real disk.

    Passed into the row filter so tests can substitute a fake.
    """

    def ensure_directory(self, path: Path) -> None:
        Path(path).mkdir(parents=True, exist_ok=True)

    def ensure_file(self, path: Path) -> None:
        path = Path(path)
        self.ensure_directory(path.parent)
        path.touch(exist_ok=True)

    def is_regular_file(self, path: Path) -> bool:
        return Path(path).is_file()

    def is_empty(self, path: Path) -> bool:
        """True for a zero-byte file or a directory without entries."""
        path = Path(path)
        if path.is_dir():
            return self.is_directory_empty(path)
        return path.stat().st_size == 0

    def is_directory_empty(self, path: Path) -> bool:
        return not any(Path(path).iterdir())


def slugify_term(term: str) -> str:
    """Turn a search term into a filename fragment."""
    return term.strip().replace(" ", "_").lower()


def results_path(processed_dir: Path, term: str, timestamp: str) -> Path:
    """Path of the result table for a pipeline run."""
    return Path(processed_dir) / f"results_{slugify_term(term)}_{timestamp}.csv"


def search_output_path(prefix: str | Path, term: str) -> Path:
    """Path written by the standalone search command: ``<prefix>_<term>.csv``."""
    return Path(f"{prefix}_{slugify_term(term)}.csv")


def backup_directory(source_dir: Path, backup_dir: Path) -> list[Path]:
    """Move every entry of ``source_dir`` into ``backup_dir``."""
    source_dir = Path(source_dir)
    backup_dir = Path(backup_dir)
    backup_dir.mkdir(parents=True, exist_ok=True)

    moved = []
    for entry in sorted(source_dir.iterdir()):
        target = backup_dir / entry.name
        shutil.move(str(entry), str(target))
        moved.append(target)

    log.info("Backup completed. %d entries moved to %s", len(moved), backup_dir)
    return moved


def prepare_directories(
    source_dir: Path,
    backup_root: Path,
    source_file: Path,
    timestamp: str,
    fs: LocalFileSystem | None = None,
) -> Path | None:
    """Create the working directories and start from a fresh source file.

    A non-empty ``source_dir`` is moved to ``backup_root/<timestamp>`` first.
    Returns the backup directory used, or None when nothing was backed up.
    """
    fs = fs or LocalFileSystem()
    fs.ensure_directory(source_dir)
    fs.ensure_directory(backup_root)

    backup_dir = None
    if not fs.is_directory_empty(source_dir):
        backup_dir = Path(backup_root) / timestamp
        log.info("Cleaning up source directory: %s", source_dir)
        backup_directory(source_dir, backup_dir)

    log.info("Creating new data file: %s", source_file)
    fs.ensure_file(source_file)
    return backup_dir
