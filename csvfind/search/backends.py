"""Match backends: a ripgrep-driven fast path and a pure Python fallback."""

import logging
import re
import shutil
import subprocess
from collections.abc import Callable, Sequence

from ..errors import BackendError, InvalidArgument

log = logging.getLogger(__name__)

BACKEND_CHOICES = ("auto", "ripgrep", "python")


class MatchBackend:
    """Decides whether a quote-stripped first field contains a search term."""

    name = "base"

    def matches(self, field0: str, term: str) -> bool:
        raise NotImplementedError

    def select(self, fields: Sequence[str], term: str) -> list[int]:
        """Return the indices of ``fields`` that match ``term``, in order."""
        return [i for i, field in enumerate(fields) if self.matches(field, term)]


class FieldSplitBackend(MatchBackend):
    """Case-insensitive containment (or regex search) done in Python.

    Literal terms are compared after ``str.lower()`` on both sides. That agrees
    with ripgrep's ``--ignore-case`` for ordinary text, but full Unicode
    lowercasing differs from ripgrep's simple case folding on a few characters:
    ``"İ".lower()`` is ``"i̇"`` (``i`` plus a combining dot), so the term ``i``
    matches ``İstanbul`` here and not under ripgrep. Backend equivalence is
    only guaranteed outside such characters.
    """

    name = "python"

    def __init__(self, regex: bool = False):
        self.regex = regex

    def matches(self, field0: str, term: str) -> bool:
        if self.regex:
            try:
                return re.search(term, field0, re.IGNORECASE) is not None
            except re.error as e:
                raise InvalidArgument(f"Invalid search pattern {term!r}: {e}") from e
        return term.lower() in field0.lower()


class RipgrepBackend(MatchBackend):
    """Runs ``rg`` once over the first-column values fed on stdin.

    Each value becomes one input line, so the reported line numbers map
    straight back to row indices.
    """

    name = "ripgrep"

    def __init__(self, executable: str = "rg", regex: bool = False, timeout: int = 60):
        self.executable = executable
        self.regex = regex
        self.timeout = timeout

    def _command(self, term: str) -> list[str]:
        cmd = [
            self.executable,
            "--no-config",
            "--text",
            "--color",
            "never",
            "--line-number",
            "--ignore-case",
        ]
        if not self.regex:
            cmd.append("--fixed-strings")
        cmd.extend(["--regexp", term])
        return cmd

    def matches(self, field0: str, term: str) -> bool:
        return bool(self.select([field0], term))

    def select(self, fields: Sequence[str], term: str) -> list[int]:
        if not fields:
            return []

        payload = "\n".join(fields) + "\n"
        try:
            result = subprocess.run(
                self._command(term),
                input=payload,
                capture_output=True,
                text=True,
                encoding="utf-8",
                timeout=self.timeout,
            )
        except subprocess.TimeoutExpired as e:
            raise BackendError(f"rg timed out after {self.timeout}s") from e
        except FileNotFoundError as e:
            raise BackendError(f"rg executable not found: {self.executable}") from e

        # rg exits 1 when nothing matched
        if result.returncode == 1:
            return []
        if result.returncode != 0:
            stderr = result.stderr.strip()
            log.error("rg exited with code %d: %s", result.returncode, stderr)
            raise BackendError(f"rg exited with code {result.returncode}: {stderr}")

        # rg only splits records on "\n"; other line breaks can sit inside a field
        indices = []
        for line in result.stdout.split("\n"):
            number, sep, _ = line.partition(":")
            if not sep or not number.isdigit():
                continue
            index = int(number) - 1
            if not 0 <= index < len(fields):
                raise BackendError(f"rg reported line {number} for {len(fields)} input lines")
            indices.append(index)
        return indices


def select_backend(
    preference: str = "auto",
    which: Callable[[str], str | None] = shutil.which,
    regex: bool = False,
    executable: str = "rg",
    timeout: int = 60,
) -> MatchBackend:
    """Pick a backend according to ``preference`` and tool availability.

    ``which`` is the capability probe; it receives the ripgrep executable name
    and returns its resolved path or None.
    """
    if preference not in BACKEND_CHOICES:
        raise InvalidArgument(f"Unknown backend {preference!r}; expected one of {', '.join(BACKEND_CHOICES)}")

    if preference == "python":
        return FieldSplitBackend(regex=regex)

    rg_path = which(executable)
    if rg_path:
        log.info("Using ripgrep (%s) for high-performance search", rg_path)
        return RipgrepBackend(executable=rg_path, regex=regex, timeout=timeout)

    if preference == "ripgrep":
        raise InvalidArgument(f"ripgrep backend requested but '{executable}' is not on PATH")

    log.warning("ripgrep (%s) not found. Falling back to Python search (may be slower).", executable)
    return FieldSplitBackend(regex=regex)
