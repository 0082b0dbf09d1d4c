"""Shared pytest fixtures for csvfind tests."""

import os
import shutil
import sys
from pathlib import Path

import pytest

# Add the package to the path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))


def pytest_runtest_setup(item):
    """Skip ripgrep-marked tests without rg, or fail them when CI requires rg."""
    if item.get_closest_marker("ripgrep") is None or shutil.which("rg"):
        return
    if os.environ.get("CSVFIND_REQUIRE_RG") == "1":
        pytest.fail("ripgrep not installed but CSVFIND_REQUIRE_RG=1")
    pytest.skip("ripgrep not installed")


@pytest.fixture(autouse=True)
def isolated_dirs(tmp_path, monkeypatch):
    """Keep config, data and log files inside the test's tmp directory."""
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "share"))
    monkeypatch.setenv("CSVFIND_DATA_DIR", str(tmp_path / "data"))
    return tmp_path


@pytest.fixture
def countries_csv(tmp_path):
    """Small country-code table with quoted and unquoted first columns."""
    path = tmp_path / "countries.csv"
    path.write_text(
        "NAME,CODE,REGION\n"
        '"Cabo Verde",CPV,Africa\n'
        "Angola,AGO,Africa\n"
        '"Verde Island",VRD,Nowhere\n'
        "Portugal,PRT,Europe verde\n"
        "CABO DELGADO,CDG,Africa\n",
        encoding="utf-8",
    )
    return path


@pytest.fixture
def scenario_csv(tmp_path):
    """The two-row table used in the documented examples."""
    path = tmp_path / "scenario.csv"
    path.write_text('NAME,CODE\n"Cabo Verde",CPV\nAngola,AGO\n', encoding="utf-8")
    return path


@pytest.fixture
def fake_rg(tmp_path, monkeypatch):
    """Stand-in ``rg`` on PATH that answers with ``grep -n -i -F``.

    It drops every option and searches stdin for the last argument, which is
    the term ``RipgrepBackend`` passes after ``--regexp``. Output format and
    exit codes match rg's for literal ASCII terms.
    """
    if sys.platform == "win32":
        pytest.skip("shell script stand-in needs a POSIX shell")
    bin_dir = tmp_path / "fakebin"
    bin_dir.mkdir()
    script = bin_dir / "rg"
    script.write_text('#!/bin/sh\nfor arg; do term="$arg"; done\nexec grep -n -i -F -e "$term"\n')
    script.chmod(0o755)
    monkeypatch.setenv("PATH", f"{bin_dir}{os.pathsep}{os.environ.get('PATH', '')}")
    return script


@pytest.fixture
def invalid_config(tmp_path):
    """A hand-edited config.json whose search.backend fails validation."""
    path = tmp_path / "config" / "csvfind" / "config.json"
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text('{"search": {"backend": "grep"}}')
    return path
