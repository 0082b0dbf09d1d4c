"""Tests for the row filter."""

from pathlib import Path
from unittest.mock import MagicMock

import pytest

from csvfind.errors import BackendError, InputUnavailable, InvalidArgument, OutputWriteFailure
from csvfind.search import FieldSplitBackend, MatchBackend, RipgrepBackend, RowFilter, filter_rows
from csvfind.workspace import LocalFileSystem

BACKENDS = [
    pytest.param(FieldSplitBackend(), id="python"),
    pytest.param(
        RipgrepBackend(),
        id="ripgrep",
        marks=pytest.mark.ripgrep,
    ),
]


class FailingBackend(MatchBackend):
    name = "broken"

    def matches(self, field0, term):
        raise BackendError("boom")


class RecordingFileSystem(LocalFileSystem):
    """Real filesystem that records directory creation requests."""

    def __init__(self, fail_mkdir: bool = False):
        self.created: list[Path] = []
        self.fail_mkdir = fail_mkdir

    def ensure_directory(self, path):
        if self.fail_mkdir:
            raise PermissionError(13, "Permission denied", str(path))
        self.created.append(Path(path))
        super().ensure_directory(path)


class TestFilterMatches:
    @pytest.mark.parametrize("backend", BACKENDS)
    def test_scenario_verde(self, backend, scenario_csv, tmp_path):
        out = tmp_path / "out" / "result.csv"
        result = RowFilter(backend=backend).filter(scenario_csv, "verde", out)

        assert result.match_count == 1
        assert result.output_path == out
        assert result.backend == backend.name
        assert out.read_text() == 'NAME,CODE\n"Cabo Verde",CPV\n'

    @pytest.mark.parametrize("backend", BACKENDS)
    def test_only_first_column_is_searched(self, backend, countries_csv, tmp_path):
        """'Portugal,PRT,Europe verde' has the term outside column 0."""
        out = tmp_path / "result.csv"
        RowFilter(backend=backend).filter(countries_csv, "VERDE", out)

        lines = out.read_text().splitlines()
        assert lines == ["NAME,CODE,REGION", '"Cabo Verde",CPV,Africa', '"Verde Island",VRD,Nowhere']

    @pytest.mark.parametrize("backend", BACKENDS)
    def test_header_never_tested(self, backend, countries_csv, tmp_path):
        out = tmp_path / "result.csv"
        result = RowFilter(backend=backend).filter(countries_csv, "NAME", out)
        assert result.match_count == 0
        assert not out.exists()

    @pytest.mark.ripgrep
    def test_backends_agree(self, countries_csv, tmp_path):
        for term in ("cabo", "verde", "a", "xyz-no-match"):
            fast = RowFilter(backend=RipgrepBackend()).filter(countries_csv, term, tmp_path / "fast.csv")
            slow = RowFilter(backend=FieldSplitBackend()).filter(countries_csv, term, tmp_path / "slow.csv")
            assert fast.match_count == slow.match_count
            if fast.match_count:
                assert fast.output_path.read_text() == slow.output_path.read_text()

    def test_rows_copied_verbatim(self, tmp_path):
        src = tmp_path / "crlf.csv"
        src.write_bytes(b'NAME,CODE\r\n"Cabo Verde",CPV\r\nAngola,AGO\r\n')
        out = tmp_path / "result.csv"

        RowFilter(backend=FieldSplitBackend()).filter(src, "verde", out)

        assert out.read_bytes() == b'NAME,CODE\r\n"Cabo Verde",CPV\r\n'

    def test_missing_final_newline_is_added(self, tmp_path):
        src = tmp_path / "nonl.csv"
        src.write_text("NAME,CODE\nAngola,AGO")
        out = tmp_path / "result.csv"

        RowFilter(backend=FieldSplitBackend()).filter(src, "ango", out)

        assert out.read_text() == "NAME,CODE\nAngola,AGO\n"

    def test_regex_backend(self, countries_csv, tmp_path):
        out = tmp_path / "result.csv"
        result = RowFilter(backend=FieldSplitBackend(regex=True)).filter(countries_csv, "^cabo", out)
        assert result.match_count == 2

    def test_creates_output_directory_through_fs(self, scenario_csv, tmp_path):
        fs = RecordingFileSystem()
        out = tmp_path / "nested" / "deeper" / "result.csv"

        RowFilter(backend=FieldSplitBackend(), fs=fs).filter(scenario_csv, "verde", out)

        assert fs.created == [out.parent]
        assert out.exists()

    def test_filter_rows_wrapper(self, scenario_csv, tmp_path):
        result = filter_rows(scenario_csv, "ango", tmp_path / "r.csv", backend=FieldSplitBackend())
        assert result.match_count == 1


class TestZeroMatches:
    def test_no_output_file(self, scenario_csv, tmp_path):
        out = tmp_path / "result.csv"
        result = RowFilter(backend=FieldSplitBackend()).filter(scenario_csv, "xyz-no-match", out)

        assert result.match_count == 0
        assert result.output_path is None
        assert not out.exists()

    def test_stale_output_removed(self, scenario_csv, tmp_path):
        out = tmp_path / "result.csv"
        out.write_text("NAME,CODE\n")

        RowFilter(backend=FieldSplitBackend()).filter(scenario_csv, "xyz-no-match", out)

        assert not out.exists()

    def test_no_directory_created(self, scenario_csv, tmp_path):
        fs = RecordingFileSystem()
        out = tmp_path / "never" / "result.csv"

        RowFilter(backend=FieldSplitBackend(), fs=fs).filter(scenario_csv, "xyz-no-match", out)

        assert fs.created == []
        assert not out.parent.exists()

    def test_header_only_input(self, tmp_path):
        src = tmp_path / "header.csv"
        src.write_text("NAME,CODE\n")
        result = RowFilter(backend=FieldSplitBackend()).filter(src, "x", tmp_path / "r.csv")
        assert result.match_count == 0


class TestIdempotence:
    @pytest.mark.parametrize("term", ["verde", "xyz-no-match"])
    def test_same_result_twice(self, scenario_csv, tmp_path, term):
        out = tmp_path / "result.csv"
        row_filter = RowFilter(backend=FieldSplitBackend())

        first = row_filter.filter(scenario_csv, term, out)
        first_content = out.read_bytes() if out.exists() else None
        second = row_filter.filter(scenario_csv, term, out)
        second_content = out.read_bytes() if out.exists() else None

        assert first == second
        assert first_content == second_content

    def test_overwrites_previous_result(self, scenario_csv, tmp_path):
        out = tmp_path / "result.csv"
        out.write_text("stale,content\nold,row\nolder,row\n")

        RowFilter(backend=FieldSplitBackend()).filter(scenario_csv, "ango", out)

        assert out.read_text() == "NAME,CODE\nAngola,AGO\n"

    def test_no_temp_files_left(self, scenario_csv, tmp_path):
        out_dir = tmp_path / "out"
        RowFilter(backend=FieldSplitBackend()).filter(scenario_csv, "verde", out_dir / "result.csv")
        assert [p.name for p in out_dir.iterdir()] == ["result.csv"]


class TestErrors:
    @pytest.mark.parametrize(
        "input_path,term,output_path",
        [
            ("in.csv", "", "out.csv"),
            ("", "x", "out.csv"),
            ("in.csv", "x", ""),
        ],
    )
    def test_invalid_arguments(self, input_path, term, output_path):
        with pytest.raises(InvalidArgument):
            RowFilter(backend=FieldSplitBackend()).filter(input_path, term, output_path)

    def test_missing_input(self, tmp_path):
        with pytest.raises(InputUnavailable):
            RowFilter(backend=FieldSplitBackend()).filter(tmp_path / "nope.csv", "x", tmp_path / "r.csv")

    def test_empty_input(self, tmp_path):
        src = tmp_path / "empty.csv"
        src.write_text("")
        with pytest.raises(InputUnavailable):
            RowFilter(backend=FieldSplitBackend()).filter(src, "x", tmp_path / "r.csv")

    def test_directory_input(self, tmp_path):
        with pytest.raises(InputUnavailable):
            RowFilter(backend=FieldSplitBackend()).filter(tmp_path, "x", tmp_path / "r.csv")

    def test_undecodable_input(self, tmp_path):
        src = tmp_path / "latin1.csv"
        src.write_bytes(b"NAME\n\xff\xfe\xfa\n")
        with pytest.raises(InputUnavailable):
            RowFilter(backend=FieldSplitBackend()).filter(src, "x", tmp_path / "r.csv")

    def test_output_directory_failure(self, scenario_csv, tmp_path):
        fs = RecordingFileSystem(fail_mkdir=True)
        with pytest.raises(OutputWriteFailure):
            RowFilter(backend=FieldSplitBackend(), fs=fs).filter(scenario_csv, "verde", tmp_path / "x" / "r.csv")

    def test_write_failure_leaves_no_file(self, scenario_csv, tmp_path, monkeypatch):
        import csvfind.search.row_filter as row_filter_mod

        def _fail_replace(src, dst):
            raise OSError(28, "No space left on device")

        monkeypatch.setattr(row_filter_mod.os, "replace", _fail_replace)
        out = tmp_path / "out" / "result.csv"

        with pytest.raises(OutputWriteFailure):
            RowFilter(backend=FieldSplitBackend()).filter(scenario_csv, "verde", out)

        assert list(out.parent.iterdir()) == []


class TestBackendFallback:
    def test_failing_fast_backend_falls_back(self, scenario_csv, tmp_path, caplog):
        out = tmp_path / "result.csv"
        with caplog.at_level("WARNING"):
            result = RowFilter(backend=FailingBackend()).filter(scenario_csv, "verde", out)

        assert result.match_count == 1
        assert result.backend == "python"
        assert "Falling back" in caplog.text

    def test_failing_ripgrep_falls_back(self, scenario_csv, tmp_path, monkeypatch):
        import csvfind.search.backends as backends_mod

        monkeypatch.setattr(
            backends_mod.subprocess,
            "run",
            MagicMock(return_value=MagicMock(returncode=2, stdout="", stderr="error")),
        )
        result = RowFilter(backend=RipgrepBackend()).filter(scenario_csv, "verde", tmp_path / "r.csv")

        assert result.match_count == 1
        assert result.backend == "python"

    def test_probe_selects_backend(self):
        assert isinstance(RowFilter(probe=lambda name: None).backend, FieldSplitBackend)
        assert isinstance(RowFilter(probe=lambda name: "/usr/bin/rg").backend, RipgrepBackend)
        assert isinstance(RowFilter(preference="python", probe=lambda name: "/usr/bin/rg").backend, FieldSplitBackend)

    def test_out_of_range_ripgrep_line_falls_back(self, scenario_csv, tmp_path, monkeypatch):
        import csvfind.search.backends as backends_mod

        monkeypatch.setattr(
            backends_mod.subprocess,
            "run",
            MagicMock(return_value=MagicMock(returncode=0, stdout="1:x\n9:x\n", stderr="")),
        )
        result = RowFilter(backend=RipgrepBackend()).filter(scenario_csv, "verde", tmp_path / "r.csv")

        assert result.match_count == 1
        assert result.backend == "python"


class TestLineBreaksInsideFields:
    def test_form_feed_in_first_field_with_ripgrep_output(self, tmp_path, monkeypatch):
        import csvfind.search.backends as backends_mod

        src = tmp_path / "ff.csv"
        src.write_bytes(b"NAME,CODE\nverde\x0c3:x,A\nb,B\n")
        monkeypatch.setattr(
            backends_mod.subprocess,
            "run",
            MagicMock(return_value=MagicMock(returncode=0, stdout="1:verde\x0c3:x\n", stderr="")),
        )
        out = tmp_path / "result.csv"

        result = RowFilter(backend=RipgrepBackend()).filter(src, "verde", out)

        assert result.match_count == 1
        assert result.backend == "ripgrep"
        assert out.read_bytes() == b"NAME,CODE\nverde\x0c3:x,A\n"

    def test_form_feed_in_first_field_through_rg_executable(self, tmp_path, fake_rg):
        src = tmp_path / "ff.csv"
        src.write_bytes(b"NAME,CODE\nverde\x0c3:x,A\nb,B\nc,C\n")
        out = tmp_path / "result.csv"

        result = RowFilter(preference="ripgrep").filter(src, "verde", out)

        assert result.backend == "ripgrep"
        assert out.read_bytes() == b"NAME,CODE\nverde\x0c3:x,A\n"

    def test_backends_agree_through_rg_executable(self, countries_csv, tmp_path, fake_rg):
        for term in ("cabo", "verde", "a", "xyz-no-match"):
            fast = RowFilter(preference="ripgrep").filter(countries_csv, term, tmp_path / "fast.csv")
            slow = RowFilter(backend=FieldSplitBackend()).filter(countries_csv, term, tmp_path / "slow.csv")
            assert fast.backend == "ripgrep"
            assert fast.match_count == slow.match_count
            if fast.match_count:
                assert fast.output_path.read_text() == slow.output_path.read_text()
