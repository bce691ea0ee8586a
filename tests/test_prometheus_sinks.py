"""Tests for rule file sinks."""

import io
import os
import stat
import sys
from unittest.mock import patch

import pytest
from slothrules.core.errors import SinkWriteError
from slothrules.prometheus.models import SLO, RecordingRule, SLORules, StorageSLO
from slothrules.prometheus.sinks import FileSink, RuleSink, StreamSink
from slothrules.prometheus.storage import GroupedRulesYAMLRepository

SLOS = [
    StorageSLO(
        slo=SLO(id="svc"),
        rules=SLORules(sli_error_recording_rules=[RecordingRule(record="r", expr="e")]),
    )
]


class TestStreamSink:
    """Tests for StreamSink."""

    def test_binary_stream(self):
        """Test bytes are written as-is to binary streams."""
        out = io.BytesIO()

        StreamSink(out).write(b"groups: []\n")

        assert out.getvalue() == b"groups: []\n"

    def test_text_stream(self):
        """Test bytes are decoded for text streams."""
        out = io.StringIO()

        StreamSink(out).write("summary: café\n".encode("utf-8"))

        assert out.getvalue() == "summary: café\n"

    def test_stdout(self, capsys):
        """Test the stdout sink writes the document to standard output."""
        repo = GroupedRulesYAMLRepository(StreamSink.stdout())

        repo.store_slos(SLOS)

        captured = capsys.readouterr()
        assert "- name: sloth-slo-sli-recordings-svc\n" in captured.out

    def test_stdout_prefers_binary_buffer(self, monkeypatch):
        """Test stdout bytes go to the underlying buffer when there is one."""
        raw = io.BytesIO()
        monkeypatch.setattr(sys, "stdout", io.TextIOWrapper(raw, encoding="utf-8"))

        StreamSink.stdout().write("summary: café\n".encode("utf-8"))

        assert raw.getvalue() == "summary: café\n".encode("utf-8")

    def test_stdout_without_buffer(self, monkeypatch):
        """Test a replaced stdout without a buffer still gets the document."""
        out = io.StringIO()
        monkeypatch.setattr(sys, "stdout", out)

        StreamSink.stdout().write(b"groups: []\n")

        assert out.getvalue() == "groups: []\n"

    def test_is_rule_sink(self):
        """Test sinks satisfy the RuleSink protocol."""
        assert isinstance(StreamSink(io.BytesIO()), RuleSink)
        assert isinstance(FileSink("rules.yaml"), RuleSink)
        assert isinstance(io.BytesIO(), RuleSink)


class TestFileSink:
    """Tests for FileSink."""

    def test_writes_file(self, tmp_path):
        """Test the document ends up in the target file."""
        path = tmp_path / "rules" / "slos.yaml"

        GroupedRulesYAMLRepository(FileSink(path)).store_slos(SLOS)

        content = path.read_text()
        assert content.startswith("\n---\n# Code generated by Sloth")
        assert "  - record: r\n    expr: e\n" in content

    def test_replaces_existing_file(self, tmp_path):
        """Test an existing file is fully replaced."""
        path = tmp_path / "slos.yaml"
        path.write_text("old content that is longer than the new one\n" * 100)

        FileSink(path).write(b"new\n")

        assert path.read_bytes() == b"new\n"
        assert os.listdir(tmp_path) == ["slos.yaml"]

    def test_failed_replace_keeps_original(self, tmp_path):
        """Test a failing write leaves the old file and no temp files."""
        path = tmp_path / "slos.yaml"
        path.write_text("old\n")

        with patch("slothrules.prometheus.sinks.os.replace", side_effect=OSError("boom")):
            with pytest.raises(SinkWriteError, match="boom"):
                GroupedRulesYAMLRepository(FileSink(path)).store_slos(SLOS)

        assert path.read_text() == "old\n"
        assert os.listdir(tmp_path) == ["slos.yaml"]

    def test_unwritable_directory(self, tmp_path):
        """Test a path under a regular file fails with SinkWriteError."""
        blocker = tmp_path / "file"
        blocker.write_text("")

        with pytest.raises(SinkWriteError):
            GroupedRulesYAMLRepository(FileSink(blocker / "slos.yaml")).store_slos(SLOS)


class TestFileSinkMode:
    """Tests for the permissions of files written by FileSink."""

    @pytest.fixture
    def umask(self):
        old = os.umask(0o022)
        yield
        os.umask(old)

    def _mode(self, path):
        return stat.S_IMODE(path.stat().st_mode)

    def test_keeps_existing_mode(self, tmp_path, umask):
        """Test replacing a rule file keeps its permissions."""
        path = tmp_path / "slos.yaml"
        path.write_text("old\n")
        os.chmod(path, 0o644)

        GroupedRulesYAMLRepository(FileSink(path)).store_slos(SLOS)

        assert self._mode(path) == 0o644

    def test_keeps_restricted_mode(self, tmp_path, umask):
        """Test a mode narrower than the umask default is kept too."""
        path = tmp_path / "slos.yaml"
        path.write_text("old\n")
        os.chmod(path, 0o640)

        FileSink(path).write(b"new\n")

        assert self._mode(path) == 0o640

    def test_new_file_follows_umask(self, tmp_path):
        """Test new rule files get the default mode minus the umask."""
        old = os.umask(0o027)
        try:
            path = tmp_path / "slos.yaml"
            FileSink(path).write(b"new\n")
        finally:
            os.umask(old)

        assert self._mode(path) == 0o640
