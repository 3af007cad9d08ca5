"""Tests for dupescan.cli — CLI argument parsing and scan dispatch."""

from dupescan.cli import build_parser
from dupescan.cli import cmd_scan
from unittest.mock import patch

import argparse
import json
import logging
import pathlib
import pytest


def _scan_args(root: pathlib.Path, **kwargs) -> argparse.Namespace:
    defaults = dict(
        root=root, exclude=[], exclude_dir=[], skip_hidden=False,
        chunk_size=65536, progress=False, format="text",
    )
    defaults.update(kwargs)
    return argparse.Namespace(**defaults)


class TestBuildParser:
    """Test argparse parser construction."""

    def test_root_positional(self):
        parser = build_parser()
        args = parser.parse_args(["/tmp/source"])
        assert args.root == pathlib.Path("/tmp/source")

    def test_defaults_are_unset(self):
        args = build_parser().parse_args(["/tmp/source"])
        assert args.exclude is None
        assert args.exclude_dir is None
        assert args.skip_hidden is None
        assert args.chunk_size is None
        assert args.progress is None
        assert args.format is None
        assert args.configure is False

    def test_all_flags(self):
        args = build_parser().parse_args([
            "/tmp/source",
            "--exclude", "*.tmp",
            "--exclude", "*.bak",
            "--exclude-dir", ".git",
            "--skip-hidden",
            "--chunk-size", "4096",
            "--no-progress",
            "--format", "json",
        ])
        assert args.exclude == ["*.tmp", "*.bak"]
        assert args.exclude_dir == [".git"]
        assert args.skip_hidden is True
        assert args.chunk_size == 4096
        assert args.progress is False
        assert args.format == "json"

    def test_invalid_chunk_size_rejected(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["/tmp/s", "--chunk-size", "0"])

    def test_invalid_format_rejected(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["/tmp/s", "--format", "xml"])

    def test_verbose_flag(self):
        args = build_parser().parse_args(["--verbose", "/tmp/s"])
        assert args.verbose is True

    def test_quiet_flag(self):
        args = build_parser().parse_args(["--quiet", "/tmp/s"])
        assert args.quiet is True

    def test_verbose_and_quiet_mutually_exclusive(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["--verbose", "--quiet", "/tmp/s"])


class TestMain:
    """Test main() entry point dispatch."""

    def test_configure_flag(self, monkeypatch):
        from dupescan.cli import main
        monkeypatch.setattr("sys.argv", ["dupescan", "--configure"])
        with patch("dupescan.cli.create_config_interactive") as mock_configure:
            main()
        mock_configure.assert_called_once()

    def test_no_root_prints_help(self, capsys, monkeypatch):
        from dupescan.cli import main
        monkeypatch.setattr("sys.argv", ["dupescan"])
        main()
        captured = capsys.readouterr()
        assert "usage" in captured.out.lower()

    def test_scan_dispatches(self, tmp_path, make_file, tmp_source, monkeypatch, caplog):
        from dupescan.cli import main
        make_file("a.bin", b"dup")
        make_file("b.bin", b"dup")
        monkeypatch.setattr("sys.argv", ["dupescan", str(tmp_source), "--no-progress"])
        monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "cfg"))
        with caplog.at_level(logging.INFO, logger="dupescan"):
            main()
        assert "Scanning" in caplog.text
        assert "1 duplicate group" in caplog.text

    def test_quiet_still_prints_report(self, tmp_path, make_file, tmp_source, monkeypatch, capsys):
        from dupescan.cli import main
        a = make_file("a.bin", b"same bytes")
        b = make_file("nested/b.bin", b"same bytes")
        monkeypatch.setattr("sys.argv", ["dupescan", "--quiet", str(tmp_source), "--no-progress"])
        monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "cfg"))
        main()
        captured = capsys.readouterr()
        assert "Files with hash" in captured.out
        assert str(a) in captured.out
        assert str(b) in captured.out
        assert "Scanning" not in captured.err

    def test_config_file_applied(self, tmp_path, make_file, tmp_source, monkeypatch, caplog):
        from dupescan.cli import main
        make_file("a.tmp", b"dup")
        make_file("b.tmp", b"dup")
        cfg = tmp_path / "cfg" / "dupescan"
        cfg.mkdir(parents=True)
        (cfg / "config.toml").write_text('exclude = ["*.tmp"]\nprogress = false\n')
        monkeypatch.setattr("sys.argv", ["dupescan", str(tmp_source)])
        monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "cfg"))
        with caplog.at_level(logging.INFO, logger="dupescan"):
            main()
        assert "No duplicates found" in caplog.text


class TestCmdScan:
    """Test the scan command."""

    def test_finds_duplicates(self, make_file, tmp_source, caplog, capsys):
        a = make_file("a.jpg", b"duplicate content here")
        b = make_file("sub/b.jpg", b"duplicate content here")
        make_file("unique.jpg", b"unique content")

        with caplog.at_level(logging.INFO, logger="dupescan"):
            cmd_scan(_scan_args(tmp_source))

        out = capsys.readouterr().out
        assert "1 duplicate group" in caplog.text
        assert "Files with hash" in out
        assert f"\t{a}" in out
        assert f"\t{b}" in out
        assert "Files with hash" not in caplog.text

    def test_summary_has_no_blank_record_line(self, make_file, tmp_source, caplog):
        make_file("a", b"dup")
        make_file("b", b"dup")
        with caplog.at_level(logging.INFO, logger="dupescan"):
            cmd_scan(_scan_args(tmp_source))
        assert all(not r.getMessage().startswith("\n") for r in caplog.records)

    def test_no_duplicates(self, make_file, tmp_source, caplog):
        make_file("a.jpg", b"unique 1")
        make_file("b.jpg", b"unique 2222")
        with caplog.at_level(logging.INFO, logger="dupescan"):
            cmd_scan(_scan_args(tmp_source))
        assert "No duplicates" in caplog.text

    def test_json_output(self, make_file, tmp_source, capsys):
        a = make_file("a", b"dup")
        b = make_file("b", b"dup")
        cmd_scan(_scan_args(tmp_source, format="json"))
        data = json.loads(capsys.readouterr().out)
        assert data["groups"][0]["paths"] == [str(a), str(b)]

    def test_missing_root_exits_with_error(self, tmp_path, caplog):
        with caplog.at_level(logging.INFO, logger="dupescan"):
            with pytest.raises(SystemExit) as excinfo:
                cmd_scan(_scan_args(tmp_path / "missing"))
        assert excinfo.value.code == 1
        assert "File not found" in caplog.text

    def test_file_root_exits_with_error(self, make_file, caplog):
        f = make_file("file.txt", b"x")
        with caplog.at_level(logging.INFO, logger="dupescan"):
            with pytest.raises(SystemExit):
                cmd_scan(_scan_args(f))
        assert "Not a directory" in caplog.text

    def test_does_not_delete_anything(self, make_file, tmp_source):
        a = make_file("a", b"dup")
        b = make_file("b", b"dup")
        cmd_scan(_scan_args(tmp_source))
        assert a.exists()
        assert b.exists()


class TestLoggingSetup:
    """Test logging configuration."""

    def test_default_level_is_info(self):
        from dupescan.logging import configure_logging
        configure_logging()
        assert logging.getLogger("dupescan").level == logging.INFO

    def test_verbose_sets_debug(self):
        from dupescan.logging import configure_logging
        configure_logging(verbose=True)
        assert logging.getLogger("dupescan").level == logging.DEBUG

    def test_quiet_sets_warning(self):
        from dupescan.logging import configure_logging
        configure_logging(quiet=True)
        assert logging.getLogger("dupescan").level == logging.WARNING

    def test_single_tqdm_handler(self):
        from dupescan.logging import TqdmHandler, configure_logging
        configure_logging()
        configure_logging(verbose=True)
        handlers = logging.getLogger("dupescan").handlers
        assert len(handlers) == 1
        assert isinstance(handlers[0], TqdmHandler)

    def test_records_go_to_stderr(self, capsys):
        from dupescan.logging import configure_logging
        configure_logging(quiet=True)
        logging.getLogger("dupescan.test").warning("disk on fire")
        captured = capsys.readouterr()
        assert "WARNING: disk on fire" in captured.err
        assert captured.out == ""
