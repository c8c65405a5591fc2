"""Tests for the command-line interface and terminal output."""

import logging
from datetime import datetime, timezone

import pytest

from gdoc_backup import cli
from gdoc_backup.catalog import InMemoryCatalog
from gdoc_backup.config import Config
from gdoc_backup.display import ConsoleFeedback, print_summary
from gdoc_backup.exceptions import AuthenticationError, BackupCancelled
from gdoc_backup.models import BackupStats, FeedbackEvent, ItemType, RemoteItem, RunResult

MODIFIED = datetime(2024, 1, 5, 10, tzinfo=timezone.utc)


@pytest.fixture
def quiet_cli(monkeypatch):
    """Keep main() from touching signal handlers and the root logger."""
    monkeypatch.setattr(cli.signal, "signal", lambda *args: None)
    monkeypatch.setattr(cli, "setup_logging", lambda *args: None)


class TestParser:
    """Tests for argument parsing."""

    def test_defaults(self):
        args = cli.build_parser().parse_args([])

        assert args.command is None
        assert args.force is False
        assert args.doc_formats is None

    def test_backup_subcommand_flags(self):
        args = cli.build_parser().parse_args(
            ["backup", "--dest", "/tmp/out", "--force", "--doc-formats", "docx,pdf"]
        )

        assert args.command == "backup"
        assert args.dest == "/tmp/out"
        assert args.force is True
        assert args.doc_formats == "docx,pdf"

    def test_flags_before_backup_subcommand(self):
        args = cli.build_parser().parse_args(["--dest", "/x", "--force", "backup"])

        assert args.command == "backup"
        assert args.dest == "/x"
        assert args.force is True

    def test_flags_on_both_sides_of_subcommand(self):
        args = cli.build_parser().parse_args(
            ["--dest", "/x", "backup", "--doc-formats", "docx"]
        )

        assert args.dest == "/x"
        assert args.doc_formats == "docx"
        assert args.force is False

    def test_auth_subcommand(self):
        assert cli.build_parser().parse_args(["auth"]).command == "auth"


class TestApplyArgs:
    """Tests for merging flags into the config."""

    def test_flags_override_config(self):
        args = cli.build_parser().parse_args([
            "--dest", "/backup",
            "--force",
            "--debug",
            "--doc-formats", "DOCX, .pdf",
            "--sheet-formats", "",
            "--proxy", "http://proxy:3128",
            "--insecure",
            "--all-parents",
        ])

        config = cli.apply_args(Config(), args)

        assert config.dest_root == "/backup"
        assert config.force_download is True
        assert config.debug is True
        assert config.document_formats == ["docx", "pdf"]
        assert config.spreadsheet_formats == []
        assert config.presentation_formats == ["pdf"]
        assert config.proxy_url == "http://proxy:3128"
        assert config.bypass_tls_verification is True
        assert config.first_parent_only is False

    def test_no_flags_keep_config(self):
        config = Config(dest_root="/keep", document_formats=["docx"])

        cli.apply_args(config, cli.build_parser().parse_args([]))

        assert config.dest_root == "/keep"
        assert config.document_formats == ["docx"]
        assert config.first_parent_only is True


class TestMain:
    """Tests for a full backup pass from the CLI."""

    def test_invalid_config(self, capsys):
        assert cli.main(Config()) == 1
        assert "Destination directory is required" in capsys.readouterr().out

    def test_connection_failure(self, tmp_path, monkeypatch, capsys, quiet_cli):
        def fail(config):
            raise AuthenticationError("No token found")

        monkeypatch.setattr("gdoc_backup.drive.GoogleDriveSource.from_config", fail)

        code = cli.main(Config(dest_root=str(tmp_path / "out")), tmp_path / "run.log")

        assert code == 1
        assert "No token found" in capsys.readouterr().out

    def test_successful_run(self, tmp_path, monkeypatch, capsys, quiet_cli):
        items = [
            RemoteItem("f1", "Reports", ItemType.FOLDER, MODIFIED),
            RemoteItem("d1", "Q1", ItemType.DOCUMENT, MODIFIED, ("f1",)),
        ]
        catalog = InMemoryCatalog(items, {("d1", "odt"): b"odt bytes"})
        monkeypatch.setattr(
            "gdoc_backup.drive.GoogleDriveSource.from_config", lambda config: catalog
        )
        out = tmp_path / "out"

        code = cli.main(Config(dest_root=str(out)), tmp_path / "run.log")

        assert code == 0
        assert (out / "Reports" / "Q1.odt").read_bytes() == b"odt bytes"
        assert "BACKUP COMPLETE" in capsys.readouterr().out

    def test_setup_logging_writes_file(self, tmp_path):
        log_file = tmp_path / "run.log"
        root = logging.getLogger()
        saved_handlers, saved_level = root.handlers[:], root.level

        try:
            cli.setup_logging(log_file)
            logging.getLogger("gdoc_backup.test").info("hello log")
            for handler in root.handlers:
                handler.flush()
        finally:
            for handler in root.handlers:
                handler.close()
            root.handlers[:] = saved_handlers
            root.setLevel(saved_level)

        assert "[INFO] hello log" in log_file.read_text(encoding="utf-8")


class TestConsoleOutput:
    """Tests for the terminal feedback sink and summary."""

    def event(self, action):
        return FeedbackEvent("Q1", "document", "odt", action, "/out", None, MODIFIED)

    def test_progress_line(self, capsys):
        ConsoleFeedback().on_progress("ITEM: Q1 (document) [1/2]", 50)

        out = capsys.readouterr().out
        assert "50.0%" in out
        assert "ITEM: Q1" in out

    def test_skipped_hidden_unless_verbose(self, capsys):
        ConsoleFeedback().on_item(self.event("skipped"))
        assert capsys.readouterr().out == ""

        ConsoleFeedback(verbose=True).on_item(self.event("skipped"))
        assert "Q1.odt" in capsys.readouterr().out

    def test_download_shown(self, capsys):
        ConsoleFeedback().on_item(self.event("downloaded"))

        out = capsys.readouterr().out
        assert "Q1.odt" in out
        assert "local -" in out

    def test_error_reason_shown(self, capsys):
        event = FeedbackEvent(
            "Q1", "document", "odt", "error", error="RuntimeError: quota exceeded"
        )

        ConsoleFeedback().on_item(event)

        assert "RuntimeError: quota exceeded" in capsys.readouterr().out

    def test_summary_interrupted(self, capsys):
        print_summary(RunResult(last_error=BackupCancelled("stop requested"), stats=BackupStats()))

        assert "BACKUP INTERRUPTED" in capsys.readouterr().out

    def test_summary_with_item_errors(self, capsys):
        stats = BackupStats(files_failed=2)

        print_summary(RunResult(error_count=2, stats=stats))

        out = capsys.readouterr().out
        assert "BACKUP COMPLETE" in out
        assert "Completed with 2 failed item(s)" in out
        assert "Speed:" in out
