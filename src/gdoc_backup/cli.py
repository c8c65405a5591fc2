"""Command-line interface for GDoc Backup."""

import argparse
import logging
import signal
import sys
from pathlib import Path
from threading import Event
from typing import Any

from .config import Config
from .exceptions import GDocBackupError
from .formats import parse_formats

logger = logging.getLogger(__name__)

DEFAULT_LOG_FILE = "gdoc_backup.log"


def setup_logging(log_file: Path, debug: bool = False) -> None:
    """Configure logging to file only (no console output)."""
    # Clear any existing handlers to prevent duplicate output
    root_logger = logging.getLogger()
    root_logger.handlers.clear()

    level = logging.DEBUG if debug else logging.INFO
    file_handler = logging.FileHandler(log_file, encoding="utf-8")
    file_handler.setFormatter(logging.Formatter("%(asctime)s [%(levelname)s] %(message)s"))
    file_handler.setLevel(level)

    root_logger.setLevel(level)
    root_logger.addHandler(file_handler)

    # googleapiclient logs every request at DEBUG
    logging.getLogger("googleapiclient.discovery_cache").setLevel(logging.ERROR)


def apply_args(config: Config, args: argparse.Namespace) -> Config:
    """Override config values with command-line flags that were given."""
    if args.dest:
        config.dest_root = args.dest
    if args.force:
        config.force_download = True
    if args.debug:
        config.debug = True
    if args.doc_formats is not None:
        config.document_formats = parse_formats(args.doc_formats)
    if args.sheet_formats is not None:
        config.spreadsheet_formats = parse_formats(args.sheet_formats)
    if args.pres_formats is not None:
        config.presentation_formats = parse_formats(args.pres_formats)
    if args.proxy:
        config.proxy_url = args.proxy
    if args.insecure:
        config.bypass_tls_verification = True
    if args.all_parents:
        config.first_parent_only = False
    return config


def main(config: Config | None = None, log_file: Path | None = None) -> int:
    """
    Run one backup pass.

    Args:
        config: Optional pre-configured Config. If None, loads from environment.
        log_file: Where to write the log (defaults to the working directory)

    Returns:
        Exit code (0 for success, non-zero for errors)
    """
    from .display import (
        ConsoleFeedback,
        print_banner,
        print_error,
        print_header,
        print_info,
        print_success,
        print_summary,
        print_warning,
    )
    from .drive import GoogleDriveSource
    from .runner import BackupRunner

    if config is None:
        config = Config.from_env()

    print_banner()
    print_header("Configuration")
    print()

    errors = config.validate()
    if errors:
        for error in errors:
            print_error(error)
        return 1

    print_success("Configuration valid")
    print_info(f"Destination: {config.dest_root}")
    print_info(f"Documents: {', '.join(config.document_formats) or '(none)'}")
    print_info(f"Spreadsheets: {', '.join(config.spreadsheet_formats) or '(none)'}")
    print_info(f"Presentations: {', '.join(config.presentation_formats) or '(none)'}")
    if config.force_download:
        print_warning("Force mode: every document will be downloaded again")
    if config.bypass_tls_verification:
        print_warning("TLS certificate validation disabled")
    if config.proxy_url:
        print_info(f"Proxy: {config.proxy_url}")

    log_file = log_file or Path.cwd() / DEFAULT_LOG_FILE
    setup_logging(log_file, config.debug)
    logger.info("=" * 50)
    logger.info("Backup started")
    print_info(f"Log file: {log_file}")

    stop_event = Event()

    def signal_handler(sig: int, frame: Any) -> None:
        if not stop_event.is_set():
            stop_event.set()
            print()
            print_warning("Stopping after the current document... please wait.")

    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)

    print()
    print_info("Connecting to Google Drive...")
    try:
        source = GoogleDriveSource.from_config(config)
    except GDocBackupError as e:
        print_error(str(e))
        logger.error("Connection failed: %s", e)
        return 1

    print_header("Backing up")
    print()
    runner = BackupRunner(source, config, ConsoleFeedback(verbose=config.debug), stop_event)
    result = runner.run()

    print_summary(result)
    logger.info(
        "Backup completed: success=%s errors=%d",
        result.success,
        result.error_count,
    )

    return 0 if result.success else 1


def run_auth(config: Config | None = None) -> int:
    """
    Run the OAuth flow and save the token file.

    Returns:
        Exit code (0 for success, non-zero for errors)
    """
    from .auth import run_oauth_flow
    from .display import print_error, print_header, print_info, print_success

    if config is None:
        config = Config.from_env()

    print()
    print_header("Google Drive Authorization")
    print()
    print_info(f"Client credentials: {config.credentials_file}")
    print_info("A browser window will open to grant read-only Drive access.")

    try:
        run_oauth_flow(config.credentials_file, config.token_file)
    except GDocBackupError as e:
        print_error(str(e))
        return 1

    print_success(f"Token saved to {config.token_file}")
    print_info("You can now run 'gdoc-backup' to start backing up.")
    return 0


def build_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="gdoc-backup",
        description="Back up Google Docs, Sheets, Slides and PDFs to a local folder",
    )
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    subparsers.add_parser(
        "auth",
        help="Authorize access to your Google Drive",
    )

    # Backup is the default (no subcommand needed). Its options are
    # suppressed unless given, so flags placed before "backup" are kept.
    backup = subparsers.add_parser(
        "backup",
        help="Run backup (default if no command specified)",
        argument_default=argparse.SUPPRESS,
    )

    for target in (parser, backup):
        target.add_argument("--dest", help="Local backup directory")
        target.add_argument("--force", action="store_true", help="Download every document again")
        target.add_argument("--debug", action="store_true", help="Verbose feedback and debug log")
        target.add_argument("--doc-formats", help="Document formats, e.g. 'docx,pdf'")
        target.add_argument("--sheet-formats", help="Spreadsheet formats, e.g. 'xlsx'")
        target.add_argument("--pres-formats", help="Presentation formats, e.g. 'pptx'")
        target.add_argument("--proxy", help="Outbound proxy URL, e.g. http://proxy:3128")
        target.add_argument(
            "--insecure",
            action="store_true",
            help="Skip TLS certificate validation (legacy networks only)",
        )
        target.add_argument(
            "--all-parents",
            action="store_true",
            help="Copy documents into every parent folder, not only the first",
        )
        target.add_argument("--log-file", type=Path, help=f"Log file (default: ./{DEFAULT_LOG_FILE})")

    return parser


def cli_main(argv: list[str] | None = None) -> int:
    """CLI entry point with argument parsing."""
    args = build_parser().parse_args(argv)

    if args.command == "auth":
        return run_auth()

    # Default to backup
    config = apply_args(Config.from_env(), args)
    return main(config, args.log_file)


if __name__ == "__main__":
    sys.exit(cli_main())
