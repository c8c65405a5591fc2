"""Terminal display and UI components for GDoc Backup."""

from datetime import datetime

from .models import FeedbackEvent, RunResult, SyncAction
from .utils import (
    format_timestamp,
    get_terminal_width,
    human_size,
    human_time,
    is_tty,
    truncate_text,
)


class Colors:
    """ANSI color codes for terminal output."""

    RED = "\033[91m"
    GREEN = "\033[92m"
    YELLOW = "\033[93m"
    BLUE = "\033[94m"
    MAGENTA = "\033[95m"
    CYAN = "\033[96m"
    WHITE = "\033[97m"
    GRAY = "\033[90m"
    BOLD = "\033[1m"
    DIM = "\033[2m"
    RESET = "\033[0m"

    _disabled = False

    @classmethod
    def disable(cls) -> None:
        """Disable all color codes (for non-TTY output)."""
        if cls._disabled:
            return
        cls._disabled = True
        for attr in dir(cls):
            if not attr.startswith("_") and attr.isupper():
                setattr(cls, attr, "")

    @classmethod
    def init(cls) -> None:
        """Initialize colors based on terminal capability."""
        if not is_tty():
            cls.disable()


Colors.init()


def make_bar(percent: float, width: int = 30) -> str:
    """Create a simple progress bar string."""
    percent = max(0, min(100, percent))
    filled = int((percent / 100) * width)
    return "█" * filled + "░" * (width - filled)


def print_banner() -> None:
    """Print the application banner."""
    C = Colors.CYAN
    W = Colors.WHITE
    B = Colors.BOLD
    D = Colors.DIM
    R = Colors.RESET

    print()
    print(f"{C}╔══════════════════════════════════════════════════════════════════════╗{R}")
    print(f"{C}║{R}{B}{W}                            GDOC BACKUP                               {R}{C}║{R}")
    print(f"{C}╠══════════════════════════════════════════════════════════════════════╣{R}")
    print(f"{C}║{R} {D}Documents  •  Spreadsheets  •  Presentations  •  PDFs  •  Folders{R}    {C}║{R}")
    print(f"{C}╚══════════════════════════════════════════════════════════════════════╝{R}")
    print()


def print_header(text: str) -> None:
    """Print a section header."""
    width = min(get_terminal_width() - 4, 76)
    line_len = max(0, width - len(text) - 5)
    print(f"\n{Colors.MAGENTA}{Colors.BOLD}{'─' * 3} {text} {'─' * line_len}{Colors.RESET}")


def print_success(text: str) -> None:
    """Print a success message."""
    print(f"  {Colors.GREEN}✓{Colors.RESET} {text}")


def print_error(text: str) -> None:
    """Print an error message."""
    print(f"  {Colors.RED}✗{Colors.RESET} {text}")


def print_warning(text: str) -> None:
    """Print a warning message."""
    print(f"  {Colors.YELLOW}⚠{Colors.RESET} {text}")


def print_info(text: str) -> None:
    """Print an info message."""
    print(f"  {Colors.CYAN}ℹ{Colors.RESET} {text}")


_ACTION_STYLES = {
    SyncAction.DOWNLOADED.value: ("↓", "GREEN"),
    SyncAction.SKIPPED.value: ("=", "BLUE"),
    SyncAction.ERROR.value: ("✗", "RED"),
    SyncAction.NOT_APPLICABLE.value: ("·", "GRAY"),
}


class ConsoleFeedback:
    """Feedback sink printing progress and item outcomes to the terminal.

    Progress lines carry a bar; the verbose flag also prints skipped and
    not-applicable items, which are hidden otherwise.
    """

    def __init__(self, verbose: bool = False):
        self.verbose = verbose

    def on_progress(self, message: str, percent: float) -> None:
        bar = make_bar(percent, width=20)
        print(
            f"  [{Colors.CYAN}{bar}{Colors.RESET}] {percent:5.1f}%  "
            f"{truncate_text(message, 60)}"
        )

    def on_item(self, event: FeedbackEvent) -> None:
        quiet_actions = (SyncAction.SKIPPED.value, SyncAction.NOT_APPLICABLE.value)
        if event.action in quiet_actions and not self.verbose:
            return

        symbol, color_name = _ACTION_STYLES.get(event.action, ("?", "WHITE"))
        color = getattr(Colors, color_name)
        fmt = f".{event.export_format}" if event.export_format else ""
        print(
            f"      {color}{symbol}{Colors.RESET} {event.title}{fmt} "
            f"{Colors.DIM}({event.doc_type}, {event.action}, "
            f"local {format_timestamp(event.local_time)}, "
            f"remote {format_timestamp(event.remote_time)}){Colors.RESET}"
        )
        if event.error:
            print(f"        {Colors.RED}{truncate_text(event.error, 70)}{Colors.RESET}")


def print_summary(result: RunResult) -> None:
    """Print the backup summary."""
    stats = result.stats
    print("\n")

    if result.cancelled:
        print_header(f"{Colors.YELLOW}BACKUP INTERRUPTED{Colors.RESET}")
    elif result.last_error is not None:
        print_header(f"{Colors.RED}BACKUP FAILED{Colors.RESET}")
    else:
        print_header(f"{Colors.GREEN}BACKUP COMPLETE{Colors.RESET}")

    print()
    print(f"  {Colors.BOLD}Run{Colors.RESET}")
    print(f"    Completed:    {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")
    print(f"    Duration:     {human_time(stats.elapsed_seconds)}")
    print(f"    Speed:        {human_size(stats.speed_bps)}/s")
    print(f"    Items:        {stats.items_processed:,}/{stats.items_total:,}")
    print()

    print(f"  {Colors.BOLD}Files{Colors.RESET}")
    print(f"    {Colors.GREEN}Downloaded:{Colors.RESET}   {stats.files_downloaded:,} ({human_size(stats.bytes_downloaded)})")
    print(f"    {Colors.BLUE}Up to date:{Colors.RESET}   {stats.files_skipped:,}")
    print(f"    {Colors.GRAY}Not exported:{Colors.RESET} {stats.items_not_applicable:,}")

    if stats.files_failed > 0:
        print(f"    {Colors.RED}Failed:{Colors.RESET}       {stats.files_failed:,}")
    print()

    print(f"  {'─' * 60}")

    if result.success:
        print(f"  {Colors.GREEN}✓{Colors.RESET} {Colors.BOLD}All done!{Colors.RESET} Documents safely backed up.")
    elif result.cancelled:
        print(f"  {Colors.YELLOW}⚠{Colors.RESET} Interrupted. Run again to continue.")
    elif result.last_error is not None:
        print(f"  {Colors.RED}✗{Colors.RESET} {result.last_error}")
    else:
        print(f"  {Colors.YELLOW}⚠{Colors.RESET} Completed with {result.error_count} failed item(s). Check log.")

    print(f"  {'─' * 60}")
    print()
