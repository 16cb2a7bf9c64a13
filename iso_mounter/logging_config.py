import logging
import logging.handlers
from rich.console import Console
from rich.highlighter import RegexHighlighter
from rich.logging import RichHandler
from rich.theme import Theme

from .config import Settings

MOUNT_LOG_THEME = Theme(
    {
        "mount.iso": "bold cyan",
        "mount.mount_id": "magenta",
        "mount.exit_code": "bold red",
    }
)


class MountLogHighlighter(RegexHighlighter):
    """Highlights ISO paths, mount ids and tool exit codes in console output."""

    base_style = "mount."
    highlights = [
        r"(?P<iso>[^\s,:]+\.[iI][sS][oO])\b",
        r"(?P<mount_id>[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12})",
        r"(?P<exit_code>exit code -?\d+)",
    ]


def _console_handler(settings: Settings) -> RichHandler:
    console = Console(width=settings.log_console_width, theme=MOUNT_LOG_THEME)
    handler = RichHandler(
        console=console,
        show_time=True,
        show_level=True,
        show_path=True,
        markup=False,
        highlighter=MountLogHighlighter(),
        rich_tracebacks=True,
        tracebacks_show_locals=False,
    )
    handler.setLevel(settings.log_level)
    return handler


def _file_handler(settings: Settings) -> logging.Handler:
    # Detailed format so mount/umount failures can be traced to the call site
    file_format = (
        "%(asctime)s - %(levelname)s - "
        "%(filename)s:%(lineno)d in %(funcName)s() - "
        "%(message)s"
    )

    handler = logging.handlers.TimedRotatingFileHandler(
        filename=settings.log_file_path,
        when="midnight",
        interval=1,
        backupCount=settings.log_retention_days,
        encoding="utf-8",
    )
    handler.setLevel(settings.log_level)
    handler.setFormatter(logging.Formatter(file_format))
    return handler


def setup_logging(settings: Settings) -> None:
    settings.log_directory.mkdir(parents=True, exist_ok=True)

    root_logger = logging.getLogger()
    root_logger.setLevel(settings.log_level)
    root_logger.handlers.clear()
    root_logger.addHandler(_console_handler(settings))
    root_logger.addHandler(_file_handler(settings))

    for logger_name in settings.quiet_loggers:
        logging.getLogger(logger_name).setLevel(logging.WARNING)

    logging.info(
        f"Logging initialized - File: {settings.log_file_path}, "
        f"Level: {settings.log_level}, "
        f"Retention: {settings.log_retention_days} days, "
        f"Mount root: {settings.mount_root}"
    )
