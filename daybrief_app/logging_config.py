"""Logging configuration with file rotation."""

import logging
import logging.handlers
from pathlib import Path

from daybrief_engine.config import settings

LOGGER_NAMES = ("daybrief_app", "daybrief_engine")
FILE_HANDLER = "daybrief-file"
CONSOLE_HANDLER = "daybrief-console"


def setup_logging(level: int = logging.INFO, log_dir: Path | str | None = None) -> logging.Logger:
    """Configure logging with console + rotating file handler for both packages.

    Safe to call once per flet session: handlers are installed only once,
    later calls just update the level.
    """
    root = logging.getLogger("daybrief_app")
    installed = {h.get_name() for h in root.handlers}
    if {FILE_HANDLER, CONSOLE_HANDLER} <= installed:
        for name in LOGGER_NAMES:
            lg = logging.getLogger(name)
            lg.setLevel(level)
            for h in lg.handlers:
                h.setLevel(level)
        return root

    log_dir = Path(log_dir or Path(settings.data_dir) / "logs")
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / "app.log"

    fmt = logging.Formatter(
        "%(asctime)s %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    # Rotating file handler: 5 MB max, 3 backups
    file_handler = logging.handlers.RotatingFileHandler(
        log_file, maxBytes=5 * 1024 * 1024, backupCount=3, encoding="utf-8",
    )
    file_handler.set_name(FILE_HANDLER)
    file_handler.setFormatter(fmt)
    file_handler.setLevel(level)

    console_handler = logging.StreamHandler()
    console_handler.set_name(CONSOLE_HANDLER)
    console_handler.setFormatter(fmt)
    console_handler.setLevel(level)

    for name in LOGGER_NAMES:
        lg = logging.getLogger(name)
        lg.setLevel(level)
        lg.addHandler(file_handler)
        lg.addHandler(console_handler)
        lg.propagate = False

    return root
