"""Session logging for the tagger and its CLI.

The console is for the person tagging: it shows only ``match_tagger``
records at ``console_level``, in a short format. The session file under
``{data_dir}/logs/`` keeps everything at DEBUG, third-party records
included, so an import or export problem can be traced afterwards.
"""

import logging
from datetime import datetime
from pathlib import Path

PACKAGE_LOGGER = "match_tagger"

CONSOLE_FORMAT = "%(asctime)s %(levelname)-5s %(message)s"
CONSOLE_DATEFMT = "%H:%M:%S"
FILE_FORMAT = "%(asctime)s %(levelname)-5s [%(name)s] %(message)s"


def session_log_path(data_dir: str | Path, started: datetime | None = None) -> Path:
    """``{data_dir}/logs/session-YYYY-MM-DD-HHMMSS.log`` for a session start time."""
    started = started or datetime.now()
    return Path(data_dir) / "logs" / f"session-{started:%Y-%m-%d-%H%M%S}.log"


def setup_logging(
    data_dir: str | Path = "data", console_level: int = logging.INFO
) -> Path:
    """Route log records to the console and a new session file.

    Replaces any handlers already on the root logger (closing them), so
    repeated calls in one process do not duplicate output.

    Returns:
        Path to the session log file.
    """
    log_file = session_log_path(data_dir)
    log_file.parent.mkdir(parents=True, exist_ok=True)

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()

    console = logging.StreamHandler()
    console.setLevel(console_level)
    console.addFilter(logging.Filter(PACKAGE_LOGGER))
    console.setFormatter(logging.Formatter(CONSOLE_FORMAT, datefmt=CONSOLE_DATEFMT))
    root.addHandler(console)

    file_handler = logging.FileHandler(log_file, encoding="utf-8")
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(logging.Formatter(FILE_FORMAT))
    root.addHandler(file_handler)

    logging.getLogger(__name__).debug("Session log started at %s", log_file)
    return log_file
