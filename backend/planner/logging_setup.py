# backend/planner/logging_setup.py
import logging
import sys
from pathlib import Path
from typing import Optional

from .config import LOG_DIR, LOG_LEVEL


class _ConsoleNoiseFilter(logging.Filter):
    """
    Keep the console readable:
    - planner logs pass through
    - uvicorn access/error logs pass through
    - SQLAlchemy engine echo and passlib internals only at WARNING+
    - any other third party only at ERROR+
    """

    def filter(self, record: logging.LogRecord) -> bool:
        name = record.name
        if name.startswith("planner"):
            return True
        if name.startswith("uvicorn"):
            return True
        if name.startswith("sqlalchemy") or name.startswith("passlib"):
            return record.levelno >= logging.WARNING
        if name == "py.warnings":
            return record.levelno >= logging.ERROR
        return record.levelno >= logging.ERROR


def setup_logging(
    *,
    log_dir: Optional[str] = LOG_DIR,
    console_level: str = LOG_LEVEL,
    file_level: int = logging.DEBUG,
) -> None:
    """
    Console handler (filtered) plus, when log_dir is set, a file handler with everything.
    Call once at startup, before the first log line.
    """
    root = logging.getLogger()
    root.setLevel(logging.DEBUG)

    for h in list(root.handlers):
        root.removeHandler(h)

    fmt = logging.Formatter(
        fmt="%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    ch = logging.StreamHandler(sys.stderr)
    ch.setLevel(console_level)
    ch.setFormatter(fmt)
    ch.addFilter(_ConsoleNoiseFilter())
    root.addHandler(ch)

    if log_dir:
        path = Path(log_dir)
        path.mkdir(parents=True, exist_ok=True)
        fh = logging.FileHandler(str(path / "planner.log"), encoding="utf-8")
        fh.setLevel(file_level)
        fh.setFormatter(fmt)
        root.addHandler(fh)

    logging.captureWarnings(True)
    # passlib logs a traceback while probing newer bcrypt builds
    logging.getLogger("passlib").setLevel(logging.ERROR)
