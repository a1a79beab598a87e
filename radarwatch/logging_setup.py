"""
Console logging always; daily rotating file (midnight) only when a log directory is given.
Log: rounds, samples, UP->OUTAGE / OUTAGE->UP transitions, fetch and notification errors, start/stop.
"""
import logging
import sys
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path


def setup_logging(log_dir: str | None = None, debug: bool = False) -> logging.Logger:
    """
    Configure root logger with console and optional daily rotating file.
    Returns the app logger ('radarwatch').
    """
    root = logging.getLogger()
    root.setLevel(logging.DEBUG)
    for h in list(root.handlers):
        root.removeHandler(h)

    fmt = logging.Formatter("%(asctime)s | %(levelname)s | %(name)s | %(message)s", datefmt="%Y-%m-%d %H:%M:%S")

    if log_dir:
        path = Path(log_dir)
        path.mkdir(parents=True, exist_ok=True)
        fh = TimedRotatingFileHandler(path / "radarwatch.log", when="midnight", backupCount=30, encoding="utf-8")
        fh.setLevel(logging.DEBUG)
        fh.setFormatter(fmt)
        root.addHandler(fh)

    ch = logging.StreamHandler(sys.stdout)
    ch.setLevel(logging.DEBUG if debug else logging.INFO)
    ch.setFormatter(fmt)
    root.addHandler(ch)

    logger = logging.getLogger("radarwatch")
    logger.setLevel(logging.DEBUG)
    return logger
