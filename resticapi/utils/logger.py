"""
ResticAPI - Logger Utility
Daily log file plus console output.
"""

import logging
import re
from datetime import datetime

from resticapi.utils.paths import LOGS_DIR

LOG_FILE_PREFIX = "resticapi-"
# only names this module writes: resticapi-YYYY-MM-DD.log
LOG_FILENAME_RE = re.compile(rf"^{LOG_FILE_PREFIX}\d{{4}}-\d{{2}}-\d{{2}}\.log$")


def get_logger(name: str = "ResticAPI") -> logging.Logger:
    """Creates a logger writing to the console and to the daily file."""
    logger = logging.getLogger(name)

    if logger.handlers:
        return logger  # already configured

    logger.setLevel(logging.DEBUG)
    formatter = logging.Formatter(
        "[%(asctime)s] [%(levelname)s] [%(name)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S"
    )

    ch = logging.StreamHandler()
    ch.setLevel(logging.INFO)
    ch.setFormatter(formatter)
    logger.addHandler(ch)

    date_str = datetime.now().strftime("%Y-%m-%d")
    log_file = LOGS_DIR / f"{LOG_FILE_PREFIX}{date_str}.log"
    try:
        LOGS_DIR.mkdir(parents=True, exist_ok=True)
        fh = logging.FileHandler(str(log_file), encoding="utf-8")
    except OSError as e:
        logger.warning(f"File logging disabled, cannot open {log_file}: {e}")
        return logger
    fh.setLevel(logging.DEBUG)
    fh.setFormatter(formatter)
    logger.addHandler(fh)

    return logger


def get_log_files() -> list[str]:
    """Daily log files, newest first. Other files in the directory are ignored."""
    if not LOGS_DIR.is_dir():
        return []
    names = [f.name for f in LOGS_DIR.iterdir() if f.is_file() and LOG_FILENAME_RE.fullmatch(f.name)]
    return sorted(names, reverse=True)


def read_log_file(filename: str) -> str | None:
    """Reads one daily log by name, as returned by ``get_log_files``."""
    name = str(filename or "").strip()
    if not LOG_FILENAME_RE.fullmatch(name):
        return None

    filepath = LOGS_DIR / name
    if not filepath.is_file():
        return None
    return filepath.read_text(encoding="utf-8", errors="replace")
