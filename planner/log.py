import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

from planner.config import settings

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
MAX_BYTES = 5 * 1024 * 1024
BACKUP_COUNT = 5

_configured = False


def setup_logging() -> logging.Logger:
    """
    Configure the ``planner`` logger hierarchy once.

    Console output is always enabled. When ``LOG_DIR`` is set two rotating
    files are added: ``error.log`` (errors only) and ``combined.log``.

    Returns:
        logging.Logger: The root ``planner`` logger.
    """
    global _configured
    root = logging.getLogger("planner")
    if _configured:
        return root

    level = logging.DEBUG if settings.is_development else getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)
    root.setLevel(level)
    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    console = logging.StreamHandler(sys.stdout)
    console.setFormatter(formatter)
    root.addHandler(console)

    if settings.LOG_DIR:
        log_dir = Path(settings.LOG_DIR)
        log_dir.mkdir(parents=True, exist_ok=True)

        error_file = RotatingFileHandler(
            log_dir / "error.log", maxBytes=MAX_BYTES, backupCount=BACKUP_COUNT, encoding="utf-8"
        )
        error_file.setLevel(logging.ERROR)
        error_file.setFormatter(formatter)
        root.addHandler(error_file)

        combined_file = RotatingFileHandler(
            log_dir / "combined.log", maxBytes=MAX_BYTES, backupCount=BACKUP_COUNT, encoding="utf-8"
        )
        combined_file.setFormatter(formatter)
        root.addHandler(combined_file)

    root.propagate = False
    _configured = True
    return root


def get_logger(name: str) -> logging.Logger:
    setup_logging()
    if not name.startswith("planner"):
        name = f"planner.{name}"
    return logging.getLogger(name)
