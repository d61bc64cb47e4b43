import logging
import sys

from textextract.config import settings

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"

_configured = False


def setup_logging(level: str | None = None) -> None:
    """Configure the root logger once with a single stream handler."""
    global _configured
    root = logging.getLogger()
    root.setLevel((level or settings.log_level).upper())

    if _configured:
        return

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
    root.addHandler(handler)

    # pdfminer is very chatty at DEBUG
    logging.getLogger("pdfminer").setLevel(logging.WARNING)
    _configured = True


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
