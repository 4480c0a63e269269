import logging
import sys
from typing import Optional, TextIO

_ROOT = "tblfmt"
_FMT = "[%(levelname)s] %(message)s"
_FILE_FMT = "%(asctime)s %(name)s [%(levelname)s] %(message)s"


def configure(*, quiet: bool = False, debug: bool = False,
              log_file: Optional[str] = None, stream: Optional[TextIO] = None) -> logging.Logger:
    """
    Route tblfmt logging to stderr (WARNING by default, ERROR with `quiet`,
    DEBUG with `debug`) and, optionally, everything at DEBUG to `log_file`.
    Only the package logger is touched, never the root logger.
    """
    level = logging.WARNING
    if quiet:
        level = logging.ERROR
    if debug:
        level = logging.DEBUG

    logger = logging.getLogger(_ROOT)
    for h in list(logger.handlers):
        logger.removeHandler(h)
        h.close()

    sh = logging.StreamHandler(stream or sys.stderr)
    sh.setLevel(level)
    sh.setFormatter(logging.Formatter(_FMT))
    logger.addHandler(sh)
    if log_file:
        fh = logging.FileHandler(log_file, encoding="utf-8")
        fh.setLevel(logging.DEBUG)
        fh.setFormatter(logging.Formatter(_FILE_FMT))
        logger.addHandler(fh)

    logger.setLevel(logging.DEBUG if log_file else level)
    logger.propagate = False
    return logger


def get_logger(name: str = _ROOT) -> logging.Logger:
    if name != _ROOT and not name.startswith(_ROOT + "."):
        name = f"{_ROOT}.{name}"
    return logging.getLogger(name)
