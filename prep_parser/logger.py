"""
Logging for the exam-prep parser.

Everything logs under the "prep_parser" logger; each module gets a child
("prep_parser.fields", "prep_parser.scraper", ...). Records go to stderr so
the CLI scripts can print JSON on stdout. The starting level is read from
PREP_PARSER_LOG_LEVEL (default INFO).
"""

import logging
import os
import sys
from typing import Optional

ROOT_LOGGER_NAME = "prep_parser"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _default_level() -> int:
    name = os.getenv("PREP_PARSER_LOG_LEVEL", "INFO").upper()
    level = logging.getLevelName(name)
    return level if isinstance(level, int) else logging.INFO


def _attach(logger: logging.Logger, handler: logging.Handler, level: int) -> None:
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
    logger.addHandler(handler)


def setup_logger(
    name: str = ROOT_LOGGER_NAME,
    level: Optional[int] = None,
    log_file: Optional[str] = None
) -> logging.Logger:
    """
    Configure the package logger and return it.

    Safe to call more than once: the stderr handler is attached on the first
    call, later calls only change the level (and add a file handler for a
    log_file not seen before).

    Args:
        name: Logger name
        level: Logging level (default: PREP_PARSER_LOG_LEVEL or INFO)
        log_file: Optional file to log to as well
    """
    if level is None:
        level = _default_level()

    logger = logging.getLogger(name)
    logger.setLevel(level)
    for handler in logger.handlers:
        handler.setLevel(level)

    if not any(type(h) is logging.StreamHandler for h in logger.handlers):
        _attach(logger, logging.StreamHandler(sys.stderr), level)

    if log_file:
        path = os.path.abspath(log_file)
        known = [h.baseFilename for h in logger.handlers if isinstance(h, logging.FileHandler)]
        if path not in known:
            _attach(logger, logging.FileHandler(path, encoding="utf-8"), level)

    return logger


logger = setup_logger()


def get_module_logger(module_name: str) -> logging.Logger:
    """Child logger named after the pipeline stage, e.g. "prep_parser.segmenter"."""
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{module_name}")
