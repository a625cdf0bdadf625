"""Logging configuration for the ClinicalTrials.gov RAG engine.

Everything logs under the ``ctgov_rag`` logger tree. Output is either the
plain pipe-separated line format or one JSON object per record; in JSON
mode engine and provider errors carry their error code, raise location and
context so they can be grepped out of aggregated logs.
"""

import json
import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING, Any

from ..core.domain.exceptions import CTGovRAGError

if TYPE_CHECKING:
    from .settings import Settings

ROOT_LOGGER_NAME = "ctgov_rag"
TEXT_FORMAT = "%(asctime)s | %(levelname)-8s | %(module)s:%(funcName)s | %(message)s"
TEXT_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# HTTP client loggers that are only useful when debugging requests
NOISY_LOGGERS = ("urllib3", "httpx", "httpcore")

# Record attributes passed through ``extra=`` that end up in JSON output
CONTEXT_FIELDS = ("nct_id", "drug", "condition")


class JSONLogFormatter(logging.Formatter):
    """One JSON object per record, with domain error details when present."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "location": {
                "file": record.filename,
                "function": record.funcName,
                "line": record.lineno,
            },
        }

        context = {name: getattr(record, name) for name in CONTEXT_FIELDS if hasattr(record, name)}
        if context:
            entry["context"] = context

        if record.exc_info and record.exc_info[1] is not None:
            exc = record.exc_info[1]
            if isinstance(exc, CTGovRAGError):
                entry["exception"] = exc.to_dict()
            else:
                entry["exception"] = {"error": {"type": type(exc).__name__, "message": str(exc)}}
            entry["traceback"] = self.formatException(record.exc_info)

        return json.dumps(entry, ensure_ascii=False, default=str)


def setup_logging(
    level: str = "INFO",
    log_file: Path | None = None,
    json_format: bool = False,
) -> logging.Logger:
    """Configure logging for the ``ctgov_rag`` logger tree.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR).
        log_file: Optional file that receives the same records as stderr.
        json_format: If True, output logs in JSON format.

    Returns:
        The configured package root logger.
    """
    log_level = getattr(logging, level.upper(), logging.INFO)
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.setLevel(log_level)
    logger.handlers.clear()

    if json_format:
        formatter: logging.Formatter = JSONLogFormatter()
    else:
        formatter = logging.Formatter(TEXT_FORMAT, datefmt=TEXT_DATE_FORMAT)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    http_level = logging.DEBUG if log_level <= logging.DEBUG else logging.WARNING
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(http_level)

    return logger


def configure_logging(config: "Settings") -> logging.Logger:
    """Apply the ``log_level``, ``log_file`` and ``log_json`` settings."""
    return setup_logging(config.log_level, log_file=config.log_file, json_format=config.log_json)
