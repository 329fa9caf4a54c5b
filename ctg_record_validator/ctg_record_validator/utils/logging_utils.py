import logging
import sys
from typing import Optional, TextIO


DEFAULT_FORMAT = "%(name)s - %(levelname)s - %(message)s"


class _MaxLevelFilter(logging.Filter):
    def __init__(self, max_level: int) -> None:
        super().__init__()
        self._max_level = max_level

    def filter(self, record: logging.LogRecord) -> bool:
        return record.levelno <= self._max_level


def _stream_handler(
    stream: TextIO,
    formatter: logging.Formatter,
    min_level: int,
    max_level: Optional[int] = None,
) -> logging.Handler:
    handler = logging.StreamHandler(stream=stream)
    handler.setLevel(min_level)
    if max_level is not None:
        handler.addFilter(_MaxLevelFilter(max_level))
    handler.setFormatter(formatter)
    return handler


def configure_report_logging(
    *,
    level: int = logging.INFO,
    stderr_level: int = logging.WARNING,
    formatter: Optional[logging.Formatter] = None,
    machine_output: bool = False,
) -> None:
    """Configure root logging around a report written to stdout.

    Human-readable runs share stdout: records below ``stderr_level`` are
    interleaved with the report, the rest go to stderr. When the report is
    machine output (json, github-actions) stdout carries nothing but the
    report and every record goes to stderr.
    """
    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(level)

    if formatter is None:
        formatter = logging.Formatter(DEFAULT_FORMAT)

    if machine_output:
        root.addHandler(_stream_handler(sys.stderr, formatter, logging.NOTSET))
        return

    stderr_level = max(stderr_level, logging.DEBUG)
    root.addHandler(_stream_handler(sys.stdout, formatter, logging.NOTSET, max_level=stderr_level - 1))
    root.addHandler(_stream_handler(sys.stderr, formatter, stderr_level))


def level_from_name(name: str, default: int = logging.INFO) -> int:
    """Map a level name such as ``"debug"`` to its ``logging`` constant."""
    value = getattr(logging, str(name).upper(), None)
    return value if isinstance(value, int) else default
