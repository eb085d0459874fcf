"""
Logging for the CCRM platform.

Console records are short (``LEVEL: message``). Errors additionally go to a
``ccrm_errors_<timestamp>.log`` file under the log directory; the file is only
created when the first error is logged, and older error logs beyond the
retention count are removed at that point.
"""

import logging
from datetime import datetime
from pathlib import Path
from typing import List, Optional, Union

ERROR_LOG_PREFIX = "ccrm_errors_"
DEFAULT_ERROR_LOG_RETENTION = 10

CONSOLE_FORMAT = "%(levelname)s: %(message)s"
FILE_FORMAT = "%(asctime)s %(levelname)-8s [%(name)s:%(lineno)d] %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Marks handlers installed by setup_logging so a second call replaces only those.
_OWNED_ATTR = "_ccrm_owned"


def error_logs(log_dir: Path) -> List[Path]:
    """Existing error logs in ``log_dir``, oldest first."""
    log_dir = Path(log_dir)
    if not log_dir.is_dir():
        return []
    return sorted(log_dir.glob(f"{ERROR_LOG_PREFIX}*.log"))


def prune_error_logs(log_dir: Path, keep: int, exclude: Optional[Path] = None) -> int:
    """Delete all but the newest ``keep`` error logs. Returns how many were removed."""
    candidates = [p for p in error_logs(log_dir) if p != exclude]
    surplus = candidates[:max(len(candidates) - keep, 0)]
    removed = 0
    for path in surplus:
        try:
            path.unlink()
            removed += 1
        except OSError as exc:
            logging.getLogger(__name__).warning("Could not remove old error log %s: %s", path, exc)
    return removed


class LazyFileHandler(logging.Handler):
    """Writes records at ``level`` and above to a timestamped file opened on first use."""

    def __init__(self, log_dir: Path, level: int = logging.ERROR,
                 keep: int = DEFAULT_ERROR_LOG_RETENTION):
        super().__init__(level)
        self.log_dir = Path(log_dir)
        self.keep = keep
        self.timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        self._stream_handler: Optional[logging.FileHandler] = None

    @property
    def log_file(self) -> Path:
        return self.log_dir / f"{ERROR_LOG_PREFIX}{self.timestamp}.log"

    @property
    def is_open(self) -> bool:
        return self._stream_handler is not None

    def _open(self) -> logging.FileHandler:
        self.log_dir.mkdir(parents=True, exist_ok=True)
        # keep - 1 older files plus the one about to be created
        prune_error_logs(self.log_dir, max(self.keep - 1, 0), exclude=self.log_file)
        handler = logging.FileHandler(self.log_file, encoding="utf-8")
        handler.setFormatter(self.formatter or logging.Formatter(FILE_FORMAT, datefmt=_DATE_FORMAT))
        return handler

    def emit(self, record: logging.LogRecord) -> None:
        try:
            if self._stream_handler is None:
                self._stream_handler = self._open()
        except OSError:
            self.handleError(record)
            return
        self._stream_handler.emit(record)

    def close(self) -> None:
        if self._stream_handler is not None:
            self._stream_handler.close()
            self._stream_handler = None
        super().close()


def _level_number(level: Union[int, str]) -> int:
    if isinstance(level, int):
        return level
    number = logging.getLevelName(str(level).strip().upper())
    if not isinstance(number, int):
        raise ValueError(f"Unknown log level: {level}")
    return number


def setup_logging(log_dir: Optional[Path] = None, level: Union[int, str] = logging.INFO,
                  keep_error_logs: int = DEFAULT_ERROR_LOG_RETENTION) -> LazyFileHandler:
    """Install the console and error-file handlers on the root logger.

    Handlers from an earlier call are replaced; handlers installed by anything
    else are left in place. Returns the error-file handler.
    """
    if log_dir is None:
        log_dir = Path("data") / "logs"
    level = _level_number(level)

    root_logger = logging.getLogger()
    root_logger.setLevel(min(level, logging.ERROR))
    for handler in list(root_logger.handlers):
        if getattr(handler, _OWNED_ATTR, False):
            root_logger.removeHandler(handler)
            handler.close()

    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))

    error_handler = LazyFileHandler(log_dir, level=logging.ERROR, keep=keep_error_logs)
    error_handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt=_DATE_FORMAT))

    for handler in (console_handler, error_handler):
        setattr(handler, _OWNED_ATTR, True)
        root_logger.addHandler(handler)

    logging.getLogger(__name__).debug("Logging at %s; error logs go to %s",
                                      logging.getLevelName(level), log_dir)
    return error_handler
