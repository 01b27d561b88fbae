# Copyright 2025-2026 Dimensional Inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""structlog setup shared by every planner object.

Each ``setup_logger()`` call returns a logger that writes compact lines to
stdout and JSON lines to a rotating file. All loggers of a process share one
file under ``log_directory()``.
"""

from collections.abc import Mapping
from datetime import datetime
import inspect
import logging
import logging.handlers
import os
from pathlib import Path
import sys
import tempfile
from typing import Any

import structlog
from structlog.processors import CallsiteParameter, CallsiteParameterAdder

from quotientplan.constants import QUOTIENTPLAN_LOG_DIR, QUOTIENTPLAN_PROJECT_ROOT

LOG_LEVEL_ENV = "QUOTIENTPLAN_LOG_LEVEL"
LOG_DIR_ENV = "QUOTIENTPLAN_LOG_DIR"

_MAX_LOG_BYTES = 10 * 1024 * 1024  # 10MiB
_LOG_BACKUPS = 20

_log_file_path: Path | None = None


def log_directory() -> Path:
    """Directory the JSON log files go to, created if missing.

    ``$QUOTIENTPLAN_LOG_DIR`` wins. A source checkout logs to ``<root>/logs``,
    an installed package to ``$XDG_STATE_HOME/quotientplan/logs``. Falls back
    to the temp dir when the chosen directory is not writable.
    """
    override = os.getenv(LOG_DIR_ENV)
    if override:
        candidate = Path(override)
    elif (QUOTIENTPLAN_PROJECT_ROOT / ".git").exists():
        candidate = QUOTIENTPLAN_LOG_DIR
    else:
        state_home = os.getenv("XDG_STATE_HOME")
        base = Path(state_home) if state_home else Path.home() / ".local" / "state"
        candidate = base / "quotientplan" / "logs"

    try:
        candidate.mkdir(parents=True, exist_ok=True)
    except OSError:
        candidate = Path(tempfile.gettempdir()) / "quotientplan" / "logs"
        candidate.mkdir(parents=True, exist_ok=True)
    return candidate


def log_file_path() -> Path:
    """The process-wide log file; structlog is configured on first use."""
    global _log_file_path

    if _log_file_path is None:
        stamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        _log_file_path = log_directory() / f"quotientplan_{stamp}_{os.getpid()}.jsonl"
        _configure_structlog()
    return _log_file_path


def _configure_structlog() -> None:
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.UnicodeDecoder(),
            CallsiteParameterAdder(
                parameters=[CallsiteParameter.FUNC_NAME, CallsiteParameter.LINENO]
            ),
            structlog.processors.format_exc_info,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


class CompactConsoleRenderer:
    """Render ``HH:MM:SS.mmm[lvl][logger] event key=value ...``.

    Call-site fields are left to the JSON file. Colours default to on when
    stdout is a terminal.
    """

    LEVEL_COLORS = {
        "deb": "\033[1;36;40m",
        "inf": "\033[1;32;40m",
        "war": "\033[1;33;40m",
        "err": "\033[1;31;40m",
        "cri": "\033[1;31;40m",
    }
    RESET = "\033[0m"
    DIM = "\033[1;30;40m"
    EVENT = "\033[0;34m"
    KEY = "\033[0;36m"
    VALUE = "\033[0;35m"

    HIDDEN_KEYS = ("func_name", "lineno", "exception", "exc_info", "_record", "_from_structlog")

    def __init__(self, name_width: int = 30, colors: bool | None = None) -> None:
        self.name_width = name_width
        if colors is None:
            colors = hasattr(sys.stdout, "isatty") and sys.stdout.isatty()
        self.colors = colors

    def __call__(self, logger: Any, method_name: str, event_dict: Mapping[str, Any]) -> str:
        fields = dict(event_dict)
        clock = self._clock(fields.pop("timestamp", ""))
        level = str(fields.pop("level", "???"))[:3].lower()
        name = str(fields.pop("logger", ""))[-self.name_width :].ljust(self.name_width)
        event = fields.pop("event", "")
        for key in self.HIDDEN_KEYS:
            fields.pop(key, None)
        context = sorted(fields.items())

        if not self.colors:
            line = f"{clock} [{level}][{name}] {event}"
            if context:
                line += " " + " ".join(f"{k}={v}" for k, v in context)
            return line

        r = self.RESET
        line = (
            f"{self.DIM}{clock}{r}{self.LEVEL_COLORS.get(level, '')}[{level}]{r}"
            f"{self.DIM}[{name}]{r} {self.EVENT}{event}{r}"
        )
        if context:
            line += " " + " ".join(f"{self.KEY}{k}={self.VALUE}{v}{r}" for k, v in context)
        return line

    @staticmethod
    def _clock(timestamp: str) -> str:
        if timestamp:
            try:
                moment = datetime.fromisoformat(timestamp.replace("Z", "+00:00"))
            except (ValueError, AttributeError):
                return str(timestamp)[:12]
        else:
            moment = datetime.now()
        return moment.strftime("%H:%M:%S") + f".{moment.microsecond // 1000:03d}"


def _console_handler(level: int) -> logging.Handler:
    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(structlog.stdlib.ProcessorFormatter(processor=CompactConsoleRenderer()))
    return handler


def _file_handler(path: Path, level: int) -> logging.Handler:
    handler = logging.handlers.RotatingFileHandler(
        path, mode="a", maxBytes=_MAX_LOG_BYTES, backupCount=_LOG_BACKUPS, encoding="utf-8"
    )
    handler.setLevel(level)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(processor=structlog.processors.JSONRenderer())
    )
    return handler


def setup_logger(*, name: str | None = None, level: int | None = None) -> Any:
    """Set up a structured logger using structlog.

    Every call returns a fresh handle; planners receive theirs at construction
    instead of sharing one module-wide instance.

    Args:
        name: Logger name. Defaults to the caller's file, relative to the project root.
        level: The logging level. Defaults to ``$QUOTIENTPLAN_LOG_LEVEL`` (INFO).

    Returns:
        A configured structlog logger instance.
    """
    if name is None:
        caller = Path(inspect.stack()[1].filename)
        try:
            name = str(caller.relative_to(QUOTIENTPLAN_PROJECT_ROOT))
        except ValueError:
            name = str(caller)

    if level is None:
        level = getattr(logging, os.getenv(LOG_LEVEL_ENV, "INFO").upper(), logging.INFO)

    path = log_file_path()

    stdlib_logger = logging.getLogger(name)
    stdlib_logger.handlers.clear()
    stdlib_logger.setLevel(level)
    stdlib_logger.propagate = False
    stdlib_logger.addHandler(_console_handler(level))
    stdlib_logger.addHandler(_file_handler(path, level))

    return structlog.get_logger(name)
