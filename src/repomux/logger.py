"""
repomux log output.

Console: short text lines on stderr (stdout is reserved for user-facing output)
File: JSON lines, only when a log directory is configured
"""

from __future__ import annotations

import json
from datetime import datetime
from pathlib import Path
from typing import Any

import click

from repomux.errors import LogFileError

LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")

_STYLES = {
    "WARNING": ("Warning", "yellow"),
    "ERROR": ("Error", "red"),
}


class RepoMuxLogger:
    """
    Logger shared by the discovery, launcher and CLI stages.

    Warnings and errors are always shown, DEBUG only when verbose.
    """

    def __init__(
        self,
        name: str = "repomux",
        log_dir: Path | None = None,
        verbose: bool = False,
    ) -> None:
        """
        Args:
            name: Logger name, also used as the log file prefix
            log_dir: Directory for JSON log files (default: no file output)
            verbose: Echo DEBUG lines to the console as well
        """
        self.name = name
        self.verbose = verbose
        self.log_dir = Path(log_dir) if log_dir else None
        if self.log_dir is not None:
            try:
                self.log_dir.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                raise LogFileError(
                    f"Cannot create log directory {self.log_dir}: {e.strerror or e}"
                ) from e

    def _get_log_file(self) -> Path | None:
        """Today's log file path, or None when file logging is off"""
        if self.log_dir is None:
            return None
        today = datetime.now().strftime("%Y%m%d")
        return self.log_dir / f"{self.name}-{today}.log"

    def log(self, level: str, message: str, **kwargs: Any) -> None:
        """
        Emit a log record.

        Args:
            level: One of DEBUG, INFO, WARNING, ERROR
            message: Log message
            **kwargs: Extra structured fields for the JSON record
        """
        if level not in LEVELS:
            raise ValueError(f"Unknown log level: {level}")

        now = datetime.now()

        if level != "DEBUG" or self.verbose:
            click.echo(self._format_console(level, message, now), err=True)

        log_file = self._get_log_file()
        if log_file is not None:
            entry = {
                "timestamp": now.isoformat(),
                "level": level,
                "message": message,
                **kwargs,
            }
            try:
                with open(log_file, "a") as f:
                    f.write(json.dumps(entry, default=str) + "\n")
            except OSError as e:
                # stop file output; the console line above was already shown
                self.log_dir = None
                warning = f"Log file disabled, cannot write {log_file}: {e.strerror or e}"
                click.echo(self._format_console("WARNING", warning, now), err=True)

    def _format_console(self, level: str, message: str, now: datetime) -> str:
        if level in _STYLES:
            label, color = _STYLES[level]
            return click.style(f"{label}: {message}", fg=color)
        return f"{now.strftime('%H:%M:%S')} [{level}] {message}"

    def debug(self, message: str, **kwargs: Any) -> None:
        self.log("DEBUG", message, **kwargs)

    def info(self, message: str, **kwargs: Any) -> None:
        self.log("INFO", message, **kwargs)

    def warning(self, message: str, **kwargs: Any) -> None:
        self.log("WARNING", message, **kwargs)

    def error(self, message: str, **kwargs: Any) -> None:
        self.log("ERROR", message, **kwargs)
