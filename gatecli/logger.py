"""
Invocation log for the gateway CLI
One file per command run, echoed to the error console with --d
"""

import os
from datetime import datetime
from pathlib import Path
from typing import Optional, TextIO

from rich.console import Console

console = Console(stderr=True)

RULE = "=" * 72
LEVEL_STYLES = {"ERROR": "red", "WARNING": "yellow", "DEBUG": "dim"}


class CommandLogger:
    """
    Log of a single gatecli invocation
    - Appends timestamped lines to logs/{date}/{time}_{command}.log
    - Echoes every line to the error console in debug mode
    - Records the exit code and whether any error was logged
    """

    def __init__(
        self,
        log_dir: Path,
        operation: str,
        verbose: bool = False,
        output: Optional[Console] = None,
    ):
        """
        Open the log file for one command

        Args:
            log_dir: Gateway logs directory
            operation: Command token (e.g., 'auth-test', 'create-alias')
            verbose: Echo log lines to the console (--d)
            output: Console used for echo (defaults to stderr)

        Raises:
            OSError: If the log directory or file cannot be created
        """
        self.operation = operation
        self.verbose = verbose
        self.console = output or console
        self.has_errors = False
        self.log_file: Optional[TextIO] = None

        started = datetime.now()
        day_dir = Path(log_dir) / started.strftime("%Y-%m-%d")
        day_dir.mkdir(parents=True, exist_ok=True)
        self.log_path: Path = day_dir / f"{started.strftime('%H-%M-%S')}_{operation}.log"

        # Line buffered so a crash still leaves a readable log
        self.log_file = open(self.log_path, "a", buffering=1)
        self._write(
            f"{RULE}\n"
            f"Operation: {operation}\n"
            f"Started: {started.isoformat()}\n"
            f"PID: {os.getpid()}\n"
            f"{RULE}\n"
        )

    def _write(self, text: str) -> None:
        if self.log_file:
            self.log_file.write(text)
            self.log_file.flush()

    def log(self, message: str, level: str = "INFO"):
        """
        Append one line to the log

        Args:
            message: Message to log
            level: INFO, WARNING, ERROR or DEBUG
        """
        self._write(f"[{datetime.now().strftime('%H:%M:%S')}] [{level}] {message}\n")
        if level == "ERROR":
            self.has_errors = True

        if self.verbose:
            self.console.print(
                message, style=LEVEL_STYLES.get(level), markup=False, highlight=False
            )

    def debug(self, message: str):
        self.log(message, "DEBUG")

    def info(self, message: str):
        self.log(message, "INFO")

    def warning(self, message: str):
        self.log(message, "WARNING")

    def log_error(self, error: str, context: Optional[str] = None):
        """
        Log an error, with indented context lines (e.g. a traceback)

        Args:
            error: Error message
            context: Exception type or traceback text
        """
        self.log(error, "ERROR")
        if context:
            indented = "".join(f"    {line}\n" for line in context.rstrip("\n").splitlines())
            self._write(f"    Context: {indented.lstrip()}")

    def close(self, exit_code: Optional[int] = None):
        """Write the footer and close the log file"""
        if not self.log_file:
            return
        footer = f"{RULE}\nCompleted: {datetime.now().isoformat()}\n"
        if exit_code is not None:
            footer += f"Exit code: {exit_code}\n"
        footer += f"Status: {'FAILED' if self.has_errors else 'SUCCESS'}\n{RULE}\n"
        self._write(footer)
        self.log_file.close()
        self.log_file = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, _exc_tb):
        if exc_type is not None and not issubclass(exc_type, SystemExit):
            self.log_error(str(exc_val) or "Command failed", context=exc_type.__name__)
        self.close()
        return False
