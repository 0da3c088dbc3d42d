"""Logging configuration for faillint."""

import logging
from pathlib import Path
from typing import Literal

from rich.console import Console
from rich.logging import RichHandler

# Log output goes to stderr; stdout carries diagnostics.
console = Console(stderr=True)


def setup_logging(
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "WARNING",
    log_file: Path | None = None,
) -> logging.Logger:
    """Configure logging with Rich handler for terminal output.

    Args:
        level: Logging level
        log_file: Optional file path for log output

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger("faillint")
    logger.setLevel(getattr(logging, level))
    logger.handlers.clear()

    rich_handler = RichHandler(
        console=console,
        show_time=False,
        show_path=False,
        markup=True,
        rich_tracebacks=True,
    )
    rich_handler.setLevel(getattr(logging, level))
    rich_handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(rich_handler)

    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(
            logging.Formatter(
                "%(asctime)s | %(levelname)-8s | %(name)s:%(lineno)d | %(message)s"
            )
        )
        logger.addHandler(file_handler)

    return logger


def get_logger(name: str | None = None) -> logging.Logger:
    """Get a logger instance.

    Args:
        name: Logger name (will be prefixed with 'faillint.')
    """
    if name:
        return logging.getLogger(f"faillint.{name}")
    return logging.getLogger("faillint")


class LogContext:
    """Context manager for scoped logging of a processing phase."""

    def __init__(self, message: str, logger: logging.Logger | None = None):
        self.message = message
        self.logger = logger or get_logger()

    def __enter__(self) -> "LogContext":
        self.logger.debug(f"[bold blue]>>>[/bold blue] {self.message}")
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        if exc_type:
            self.logger.error(f"[bold red]<<<[/bold red] {self.message} [FAILED]")
        else:
            self.logger.debug(f"[bold green]<<<[/bold green] {self.message} [DONE]")
