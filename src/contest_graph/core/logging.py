"""
Centralized logging configuration for the contest_graph package.

Every module logs through a child of the ``contest_graph`` logger so a
single call to :func:`setup_logging` controls the whole engine.
"""

from __future__ import annotations

import json
import logging
import sys
import time
from contextlib import contextmanager
from pathlib import Path
from typing import IO, Any

ROOT_LOGGER_NAME = "contest_graph"

LOG_FORMATS = {
    "simple": "%(levelname)s: %(message)s",
    "detailed": "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
}


class JsonLineFormatter(logging.Formatter):
    """Render each record as one JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry)


def _make_formatter(
    format_style: str, include_timestamp: bool
) -> logging.Formatter:
    if format_style == "json":
        return JsonLineFormatter()
    if format_style not in LOG_FORMATS:
        raise ValueError(
            f"Unknown log format {format_style!r}, expected json, "
            f"{', '.join(sorted(LOG_FORMATS))}"
        )

    format_string = LOG_FORMATS[format_style]
    if not include_timestamp:
        format_string = format_string.replace("%(asctime)s - ", "")
    return logging.Formatter(format_string)


def setup_logging(
    level: str | int = logging.INFO,
    log_file: str | Path | None = None,
    format_style: str = "detailed",
    include_timestamp: bool = True,
    stream: IO[str] | None = None,
) -> logging.Logger:
    """Attach console (and optionally file) handlers to the package logger.

    Handlers from an earlier call are closed and replaced, so repeated calls
    never duplicate output. The package logger stops propagating to the
    root logger.

    Args:
        level: Level name or number. Defaults to logging.INFO.
        log_file: Optional file that also receives every record. Defaults to None.
        format_style: "simple", "detailed" or "json". Defaults to "detailed".
        include_timestamp: Prefix detailed records with the time. Defaults to True.
        stream: Console stream. Defaults to sys.stdout.

    Returns:
        The configured ``contest_graph`` logger.
    """
    if isinstance(level, str):
        level = getattr(logging, level.upper())

    formatter = _make_formatter(format_style, include_timestamp)
    handlers: list[logging.Handler] = [
        logging.StreamHandler(stream or sys.stdout)
    ]
    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logger = logging.getLogger(ROOT_LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    logger.setLevel(level)
    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        logger.addHandler(handler)
    logger.propagate = False

    return logger


def get_logger(name: str) -> logging.Logger:
    """Get a logger for a specific module/component.

    Args:
        name: Name of the component (usually __name__).

    Returns:
        Logger instance parented under the package logger.
    """
    if name == ROOT_LOGGER_NAME or name.startswith(f"{ROOT_LOGGER_NAME}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")


@contextmanager
def log_timing(
    logger: logging.Logger,
    operation: str,
    level: int = logging.INFO,
    failure_level: int | None = logging.ERROR,
):
    """Context manager to log the timing of operations.

    Args:
        logger: Logger to use for timing messages.
        operation: Description of the operation being timed.
        level: Logging level for timing messages. Defaults to logging.INFO.
        failure_level: Level for the message when the block raises, or None
            when the caller reports the failure itself. Defaults to
            logging.ERROR.

    Examples:
        >>> logger = get_logger(__name__)
        >>> with log_timing(logger, "computing betweenness"):
        ...     scores = backend.betweenness(graph, config, weighted=False)
    """
    start_time = time.time()
    logger.log(level, f"Starting {operation}")

    try:
        yield
    except Exception as exception:
        if failure_level is not None:
            elapsed_time = time.time() - start_time
            logger.log(
                failure_level,
                f"Failed {operation} after {elapsed_time:.2f}s: {exception}",
            )
        raise

    elapsed_time = time.time() - start_time
    logger.log(level, f"Completed {operation} in {elapsed_time:.2f}s")


def log_dataframe_stats(
    logger: logging.Logger,
    dataframe: Any,
    name: str,
    level: int = logging.DEBUG,
) -> None:
    """Log shape and column types of a polars DataFrame.

    Args:
        logger: Logger instance.
        dataframe: DataFrame to describe.
        name: Name/description of the DataFrame.
        level: Logging level. Defaults to logging.DEBUG.
    """
    if dataframe is None:
        logger.log(level, f"{name}: None")
        return

    logger.log(
        level,
        f"{name}: {dataframe.height:,} rows x {dataframe.width} cols, "
        f"~{dataframe.estimated_size('mb'):.1f}MB",
    )

    if level <= logging.DEBUG:
        column_info = [
            f"{column_name}({data_type})"
            for column_name, data_type in zip(
                dataframe.columns, dataframe.dtypes
            )
        ]
        logger.debug(f"{name} columns: {', '.join(column_info)}")


def log_algorithm_convergence(
    logger: logging.Logger,
    iteration: int,
    delta: float,
    threshold: float,
    algorithm: str = "algorithm",
) -> None:
    """Log algorithm convergence information.

    Args:
        logger: Logger instance.
        iteration: Current iteration number.
        delta: Current convergence delta.
        threshold: Convergence threshold.
        algorithm: Name of the algorithm. Defaults to "algorithm".
    """
    if delta <= threshold:
        logger.info(
            f"{algorithm} converged at iteration {iteration} with delta {delta:.2e}"
        )
    else:
        logger.warning(
            f"{algorithm} stopped at iteration {iteration}: delta={delta:.2e} (threshold={threshold:.2e})"
        )
