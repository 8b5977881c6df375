# persons/logging/logging.py
import os
import logging
import sys
from pathlib import Path

from .config import load_log_level

# Singleton record to track which loggers are already configured
_LOGGER_INITIALIZED = {}


def _resolve_log_dir(log_dir=None):
    if log_dir is not None:
        return Path(log_dir)
    return Path(os.environ.get("PERSONS_LOG_DIR", Path.home() / ".persons" / "logs"))


def _resolve_log_file(log_file=None, log_dir=None):
    if log_file is not None:
        return Path(log_file)
    return _resolve_log_dir(log_dir) / "persons.log"


def ensure_log_dir(log_dir=None):
    dir_ = _resolve_log_dir(log_dir)
    dir_.mkdir(parents=True, exist_ok=True)


def _logger_name(name):
    """Map ``__file__`` style names onto the ``persons.*`` hierarchy."""
    name = str(name)
    if name.endswith(".py"):
        path = Path(name)
        parts = path.with_suffix("").parts
        if parts[-1] == "__init__":
            parts = parts[:-1]
        if "persons" in parts:
            idx = len(parts) - 1 - parts[::-1].index("persons")
            if idx == len(parts) - 1 and "persons" in parts[:-1]:
                idx = len(parts) - 2 - parts[-2::-1].index("persons")
            return ".".join(parts[idx:])
        return path.stem
    return name


def get_logger(
    name="persons",
    level=None,
    log_file=None,
    log_dir=None,
    console=True,
    filemode="a",
    fmt="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
    encoding="utf-8",
    propagate=False,
):
    """
    Get or create a logger with optional configuration.
    - name: Logger name or a module ``__file__`` (default 'persons')
    - level: Logging level (default: persisted level, else logging.INFO)
    - log_file: File path for logs (default: <log_dir>/persons.log)
    - log_dir: Directory for logs (default: ~/.persons/logs)
    - console: If True, logs also go to stderr
    - filemode: File mode for log file ('a' append, 'w' overwrite)
    - fmt, datefmt: Formatting for log messages
    - encoding: Encoding for file log
    - propagate: Whether to propagate to root logger (default False)
    """
    name = _logger_name(name)
    logger = logging.getLogger(name)
    if not _LOGGER_INITIALIZED.get(name, False):
        if level is None:
            level = load_log_level() or logging.INFO
        ensure_log_dir(log_dir)
        logger.setLevel(level)
        logger.propagate = propagate  # Typically False for application loggers
        formatter = logging.Formatter(fmt=fmt, datefmt=datefmt)

        if log_file is not None:
            Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        file_path = _resolve_log_file(log_file, log_dir)

        # File handler
        fh = logging.FileHandler(file_path, mode=filemode, encoding=encoding)
        fh.setFormatter(formatter)
        logger.addHandler(fh)

        # Console handler
        if console:
            ch = logging.StreamHandler(sys.stderr)
            ch.setFormatter(formatter)
            logger.addHandler(ch)

        _LOGGER_INITIALIZED[name] = True

    return logger


def reset_logger(name=None):
    """Reset configured loggers so they can be reconfigured.

    Parameters
    ----------
    name : str, optional
        Name of the logger to reset. If omitted, all loggers tracked by
        :func:`get_logger` are reset.

    Examples
    --------
    >>> logger = get_logger("demo", level=logging.DEBUG)
    >>> reset_logger("demo")
    >>> logger = get_logger("demo", level=logging.INFO)
    """
    if name is None:
        names = list(_LOGGER_INITIALIZED.keys())
    else:
        names = [_logger_name(name)]

    for n in names:
        logger = logging.getLogger(n)
        for handler in list(logger.handlers):
            logger.removeHandler(handler)
            handler.close()
        _LOGGER_INITIALIZED.pop(n, None)


def get_configured_level(name="persons"):
    """Return the configured logging level name for ``name``."""

    level = logging.getLogger(_logger_name(name)).getEffectiveLevel()
    return logging.getLevelName(level)
