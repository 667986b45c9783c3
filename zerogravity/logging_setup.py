"""
Logging for Zero Gravity tools.

Messages carry a category tag so whole areas can be silenced at runtime:

    logger = get_logger()
    logger.info(f"{LogCategory.PARSER} Stamp found in {path}")

Settings come from logging_config.json in the working directory (or an
explicit path) and the LOG_LEVEL / ZEROGRAVITY_LOG_FILE environment
variables. Console output goes to stderr so stdout stays free for data.
"""

import os
import sys
import json
import logging
import re
import time
from pathlib import Path
from typing import FrozenSet, Optional
from dataclasses import dataclass, field
from functools import wraps
from logging.handlers import RotatingFileHandler


LOGGER_NAME = "zerogravity"


class LogCategory:
    """Category tags prefixed to log messages."""

    PARSER = "[ZG][PARSER]"
    VALIDATION = "[ZG][VALIDATION]"
    GENERATION = "[ZG][GENERATION]"
    EMBEDDING = "[ZG][EMBEDDING]"
    API_CALL = "[ZG][API_CALL]"
    FILE_IO = "[ZG][FILE_IO]"
    CONFIG = "[ZG][CONFIG]"
    PERF = "[ZG][PERF]"
    DEBUG = "[ZG][DEBUG]"
    ERROR = "[ZG][ERROR]"


CATEGORY_TAG = re.compile(r'\[ZG\]\[(\w+)\]')


@dataclass
class LoggingConfig:
    level: str = "INFO"
    log_file: Optional[Path] = None
    console: bool = True
    json_file_output: bool = False
    disabled_categories: FrozenSet[str] = field(default_factory=lambda: frozenset({"DEBUG"}))


_logging_config: Optional[LoggingConfig] = None
_logger: Optional[logging.Logger] = None


def load_logging_config(config_path: Optional[Path] = None) -> LoggingConfig:
    """
    Build the logging settings once per process.

    logging_config.json may hold "level", "log_file", "json_file_output"
    and a "disabled_categories" list. Environment variables win over it.
    """
    global _logging_config

    if _logging_config is not None:
        return _logging_config

    config = LoggingConfig()

    if config_path is None:
        config_path = Path.cwd() / "logging_config.json"

    if config_path.exists():
        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                data = json.load(f)
            config.level = data.get("level", config.level)
            config.json_file_output = bool(data.get("json_file_output", False))
            if data.get("log_file"):
                config.log_file = Path(data["log_file"])
            if "disabled_categories" in data:
                config.disabled_categories = frozenset(c.upper() for c in data["disabled_categories"])
        except (json.JSONDecodeError, OSError) as e:
            print(f"Warning: ignoring logging config {config_path}: {e}", file=sys.stderr)

    config.level = os.environ.get("LOG_LEVEL", config.level).upper()
    if os.environ.get("ZEROGRAVITY_LOG_FILE"):
        config.log_file = Path(os.environ["ZEROGRAVITY_LOG_FILE"])

    _logging_config = config
    return config


class CategoryFilter(logging.Filter):
    """Drop records whose category tag is disabled."""

    def __init__(self, disabled: FrozenSet[str]):
        super().__init__()
        self.disabled = disabled

    def filter(self, record: logging.LogRecord) -> bool:
        match = CATEGORY_TAG.search(record.getMessage())
        return match is None or match.group(1).upper() not in self.disabled


class JsonLineFormatter(logging.Formatter):
    """One JSON object per record, with the category split out."""

    def format(self, record: logging.LogRecord) -> str:
        message = record.getMessage()
        entry = {
            "time": self.formatTime(record, "%Y-%m-%dT%H:%M:%S"),
            "level": record.levelname,
            "message": message,
        }
        match = CATEGORY_TAG.search(message)
        if match:
            entry["category"] = match.group(1)
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, ensure_ascii=False)


def _build_logger(config: LoggingConfig) -> logging.Logger:
    logger = logging.getLogger(LOGGER_NAME)
    logger.handlers.clear()
    logger.setLevel(logging.DEBUG)

    category_filter = CategoryFilter(config.disabled_categories)
    level = getattr(logging, config.level.upper(), logging.INFO)

    if config.console:
        console = logging.StreamHandler(sys.stderr)
        console.setLevel(level)
        console.setFormatter(logging.Formatter("%(levelname)s - %(message)s"))
        console.addFilter(category_filter)
        logger.addHandler(console)

    if config.log_file:
        try:
            config.log_file.parent.mkdir(parents=True, exist_ok=True)
            file_handler = RotatingFileHandler(
                config.log_file, maxBytes=5 * 1024 * 1024, backupCount=3, encoding='utf-8'
            )
        except OSError as e:
            print(f"Warning: cannot open log file {config.log_file}: {e}", file=sys.stderr)
        else:
            file_handler.setLevel(logging.DEBUG)
            if config.json_file_output:
                file_handler.setFormatter(JsonLineFormatter())
            else:
                file_handler.setFormatter(logging.Formatter(
                    "%(asctime)s - %(levelname)s - %(message)s", "%Y-%m-%d %H:%M:%S"
                ))
            file_handler.addFilter(category_filter)
            logger.addHandler(file_handler)

    return logger


def get_logger() -> logging.Logger:
    """Return the shared logger, creating it from the loaded settings on first use."""
    global _logger

    if _logger is None:
        _logger = _build_logger(load_logging_config())
    return _logger


def configure_logging(
    log_level: str = "INFO",
    log_file: Optional[str] = None,
    console: bool = True,
    json_file_output: bool = False,
) -> logging.Logger:
    """
    Replace the shared logger with one built from explicit settings.

    DEBUG level also enables the DEBUG category.
    """
    global _logging_config, _logger

    config = LoggingConfig(
        level=log_level.upper(),
        log_file=Path(log_file) if log_file else None,
        console=console,
        json_file_output=json_file_output,
    )
    if config.level == "DEBUG":
        config.disabled_categories = frozenset()

    _logging_config = config
    _logger = _build_logger(config)
    return _logger


def log_performance(operation: str):
    """Decorator logging how long a call took, and failures with their elapsed time."""
    def decorator(func):
        @wraps(func)
        def wrapper(*args, **kwargs):
            logger = get_logger()
            started = time.perf_counter()
            try:
                result = func(*args, **kwargs)
            except Exception as e:
                logger.error(f"{LogCategory.PERF} {operation} failed after {time.perf_counter() - started:.2f}s: {e}")
                raise
            logger.info(f"{LogCategory.PERF} {operation} took {time.perf_counter() - started:.2f}s")
            return result
        return wrapper
    return decorator


def log_api_call(
    operation: str,
    model: Optional[str] = None,
    input_tokens: Optional[int] = None,
    output_tokens: Optional[int] = None,
):
    """Log a provider call with whatever token counts it reported."""
    details = [f"model={model}" if model else None]
    if input_tokens is not None:
        details.append(f"input_tokens={input_tokens}")
    if output_tokens is not None:
        details.append(f"output_tokens={output_tokens}")
    suffix = " | ".join(d for d in details if d)
    get_logger().info(f"{LogCategory.API_CALL} {operation}" + (f" | {suffix}" if suffix else ""))


def log_file_operation(operation: str, path: Path, success: bool = True, details: str = ""):
    message = f"{LogCategory.FILE_IO} {operation}: {path}" + (f" ({details})" if details else "")
    if success:
        get_logger().debug(message)
    else:
        get_logger().error(message)


def log_validation(item: str, valid: bool, reason: str = ""):
    """PASS results at debug level, FAIL results as warnings."""
    message = f"{LogCategory.VALIDATION} [{'PASS' if valid else 'FAIL'}] {item}"
    if reason:
        message += f": {reason}"
    if valid:
        get_logger().debug(message)
    else:
        get_logger().warning(message)
