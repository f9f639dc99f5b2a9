"""sleeptrack configuration management.

Handles the data directory (~/.sleeptrack, or $SLEEPTRACK_HOME) and the
config.json file inside it.
"""

import logging
import os
from pathlib import Path

import orjson

DATA_DIR_ENV = "SLEEPTRACK_HOME"
DEFAULT_DATABASE_NAME = "sleep_history.db"
DEFAULT_LOG_LEVEL = "WARNING"
LOG_FILE_NAME = "sleeptrack.log"


def get_data_dir() -> Path:
    """Get the directory holding the database, config and log file.

    Returns:
        $SLEEPTRACK_HOME if set, otherwise ~/.sleeptrack.
    """
    if env_dir := os.environ.get(DATA_DIR_ENV):
        return Path(env_dir).expanduser()
    return Path.home() / ".sleeptrack"


def get_config_path() -> Path:
    """Get the path to sleeptrack's config file."""
    return get_data_dir() / "config.json"


def read_config() -> dict:
    """Read sleeptrack config, returning empty dict if not found."""
    config_path = get_config_path()
    if not config_path.exists():
        return {}
    try:
        content = config_path.read_bytes()
        return orjson.loads(content) if content else {}
    except (orjson.JSONDecodeError, OSError):
        return {}


def write_config(config: dict) -> None:
    """Write sleeptrack config."""
    config_path = get_config_path()
    config_path.parent.mkdir(parents=True, exist_ok=True)
    config_path.write_bytes(orjson.dumps(config, option=orjson.OPT_INDENT_2))


def get_database_path(data_dir: Path | None = None) -> Path:
    """Get the path to the SQLite database file.

    Args:
        data_dir: Directory to place the database in. Defaults to get_data_dir().

    Returns:
        Path to the database file (name configurable via "database_name").
    """
    base = data_dir if data_dir is not None else get_data_dir()
    name = read_config().get("database_name", DEFAULT_DATABASE_NAME)
    return base / name


def get_log_level() -> str:
    """Get the configured log level name (default: WARNING)."""
    return str(read_config().get("log_level", DEFAULT_LOG_LEVEL)).upper()


def set_log_level(level: str) -> None:
    """Set the log level used by configure_logging.

    Args:
        level: A standard logging level name, e.g. "INFO".
    """
    level = level.upper()
    if level not in logging.getLevelNamesMapping():
        raise ValueError(f"Unknown log level: {level}")
    config = read_config()
    config["log_level"] = level
    write_config(config)


def configure_logging(verbose: bool = False) -> Path:
    """Send sleeptrack log records to the log file in the data directory.

    The TUI owns the terminal, so nothing is logged to stderr.

    Args:
        verbose: Log at DEBUG regardless of the configured level.

    Returns:
        Path to the log file.
    """
    log_path = get_data_dir() / LOG_FILE_NAME
    log_path.parent.mkdir(parents=True, exist_ok=True)

    handler = logging.FileHandler(log_path, encoding="utf-8")
    handler.setFormatter(
        logging.Formatter("%(asctime)s %(levelname)s [%(threadName)s] %(name)s: %(message)s")
    )

    package_logger = logging.getLogger("sleeptrack")
    for existing in list(package_logger.handlers):
        package_logger.removeHandler(existing)
        existing.close()
    package_logger.addHandler(handler)
    package_logger.setLevel(logging.DEBUG if verbose else get_log_level())
    return log_path
