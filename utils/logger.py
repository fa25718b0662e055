import logging
import os
from typing import Optional

LOGGER_NAME = "spotify_viewer"
DEFAULT_LOG_FILE = os.path.join("logs", "app.log")

_FILE_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def setup_logging(level: str = "INFO", log_file: Optional[str] = DEFAULT_LOG_FILE) -> logging.Logger:
    """Configure console + file logging for the app and the spotify_api package.

    Safe to call more than once; existing handlers are replaced.
    """

    numeric_level = getattr(logging, str(level or "INFO").upper(), logging.INFO)

    handlers = [logging.StreamHandler()]
    handlers[0].setFormatter(logging.Formatter("%(message)s"))

    if log_file:
        log_dir = os.path.dirname(log_file)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(logging.Formatter(_FILE_FORMAT))
        handlers.append(file_handler)

    for name in (LOGGER_NAME, "spotify_api"):
        logger = logging.getLogger(name)
        for h in list(logger.handlers):
            logger.removeHandler(h)
            h.close()
        for h in handlers:
            logger.addHandler(h)
        logger.setLevel(numeric_level)
        logger.propagate = False

    return logging.getLogger(LOGGER_NAME)


def get_logger() -> logging.Logger:
    return logging.getLogger(LOGGER_NAME)


def log_debug(message: str) -> None:
    get_logger().debug(message)


def log_info(message: str) -> None:
    get_logger().info(message)


def log_success(message: str) -> None:
    get_logger().info(f"✅ {message}")


def log_warning(message: str) -> None:
    get_logger().warning(f"⚠️ {message}")


def log_error(message: str) -> None:
    get_logger().error(f"❌ {message}")
