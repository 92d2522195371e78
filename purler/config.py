import tomllib
import os
import logging
from typing import Dict, Any, Optional

CONFIG_FILE_PATH = "pyproject.toml"

DEFAULT_PURLER_CONFIG = {
    "logging_level": "WARNING",
}

LOG_FORMAT = "%(asctime)s-%(levelname)s-%(message)s"


def get_logging_level_from_string(level_str: str) -> int:
    """Converts a logging level string to its integer value."""
    return getattr(logging, level_str.upper(), logging.INFO)


def load_purler_config(path: str = CONFIG_FILE_PATH) -> Dict[str, Any]:
    """
    Loads purler configuration from the ``[tool.purler]`` table of pyproject.toml.
    Falls back to default values if the file or specific keys are not found.
    The environment variable `PURLER_LOGGING_LEVEL` overrides the file.

    Only logging is configurable; parsing and canonical forms never depend on it.
    """
    config = DEFAULT_PURLER_CONFIG.copy()

    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
            tool_purler_config = data.get("tool", {}).get("purler", {})
            if tool_purler_config:
                config["logging_level"] = tool_purler_config.get("logging_level", config["logging_level"])

    except FileNotFoundError:
        logging.getLogger(__name__).info(f"{path} not found. Using default configurations.")
    except tomllib.TOMLDecodeError:
        logging.getLogger(__name__).error(f"Error decoding {path}. Using default configurations.")
    except Exception as e:
        logging.getLogger(__name__).error(f"Unexpected error loading config from {path}: {e}. Using defaults.")

    config["logging_level"] = os.getenv("PURLER_LOGGING_LEVEL", config["logging_level"])
    config["logging_level_int"] = get_logging_level_from_string(str(config["logging_level"]))

    return config


def configure_logging(level: Optional[int] = None) -> logging.Logger:
    """Sets up basic logging and the level of the ``purler`` package logger.

    Meant for applications and scripts; the library never calls it itself.

    Args:
        level: A logging level such as `logging.DEBUG`. Overrides config if provided.

    Returns:
        The ``purler`` package logger.
    """
    _level = level if level is not None else PURLER_CONFIG["logging_level_int"]
    logging.basicConfig(level=_level, format=LOG_FORMAT)
    logger = logging.getLogger("purler")
    logger.setLevel(_level)
    return logger


# Load configuration once when the module is imported.
PURLER_CONFIG = load_purler_config()
