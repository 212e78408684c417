import logging
import logging.config
import yaml
import os
from pathlib import Path
from functools import lru_cache

# Provider SDKs log every HTTP request at INFO
NOISY_LOGGERS = ("httpx", "httpcore", "anthropic", "openai", "google_genai")


@lru_cache()
def setup_logging(
    default_path=None,
    default_level=logging.INFO,
    env_key='LOG_CFG',
    level_key='LOG_LEVEL',
):
    """
    Configure logging once per process.

    Loads a dictConfig YAML (``src/config/logging.yaml`` unless ``LOG_CFG``
    points elsewhere), then applies ``LOG_LEVEL`` to the root logger if set.
    """
    if default_path is None:
        # src/utils/logger.py -> src/config/logging.yaml
        default_path = Path(__file__).resolve().parent.parent / 'config' / 'logging.yaml'

    config_path = Path(os.getenv(env_key) or default_path)

    if config_path.exists():
        with open(config_path, 'rt') as f:
            try:
                logging.config.dictConfig(yaml.safe_load(f.read()))
            except (yaml.YAMLError, ValueError, TypeError) as e:
                logging.basicConfig(level=default_level)
                logging.getLogger(__name__).warning(f"Error loading logging config {config_path}: {e}")
    else:
        logging.basicConfig(level=default_level)

    level_name = os.getenv(level_key)
    if level_name:
        logging.getLogger().setLevel(level_name.upper())

    for name in NOISY_LOGGERS:
        logger = logging.getLogger(name)
        if logger.level == logging.NOTSET:
            logger.setLevel(logging.WARNING)


def get_logger(name: str):
    """Get a logger instance with the specified name"""
    setup_logging()
    return logging.getLogger(name)
