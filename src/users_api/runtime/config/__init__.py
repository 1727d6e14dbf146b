"""Configuration loading.

The configuration is resolved once at startup and then passed explicitly to
the application factory and the services it builds.
"""

from __future__ import annotations

from pathlib import Path

from loguru import logger
from pydantic import ValidationError

from src.users_api.runtime.config.config_data import (
    AppConfig,
    ConfigData,
    DatabaseConfig,
    LoggingConfig,
)
from src.users_api.runtime.config.config_template import (
    load_templated_yaml,
    substitute_env_vars,
)


def load_config(config_file: Path | str | None = None) -> ConfigData:
    """Resolve the application configuration.

    A YAML file (``CONFIG_FILE``, default ``config.yaml``) takes precedence;
    without one the configuration comes from environment variables alone.

    Raises:
        ValueError: If the configuration is invalid.
        FileNotFoundError: If ``config_file`` is given explicitly but missing.
    """
    from src.users_api.runtime.settings import EnvironmentVariables

    try:
        env = EnvironmentVariables()
    except ValidationError as e:
        raise ValueError(f"Invalid environment configuration: {e}") from e

    if config_file is not None:
        return load_templated_yaml(Path(config_file))

    path = Path(env.config_file)
    if path.is_file():
        logger.info("Loading configuration from {}", path)
        return load_templated_yaml(path)

    logger.info("No configuration file at {}; using environment variables", path)
    try:
        return env.to_config_data()
    except ValidationError as e:
        raise ValueError(f"Invalid environment configuration: {e}") from e


__all__ = [
    "AppConfig",
    "ConfigData",
    "DatabaseConfig",
    "LoggingConfig",
    "load_config",
    "load_templated_yaml",
    "substitute_env_vars",
]
