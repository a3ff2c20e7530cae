"""
ResticAPI - Config Store
Loads ~/.config/resticapi/config.toml once at startup.
"""

import tomllib
from pathlib import Path
from typing import Optional

from pydantic import ValidationError as PydanticValidationError

from resticapi.core.errors import ConfigError
from resticapi.models.schemas import AppConfig
from resticapi.utils.logger import get_logger
from resticapi.utils.paths import CONFIG_PATH

logger = get_logger("ConfigStore")


def _describe_validation_error(exc: PydanticValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()))
        parts.append(f"{loc}: {err.get('msg')}")
    return "; ".join(parts)


def load_config(path: Optional[Path] = None) -> AppConfig:
    """Reads and validates the TOML configuration file."""
    config_path = Path(path) if path else CONFIG_PATH
    if not config_path.is_file():
        raise ConfigError(f"Configuration file not found at {config_path}")

    try:
        with open(config_path, "rb") as f:
            raw = tomllib.load(f)
    except OSError as e:
        raise ConfigError(f"Could not read configuration file {config_path}: {e}") from e
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Invalid TOML in {config_path}: {e}") from e

    try:
        config = AppConfig.model_validate(raw)
    except PydanticValidationError as e:
        raise ConfigError(f"Invalid configuration in {config_path}: {_describe_validation_error(e)}") from e

    logger.info(
        "[Config] Loaded %s repository=%s server=%s:%s",
        config_path,
        config.repository.location,
        config.server.ip,
        config.server.port,
    )
    return config
