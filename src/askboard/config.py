"""Configuration loader with YAML file support.

Loads configuration from multiple sources with the following precedence (highest to lowest):
1. Environment variables (ASKBOARD_*)
2. Local project config (./askboard.yaml)
3. User-global config (~/.askboard/config.yaml)
4. Built-in defaults
"""

import os
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, List

import yaml

from askboard.core import Settings, get_logger

logger = get_logger(__name__)

ENV_PREFIX = "ASKBOARD_"

SUPPORTED_DATABASE_SCHEMES = ("sqlite+aiosqlite://", "postgresql+asyncpg://")


def get_global_config_path() -> Path:
    """Get path to global config file in user's home directory."""
    return Path.home() / ".askboard" / "config.yaml"


def get_local_config_path() -> Path:
    """Get path to local config file in current directory."""
    return Path.cwd() / "askboard.yaml"


def load_yaml_config(config_path: Path) -> Dict[str, Any]:
    """
    Load configuration from YAML file.

    Args:
        config_path: Path to YAML config file

    Returns:
        Dictionary of configuration values (empty if missing or unreadable)
    """
    try:
        with open(config_path, "r", encoding="utf-8") as f:
            config = yaml.safe_load(f)
    except FileNotFoundError:
        return {}
    except yaml.YAMLError as e:
        logger.warning(f"Invalid YAML syntax in {config_path}", error=str(e))
        return {}

    if not isinstance(config, dict):
        if config is not None:
            logger.warning(f"Ignoring non-mapping config in {config_path}")
        return {}
    return config


def merge_config(base_config: Dict[str, Any], override_config: Dict[str, Any]) -> Dict[str, Any]:
    """
    Merge two configuration dictionaries.

    None values in the override never replace a base value.
    """
    merged = base_config.copy()
    for key, value in override_config.items():
        if value is not None:
            merged[key] = value
    return merged


def load_config() -> Settings:
    """
    Load configuration from all sources with proper precedence.

    Returns:
        Settings instance with merged configuration
    """
    config_dict: Dict[str, Any] = {}

    # Load global config
    global_config_path = get_global_config_path()
    if global_config_path.exists():
        logger.debug(f"Loading global config from {global_config_path}")
        config_dict = merge_config(config_dict, load_yaml_config(global_config_path))

    # Load local config (overrides global)
    local_config_path = get_local_config_path()
    if local_config_path.exists():
        logger.debug(f"Loading local config from {local_config_path}")
        config_dict = merge_config(config_dict, load_yaml_config(local_config_path))

    # Init kwargs beat the environment in pydantic-settings, so drop any key
    # whose ASKBOARD_* variable is set.
    file_values = {}
    for key, value in config_dict.items():
        clean_key = key[len(ENV_PREFIX):] if key.upper().startswith(ENV_PREFIX) else key
        clean_key = clean_key.lower()
        if f"{ENV_PREFIX}{clean_key.upper()}" in os.environ:
            continue
        file_values[clean_key] = value

    return Settings(**file_values)


@lru_cache(maxsize=1)
def get_config() -> Settings:
    """
    Get the merged configuration the running application uses.

    Loaded once per process; call ``get_config.cache_clear()`` to reload.

    Returns:
        Settings instance with merged configuration

    Examples:
        >>> config = get_config()
        >>> print(config.accept_policy)
        any
    """
    return load_config()


def validate_config(settings: Settings) -> List[str]:
    """
    Validate configuration and return list of issues.

    Performs semantic validation beyond basic type checking.

    Args:
        settings: Settings instance to validate

    Returns:
        List of validation error messages (empty list if valid)

    Examples:
        >>> errors = validate_config(load_config())
        >>> for error in errors:
        ...     print(f"Error: {error}")
    """
    from askboard.services.acceptance import ACCEPTANCE_POLICIES

    errors = []

    # Validate database URL format
    if not settings.database_url.startswith(SUPPORTED_DATABASE_SCHEMES):
        errors.append(
            "database_url must be an async SQLAlchemy URL "
            "(starting with 'sqlite+aiosqlite://' or 'postgresql+asyncpg://')"
        )

    # Validate title rules
    if settings.title_min_length < 1:
        errors.append("title_min_length must be at least 1")
    if settings.title_min_length > settings.title_max_length:
        errors.append(
            f"title_min_length ({settings.title_min_length}) must not exceed "
            f"title_max_length ({settings.title_max_length})"
        )

    # Validate tag rules
    if settings.max_tags_per_question < 1:
        errors.append("max_tags_per_question must be at least 1")
    if not (1 <= settings.tag_max_length <= 50):
        errors.append(f"tag_max_length must be between 1 and 50 (got {settings.tag_max_length})")

    # Validate page limits
    if settings.default_page_size < 1:
        errors.append("default_page_size must be at least 1")
    if settings.max_page_size < settings.default_page_size:
        errors.append("max_page_size must be at least default_page_size")
    if settings.search_max_results < 1:
        errors.append("search_max_results must be at least 1")

    # Validate accept policy
    if settings.accept_policy not in ACCEPTANCE_POLICIES:
        errors.append(
            f"accept_policy must be one of {sorted(ACCEPTANCE_POLICIES)} "
            f"(got '{settings.accept_policy}')"
        )

    # Validate ports
    if not (1 <= settings.api_port <= 65535):
        errors.append(f"api_port must be between 1 and 65535 (got {settings.api_port})")

    return errors


def diagnose_config() -> Dict[str, Any]:
    """
    Diagnose configuration issues and show loaded sources.

    Returns:
        Dictionary with diagnostic information including:
        - global_config: Global config file status
        - local_config: Local config file status
        - env_vars: ASKBOARD_* environment variables
        - validation: Configuration validation results
    """
    global_path = get_global_config_path()
    local_path = get_local_config_path()

    try:
        config = load_config()
        validation_errors = validate_config(config)
        config_loaded = True
    except ValueError as e:
        validation_errors = [str(e)]
        config_loaded = False

    return {
        "config_loaded": config_loaded,
        "global_config": {
            "path": str(global_path),
            "exists": global_path.exists(),
            "readable": global_path.exists() and os.access(global_path, os.R_OK),
        },
        "local_config": {
            "path": str(local_path),
            "exists": local_path.exists(),
            "readable": local_path.exists() and os.access(local_path, os.R_OK),
        },
        "env_vars": {k: v for k, v in os.environ.items() if k.startswith(ENV_PREFIX)},
        "validation": {
            "valid": len(validation_errors) == 0,
            "errors": validation_errors,
        },
    }

