"""
Settings for duckup.

Hosts, repository coordinates and fallback versions default to the public
duck compiler release channel and can be overridden from a YAML file:

    repo_owner: duck-compiler
    repo_name: duckc
    fallback_runtime_version: "1.25.0"
    timeout: 60
"""

import logging
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from duckup.core.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

CONFIG_FILE_NAME = "config.yaml"


@dataclass(frozen=True)
class DuckupSettings:
    """Release channel and download settings."""

    repo_owner: str = "duck-compiler"
    """Owner of the compiler repository on the release host"""

    repo_name: str = "duckc"
    """Compiler repository name"""

    binary_name: str = "dargo"
    """Base name of the compiler binary"""

    api_url: str = "https://api.github.com"
    """Release host API base URL"""

    github_url: str = "https://github.com"
    """Release host web base URL (source archives)"""

    runtime_url: str = "https://go.dev"
    """Runtime bundle host base URL"""

    fallback_runtime_version: str = "1.25.0"
    """Runtime version used when the source manifest is missing or malformed"""

    manifest_file: str = "duck-version-info.json"
    """Manifest file name at the root of a source tree"""

    runtime_root: str = "go"
    """Top-level directory name inside a runtime bundle"""

    user_agent: str = "duckup"
    """User-Agent header sent to both hosts"""

    timeout: Optional[float] = None
    """HTTP timeout in seconds (None waits indefinitely)"""

    @property
    def repo_api_url(self) -> str:
        return f"{self.api_url.rstrip('/')}/repos/{self.repo_owner}/{self.repo_name}"

    @property
    def repo_web_url(self) -> str:
        return f"{self.github_url.rstrip('/')}/{self.repo_owner}/{self.repo_name}"


def load_yaml_config(config_file: Path, required: bool = False) -> Dict[str, Any]:
    """
    Load and parse a YAML configuration file.

    Args:
        config_file: Path to YAML configuration file
        required: If True, raise error if file doesn't exist

    Returns:
        Configuration dictionary (empty dict if file doesn't exist and not required)

    Raises:
        ConfigurationError: If the file is required but missing, is not valid
            YAML, or does not contain a mapping
    """
    if not config_file.exists():
        if required:
            raise ConfigurationError(f"Configuration file not found: {config_file}")
        logger.debug(f"Config file not found (optional): {config_file}")
        return {}

    logger.debug(f"Loading configuration from {config_file}")

    try:
        with open(config_file, "r", encoding="utf-8") as f:
            config = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in {config_file}: {e}") from e

    config = config or {}
    if not isinstance(config, dict):
        raise ConfigurationError(
            f"Configuration in {config_file} must be a mapping, "
            f"got {type(config).__name__}"
        )
    return config


def settings_from_dict(config: Dict[str, Any]) -> DuckupSettings:
    """
    Build settings from a configuration mapping.

    Unknown keys are ignored with a warning.

    Raises:
        ConfigurationError: If a value has the wrong type
    """
    known = {f.name for f in fields(DuckupSettings)}
    overrides: Dict[str, Any] = {}

    for key, value in config.items():
        if key not in known:
            logger.warning(f"Ignoring unknown configuration key: {key}")
            continue

        if key == "timeout":
            if value is not None and (
                isinstance(value, bool) or not isinstance(value, (int, float))
            ):
                raise ConfigurationError(
                    f"'timeout' must be a number of seconds, got {value!r}"
                )
        elif isinstance(value, (int, float)) and not isinstance(value, bool):
            # Unquoted versions such as 1.25 parse as numbers
            value = str(value)
        elif not isinstance(value, str) or not value:
            raise ConfigurationError(f"'{key}' must be a non-empty string")

        overrides[key] = value

    return replace(DuckupSettings(), **overrides)


def load_settings(
    config_file: Optional[Path] = None, data_dir: Optional[Path] = None
) -> DuckupSettings:
    """
    Load settings from an explicit file or from the data directory.

    Args:
        config_file: Explicit configuration file (must exist)
        data_dir: duckup data directory holding an optional config.yaml

    Returns:
        DuckupSettings with overrides applied
    """
    if config_file is not None:
        config = load_yaml_config(Path(config_file), required=True)
    elif data_dir is not None:
        config = load_yaml_config(Path(data_dir) / CONFIG_FILE_NAME)
    else:
        config = {}

    return settings_from_dict(config)


__all__ = [
    "CONFIG_FILE_NAME",
    "DuckupSettings",
    "load_yaml_config",
    "settings_from_dict",
    "load_settings",
]
