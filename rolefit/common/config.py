"""Configuration management for rolefit.

Handles loading and validation of YAML configuration files for the
role resolution engine.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml


DEFAULT_PRIVILEGED_ROLES = [
    # Top-tier privileged roles
    "Owner",
    "Contributor",
    "User Access Administrator",
    # Security-related privileged roles
    "Security Admin",
    "Security Manager (Legacy)",
    "SQL Security Manager",
]


@dataclass
class DirectoryConfig:
    """Configuration for action directory construction."""

    progress_interval: Optional[int] = 1000
    merge_provider_operations: bool = True


@dataclass
class SearchConfig:
    """Configuration for operation search and role lookups."""

    default_limit: int = 50
    max_results: Optional[int] = None


@dataclass
class RoleFitConfig:
    """Top-level configuration for rolefit."""

    directory: DirectoryConfig = field(default_factory=DirectoryConfig)
    search: SearchConfig = field(default_factory=SearchConfig)
    privileged_roles: List[str] = field(
        default_factory=lambda: list(DEFAULT_PRIVILEGED_ROLES)
    )
    log_dir: str = "/var/log/rolefit"
    log_level: str = "INFO"


def parse_directory_config(directory_dict: Dict[str, Any]) -> DirectoryConfig:
    """Parse directory configuration dictionary.

    Args:
        directory_dict: Directory configuration dictionary

    Returns:
        DirectoryConfig instance
    """
    interval = directory_dict.get("progress_interval", 1000)
    if interval is not None and int(interval) <= 0:
        interval = None

    return DirectoryConfig(
        progress_interval=int(interval) if interval is not None else None,
        merge_provider_operations=directory_dict.get(
            "merge_provider_operations", True
        ),
    )


def parse_search_config(search_dict: Dict[str, Any]) -> SearchConfig:
    """Parse search configuration dictionary.

    Args:
        search_dict: Search configuration dictionary

    Returns:
        SearchConfig instance
    """
    max_results = search_dict.get("max_results")
    return SearchConfig(
        default_limit=int(search_dict.get("default_limit", 50)),
        max_results=int(max_results) if max_results is not None else None,
    )


def parse_config(config_dict: Dict[str, Any]) -> RoleFitConfig:
    """Parse the full configuration dictionary.

    Args:
        config_dict: Full configuration dictionary

    Returns:
        RoleFitConfig instance
    """
    directory = DirectoryConfig()
    if "directory" in config_dict:
        directory = parse_directory_config(config_dict["directory"] or {})

    search = SearchConfig()
    if "search" in config_dict:
        search = parse_search_config(config_dict["search"] or {})

    privileged_roles = config_dict.get("privileged_roles")
    if privileged_roles is None:
        privileged_roles = list(DEFAULT_PRIVILEGED_ROLES)

    logging_dict = config_dict.get("logging") or {}

    return RoleFitConfig(
        directory=directory,
        search=search,
        privileged_roles=list(privileged_roles),
        log_dir=logging_dict.get("log_dir", "/var/log/rolefit"),
        log_level=logging_dict.get("level", "INFO"),
    )


def load_config(config_path: str = "/etc/rolefit/config.yaml") -> Dict[str, Any]:
    """Load configuration from YAML file.

    Args:
        config_path: Path to configuration file

    Returns:
        Configuration dictionary

    Raises:
        FileNotFoundError: If config file doesn't exist
        yaml.YAMLError: If config file is invalid YAML
    """
    config_file = Path(config_path)

    if not config_file.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    with config_file.open("r") as f:
        config = yaml.safe_load(f)

    if config is None:
        config = {}

    if not isinstance(config, dict):
        raise TypeError(
            f"Configuration root must be a mapping, got {type(config).__name__}"
        )

    return _expand_env_vars(config)


def _expand_env_vars(obj: Any) -> Any:
    """Recursively expand environment variables in configuration."""
    if isinstance(obj, dict):
        return {key: _expand_env_vars(value) for key, value in obj.items()}
    elif isinstance(obj, list):
        return [_expand_env_vars(item) for item in obj]
    elif isinstance(obj, str):
        return os.path.expandvars(obj)
    else:
        return obj


def load_typed_config(
    config_path: str = "/etc/rolefit/config.yaml",
) -> RoleFitConfig:
    """Load and parse configuration into typed dataclass.

    Args:
        config_path: Path to configuration file

    Returns:
        RoleFitConfig instance

    Raises:
        FileNotFoundError: If config file doesn't exist
        yaml.YAMLError: If config file is invalid YAML
    """
    config_dict = load_config(config_path)
    return parse_config(config_dict)
