"""Common utilities for rolefit."""

from .logger import get_logger, set_catalog_version, setup_logger
from .config import load_config, load_typed_config, RoleFitConfig

__all__ = [
    "RoleFitConfig",
    "get_logger",
    "load_config",
    "load_typed_config",
    "set_catalog_version",
    "setup_logger",
]
