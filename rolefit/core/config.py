from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict

from rolefit.common.config import RoleFitConfig, load_typed_config


class Settings(BaseSettings):
    # App
    app_name: str = "rolefit"
    debug: bool = False

    # Configuration file
    config_path: str = "/etc/rolefit/config.yaml"

    # Logging
    log_level: Optional[str] = None
    log_dir: Optional[str] = None
    file_logging: bool = False

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="ROLEFIT_",
        case_sensitive=False,
        extra="ignore",  # Allow extra env vars without raising validation errors
    )


@lru_cache
def get_settings() -> Settings:
    return Settings()


def load_runtime_config(settings: Optional[Settings] = None) -> RoleFitConfig:
    """Load the YAML config named by settings, falling back to defaults.

    Log options set through the environment take precedence over the file.
    """
    settings = settings or get_settings()

    if Path(settings.config_path).exists():
        config = load_typed_config(settings.config_path)
    else:
        config = RoleFitConfig()

    if settings.log_level:
        config.log_level = settings.log_level
    if settings.log_dir:
        config.log_dir = settings.log_dir
    if settings.debug:
        config.log_level = "DEBUG"

    return config
