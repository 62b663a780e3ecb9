"""
Configuration management with schema validation.
Single source of truth for MiniSocial settings.
"""

import os
import yaml
from pathlib import Path
from typing import Any, Optional
from pydantic import BaseModel, Field, ValidationError
from dotenv import load_dotenv

from .exceptions import ConfigError
from .logger import get_logger

logger = get_logger(__name__)

# Load environment variables
load_dotenv()

DEFAULT_AVATAR_TEMPLATE = (
    "https://ui-avatars.com/api/?name={name}&background=0D8ABC&color=fff&size=256"
)


def _data_dir() -> Path:
    return Path(os.getenv("MINISOCIAL_DATA_DIR", "data"))


class AppSettings(BaseModel):
    name: str = "MiniSocial"
    version: str = "1.0.0"
    environment: str = "development"

class StorageSettings(BaseModel):
    data_dir: str = Field(default_factory=lambda: str(_data_dir()))

class LoggingSettings(BaseModel):
    level: str = "INFO"
    format: str = Field(default="text", pattern="^(json|text)$")
    file_path: Optional[str] = "logs/minisocial.log"
    max_bytes: int = 10485760
    backup_count: int = 5

class FeedSettings(BaseModel):
    default_sort: str = Field(default="latest", pattern="^(latest|oldest|mostLiked)$")

class ProfileSettings(BaseModel):
    # {name} is replaced with the URL-encoded display name
    default_avatar_template: str = DEFAULT_AVATAR_TEMPLATE

class SeedSettings(BaseModel):
    demo_user: bool = True

class Settings(BaseModel):
    app: AppSettings = Field(default_factory=AppSettings)
    storage: StorageSettings = Field(default_factory=StorageSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    feed: FeedSettings = Field(default_factory=FeedSettings)
    profile: ProfileSettings = Field(default_factory=ProfileSettings)
    seed: SeedSettings = Field(default_factory=SeedSettings)


class ConfigManager:
    """Loads settings.yaml from the data directory"""

    def __init__(self, settings_path: Optional[Path] = None):
        self.settings_path = Path(settings_path) if settings_path else _data_dir() / "settings.yaml"
        self._settings: Optional[Settings] = None

    def _substitute_env_vars(self, value: Any) -> Any:
        """Recursively substitute environment variables"""
        if isinstance(value, str):
            if value.startswith("${") and value.endswith("}"):
                var_expr = value[2:-1]
                if ":" in var_expr:
                    var_name, default = var_expr.split(":", 1)
                    return os.getenv(var_name.strip(), default.strip())
                else:
                    return os.getenv(var_expr, value)
        elif isinstance(value, dict):
            return {k: self._substitute_env_vars(v) for k, v in value.items()}
        elif isinstance(value, list):
            return [self._substitute_env_vars(item) for item in value]
        return value

    def load_settings(self) -> Settings:
        """Load and validate settings.yaml, falling back to defaults when absent"""
        if not self.settings_path.exists():
            logger.debug("Settings file not found, using defaults", path=str(self.settings_path))
            self._settings = Settings()
            return self._settings

        try:
            with open(self.settings_path, "r", encoding="utf-8") as f:
                raw_data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            raise ConfigError(f"Failed to read settings from {self.settings_path}: {str(e)}")

        if not isinstance(raw_data, dict):
            raise ConfigError(f"Settings file {self.settings_path} must contain a mapping")

        processed_data = self._substitute_env_vars(raw_data)
        try:
            self._settings = Settings(**processed_data)
        except ValidationError as e:
            raise ConfigError(f"Invalid settings in {self.settings_path}: {str(e)}")
        return self._settings

    @property
    def settings(self) -> Settings:
        if self._settings is None:
            return self.load_settings()
        return self._settings
