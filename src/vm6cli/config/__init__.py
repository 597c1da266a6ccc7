"""Profile configuration stored on disk."""

from ..models.config import AuthConfig, OutputConfig, ProfileConfig
from .manager import Config, ConfigManager

__all__ = ["AuthConfig", "Config", "ConfigManager", "OutputConfig", "ProfileConfig"]
