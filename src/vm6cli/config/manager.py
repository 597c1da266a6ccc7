"""Profile store backed by a YAML file with age-encrypted secrets."""

import os
from pathlib import Path
from typing import Any, Iterator

import yaml
from pydantic import BaseModel, Field, ValidationError

from ..api.exceptions import ConfigError
from ..crypto import decrypt, encrypt, is_encrypted
from ..models.config import OutputConfig, ProfileConfig

CONFIG_DIR_ENV = "VM6CLI_CONFIG_DIR"
SECRET_FIELDS = ("password", "token")


class Config(BaseModel):
    """Contents of ``config.yaml``."""

    default_profile: str | None = None
    profiles: dict[str, ProfileConfig] = Field(default_factory=dict)
    output: OutputConfig = Field(default_factory=OutputConfig)

    def profile(self, name: str) -> ProfileConfig:
        try:
            return self.profiles[name]
        except KeyError:
            known = ", ".join(sorted(self.profiles)) or "none"
            raise ConfigError(f"Profile '{name}' not found (known profiles: {known})") from None


def default_config_dir() -> Path:
    return Path(os.environ.get(CONFIG_DIR_ENV) or Path.home() / ".config" / "vm6cli")


def _secrets(data: dict[str, Any]) -> Iterator[tuple[dict[str, Any], str]]:
    """Yield (auth section, field) for every secret set in a raw config mapping."""
    for profile in (data.get("profiles") or {}).values():
        auth = profile.get("auth") if isinstance(profile, dict) else None
        if not isinstance(auth, dict):
            continue
        for field in SECRET_FIELDS:
            if auth.get(field):
                yield auth, field


class ConfigManager:
    """Read and update vm6cli profiles.

    The parsed file is cached after the first read. Every change is written
    back immediately.
    """

    def __init__(self, config_dir: Path | None = None) -> None:
        self.config_dir = config_dir or default_config_dir()
        self.config_file = self.config_dir / "config.yaml"
        self._config: Config | None = None

    def load(self) -> Config:
        """Parse the config file and decrypt its secrets.

        A file that still holds plaintext secrets is rewritten encrypted.

        Raises:
            ConfigError: If the file is missing, is not YAML, or fails validation
        """
        if not self.config_file.exists():
            raise ConfigError(f"No configuration at {self.config_file}; run 'vm6cli config add' first")

        try:
            data = yaml.safe_load(self.config_file.read_text()) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {self.config_file}: {e}")

        plaintext = False
        for auth, field in _secrets(data):
            if is_encrypted(auth[field]):
                auth[field] = decrypt(auth[field], self.config_dir)
            else:
                plaintext = True

        try:
            config = Config.model_validate(data)
        except ValidationError as e:
            raise ConfigError(f"Invalid config in {self.config_file}: {e}")

        if plaintext:
            self.save(config)
        self._config = config
        return config

    def save(self, config: Config) -> None:
        """Write the config with secrets encrypted. Directory and file are owner-only."""
        try:
            self.config_dir.mkdir(parents=True, exist_ok=True)
            self.config_dir.chmod(0o700)
        except OSError as e:
            raise ConfigError(f"Cannot create {self.config_dir}: {e}")

        data = config.model_dump(exclude_none=True)
        for auth, field in _secrets(data):
            auth[field] = encrypt(auth[field], self.config_dir)

        try:
            self.config_file.write_text(yaml.safe_dump(data, default_flow_style=False))
            self.config_file.chmod(0o600)
        except OSError as e:
            raise ConfigError(f"Failed to save config: {e}")
        self._config = config

    def get(self) -> Config:
        if self._config is None:
            self._config = self.load()
        return self._config

    def get_profile(self, name: str | None = None) -> ProfileConfig:
        """Return the named profile, or the default one when no name is given."""
        config = self.get()
        name = name or config.default_profile
        if name is None:
            raise ConfigError("No default profile set. Use --profile to specify one.")
        return config.profile(name)

    def add_profile(self, name: str, profile: ProfileConfig) -> None:
        """Add or replace a profile. The first profile becomes the default."""
        config = self.get() if self.config_file.exists() else Config()
        config.profiles[name] = profile
        config.default_profile = config.default_profile or name
        self.save(config)

    def remove_profile(self, name: str) -> None:
        """Remove a profile. The default moves to the next one left, if any."""
        config = self.get()
        config.profile(name)
        del config.profiles[name]
        if config.default_profile == name:
            config.default_profile = next(iter(config.profiles), None)
        self.save(config)

    def set_default_profile(self, name: str) -> None:
        config = self.get()
        config.profile(name)
        config.default_profile = name
        self.save(config)
