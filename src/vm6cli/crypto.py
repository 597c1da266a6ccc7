"""Age encryption of secrets stored in the config file."""

import base64
from pathlib import Path

import pyrage

AGE_PREFIX = "AGE:"
IDENTITY_FILENAME = ".age-identity"


def load_identity(config_dir: Path) -> pyrage.x25519.Identity:
    """Read the age identity kept next to the config, creating it on first use."""
    identity_file = config_dir / IDENTITY_FILENAME
    if identity_file.exists():
        return pyrage.x25519.Identity.from_str(identity_file.read_text().strip())

    config_dir.mkdir(parents=True, exist_ok=True)
    identity = pyrage.x25519.Identity.generate()
    identity_file.write_text(str(identity))
    identity_file.chmod(0o600)
    return identity


def is_encrypted(value: str) -> bool:
    return value.startswith(AGE_PREFIX)


def encrypt(value: str, config_dir: Path) -> str:
    """Seal a plaintext secret. Already sealed values are returned as is."""
    if is_encrypted(value):
        return value
    recipient = load_identity(config_dir).to_public()
    sealed = pyrage.encrypt(value.encode(), [recipient])
    return AGE_PREFIX + base64.b64encode(sealed).decode()


def decrypt(value: str, config_dir: Path) -> str:
    """Open a sealed secret. Plaintext values are returned as is."""
    if not is_encrypted(value):
        return value
    raw = base64.b64decode(value[len(AGE_PREFIX):])
    return pyrage.decrypt(raw, [load_identity(config_dir)]).decode()
