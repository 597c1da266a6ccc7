"""Configuration models."""

from urllib.parse import urlsplit

from pydantic import BaseModel, Field, field_validator, model_validator


class AuthConfig(BaseModel):
    """Authentication configuration."""

    type: str = Field(..., pattern="^(token|password)$")
    user: str | None = None
    password: str | None = None
    token: str | None = None

    @model_validator(mode="after")
    def validate_credentials(self) -> "AuthConfig":
        """Validate the fields required by the auth type are present.

        Raises:
            ValueError: If token missing when type is token
        """
        if self.type == "token" and not self.token:
            raise ValueError("token required when auth type is 'token'")
        return self


class ProfileConfig(BaseModel):
    """Profile configuration for a VMmanager installation."""

    model_config = {"frozen": True}

    api_url: str
    auth_url: str | None = None
    verify_ssl: bool = True
    auth: AuthConfig
    timeout: int = 30
    task_timeout: int = Field(default=300, ge=0)
    poll_interval: float = Field(default=5, gt=0)
    retry_attempts: int = Field(default=3, ge=1)
    retry_backoff: float = Field(default=1.0, ge=0)
    fail_on_terminal_status: bool = False

    @field_validator("api_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    @property
    def token_url(self) -> str:
        """Endpoint used for password login."""
        if self.auth_url:
            return self.auth_url
        parts = urlsplit(self.api_url)
        return f"{parts.scheme}://{parts.netloc}/auth/v4/public/token"


class OutputConfig(BaseModel):
    """Output preferences."""

    format: str = Field(default="table", pattern="^(table|json|yaml)$")
