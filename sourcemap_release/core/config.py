"""Plugin options and environment-backed settings.

`PluginOptions` is the construction-time surface of the plugin. It is
frozen once validated; every required field must be a non-empty string
and a bad value raises `ConfigurationError` before any client is built.

`Settings` reads defaults for the CLI from the environment (or `.env`):

  SENTRY_AUTH_TOKEN         : API token with `project:releases` scope
  SENTRY_ORG                : organization slug
  SENTRY_PROJECT            : project slug
  SENTRY_RELEASE            : release version
  SENTRY_URL                : Sentry base URL (default: https://sentry.io/)
  SENTRY_UPLOAD_CONCURRENCY : max parallel uploads (unset = unbounded)
  SENTRY_DEBUG              : console log renderer instead of JSON
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any, Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    SecretStr,
    StrictInt,
    ValidationError,
    field_validator,
)
from pydantic_settings import BaseSettings, SettingsConfigDict

from sourcemap_release.errors import ConfigurationError

DEFAULT_SENTRY_URL = "https://sentry.io/"
DEFAULT_TIMEOUT = 30.0

_EMPTY_MESSAGE = "must not be empty"


def _identity(name: str) -> str:
    return name


class PluginOptions(BaseModel):
    """Validated plugin options.

    Accepts both the snake_case field names and the camelCase aliases
    used by bundler configs (`authToken`, `deleteSourcemaps`, ...).
    """

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        str_strip_whitespace=True,
    )

    auth_token: SecretStr = Field(alias="authToken")
    organization: str
    project: str
    version: str
    delete_sourcemaps: bool = Field(default=False, alias="deleteSourcemaps")
    filename_transform: Optional[Callable[[str], str]] = Field(
        default=None, alias="filenameTransform"
    )
    upload_concurrency: Optional[StrictInt] = Field(default=None, alias="uploadConcurrency")

    url: str = DEFAULT_SENTRY_URL
    timeout: float = DEFAULT_TIMEOUT

    @field_validator("auth_token")
    @classmethod
    def _token_not_empty(cls, v: SecretStr) -> SecretStr:
        if not v.get_secret_value().strip():
            raise ValueError(_EMPTY_MESSAGE)
        return v

    @field_validator("organization", "project", "version")
    @classmethod
    def _not_empty(cls, v: str) -> str:
        if not v:
            raise ValueError(_EMPTY_MESSAGE)
        return v

    @field_validator("upload_concurrency")
    @classmethod
    def _positive_concurrency(cls, v: Optional[int]) -> Optional[int]:
        if v is not None and v < 1:
            raise ValueError("must be a positive integer")
        return v

    @field_validator("timeout")
    @classmethod
    def _positive_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("must be greater than zero")
        return v

    @property
    def transform(self) -> Callable[[str], str]:
        """The filename transform, defaulting to identity."""
        return self.filename_transform or _identity


def load_options(options: PluginOptions | Mapping[str, Any]) -> PluginOptions:
    """Validate raw options into a `PluginOptions`.

    Raises:
        ConfigurationError: naming the first invalid option, e.g.
            "Invalid configuration, <authToken> was not provided".
    """
    if isinstance(options, PluginOptions):
        return options

    try:
        return PluginOptions.model_validate(dict(options))
    except ValidationError as exc:
        # Fields are validated in declaration order, so the first error
        # matches the first missing required option.
        error = exc.errors()[0]
        name = ".".join(str(part) for part in error["loc"]) or "options"
        if (
            error["type"] == "missing"
            or error.get("input") is None
            or _EMPTY_MESSAGE in error["msg"]
        ):
            message = f"Invalid configuration, <{name}> was not provided"
        else:
            message = f"Invalid configuration, <{name}>: {error['msg']}"
        raise ConfigurationError(message) from exc


class Settings(BaseSettings):
    """Environment-backed defaults for the command-line host."""

    model_config = SettingsConfigDict(
        env_prefix="SENTRY_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    auth_token: str = ""
    org: str = ""
    project: str = ""
    release: str = ""
    url: str = DEFAULT_SENTRY_URL
    upload_concurrency: Optional[int] = None

    debug: bool = False


def get_settings() -> Settings:
    return Settings()
