"""Configuration management for notecell."""

from __future__ import annotations

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_IGNORED_TYPE_PREFIXES = ("builtins", "typing", "collections.abc", "__main__")
# traceback.format_exception_only always ends with a newline.
DEFAULT_ERROR_HINTS = ("\n",)


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(
        env_prefix="NOTECELL_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Logging Configuration
    log_level: str = Field(default="INFO", description="Log level")

    # Evaluation Configuration
    directive_marker: str = Field(default=":", min_length=1, max_length=1, description="Directive prefix")
    capture_dir: Path | None = Field(default=None, description="Directory for stdout capture files")
    startup_imports: tuple[str, ...] = Field(default=(), description="Imports run when a session starts")

    # Rendering Configuration
    ignored_type_prefixes: tuple[str, ...] = Field(
        default=DEFAULT_IGNORED_TYPE_PREFIXES,
        description="Module prefixes stripped from rendered type names",
    )
    error_hints: tuple[str, ...] = Field(
        default=DEFAULT_ERROR_HINTS,
        description="Trailing hint strings stripped from error text",
    )


def load_settings(**overrides: object) -> Settings:
    """Load settings from the environment, then apply non-empty overrides."""
    settings = Settings()
    updates = {key: value for key, value in overrides.items() if value is not None}
    if updates:
        settings = settings.model_copy(update=updates)
    return settings
