"""
Central configuration management for Devbox.

This module provides type-safe configuration management using Pydantic,
with every field overridable through ``DEVBOX_``-prefixed environment
variables or a local ``.env`` file.
"""

from typing import Any, Dict, List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        env_prefix="DEVBOX_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Core application
    app_name: str = "Devbox"
    app_version: str = "0.1.0"

    # Environment layout
    marker_name: str = ".devbox"
    vm_workdir: str = "/vagrant"
    compose_file: str = "docker-compose.yml"
    template_files: List[str] = Field(
        default_factory=lambda: ["Vagrantfile", "docker-compose.yml"]
    )

    # External tooling
    vagrant_plugins: List[str] = Field(
        default_factory=lambda: ["vagrant-docker-compose", "vagrant-vbguest"]
    )
    compose_command: List[str] = Field(default_factory=lambda: ["docker-compose"])

    # Logging
    log_level: str = "INFO"
    log_format: str = "json"  # json or text
    log_dir: Optional[str] = None

    @field_validator("marker_name")
    @classmethod
    def validate_marker_name(cls, v):
        """Marker must be a bare file name."""
        if not v or "/" in v or v in (".", ".."):
            raise ValueError("Marker name must be a plain file name")
        return v

    @field_validator("vm_workdir")
    @classmethod
    def validate_vm_workdir(cls, v):
        """The in-VM working directory must be absolute."""
        if not v.startswith("/"):
            raise ValueError("VM working directory must be an absolute path")
        return v

    @field_validator("compose_command")
    @classmethod
    def validate_compose_command(cls, v):
        """Validate the orchestrator command is not empty."""
        if not v:
            raise ValueError("Compose command must have at least one token")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v):
        """Validate log level."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"Log level must be one of: {valid_levels}")
        return v.upper()

    @field_validator("log_format")
    @classmethod
    def validate_log_format(cls, v):
        """Validate log format."""
        if v not in ["json", "text"]:
            raise ValueError("Log format must be 'json' or 'text'")
        return v

    def get_safe_dict(self) -> Dict[str, Any]:
        """Get configuration dict with sensitive values masked."""
        config = self.model_dump()

        def mask_sensitive(obj):
            """Recursively mask sensitive fields."""
            if isinstance(obj, dict):
                for key, value in obj.items():
                    if any(
                        sensitive in key.lower()
                        for sensitive in ["password", "secret", "token", "api_key"]
                    ):
                        if value and str(value).strip():
                            obj[key] = "***MASKED***"
                    elif isinstance(value, (dict, list)):
                        mask_sensitive(value)
            elif isinstance(obj, list):
                for item in obj:
                    if isinstance(item, (dict, list)):
                        mask_sensitive(item)

        mask_sensitive(config)
        return config


# Singleton pattern for settings
_settings: Optional[AppSettings] = None


def get_settings() -> AppSettings:
    """Get application settings singleton."""
    global _settings
    if _settings is None:
        _settings = AppSettings()
    return _settings


def reload_settings() -> AppSettings:
    """Force reload of settings (useful for testing)."""
    global _settings
    _settings = None
    return get_settings()
