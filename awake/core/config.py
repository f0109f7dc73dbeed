"""Configuration management."""

import os
from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class OpenRouterConfig(BaseModel):
    """Configuration for the OpenRouter completion backend."""

    enabled: bool = Field(default=True, description="Whether the backend is enabled")
    base_url: str = Field(
        default="https://openrouter.ai/api/v1", description="OpenRouter API base URL"
    )
    api_key_env: str = Field(
        default="OPENROUTER_API_KEY",
        description="Environment variable holding the OpenRouter API key",
    )
    referer: str = Field(
        default="http://localhost:5000", description="Origin sent as the HTTP-Referer header"
    )
    title: str = Field(default="AWAKE Meta-AI OS", description="Product sent as X-Title header")
    timeout_seconds: float = Field(default=60.0, gt=0, description="Upstream request timeout")

    def get_api_key(self) -> str | None:
        """
        Read the API key from the configured environment variable.

        Returns:
            API key, or None if it is unset or blank
        """
        value = os.getenv(self.api_key_env, "").strip()
        return value or None


class Settings(BaseSettings):
    """Application settings."""

    # Application
    app_name: str = Field(default="AWAKE Meta-AI OS", description="Application name")
    version: str = Field(default="0.1.0", description="Application version")
    environment: str = Field(default="development", description="Deployment environment")
    debug: bool = Field(default=False, description="Debug mode")

    # Server
    host: str = Field(default="0.0.0.0", description="Server host")
    port: int = Field(default=5000, description="Server port")

    # Logging
    log_level: str = Field(default="INFO", description="Logging level")
    log_format: str = Field(default="json", description="Log format: json or text")

    # CORS
    cors_origins: list[str] = Field(default=["*"], description="Allowed CORS origins")

    # Upstream backend
    openrouter: OpenRouterConfig = Field(
        default_factory=OpenRouterConfig, description="OpenRouter backend configuration"
    )

    # Configuration file path
    config_file: str = Field(
        default="config/main.yaml",
        description="Path to configuration file",
    )

    model_config = SettingsConfigDict(
        env_prefix="AWAKE_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    def load_yaml_config(self) -> dict[str, Any]:
        """
        Load configuration from YAML file.

        Returns:
            Configuration dictionary
        """
        config_path = Path(self.config_file)
        if not config_path.exists():
            return {}

        with open(config_path, encoding="utf-8") as f:
            return yaml.safe_load(f) or {}

    def merge_yaml_config(self) -> None:
        """
        Merge YAML configuration into settings.

        Values already set explicitly or through the environment take
        precedence over the YAML file, including nested openrouter fields.
        """
        yaml_config = self.load_yaml_config()

        for key, value in yaml_config.items():
            if not hasattr(self, key):
                continue
            if key == "openrouter" and isinstance(value, dict):
                overrides = self.openrouter.model_dump(exclude_unset=True)
                self.openrouter = OpenRouterConfig(**{**value, **overrides})
            elif key not in self.model_fields_set:
                setattr(self, key, value)


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Returns:
        Application settings
    """
    settings = Settings()

    if os.path.exists(settings.config_file):
        settings.merge_yaml_config()

    return settings
