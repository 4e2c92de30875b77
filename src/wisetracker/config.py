"""
WiseTracker configuration management.

Supports loading from YAML files, environment variables, and keyword overrides.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field

_TRUTHY = ("1", "true", "yes")

# Wise environments
WISE_ENVIRONMENTS = {
    "sandbox": "https://api.sandbox.transferwise.tech",
    "production": "https://api.wise.com",
}


class WiseConfig(BaseModel):
    """Wise API credentials and transport settings."""

    api_token: str | None = Field(default=None, description="Personal API token (or set WISE_API_TOKEN)")
    profile_id: str | None = Field(default=None, description="Profile whose balance and activities are read")
    environment: str = Field(default="sandbox", description="sandbox or production")
    request_timeout: float = Field(default=30.0, gt=0, description="Upstream request timeout in seconds")
    max_pages: int = Field(default=100, ge=1, description="Safety limit on activity pages per refresh")

    @property
    def base_url(self) -> str:
        return WISE_ENVIRONMENTS.get(self.environment, WISE_ENVIRONMENTS["sandbox"])

    @property
    def is_configured(self) -> bool:
        return bool(self.api_token and self.profile_id)


class TrackerConfig(BaseModel):
    """Root configuration for WiseTracker."""

    wise: WiseConfig = Field(default_factory=WiseConfig)

    mock_mode: bool = Field(default=False, description="Serve generated data instead of calling Wise")
    fallback_currency: str = Field(default="JPY", description="Currency used when an amount cannot be parsed")
    settings_file: str = Field(default="settings.json", description="Where the data window is persisted")

    # Server settings
    host: str = Field(default="127.0.0.1")
    port: int = Field(default=3000, ge=1, le=65535)
    cors_origins: list[str] = Field(default_factory=lambda: ["*"])

    @property
    def is_configured(self) -> bool:
        return self.wise.is_configured

    @classmethod
    def load(cls, config_path: str | None = None, **overrides: Any) -> TrackerConfig:
        """Load configuration from file, env vars, and overrides.

        Priority: overrides > env vars > config file > defaults.
        """
        data: dict[str, Any] = {}

        # 1. Load from YAML file if provided
        if config_path:
            path = Path(config_path)
            if path.exists():
                with open(path) as f:
                    data = yaml.safe_load(f) or {}

        # 2. Override from environment variables
        env_token = os.environ.get("WISE_API_TOKEN")
        env_profile = os.environ.get("WISE_PROFILE_ID")
        env_environment = os.environ.get("WISE_ENVIRONMENT")
        env_timeout = os.environ.get("WISE_REQUEST_TIMEOUT")

        if env_token or env_profile or env_environment or env_timeout:
            wise = data.get("wise", {})
            if env_token:
                wise["api_token"] = env_token
            if env_profile:
                wise["profile_id"] = env_profile
            if env_environment:
                wise["environment"] = env_environment
            if env_timeout:
                wise["request_timeout"] = float(env_timeout)
            data["wise"] = wise

        env_mock = os.environ.get("MOCK_MODE")
        if env_mock is not None:
            data["mock_mode"] = env_mock.lower() in _TRUTHY

        env_port = os.environ.get("PORT")
        if env_port:
            data["port"] = int(env_port)

        env_settings = os.environ.get("WISETRACKER_SETTINGS_FILE")
        if env_settings:
            data["settings_file"] = env_settings

        # 3. Apply keyword overrides
        data.update(overrides)

        return cls.model_validate(data)
