"""Pydantic models for apcdeploy configuration.

Defines the apcdeploy.yml schema and the runtime settings that control
polling, timeouts, and pagination limits.
"""

from __future__ import annotations

import os
from collections.abc import Mapping

from pydantic import BaseModel, ConfigDict, Field, field_validator

from apcdeploy.config.defaults import (
    DEFAULT_DEPLOYMENT_STRATEGY,
    DEFAULT_MAX_PAGES,
    DEFAULT_POLL_INTERVAL,
    DEFAULT_TIMEOUT,
    MAX_CONFIG_SIZE,
    SETTINGS_ENV_VARS,
)


class Settings(BaseModel):
    """Runtime settings passed explicitly into clients and waiters.

    Attributes:
        poll_interval: Seconds between deployment status checks
        timeout: Default seconds to wait for a deployment
        max_pages: Page cap for paginated listings
        max_config_size: Maximum configuration data size in bytes
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    poll_interval: float = Field(
        default=DEFAULT_POLL_INTERVAL, gt=0, description="Seconds between polls"
    )
    timeout: float = Field(
        default=DEFAULT_TIMEOUT, gt=0, description="Seconds to wait for a rollout"
    )
    max_pages: int = Field(
        default=DEFAULT_MAX_PAGES, ge=1, description="Page cap for listings"
    )
    max_config_size: int = Field(
        default=MAX_CONFIG_SIZE, ge=1, description="Maximum data size in bytes"
    )

    @classmethod
    def from_env(cls, env: Mapping[str, str] | None = None, **overrides: object) -> Settings:
        """Build settings from APCDEPLOY_* environment variables.

        Explicit keyword overrides win over environment values.

        Args:
            env: Environment mapping (defaults to os.environ)
            **overrides: Field values that take precedence

        Returns:
            Validated Settings instance
        """
        env = os.environ if env is None else env
        values: dict[str, object] = {}
        for field_name, env_var in SETTINGS_ENV_VARS.items():
            if env_var in env:
                values[field_name] = env[env_var]
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls.model_validate(values)


class DeployConfig(BaseModel):
    """Schema of the apcdeploy.yml deployment config file.

    Attributes:
        application: AppConfig application name
        configuration_profile: Configuration profile name
        environment: Environment name
        deployment_strategy: Deployment strategy name
        data_file: Path to the configuration data (resolved by the loader)
        region: AWS region; falls back to AWS_REGION/AWS_DEFAULT_REGION
    """

    model_config = ConfigDict(extra="forbid")

    application: str = Field(..., description="Application name")
    configuration_profile: str = Field(..., description="Configuration profile name")
    environment: str = Field(..., description="Environment name")
    deployment_strategy: str = Field(
        default=DEFAULT_DEPLOYMENT_STRATEGY, description="Deployment strategy name"
    )
    data_file: str = Field(..., description="Path to configuration data")
    region: str | None = Field(default=None, description="AWS region")

    @field_validator("application", "configuration_profile", "environment", "data_file")
    @classmethod
    def validate_not_blank(cls, v: str) -> str:
        """Reject empty required names."""
        if not v.strip():
            raise ValueError("must not be empty")
        return v

    @field_validator("deployment_strategy", mode="before")
    @classmethod
    def default_blank_strategy(cls, v: str | None) -> str:
        """Treat a blank strategy as the default strategy."""
        if v is None or (isinstance(v, str) and not v.strip()):
            return DEFAULT_DEPLOYMENT_STRATEGY
        return v
