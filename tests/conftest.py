"""Pytest configuration and shared fixtures for apcdeploy tests."""

from __future__ import annotations

import os
from collections.abc import Callable, Generator
from typing import Any
from unittest.mock import MagicMock

import pytest
from botocore.exceptions import ClientError

from apcdeploy.aws.client import AppConfigClient
from apcdeploy.models.config import Settings


def _make_client_error(code: str, operation: str = "ListApplications") -> ClientError:
    """Build a botocore ClientError with the given error code."""
    return ClientError(
        {"Error": {"Code": code, "Message": f"{code} raised"}},
        operation,
    )


def _deployment_response(
    number: int,
    state: str,
    profile_id: str = "p-1",
    version: str = "1",
    event_log: list[dict[str, Any]] | None = None,
    strategy_id: str = "AppConfig.AllAtOnce",
) -> dict[str, Any]:
    """Build a GetDeployment response dict."""
    return {
        "ApplicationId": "app-1",
        "EnvironmentId": "e-1",
        "DeploymentNumber": number,
        "ConfigurationProfileId": profile_id,
        "ConfigurationVersion": version,
        "DeploymentStrategyId": strategy_id,
        "State": state,
        "Description": "",
        "EventLog": event_log or [],
        "PercentageComplete": 100.0 if state == "COMPLETE" else 0.0,
    }


@pytest.fixture
def client_error() -> Callable[..., ClientError]:
    """Factory for botocore ClientError instances."""
    return _make_client_error


@pytest.fixture
def deployment_response() -> Callable[..., dict[str, Any]]:
    """Factory for GetDeployment response dicts."""
    return _deployment_response


@pytest.fixture
def isolated_env() -> Generator[dict[str, str]]:
    """Save the environment and restore it after the test."""
    original_env = os.environ.copy()
    yield original_env
    os.environ.clear()
    os.environ.update(original_env)


@pytest.fixture
def settings() -> Settings:
    """Fast polling settings for tests."""
    return Settings(poll_interval=0.01, timeout=1.0, max_pages=100)


@pytest.fixture
def sdk() -> MagicMock:
    """Mocked boto3 appconfig client with empty single-page listings."""
    mock = MagicMock()
    empty = {"Items": []}
    mock.list_applications.return_value = empty
    mock.list_configuration_profiles.return_value = empty
    mock.list_environments.return_value = empty
    mock.list_deployment_strategies.return_value = empty
    mock.list_deployments.return_value = empty
    mock.list_hosted_configuration_versions.return_value = empty
    return mock


@pytest.fixture
def client(sdk: MagicMock, settings: Settings) -> AppConfigClient:
    """AppConfigClient wrapping the mocked SDK."""
    return AppConfigClient(sdk, region="us-east-1", settings=settings)


@pytest.fixture
def demo_sdk(sdk: MagicMock) -> MagicMock:
    """SDK populated with one application, profile, environment and strategy."""
    sdk.list_applications.return_value = {"Items": [{"Id": "app-1", "Name": "demo"}]}
    sdk.list_configuration_profiles.return_value = {
        "Items": [{"Id": "p-1", "Name": "cfg", "ApplicationId": "app-1"}]
    }
    sdk.get_configuration_profile.return_value = {
        "Id": "p-1",
        "Name": "cfg",
        "Type": "AWS.Freeform",
    }
    sdk.list_environments.return_value = {"Items": [{"Id": "e-1", "Name": "prod"}]}
    sdk.list_deployment_strategies.return_value = {
        "Items": [{"Id": "s-1", "Name": "AllAtOnce"}]
    }
    return sdk
