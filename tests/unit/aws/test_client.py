"""Unit tests for the AppConfig client wrapper."""

from __future__ import annotations

import io
from collections.abc import Callable
from typing import Any
from unittest.mock import MagicMock, patch

import pytest
from botocore.exceptions import ClientError

from apcdeploy.aws.client import (
    AppConfigClient,
    api_action_name,
    create_client,
    resolve_region,
)
from apcdeploy.lib.errors import (
    ConfigError,
    ErrorKind,
    RemoteCallError,
    format_user_friendly_error,
)
from apcdeploy.models.config import Settings


@pytest.mark.parametrize(
    ("method", "action"),
    [
        ("start_deployment", "StartDeployment"),
        ("list_hosted_configuration_versions", "ListHostedConfigurationVersions"),
        ("get_configuration_profile", "GetConfigurationProfile"),
    ],
)
def test_api_action_name(method: str, action: str) -> None:
    assert api_action_name(method) == action


class TestResolveRegion:
    """Tests for region selection."""

    def test_explicit_region_wins(self) -> None:
        """The argument takes precedence over the environment."""
        env = {"AWS_REGION": "eu-west-1"}
        assert resolve_region("us-west-2", env) == "us-west-2"

    def test_aws_region_before_default_region(self) -> None:
        """AWS_REGION is preferred over AWS_DEFAULT_REGION."""
        env = {"AWS_REGION": "eu-west-1", "AWS_DEFAULT_REGION": "ap-northeast-1"}
        assert resolve_region(None, env) == "eu-west-1"

    def test_default_region_fallback(self) -> None:
        """AWS_DEFAULT_REGION is used when AWS_REGION is unset."""
        assert resolve_region(None, {"AWS_DEFAULT_REGION": "ap-northeast-1"}) == (
            "ap-northeast-1"
        )

    def test_missing_region_raises(self) -> None:
        """No region anywhere is a configuration error."""
        with pytest.raises(ConfigError) as exc_info:
            resolve_region(None, {})
        assert exc_info.value.field == "region"


class TestCreateClient:
    """Tests for create_client."""

    def test_builds_boto3_appconfig_client(self) -> None:
        """A boto3 session is created for the region."""
        with patch("apcdeploy.aws.client.boto3.Session") as session_cls:
            client = create_client("us-east-1", Settings(max_pages=7))

        session_cls.assert_called_once_with(region_name="us-east-1")
        session_cls.return_value.client.assert_called_once_with("appconfig")
        assert client.region == "us-east-1"
        assert client.settings.max_pages == 7


class TestListOperations:
    """Tests for paginated listings."""

    def test_list_applications_follows_tokens(
        self, client: AppConfigClient, sdk: MagicMock
    ) -> None:
        """All pages are requested and merged."""
        sdk.list_applications.side_effect = [
            {"Items": [{"Id": "a1", "Name": "one"}], "NextToken": "tok"},
            {"Items": [{"Id": "a2", "Name": "two"}]},
        ]

        apps = client.list_applications()

        assert [app.id for app in apps] == ["a1", "a2"]
        assert sdk.list_applications.call_count == 2
        first, second = sdk.list_applications.call_args_list
        assert "NextToken" not in first.kwargs
        assert second.kwargs["NextToken"] == "tok"

    def test_list_deployments_passes_scope(
        self, client: AppConfigClient, sdk: MagicMock
    ) -> None:
        """Application and environment ids are forwarded."""
        sdk.list_deployments.return_value = {
            "Items": [{"DeploymentNumber": 3, "State": "COMPLETE"}]
        }

        deployments = client.list_deployments("app-1", "e-1")

        assert deployments[0].deployment_number == 3
        kwargs = sdk.list_deployments.call_args.kwargs
        assert kwargs["ApplicationId"] == "app-1"
        assert kwargs["EnvironmentId"] == "e-1"

    def test_list_hosted_configuration_versions(
        self, client: AppConfigClient, sdk: MagicMock
    ) -> None:
        """Version numbers are returned as ints."""
        sdk.list_hosted_configuration_versions.return_value = {
            "Items": [{"VersionNumber": 1}, {"VersionNumber": 4}]
        }

        assert client.list_hosted_configuration_versions("app-1", "p-1") == [1, 4]

    def test_list_error_is_wrapped(
        self,
        client: AppConfigClient,
        sdk: MagicMock,
        client_error: Callable[..., ClientError],
    ) -> None:
        """SDK failures become RemoteCallError with the operation name."""
        sdk.list_environments.side_effect = client_error("AccessDeniedException")

        with pytest.raises(RemoteCallError) as exc_info:
            client.list_environments("app-1")

        assert exc_info.value.operation == "ListEnvironments"
        assert exc_info.value.kind == ErrorKind.ACCESS_DENIED
        assert isinstance(exc_info.value.__cause__, ClientError)


class TestGetOperations:
    """Tests for single-resource reads."""

    def test_get_configuration_profile(
        self, client: AppConfigClient, sdk: MagicMock
    ) -> None:
        """The profile type is exposed as kind."""
        sdk.get_configuration_profile.return_value = {
            "Id": "p-1",
            "Name": "flags",
            "Type": "AWS.AppConfig.FeatureFlags",
        }

        profile = client.get_configuration_profile("app-1", "p-1")

        assert profile.kind == "AWS.AppConfig.FeatureFlags"
        assert profile.is_feature_flags

    def test_get_configuration_profile_defaults_to_freeform(
        self, client: AppConfigClient, sdk: MagicMock
    ) -> None:
        """A profile without a type is freeform."""
        sdk.get_configuration_profile.return_value = {"Id": "p-1", "Name": "cfg"}

        assert client.get_configuration_profile("app-1", "p-1").kind == "AWS.Freeform"

    def test_get_deployment_parses_event_log(
        self,
        client: AppConfigClient,
        sdk: MagicMock,
        deployment_response: Callable[..., dict[str, Any]],
    ) -> None:
        """Event log entries become DeploymentEvent models."""
        response = deployment_response(
            5,
            "ROLLED_BACK",
            event_log=[
                {"EventType": "ROLLBACK_STARTED", "Description": "alarm fired"},
            ],
        )
        response["ResponseMetadata"] = {"HTTPStatusCode": 200}
        response["GrowthFactor"] = None
        sdk.get_deployment.return_value = response

        record = client.get_deployment("app-1", "e-1", 5)

        assert record.deployment_number == 5
        assert record.state == "ROLLED_BACK"
        assert record.configuration_profile_id == "p-1"
        assert record.event_log[0].description == "alarm fired"
        assert record.growth_factor == 0.0

    def test_get_hosted_configuration_version_reads_stream(
        self, client: AppConfigClient, sdk: MagicMock
    ) -> None:
        """Streaming bodies are read into bytes."""
        sdk.get_hosted_configuration_version.return_value = {
            "VersionNumber": 2,
            "Content": io.BytesIO(b'{"a": 1}'),
            "ContentType": "application/json",
        }

        version = client.get_hosted_configuration_version("app-1", "p-1", 2)

        assert version.content == b'{"a": 1}'
        assert version.content_type == "application/json"


class TestMutations:
    """Tests for create, start and stop."""

    def test_create_version_without_description(
        self, client: AppConfigClient, sdk: MagicMock
    ) -> None:
        """Description is omitted when empty."""
        sdk.create_hosted_configuration_version.return_value = {"VersionNumber": 9}

        number = client.create_hosted_configuration_version(
            "app-1", "p-1", b"{}", "application/json"
        )

        assert number == 9
        kwargs = sdk.create_hosted_configuration_version.call_args.kwargs
        assert kwargs["Content"] == b"{}"
        assert "Description" not in kwargs

    def test_start_deployment_sends_version_as_string(
        self, client: AppConfigClient, sdk: MagicMock
    ) -> None:
        """ConfigurationVersion is sent as a string."""
        sdk.start_deployment.return_value = {"DeploymentNumber": 12}

        number = client.start_deployment(
            "app-1", "e-1", "p-1", "s-1", 9, description="release"
        )

        assert number == 12
        kwargs = sdk.start_deployment.call_args.kwargs
        assert kwargs["ConfigurationVersion"] == "9"
        assert kwargs["DeploymentStrategyId"] == "s-1"
        assert kwargs["Description"] == "release"

    def test_start_deployment_conflict(
        self,
        client: AppConfigClient,
        sdk: MagicMock,
        client_error: Callable[..., ClientError],
    ) -> None:
        """Service-side admission failures are surfaced, not retried."""
        sdk.start_deployment.side_effect = client_error(
            "ConflictException", "StartDeployment"
        )

        with pytest.raises(RemoteCallError) as exc_info:
            client.start_deployment("app-1", "e-1", "p-1", "s-1", 1)

        assert exc_info.value.kind == ErrorKind.CONFLICT
        assert sdk.start_deployment.call_count == 1

    def test_access_denied_names_iam_action(
        self,
        client: AppConfigClient,
        sdk: MagicMock,
        client_error: Callable[..., ClientError],
    ) -> None:
        """The IAM hint names the AWS action, not the boto3 method."""
        sdk.start_deployment.side_effect = client_error(
            "AccessDeniedException", "StartDeployment"
        )

        with pytest.raises(RemoteCallError) as exc_info:
            client.start_deployment("app-1", "e-1", "p-1", "s-1", 1)

        error = exc_info.value
        assert error.operation == "StartDeployment"
        message = format_user_friendly_error(error, error.operation)
        assert "appconfig:StartDeployment" in message
        assert "start_deployment" not in message

    def test_stop_deployment(self, client: AppConfigClient, sdk: MagicMock) -> None:
        """StopDeployment is called with the deployment number."""
        client.stop_deployment("app-1", "e-1", 4)

        sdk.stop_deployment.assert_called_once_with(
            ApplicationId="app-1", EnvironmentId="e-1", DeploymentNumber=4
        )
