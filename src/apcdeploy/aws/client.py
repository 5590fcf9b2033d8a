"""AWS AppConfig client wrapper.

All List operations go through collect_pages so callers always see the
complete result set. Every boto3 failure is wrapped in RemoteCallError naming
the AppConfig operation that failed; nothing here retries on its own.
"""

from __future__ import annotations

import os
from collections.abc import Callable, Mapping
from typing import Any

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from apcdeploy.aws.pagination import collect_pages
from apcdeploy.lib.errors import ConfigError, RemoteCallError
from apcdeploy.lib.logging_config import get_logger
from apcdeploy.models.appconfig import (
    ConfigurationProfile,
    ConfigurationVersion,
    DeploymentRecord,
    DeploymentStrategy,
    DeploymentSummary,
    NamedResource,
    ProfileKind,
)
from apcdeploy.models.config import Settings

logger = get_logger(__name__)

PAGE_SIZE = 50


def resolve_region(region: str | None = None, env: Mapping[str, str] | None = None) -> str:
    """Pick the AWS region from the argument or the environment.

    Raises:
        ConfigError: If no region can be determined
    """
    env = os.environ if env is None else env
    final_region = region or env.get("AWS_REGION") or env.get("AWS_DEFAULT_REGION")
    if not final_region:
        raise ConfigError(
            field="region",
            message=(
                "region must be specified either in the config file or via "
                "AWS_REGION/AWS_DEFAULT_REGION environment variable"
            ),
        )
    return final_region


def create_client(region: str | None = None, settings: Settings | None = None) -> AppConfigClient:
    """Create an AppConfigClient backed by a real boto3 session."""
    final_region = resolve_region(region)
    try:
        session = boto3.Session(region_name=final_region)
        sdk = session.client("appconfig")
    except BotoCoreError as exc:
        raise ConfigError(
            field="region", message=f"failed to load AWS config: {exc}"
        ) from exc
    logger.debug(f"Created AppConfig client for region {final_region}")
    return AppConfigClient(sdk, region=final_region, settings=settings)


def api_action_name(method_name: str) -> str:
    """Convert a boto3 method name to its AWS action name.

    ``start_deployment`` becomes ``StartDeployment``.
    """
    return "".join(part.capitalize() for part in method_name.split("_"))


def _read_content(content: Any) -> bytes:
    """Return bytes from a boto3 blob field (bytes or StreamingBody)."""
    if content is None:
        return b""
    if hasattr(content, "read"):
        return bytes(content.read())
    return bytes(content)


class AppConfigClient:
    """Thin, typed wrapper around the boto3 ``appconfig`` client.

    Attributes:
        sdk: The underlying boto3 client
        region: AWS region the client talks to
        settings: Runtime settings (page cap, polling interval)
    """

    def __init__(
        self,
        sdk: Any,
        region: str | None = None,
        settings: Settings | None = None,
    ) -> None:
        self.sdk = sdk
        self.region = region
        self.settings = settings or Settings()

    def _call(self, operation: str, **params: Any) -> dict[str, Any]:
        """Invoke a boto3 operation, wrapping failures in RemoteCallError.

        The error carries the AWS action name (``StartDeployment``), which is
        also the IAM action suffix, rather than the boto3 method name.
        """
        method: Callable[..., dict[str, Any]] = getattr(self.sdk, operation)
        action = api_action_name(operation)
        logger.debug(f"Calling AppConfig {action}")
        try:
            return method(**params)
        except (ClientError, BotoCoreError) as exc:
            raise RemoteCallError(action, exc) from exc

    def _list_all(self, operation: str, **params: Any) -> list[dict[str, Any]]:
        """Drain a paginated List* operation into raw item dicts."""

        def fetch(token: str | None) -> tuple[list[dict[str, Any]], str | None]:
            request = dict(params, MaxResults=PAGE_SIZE)
            if token:
                request["NextToken"] = token
            response = self._call(operation, **request)
            return list(response.get("Items", [])), response.get("NextToken")

        return collect_pages(fetch, operation=operation, max_pages=self.settings.max_pages)

    # Paginated listings

    def list_applications(self) -> list[NamedResource]:
        """List every application in the region."""
        return [
            NamedResource.model_validate(item)
            for item in self._list_all("list_applications")
        ]

    def list_configuration_profiles(self, application_id: str) -> list[NamedResource]:
        """List configuration profile summaries of an application."""
        return [
            NamedResource.model_validate(item)
            for item in self._list_all(
                "list_configuration_profiles", ApplicationId=application_id
            )
        ]

    def list_environments(self, application_id: str) -> list[NamedResource]:
        """List environments of an application."""
        return [
            NamedResource.model_validate(item)
            for item in self._list_all("list_environments", ApplicationId=application_id)
        ]

    def list_deployment_strategies(self) -> list[DeploymentStrategy]:
        """List predefined and custom deployment strategies."""
        return [
            DeploymentStrategy.model_validate(item)
            for item in self._list_all("list_deployment_strategies")
        ]

    def list_deployments(
        self, application_id: str, environment_id: str
    ) -> list[DeploymentSummary]:
        """List deployment summaries of an application environment."""
        return [
            DeploymentSummary.model_validate(item)
            for item in self._list_all(
                "list_deployments",
                ApplicationId=application_id,
                EnvironmentId=environment_id,
            )
        ]

    def list_hosted_configuration_versions(
        self, application_id: str, profile_id: str
    ) -> list[int]:
        """List hosted configuration version numbers of a profile."""
        items = self._list_all(
            "list_hosted_configuration_versions",
            ApplicationId=application_id,
            ConfigurationProfileId=profile_id,
        )
        return [int(item["VersionNumber"]) for item in items]

    # Single resource reads

    def get_configuration_profile(
        self, application_id: str, profile_id: str
    ) -> ConfigurationProfile:
        """Fetch a profile's full detail, including its type."""
        response = self._call(
            "get_configuration_profile",
            ApplicationId=application_id,
            ConfigurationProfileId=profile_id,
        )
        return ConfigurationProfile(
            id=response.get("Id") or profile_id,
            name=response.get("Name", ""),
            kind=response.get("Type") or ProfileKind.FREEFORM.value,
        )

    def get_deployment(
        self, application_id: str, environment_id: str, deployment_number: int
    ) -> DeploymentRecord:
        """Fetch a deployment's full detail, including its event log."""
        response = self._call(
            "get_deployment",
            ApplicationId=application_id,
            EnvironmentId=environment_id,
            DeploymentNumber=deployment_number,
        )
        response.pop("ResponseMetadata", None)
        return DeploymentRecord.from_response(response)

    def get_hosted_configuration_version(
        self, application_id: str, profile_id: str, version_number: int
    ) -> ConfigurationVersion:
        """Fetch the content of one hosted configuration version."""
        response = self._call(
            "get_hosted_configuration_version",
            ApplicationId=application_id,
            ConfigurationProfileId=profile_id,
            VersionNumber=version_number,
        )
        return ConfigurationVersion(
            version_number=int(response.get("VersionNumber", version_number)),
            content=_read_content(response.get("Content")),
            content_type=response.get("ContentType") or "",
        )

    # Mutations

    def create_hosted_configuration_version(
        self,
        application_id: str,
        profile_id: str,
        content: bytes,
        content_type: str,
        description: str | None = None,
    ) -> int:
        """Create a new hosted configuration version and return its number."""
        params: dict[str, Any] = {
            "ApplicationId": application_id,
            "ConfigurationProfileId": profile_id,
            "Content": content,
            "ContentType": content_type,
        }
        if description:
            params["Description"] = description
        response = self._call("create_hosted_configuration_version", **params)
        return int(response["VersionNumber"])

    def start_deployment(
        self,
        application_id: str,
        environment_id: str,
        profile_id: str,
        strategy_id: str,
        version_number: int,
        description: str | None = None,
    ) -> int:
        """Start a deployment of a configuration version and return its number."""
        params: dict[str, Any] = {
            "ApplicationId": application_id,
            "EnvironmentId": environment_id,
            "ConfigurationProfileId": profile_id,
            "DeploymentStrategyId": strategy_id,
            "ConfigurationVersion": str(version_number),
        }
        if description:
            params["Description"] = description
        response = self._call("start_deployment", **params)
        return int(response["DeploymentNumber"])

    def stop_deployment(
        self, application_id: str, environment_id: str, deployment_number: int
    ) -> None:
        """Stop an in-flight deployment, which rolls it back."""
        self._call(
            "stop_deployment",
            ApplicationId=application_id,
            EnvironmentId=environment_id,
            DeploymentNumber=deployment_number,
        )
