"""Deployment lookups: ongoing guard, latest deployment, and version content."""

from __future__ import annotations

from apcdeploy.aws.client import AppConfigClient
from apcdeploy.aws.resolver import Resolver
from apcdeploy.lib.errors import (
    ApcDeployError,
    DeploymentError,
    InvalidVersionNumberError,
)
from apcdeploy.lib.logging_config import get_logger
from apcdeploy.models.appconfig import (
    ConfigurationVersion,
    DeploymentDetails,
    DeploymentRecord,
    DeploymentState,
    DeploymentSummary,
)

logger = get_logger(__name__)

def check_ongoing_deployment(
    client: AppConfigClient, application_id: str, environment_id: str
) -> tuple[bool, DeploymentSummary | None]:
    """Find a deployment that is still DEPLOYING or BAKING.

    The first match in listing order is returned. This is a best-effort
    check: another actor may start a deployment right after it returns.

    Returns:
        (True, summary) for the first ongoing deployment, else (False, None)
    """
    for deployment in client.list_deployments(application_id, environment_id):
        if deployment.is_ongoing:
            logger.debug(
                f"Deployment #{deployment.deployment_number} is {deployment.state}"
            )
            return True, deployment
    return False, None


def _latest_deployment(
    client: AppConfigClient,
    application_id: str,
    environment_id: str,
    profile_id: str,
    skip_rolled_back: bool,
) -> DeploymentRecord | None:
    summaries = client.list_deployments(application_id, environment_id)

    latest: DeploymentRecord | None = None
    for summary in summaries:
        # Summaries carry no profile id, so each candidate needs its detail
        try:
            record = client.get_deployment(
                application_id, environment_id, summary.deployment_number
            )
        except ApcDeployError as exc:
            logger.warning(
                f"Skipping deployment #{summary.deployment_number}: {exc}"
            )
            continue

        if record.configuration_profile_id != profile_id:
            continue
        if skip_rolled_back and record.state == DeploymentState.ROLLED_BACK.value:
            continue
        if latest is None or summary.deployment_number > latest.deployment_number:
            latest = record.model_copy(
                update={"deployment_number": summary.deployment_number}
            )

    return latest


def get_latest_deployment(
    client: AppConfigClient, application_id: str, environment_id: str, profile_id: str
) -> DeploymentRecord | None:
    """Return the latest deployment of a profile, ignoring rolled back ones.

    This is what is currently live, and what deploy compares against.
    """
    return _latest_deployment(
        client, application_id, environment_id, profile_id, skip_rolled_back=True
    )


def get_latest_deployment_including_rollback(
    client: AppConfigClient, application_id: str, environment_id: str, profile_id: str
) -> DeploymentRecord | None:
    """Return the absolute latest deployment of a profile, rolled back or not."""
    return _latest_deployment(
        client, application_id, environment_id, profile_id, skip_rolled_back=False
    )


def get_deployment_details(
    client: AppConfigClient,
    application_id: str,
    environment_id: str,
    deployment_number: int,
) -> DeploymentDetails:
    """Fetch a deployment with its strategy name resolved for display."""
    record = client.get_deployment(application_id, environment_id, deployment_number)
    strategy_name = None
    if record.deployment_strategy_id:
        strategy_name = Resolver(client).resolve_strategy_name(
            record.deployment_strategy_id
        )
    return DeploymentDetails(record=record, deployment_strategy_name=strategy_name)


def parse_version_number(value: str) -> int:
    """Parse a configuration version string returned by AppConfig.

    Raises:
        InvalidVersionNumberError: If the value is not an integer
    """
    try:
        return int(value.strip())
    except (AttributeError, ValueError) as exc:
        raise InvalidVersionNumberError(str(value)) from exc


def get_hosted_configuration_version(
    client: AppConfigClient, application_id: str, profile_id: str, version: str
) -> ConfigurationVersion:
    """Fetch a hosted configuration version addressed by its version string."""
    version_number = parse_version_number(version)
    return client.get_hosted_configuration_version(
        application_id, profile_id, version_number
    )


def get_latest_configuration_version(
    client: AppConfigClient, application_id: str, profile_id: str
) -> ConfigurationVersion:
    """Fetch the highest-numbered hosted configuration version.

    Raises:
        DeploymentError: If the profile has no hosted versions
    """
    versions = client.list_hosted_configuration_versions(application_id, profile_id)
    if not versions:
        raise DeploymentError(
            operation="get",
            message=f"no configuration versions found for profile {profile_id}",
        )
    return client.get_hosted_configuration_version(
        application_id, profile_id, max(versions)
    )
