"""Deployment orchestration for a single apcdeploy.yml target.

A Deployer resolves names once per call, guards against a running rollout,
creates a hosted configuration version, starts the deployment, and
optionally waits for it. The same target also backs diff, pull, status and
rollback. No state is kept between calls.
"""

from __future__ import annotations

import threading
from pathlib import Path

from apcdeploy.aws.client import AppConfigClient, create_client
from apcdeploy.aws.resolver import Resolver
from apcdeploy.config.data import (
    canonical_content_type,
    determine_content_type,
    load_data_file,
    normalize_content,
    validate_data,
    write_data_file,
)
from apcdeploy.deploy.deployments import (
    check_ongoing_deployment,
    get_deployment_details,
    get_hosted_configuration_version,
    get_latest_deployment,
    get_latest_deployment_including_rollback,
)
from apcdeploy.deploy.diff import calculate_diff
from apcdeploy.deploy.waiter import DeploymentWaiter
from apcdeploy.lib.errors import (
    ConfigError,
    DeploymentError,
    DeploymentInProgressError,
    ValidationError,
)
from apcdeploy.lib.logging_config import get_logger
from apcdeploy.models.appconfig import DeploymentSummary, ResolvedDeploymentTarget
from apcdeploy.models.config import DeployConfig, Settings
from apcdeploy.models.deployment import (
    DeployOptions,
    DeployResult,
    DiffReport,
    PullResult,
    StatusResult,
)

logger = get_logger(__name__)


class Deployer:
    """Deploy configuration data described by a DeployConfig.

    Attributes:
        config: Loaded deployment config
        client: AppConfig client
        settings: Polling and limit settings
    """

    def __init__(
        self,
        config: DeployConfig,
        client: AppConfigClient,
        settings: Settings | None = None,
        cancel_event: threading.Event | None = None,
    ) -> None:
        self.config = config
        self.client = client
        self.settings = settings if settings is not None else client.settings
        self.resolver = Resolver(client)
        self.waiter = DeploymentWaiter(client, self.settings, cancel_event=cancel_event)

    def resolve_resources(self, with_strategy: bool = True) -> ResolvedDeploymentTarget:
        """Resolve every configured name to an identifier.

        Read-only flows pass ``with_strategy=False`` to skip the strategy.
        """
        return self.resolver.resolve_all(
            self.config.application,
            self.config.configuration_profile,
            self.config.environment,
            self.config.deployment_strategy if with_strategy else None,
        )

    def check_ongoing_deployment(
        self, target: ResolvedDeploymentTarget
    ) -> tuple[bool, DeploymentSummary | None]:
        """Report whether a rollout is already running in the target environment."""
        return check_ongoing_deployment(
            self.client, target.application_id, target.environment_id
        )

    def create_version(
        self,
        target: ResolvedDeploymentTarget,
        content: bytes,
        content_type: str,
        description: str | None = None,
    ) -> int:
        """Create a hosted configuration version for the target profile."""
        return self.client.create_hosted_configuration_version(
            target.application_id, target.profile.id, content, content_type, description
        )

    def start_deployment(
        self,
        target: ResolvedDeploymentTarget,
        version_number: int,
        description: str | None = None,
    ) -> int:
        """Start deploying a version to the target environment.

        Raises:
            DeploymentError: If the target was resolved without a strategy
        """
        if not target.deployment_strategy_id:
            raise DeploymentError(
                operation="deploy",
                message="a deployment strategy is required to start a deployment",
            )
        return self.client.start_deployment(
            target.application_id,
            target.environment_id,
            target.profile.id,
            target.deployment_strategy_id,
            version_number,
            description,
        )

    def wait_for_deployment(
        self,
        target: ResolvedDeploymentTarget,
        deployment_number: int,
        timeout: float | None = None,
        wait_for_baking_only: bool = False,
    ) -> None:
        """Block until the deployment finishes; see DeploymentWaiter."""
        self.waiter.wait_for_phase(
            target.application_id,
            target.environment_id,
            deployment_number,
            wait_for_baking_only=wait_for_baking_only,
            timeout=timeout,
        )

    def has_configuration_changes(
        self, target: ResolvedDeploymentTarget, content: bytes, content_type: str
    ) -> bool:
        """Compare local content with the live (latest non-rolled-back) version."""
        deployment = get_latest_deployment(
            self.client, target.application_id, target.environment_id, target.profile.id
        )
        if deployment is None:
            return True

        remote = get_hosted_configuration_version(
            self.client,
            target.application_id,
            target.profile.id,
            deployment.configuration_version,
        )
        kind = target.profile.kind
        return normalize_content(remote.content, content_type, kind) != normalize_content(
            content, content_type, kind
        )

    def run(self, options: DeployOptions | None = None) -> DeployResult:
        """Run the full deploy flow.

        Raises:
            ConfigError: If the data file cannot be read
            ValidationError: If the data fails local validation
            DeploymentInProgressError: If a rollout is already running
            DeploymentError: If waiting fails (rollback, timeout, cancel)
            ApcDeployError: For resolution and remote call failures
        """
        options = options or DeployOptions()
        data_path = Path(self.config.data_file)
        content = load_data_file(data_path, self.settings.max_config_size)

        logger.info("Resolving AppConfig resources...")
        target = self.resolve_resources()
        logger.info(
            f"Resolved resources: App={target.application_id}, "
            f"Profile={target.profile.id}, Env={target.environment_id}, "
            f"Strategy={target.deployment_strategy_id}"
        )

        ongoing, deployment = self.check_ongoing_deployment(target)
        if ongoing and deployment is not None:
            raise DeploymentInProgressError(deployment.deployment_number)

        content_type = determine_content_type(target.profile.kind, data_path)
        validate_data(content, content_type, self.settings.max_config_size)

        if not options.force and not self.has_configuration_changes(
            target, content, content_type
        ):
            logger.info("No changes detected; skipping deployment")
            return DeployResult(target=target, content_type=content_type, skipped=True)

        version_number = self.create_version(
            target, content, content_type, options.description
        )
        logger.info(f"Created configuration version {version_number}")

        deployment_number = self.start_deployment(
            target, version_number, options.description
        )
        logger.info(f"Deployment #{deployment_number} started")

        if options.wait:
            self.wait_for_deployment(
                target,
                deployment_number,
                timeout=options.timeout,
                wait_for_baking_only=options.wait_for_baking_only,
            )
            logger.info(f"Deployment #{deployment_number} finished")

        return DeployResult(
            target=target,
            content_type=content_type,
            version_number=version_number,
            deployment_number=deployment_number,
            waited=options.wait,
        )

    def diff(self) -> DiffReport:
        """Compare the local data file with the live configuration.

        Raises:
            ConfigError: If the data file cannot be read
            ValidationError: If either side does not parse
            ApcDeployError: For resolution and remote call failures
        """
        data_path = Path(self.config.data_file)
        local = load_data_file(data_path, self.settings.max_config_size)

        target = self.resolve_resources(with_strategy=False)
        content_type = determine_content_type(target.profile.kind, data_path)

        deployment = get_latest_deployment(
            self.client, target.application_id, target.environment_id, target.profile.id
        )
        if deployment is None:
            return DiffReport(target=target, content_type=content_type, local_content=local)

        remote = get_hosted_configuration_version(
            self.client,
            target.application_id,
            target.profile.id,
            deployment.configuration_version,
        )
        result = calculate_diff(
            remote.content, local, content_type, target.profile.kind, data_path.name
        )
        return DiffReport(
            target=target,
            content_type=content_type,
            local_content=local,
            deployment=deployment,
            diff=result,
        )

    def pull(self) -> PullResult:
        """Overwrite the local data file with the live configuration.

        Nothing is written when the local file already matches.

        Raises:
            DeploymentError: If the profile was never deployed
            ConfigError: If the data file cannot be written
            ValidationError: If the deployed JSON does not parse
            ApcDeployError: For resolution and remote call failures
        """
        target = self.resolve_resources(with_strategy=False)
        deployment = get_latest_deployment(
            self.client, target.application_id, target.environment_id, target.profile.id
        )
        if deployment is None:
            raise DeploymentError(
                operation="pull",
                message=(
                    "no deployment found for this configuration profile: "
                    "run 'apcdeploy run' to create the first deployment"
                ),
            )

        remote = get_hosted_configuration_version(
            self.client,
            target.application_id,
            target.profile.id,
            deployment.configuration_version,
        )
        content_type = canonical_content_type(remote.content_type)
        kind = target.profile.kind
        data_path = Path(self.config.data_file)
        result = PullResult(
            target=target,
            deployment_number=deployment.deployment_number,
            version_number=remote.version_number,
            data_file=str(data_path),
        )

        try:
            local = load_data_file(data_path, self.settings.max_config_size)
        except ConfigError as exc:
            logger.warning(f"Local data file not read, writing it fresh: {exc.message}")
        else:
            try:
                unchanged = normalize_content(
                    local, content_type, kind
                ) == normalize_content(remote.content, content_type, kind)
            except ValidationError as exc:
                logger.debug(f"Local data does not parse as {content_type}: {exc.message}")
                unchanged = False
            if unchanged:
                logger.info("Local data file already matches the deployed version")
                return result.model_copy(update={"updated": False})

        write_data_file(data_path, remote.content, content_type, kind)
        logger.info(
            f"Wrote version {remote.version_number} of deployment "
            f"#{deployment.deployment_number} to {data_path}"
        )
        return result

    def status(self, include_rolled_back: bool = True) -> StatusResult:
        """Return the latest deployment of the configured profile."""
        target = self.resolve_resources(with_strategy=False)
        lookup = (
            get_latest_deployment_including_rollback
            if include_rolled_back
            else get_latest_deployment
        )
        latest = lookup(
            self.client, target.application_id, target.environment_id, target.profile.id
        )
        if latest is None:
            return StatusResult(target=target)

        details = get_deployment_details(
            self.client,
            target.application_id,
            target.environment_id,
            latest.deployment_number,
        )
        return StatusResult(target=target, deployment=details)

    def rollback(self) -> int:
        """Stop the ongoing deployment, which makes AppConfig roll it back.

        Returns:
            The number of the stopped deployment

        Raises:
            DeploymentError: If no deployment is in progress
        """
        target = self.resolve_resources(with_strategy=False)
        ongoing, deployment = self.check_ongoing_deployment(target)
        if not ongoing or deployment is None:
            raise DeploymentError(
                operation="rollback", message="no ongoing deployment found"
            )

        self.client.stop_deployment(
            target.application_id, target.environment_id, deployment.deployment_number
        )
        logger.info(f"Stopped deployment #{deployment.deployment_number}")
        return deployment.deployment_number


def create_deployer(
    config: DeployConfig,
    settings: Settings | None = None,
    cancel_event: threading.Event | None = None,
) -> Deployer:
    """Create a Deployer with a boto3-backed client for the config's region."""
    settings = settings or Settings.from_env()
    client = create_client(config.region, settings)
    return Deployer(config, client, settings, cancel_event=cancel_event)
