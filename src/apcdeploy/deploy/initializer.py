"""Generate apcdeploy.yml and a data file from existing AppConfig resources."""

from __future__ import annotations

from pathlib import Path

from apcdeploy.aws.client import AppConfigClient
from apcdeploy.aws.resolver import Resolver
from apcdeploy.config.data import data_file_name, write_data_file
from apcdeploy.config.defaults import DEFAULT_DEPLOYMENT_STRATEGY
from apcdeploy.config.loader import resolve_data_file_path, save_config
from apcdeploy.deploy.deployments import (
    get_latest_configuration_version,
    get_latest_deployment,
)
from apcdeploy.lib.errors import ConfigError, DeploymentError
from apcdeploy.lib.logging_config import get_logger
from apcdeploy.models.appconfig import ConfigurationVersion, ResolvedDeploymentTarget
from apcdeploy.models.config import DeployConfig
from apcdeploy.models.deployment import InitOptions, InitResult

logger = get_logger(__name__)


class Initializer:
    """Bootstrap a deployment config for a profile that already exists.

    The data file holds the latest hosted configuration version, which may
    be newer than what is deployed. The strategy is taken from the latest
    deployment, or the default one when the profile was never deployed.
    """

    def __init__(self, client: AppConfigClient) -> None:
        self.client = client
        self.resolver = Resolver(client)

    def latest_version(self, target: ResolvedDeploymentTarget) -> ConfigurationVersion | None:
        """Return the latest hosted version, or None if the profile has none."""
        try:
            return get_latest_configuration_version(
                self.client, target.application_id, target.profile.id
            )
        except DeploymentError as exc:
            logger.warning(f"{exc.message}; the data file will not be written")
            return None

    def deployment_strategy(self, target: ResolvedDeploymentTarget) -> str:
        """Return the strategy name used by the latest deployment."""
        deployment = get_latest_deployment(
            self.client, target.application_id, target.environment_id, target.profile.id
        )
        if deployment is None or not deployment.deployment_strategy_id:
            logger.info(
                f"No previous deployments found; using {DEFAULT_DEPLOYMENT_STRATEGY}"
            )
            return DEFAULT_DEPLOYMENT_STRATEGY
        return self.resolver.resolve_strategy_name(deployment.deployment_strategy_id)

    def run(self, options: InitOptions) -> InitResult:
        """Write apcdeploy.yml and, if a version exists, the data file.

        Raises:
            ConfigError: If a file exists without ``force`` or cannot be written
            ApcDeployError: For resolution and remote call failures
        """
        config_path = Path(options.config_file)
        if config_path.exists() and not options.force:
            raise ConfigError(
                field="config_file",
                message=(
                    f"config file already exists at {config_path} "
                    "(use --force to overwrite)"
                ),
            )

        target = self.resolver.resolve_all(
            options.application, options.configuration_profile, options.environment
        )
        version = self.latest_version(target)
        strategy = self.deployment_strategy(target)

        data_file = options.data_file
        if not data_file:
            data_file = data_file_name(version.content_type) if version else "data.json"
        data_path = resolve_data_file_path(config_path.resolve(), data_file)
        if version is not None and data_path.exists() and not options.force:
            raise ConfigError(
                field="data_file",
                message=f"data file already exists at {data_path} (use --force to overwrite)",
            )

        config = DeployConfig(
            application=options.application,
            configuration_profile=options.configuration_profile,
            environment=options.environment,
            deployment_strategy=strategy,
            data_file=data_file,
            region=self.client.region,
        )
        save_config(config, config_path, force=options.force)
        logger.info(f"Created {config_path}")

        if version is not None:
            write_data_file(
                data_path, version.content, version.content_type, target.profile.kind
            )
            logger.info(f"Wrote version {version.version_number} to {data_path}")

        return InitResult(
            target=target,
            config_file=str(config_path),
            data_file=str(data_path),
            deployment_strategy=strategy,
            version_number=version.version_number if version else None,
            data_written=version is not None,
        )
