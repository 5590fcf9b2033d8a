"""Pydantic models for deployment runs and their results."""

from pydantic import BaseModel, ConfigDict, Field

from apcdeploy.config.defaults import DEFAULT_CONFIG_FILE
from apcdeploy.models.appconfig import (
    DeploymentDetails,
    DeploymentRecord,
    ResolvedDeploymentTarget,
)


class DeployOptions(BaseModel):
    """Options for a single deploy run.

    Attributes:
        wait: Wait for the rollout to finish
        wait_for_baking_only: Stop waiting once the deploy phase is over
        timeout: Seconds to wait; None uses the configured default
        force: Deploy even when the content matches what is live
        description: Description attached to the version and deployment
    """

    model_config = ConfigDict(extra="forbid")

    wait: bool = Field(default=False, description="Wait for the rollout")
    wait_for_baking_only: bool = Field(
        default=False, description="Stop waiting when BAKING starts"
    )
    timeout: float | None = Field(default=None, gt=0, description="Wait timeout")
    force: bool = Field(default=False, description="Deploy unchanged content")
    description: str | None = Field(default=None, description="Deployment note")


class DeployResult(BaseModel):
    """Outcome of a deploy run.

    ``skipped`` is True when the local content already matches the live
    version and no version or deployment was created.
    """

    target: ResolvedDeploymentTarget
    content_type: str
    version_number: int | None = None
    deployment_number: int | None = None
    skipped: bool = False
    waited: bool = False


class StatusResult(BaseModel):
    """Latest deployment of a profile, if any."""

    target: ResolvedDeploymentTarget
    deployment: DeploymentDetails | None = None


class DiffResult(BaseModel):
    """Unified diff between the deployed and the local configuration.

    Lines are ready for display: undecodable bytes show as U+FFFD.
    """

    lines: list[str] = Field(default_factory=list)

    @property
    def has_changes(self) -> bool:
        """Whether the two sides differ after normalization."""
        return bool(self.lines)

    @property
    def additions(self) -> int:
        """Number of added lines."""
        return sum(
            1 for line in self.lines if line.startswith("+") and not line.startswith("+++")
        )

    @property
    def deletions(self) -> int:
        """Number of removed lines."""
        return sum(
            1 for line in self.lines if line.startswith("-") and not line.startswith("---")
        )


class DiffReport(BaseModel):
    """Local data compared with the live deployment of a profile.

    ``deployment`` and ``diff`` are None when nothing was deployed yet.
    """

    target: ResolvedDeploymentTarget
    content_type: str
    local_content: bytes
    deployment: DeploymentRecord | None = None
    diff: DiffResult | None = None


class PullResult(BaseModel):
    """Outcome of pulling the live configuration into the local data file.

    ``updated`` is False when the local file already matched.
    """

    target: ResolvedDeploymentTarget
    deployment_number: int
    version_number: int
    data_file: str
    updated: bool = True


class InitOptions(BaseModel):
    """Options for generating apcdeploy.yml from existing resources.

    Attributes:
        application: Application name
        configuration_profile: Configuration profile name
        environment: Environment name
        config_file: Path of the apcdeploy.yml to write
        data_file: Data file name; derived from the content type when None
        force: Overwrite existing files
    """

    model_config = ConfigDict(extra="forbid")

    application: str
    configuration_profile: str
    environment: str
    config_file: str = Field(default=DEFAULT_CONFIG_FILE)
    data_file: str | None = None
    force: bool = False


class InitResult(BaseModel):
    """Files written by init and what they were built from."""

    target: ResolvedDeploymentTarget
    config_file: str
    data_file: str
    deployment_strategy: str
    version_number: int | None = None
    data_written: bool = False
