"""Pydantic models for AppConfig resources and deployments.

These models are read-only snapshots of what AppConfig returned for a single
call. Nothing here is cached between calls.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ProfileKind(str, Enum):
    """Configuration profile types."""

    FREEFORM = "AWS.Freeform"
    FEATURE_FLAGS = "AWS.AppConfig.FeatureFlags"


class DeploymentState(str, Enum):
    """Deployment states reported by AppConfig."""

    BAKING = "BAKING"
    VALIDATING = "VALIDATING"
    DEPLOYING = "DEPLOYING"
    COMPLETE = "COMPLETE"
    ROLLING_BACK = "ROLLING_BACK"
    ROLLED_BACK = "ROLLED_BACK"
    REVERTED = "REVERTED"


# A deployment in one of these states blocks new deployments to its environment
ONGOING_STATES = frozenset({DeploymentState.DEPLOYING.value, DeploymentState.BAKING.value})


class DeploymentEventType(str, Enum):
    """Event types found in a deployment event log."""

    PERCENTAGE_UPDATED = "PERCENTAGE_UPDATED"
    ROLLBACK_STARTED = "ROLLBACK_STARTED"
    ROLLBACK_COMPLETED = "ROLLBACK_COMPLETED"
    BAKE_TIME_STARTED = "BAKE_TIME_STARTED"
    DEPLOYMENT_STARTED = "DEPLOYMENT_STARTED"
    DEPLOYMENT_COMPLETED = "DEPLOYMENT_COMPLETED"
    REVERT_COMPLETED = "REVERT_COMPLETED"


class NamedResource(BaseModel):
    """Any AppConfig resource addressed by name: application, environment, strategy."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str = Field(..., alias="Id")
    name: str = Field(..., alias="Name")


class DeploymentStrategy(NamedResource):
    """Deployment strategy with its rollout parameters, as listed by AppConfig."""

    description: str = Field(default="", alias="Description")
    deployment_duration_in_minutes: int = Field(
        default=0, alias="DeploymentDurationInMinutes"
    )
    final_bake_time_in_minutes: int = Field(default=0, alias="FinalBakeTimeInMinutes")
    growth_factor: float = Field(default=0.0, alias="GrowthFactor")
    growth_type: str = Field(default="", alias="GrowthType")
    replicate_to: str = Field(default="", alias="ReplicateTo")


class ConfigurationProfile(BaseModel):
    """Configuration profile with its resolved type.

    Attributes:
        id: Profile identifier
        name: Profile name
        kind: Freeform or FeatureFlags; drives content type selection
    """

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    kind: str = ProfileKind.FREEFORM.value

    @property
    def is_feature_flags(self) -> bool:
        """Whether this profile holds feature flags."""
        return self.kind == ProfileKind.FEATURE_FLAGS.value


class ResolvedDeploymentTarget(BaseModel):
    """All identifiers needed to deploy, resolved once per invocation.

    Attributes:
        application_id: Application identifier
        profile: Resolved configuration profile
        environment_id: Environment identifier
        deployment_strategy_id: Strategy identifier; None for read-only flows
    """

    model_config = ConfigDict(frozen=True)

    application_id: str
    profile: ConfigurationProfile
    environment_id: str
    deployment_strategy_id: str | None = None


class ConfigurationVersion(BaseModel):
    """A hosted configuration version and its content."""

    model_config = ConfigDict(frozen=True)

    version_number: int
    content: bytes
    content_type: str = ""


class DeploymentEvent(BaseModel):
    """One entry of a deployment's append-only event log."""

    model_config = ConfigDict(populate_by_name=True)

    event_type: str = Field(..., alias="EventType")
    description: str | None = Field(default=None, alias="Description")
    triggered_by: str | None = Field(default=None, alias="TriggeredBy")
    occurred_at: datetime | None = Field(default=None, alias="OccurredAt")

    @property
    def is_rollback(self) -> bool:
        """Whether this event belongs to a rollback."""
        return self.event_type in (
            DeploymentEventType.ROLLBACK_STARTED.value,
            DeploymentEventType.ROLLBACK_COMPLETED.value,
        )


class DeploymentSummary(BaseModel):
    """Deployment as returned by ListDeployments (no profile id)."""

    model_config = ConfigDict(populate_by_name=True)

    deployment_number: int = Field(..., alias="DeploymentNumber")
    configuration_name: str | None = Field(default=None, alias="ConfigurationName")
    configuration_version: str | None = Field(
        default=None, alias="ConfigurationVersion"
    )
    state: str = Field(..., alias="State")
    percentage_complete: float | None = Field(default=None, alias="PercentageComplete")
    started_at: datetime | None = Field(default=None, alias="StartedAt")
    completed_at: datetime | None = Field(default=None, alias="CompletedAt")

    @property
    def is_ongoing(self) -> bool:
        """Whether the deployment is still DEPLOYING or BAKING."""
        return self.state in ONGOING_STATES


class DeploymentRecord(BaseModel):
    """Full deployment detail as returned by GetDeployment."""

    model_config = ConfigDict(populate_by_name=True)

    deployment_number: int = Field(..., alias="DeploymentNumber")
    configuration_profile_id: str | None = Field(
        default=None, alias="ConfigurationProfileId"
    )
    configuration_version: str = Field(default="", alias="ConfigurationVersion")
    deployment_strategy_id: str | None = Field(
        default=None, alias="DeploymentStrategyId"
    )
    state: str = Field(..., alias="State")
    description: str = Field(default="", alias="Description")
    event_log: list[DeploymentEvent] = Field(default_factory=list, alias="EventLog")
    started_at: datetime | None = Field(default=None, alias="StartedAt")
    completed_at: datetime | None = Field(default=None, alias="CompletedAt")
    percentage_complete: float = Field(default=0.0, alias="PercentageComplete")
    growth_factor: float = Field(default=0.0, alias="GrowthFactor")
    final_bake_time_in_minutes: int = Field(
        default=0, alias="FinalBakeTimeInMinutes"
    )

    @property
    def is_ongoing(self) -> bool:
        """Whether the deployment is still DEPLOYING or BAKING."""
        return self.state in ONGOING_STATES

    @classmethod
    def from_response(cls, response: dict[str, Any]) -> DeploymentRecord:
        """Build a record from a GetDeployment response, dropping null fields."""
        return cls.model_validate(
            {key: value for key, value in response.items() if value is not None}
        )


class DeploymentDetails(BaseModel):
    """Deployment detail enriched with the strategy display name."""

    record: DeploymentRecord
    deployment_strategy_name: str | None = None
