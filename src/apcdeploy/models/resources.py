"""Pydantic models for the AppConfig resource inventory of a region."""

from pydantic import BaseModel, Field

from apcdeploy.models.appconfig import DeploymentStrategy, NamedResource


class ApplicationResources(BaseModel):
    """An application with its configuration profiles and environments.

    Attributes:
        id: Application identifier
        name: Application name
        configuration_profiles: Profiles sorted by name
        environments: Environments sorted by name
    """

    id: str
    name: str
    configuration_profiles: list[NamedResource] = Field(default_factory=list)
    environments: list[NamedResource] = Field(default_factory=list)


class ResourcesTree(BaseModel):
    """Every application of a region, optionally with deployment strategies.

    ``deployment_strategies`` is None unless strategies were requested, so
    JSON output leaves the key out entirely.
    """

    region: str
    applications: list[ApplicationResources] = Field(default_factory=list)
    deployment_strategies: list[DeploymentStrategy] | None = None
