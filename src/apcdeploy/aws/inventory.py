"""Collect the AppConfig resources of a region into one sorted tree."""

from __future__ import annotations

from apcdeploy.aws.client import AppConfigClient
from apcdeploy.lib.logging_config import get_logger
from apcdeploy.models.appconfig import NamedResource
from apcdeploy.models.resources import ApplicationResources, ResourcesTree

logger = get_logger(__name__)


def _by_name(items: list[NamedResource]) -> list[NamedResource]:
    return sorted(items, key=lambda item: (item.name, item.id))


def list_resources(client: AppConfigClient, include_strategies: bool = False) -> ResourcesTree:
    """List applications with their profiles and environments.

    Applications and their children are sorted by name. Deployment
    strategies are listed only when ``include_strategies`` is set.

    Raises:
        RemoteCallError: If any AppConfig call fails
        PaginationLimitError: If a listing exceeds the page cap
    """
    applications: list[ApplicationResources] = []
    for app in _by_name(client.list_applications()):
        profiles = client.list_configuration_profiles(app.id)
        environments = client.list_environments(app.id)
        logger.debug(
            f"Application {app.name}: {len(profiles)} profiles, "
            f"{len(environments)} environments"
        )
        applications.append(
            ApplicationResources(
                id=app.id,
                name=app.name,
                configuration_profiles=_by_name(profiles),
                environments=_by_name(environments),
            )
        )

    strategies = None
    if include_strategies:
        strategies = sorted(
            client.list_deployment_strategies(), key=lambda item: (item.name, item.id)
        )

    return ResourcesTree(
        region=client.region or "",
        applications=applications,
        deployment_strategies=strategies,
    )
