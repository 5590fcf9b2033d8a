"""Resolve AppConfig resource names to identifiers."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any, Protocol

from apcdeploy.aws.client import AppConfigClient
from apcdeploy.config.defaults import PREDEFINED_STRATEGY_PREFIX
from apcdeploy.lib.errors import AmbiguousResourceError, ResourceNotFoundError
from apcdeploy.lib.logging_config import get_logger
from apcdeploy.models.appconfig import ConfigurationProfile, ResolvedDeploymentTarget

logger = get_logger(__name__)


class Named(Protocol):
    """Anything with a name and an id."""

    @property
    def id(self) -> str: ...

    @property
    def name(self) -> str: ...


def _field(item: Named | Mapping[str, Any], attr: str) -> str | None:
    """Read ``id``/``name`` from a model or ``Id``/``Name`` from a boto3 dict."""
    if isinstance(item, Mapping):
        return item.get(attr.capitalize(), item.get(attr))
    return getattr(item, attr, None)


def resolve_by_name(
    items: Iterable[Named | Mapping[str, Any]], name: str, kind: str
) -> str:
    """Return the id of the single item whose name equals ``name``.

    Matching is exact and case-sensitive. Duplicate names are a configuration
    problem; the first match is never picked silently.

    Args:
        items: Resources to search
        name: Name to look for
        kind: Resource kind label used in error messages

    Returns:
        The identifier of the matching resource

    Raises:
        ResourceNotFoundError: If no item has the name
        AmbiguousResourceError: If more than one item has the name
    """
    matches: list[str] = []
    for item in items:
        if _field(item, "name") != name:
            continue
        item_id = _field(item, "id")
        if item_id is not None:
            matches.append(item_id)

    if not matches:
        raise ResourceNotFoundError(kind, name)
    if len(matches) > 1:
        raise AmbiguousResourceError(kind, name, len(matches))
    return matches[0]


def resolve_name_from_id(
    items: Iterable[Named | Mapping[str, Any]], target_id: str
) -> str:
    """Return the name of the item with ``target_id``, or the id itself.

    For display only; never compare the result against ids.
    """
    for item in items:
        if _field(item, "id") == target_id:
            return _field(item, "name") or target_id
    return target_id


def is_predefined_strategy(strategy_id: str) -> bool:
    """Whether a strategy id belongs to the strategies shipped by AppConfig."""
    return strategy_id.startswith(PREDEFINED_STRATEGY_PREFIX)


class Resolver:
    """Resolve application, profile, environment, and strategy names."""

    def __init__(self, client: AppConfigClient) -> None:
        self.client = client

    def resolve_application(self, app_name: str) -> str:
        """Resolve an application name to its ID."""
        return resolve_by_name(self.client.list_applications(), app_name, "application")

    def resolve_configuration_profile(
        self, application_id: str, profile_name: str
    ) -> ConfigurationProfile:
        """Resolve a profile name and fetch its type.

        Listing returns summaries only, so the profile detail is fetched
        after the name has been matched.
        """
        profile_id = resolve_by_name(
            self.client.list_configuration_profiles(application_id),
            profile_name,
            "configuration profile",
        )
        detail = self.client.get_configuration_profile(application_id, profile_id)
        return ConfigurationProfile(id=profile_id, name=profile_name, kind=detail.kind)

    def resolve_environment(self, application_id: str, env_name: str) -> str:
        """Resolve an environment name to its ID within an application."""
        return resolve_by_name(
            self.client.list_environments(application_id), env_name, "environment"
        )

    def resolve_deployment_strategy(self, strategy_name: str) -> str:
        """Resolve a deployment strategy name to its ID."""
        return resolve_by_name(
            self.client.list_deployment_strategies(),
            strategy_name,
            "deployment strategy",
        )

    def resolve_strategy_name(self, strategy_id: str) -> str:
        """Resolve a deployment strategy ID to a display name.

        Predefined strategies use their id as name and need no lookup.
        """
        if is_predefined_strategy(strategy_id):
            return strategy_id
        return resolve_name_from_id(self.client.list_deployment_strategies(), strategy_id)

    def resolve_all(
        self,
        app_name: str,
        profile_name: str,
        env_name: str,
        strategy_name: str | None = None,
    ) -> ResolvedDeploymentTarget:
        """Resolve every resource needed for a deployment.

        The application is resolved first since profiles and environments
        are scoped to it. An empty strategy name skips strategy resolution,
        which read-only flows rely on.

        Raises:
            ResourceNotFoundError: If any name matches nothing
            AmbiguousResourceError: If any name matches several resources
            RemoteCallError: If any AppConfig call fails
        """
        application_id = self.resolve_application(app_name)
        profile = self.resolve_configuration_profile(application_id, profile_name)
        environment_id = self.resolve_environment(application_id, env_name)

        strategy_id = None
        if strategy_name:
            strategy_id = self.resolve_deployment_strategy(strategy_name)

        target = ResolvedDeploymentTarget(
            application_id=application_id,
            profile=profile,
            environment_id=environment_id,
            deployment_strategy_id=strategy_id,
        )
        logger.debug(
            f"Resolved {app_name}/{profile_name}/{env_name}: "
            f"app={application_id} profile={profile.id} env={environment_id} "
            f"strategy={strategy_id}"
        )
        return target
