"""AWS AppConfig access: client, pagination, name resolution, and inventory."""

from apcdeploy.aws.client import AppConfigClient, create_client
from apcdeploy.aws.inventory import list_resources
from apcdeploy.aws.pagination import collect_pages
from apcdeploy.aws.resolver import Resolver, resolve_by_name, resolve_name_from_id

__all__ = [
    "AppConfigClient",
    "Resolver",
    "collect_pages",
    "create_client",
    "list_resources",
    "resolve_by_name",
    "resolve_name_from_id",
]
