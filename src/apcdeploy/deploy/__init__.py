"""apcdeploy deployment engine.

This package orchestrates AppConfig deployments: the ongoing-deployment
guard, latest deployment lookups, and the polling state machine. It also
diffs and pulls the live configuration and bootstraps apcdeploy.yml.
"""

from apcdeploy.deploy.deployer import Deployer, create_deployer
from apcdeploy.deploy.deployments import (
    check_ongoing_deployment,
    get_latest_deployment,
    get_latest_deployment_including_rollback,
)
from apcdeploy.deploy.diff import calculate_diff
from apcdeploy.deploy.initializer import Initializer
from apcdeploy.deploy.waiter import DeploymentWaiter, extract_rollback_reason

__all__ = [
    "Deployer",
    "DeploymentWaiter",
    "Initializer",
    "calculate_diff",
    "check_ongoing_deployment",
    "create_deployer",
    "extract_rollback_reason",
    "get_latest_deployment",
    "get_latest_deployment_including_rollback",
]
