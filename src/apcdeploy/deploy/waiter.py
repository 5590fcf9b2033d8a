"""Poll a deployment until it completes, rolls back, or times out."""

from __future__ import annotations

import threading
import time
from collections.abc import Callable, Iterable

from apcdeploy.aws.client import AppConfigClient
from apcdeploy.lib.errors import (
    DeploymentCancelledError,
    DeploymentRolledBackError,
    DeploymentTimeoutError,
    UnexpectedDeploymentStateError,
)
from apcdeploy.lib.logging_config import get_logger
from apcdeploy.models.appconfig import DeploymentEvent, DeploymentState
from apcdeploy.models.config import Settings

logger = get_logger(__name__)


def extract_rollback_reason(event_log: Iterable[DeploymentEvent]) -> str | None:
    """Return the description of the most recent rollback event.

    The event log is append-only, so it is scanned from the end.
    """
    for event in reversed(list(event_log)):
        if event.is_rollback and event.description:
            return event.description
    return None


class DeploymentWaiter:
    """Drive the deployment state machine for one deployment at a time.

    The waiter checks status immediately, then once per poll interval. Each
    check issues exactly one GetDeployment call. ``cancel()`` wakes a
    sleeping waiter, which then raises DeploymentCancelledError.

    Attributes:
        client: AppConfig client used for status checks
        settings: Polling interval and default timeout
    """

    def __init__(
        self,
        client: AppConfigClient,
        settings: Settings | None = None,
        cancel_event: threading.Event | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.client = client
        self.settings = settings if settings is not None else client.settings
        self._cancel_event = cancel_event or threading.Event()
        self._clock = clock

    def cancel(self) -> None:
        """Ask any in-flight wait to stop at the next opportunity."""
        self._cancel_event.set()

    @property
    def cancelled(self) -> bool:
        """Whether cancellation has been requested."""
        return self._cancel_event.is_set()

    def wait_for_deployment(
        self,
        application_id: str,
        environment_id: str,
        deployment_number: int,
        timeout: float | None = None,
    ) -> None:
        """Wait until the deployment reaches COMPLETE.

        Raises:
            DeploymentRolledBackError: If the deployment rolled back
            DeploymentTimeoutError: If COMPLETE is not reached in time
            DeploymentCancelledError: If cancel() was called
            UnexpectedDeploymentStateError: On a state outside the known set
            RemoteCallError: If a status call fails
        """
        self.wait_for_phase(
            application_id,
            environment_id,
            deployment_number,
            wait_for_baking_only=False,
            timeout=timeout,
        )

    def wait_for_phase(
        self,
        application_id: str,
        environment_id: str,
        deployment_number: int,
        wait_for_baking_only: bool = False,
        timeout: float | None = None,
    ) -> None:
        """Wait until the deployment reaches the requested phase.

        With ``wait_for_baking_only`` the wait ends as soon as the deploy
        phase is over (BAKING). COMPLETE is success and ROLLED_BACK is
        failure in both modes.

        Args:
            application_id: Application identifier
            environment_id: Environment identifier
            deployment_number: Deployment to watch
            wait_for_baking_only: Treat BAKING as the target state
            timeout: Seconds to wait; defaults to settings.timeout
        """
        timeout = self.settings.timeout if timeout is None else timeout
        poll_interval = self.settings.poll_interval
        deadline = self._clock() + timeout
        previous: str | None = None

        while True:
            if self.cancelled:
                raise DeploymentCancelledError(deployment_number)

            state = self._check(
                application_id,
                environment_id,
                deployment_number,
                wait_for_baking_only,
                previous,
            )
            if state is None:
                return
            previous = state

            remaining = deadline - self._clock()
            if remaining <= 0:
                raise DeploymentTimeoutError(deployment_number, timeout)
            if self._cancel_event.wait(min(poll_interval, remaining)):
                raise DeploymentCancelledError(deployment_number)
            if self._clock() >= deadline:
                raise DeploymentTimeoutError(deployment_number, timeout)

    def _check(
        self,
        application_id: str,
        environment_id: str,
        deployment_number: int,
        wait_for_baking_only: bool,
        previous: str | None,
    ) -> str | None:
        """Fetch status once; return None when done, else the state seen."""
        record = self.client.get_deployment(
            application_id, environment_id, deployment_number
        )
        state = record.state

        if state != previous:
            logger.info(f"Deployment #{deployment_number}: {state}")

        if state == DeploymentState.COMPLETE.value:
            return None

        if state == DeploymentState.ROLLED_BACK.value:
            raise DeploymentRolledBackError(
                deployment_number, extract_rollback_reason(record.event_log)
            )

        if state == DeploymentState.BAKING.value:
            if wait_for_baking_only:
                return None
            return state

        if state == DeploymentState.DEPLOYING.value:
            if previous == DeploymentState.BAKING.value:
                logger.warning(
                    f"Deployment #{deployment_number} went from BAKING back to DEPLOYING"
                )
            return state

        raise UnexpectedDeploymentStateError(deployment_number, state)
