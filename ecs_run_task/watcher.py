"""
Waiting for launched tasks to stop, and turning their container exit codes into a verdict.

The watcher is a small state machine::

    SUBMITTED -> POLLING -> STOPPED
                        \\-> TIMED_OUT

Each poll describes all tasks and checks whether every one of them reached the ``STOPPED`` lifecycle
state. Delays between polls are delegated to a ``PollDriver``, so the attempt budget and cancellation
can be exercised without waiting on the wall clock.
"""
import abc
import dataclasses
import enum
import logging
import threading
from typing import List, Optional

from botocore.client import BaseClient

from ecs_run_task.aws.api.ecs import Container, DescribeTasksResponse, Task
from ecs_run_task.aws.connect import client_region
from ecs_run_task.constants import (
    DEFAULT_WAIT_MINUTES,
    ECS_CONSOLE_TASKS_URL,
    MAX_WAIT_MINUTES,
    TASK_STATUS_STOPPED,
    WAIT_DEFAULT_DELAY_SEC,
)
from ecs_run_task.exceptions import TaskExitCodeError, TaskWaitTimeoutError

LOG = logging.getLogger(__name__)


class WatchState(enum.Enum):
    SUBMITTED = "SUBMITTED"
    POLLING = "POLLING"
    STOPPED = "STOPPED"
    TIMED_OUT = "TIMED_OUT"


def effective_wait_minutes(requested_minutes: int) -> int:
    """
    The wait time is capped at ``MAX_WAIT_MINUTES``, whatever was requested. Values below one minute
    fall back to ``DEFAULT_WAIT_MINUTES``.
    """
    if requested_minutes < 1:
        return DEFAULT_WAIT_MINUTES
    return min(requested_minutes, MAX_WAIT_MINUTES)


def max_attempts(requested_minutes: int, delay: int = WAIT_DEFAULT_DELAY_SEC) -> int:
    return max(1, (effective_wait_minutes(requested_minutes) * 60) // delay)


class PollDriver(abc.ABC):
    """Waits between two polls."""

    @abc.abstractmethod
    def wait(self, seconds: float) -> bool:
        """
        Blocks for the given number of seconds.

        :return: False if waiting was cancelled, True otherwise
        """
        pass

    @abc.abstractmethod
    def cancel(self) -> None:
        pass


class EventPollDriver(PollDriver):
    """Poll driver backed by a ``threading.Event``, which can be cancelled from another thread."""

    def __init__(self):
        self._cancelled = threading.Event()

    def wait(self, seconds: float) -> bool:
        return not self._cancelled.wait(seconds)

    def cancel(self) -> None:
        self._cancelled.set()


@dataclasses.dataclass
class TaskOutcome:
    """The result of one container of a stopped task."""

    task_arn: Optional[str]
    container_name: Optional[str]
    exit_code: Optional[int]
    reason: Optional[str] = None

    @property
    def failed(self) -> bool:
        # a container that never started has no exit code
        return self.exit_code != 0

    @property
    def failure_reason(self) -> str:
        if self.reason:
            return self.reason
        return f"{self.container_name} exited with code {self.exit_code}"

    @classmethod
    def from_container(cls, container: Container, task_arn: str = None) -> "TaskOutcome":
        return cls(
            task_arn=container.get("taskArn") or task_arn,
            container_name=container.get("name"),
            exit_code=container.get("exitCode"),
            reason=container.get("reason"),
        )


class CompletionWatcher:
    """
    Waits for the tasks of one RunTask call to stop and collects their container outcomes.
    """

    state: WatchState
    attempts: int

    def __init__(
        self,
        ecs_client: BaseClient,
        cluster: str,
        poll_driver: PollDriver = None,
        delay: int = WAIT_DEFAULT_DELAY_SEC,
    ):
        self.ecs_client = ecs_client
        self.cluster = cluster
        self.poll_driver = poll_driver or EventPollDriver()
        self.delay = delay
        self.state = WatchState.SUBMITTED
        self.attempts = 0

    def describe_tasks(self, task_arns: List[str]) -> DescribeTasksResponse:
        response = self.ecs_client.describe_tasks(cluster=self.cluster, tasks=task_arns)
        for failure in response.get("failures") or []:
            LOG.debug("Describe tasks failure: %s is %s", failure.get("arn"), failure.get("reason"))
        return response

    def _all_stopped(self, task_arns: List[str]) -> bool:
        tasks = self.describe_tasks(task_arns).get("tasks") or []
        stopped = {
            task.get("taskArn") for task in tasks if task.get("lastStatus") == TASK_STATUS_STOPPED
        }
        return all(task_arn in stopped for task_arn in task_arns)

    def wait_for_tasks_stopped(self, task_arns: List[str], wait_minutes: int) -> WatchState:
        """
        Polls until all tasks are stopped, or the attempt budget derived from ``wait_minutes`` is used up.

        :raises TaskWaitTimeoutError: if the tasks did not stop in time, or waiting was cancelled
        """
        wait_minutes = effective_wait_minutes(wait_minutes)
        budget = max_attempts(wait_minutes, self.delay)

        LOG.debug("Waiting for tasks to stop")
        self.state = WatchState.POLLING
        self.attempts = 0

        while self.attempts < budget:
            self.attempts += 1
            if self._all_stopped(task_arns):
                self.state = WatchState.STOPPED
                break
            if self.attempts >= budget:
                break
            if not self.poll_driver.wait(self.delay):
                LOG.debug("Waiting for tasks to stop was cancelled")
                break

        if self.state != WatchState.STOPPED:
            self.state = WatchState.TIMED_OUT
            raise TaskWaitTimeoutError(task_arns, wait_minutes)

        LOG.info(
            "All tasks have stopped. Watch progress in the Amazon ECS console: %s",
            ECS_CONSOLE_TASKS_URL.format(
                region=client_region(self.ecs_client), cluster=self.cluster
            ),
        )
        return self.state

    def collect_outcomes(
        self, task_arns: List[str], container_name: Optional[str] = None
    ) -> List[TaskOutcome]:
        """
        Describes the stopped tasks and returns the outcome of every container, or only of the
        containers with the given name.
        """
        tasks: List[Task] = self.describe_tasks(task_arns).get("tasks") or []
        outcomes = [
            TaskOutcome.from_container(container, task.get("taskArn"))
            for task in tasks
            for container in task.get("containers") or []
        ]
        if container_name:
            outcomes = [outcome for outcome in outcomes if outcome.container_name == container_name]
        return outcomes

    def await_completion(
        self, task_arns: List[str], wait_minutes: int, container_name: Optional[str] = None
    ) -> List[TaskOutcome]:
        self.wait_for_tasks_stopped(task_arns, wait_minutes)
        return self.collect_outcomes(task_arns, container_name)


def verify_outcomes(outcomes: List[TaskOutcome]) -> None:
    """
    A run is successful if every watched container exited with code 0.

    :raises TaskExitCodeError: with the reasons of all failed containers
    """
    if not outcomes:
        LOG.warning("No containers matched, no exit codes were checked.")

    failed = [outcome for outcome in outcomes if outcome.failed]
    for outcome in failed:
        LOG.warning(
            "Container %s of task %s exited with code %s",
            outcome.container_name,
            outcome.task_arn,
            outcome.exit_code,
        )
    failures = [outcome.failure_reason for outcome in failed]
    if failures:
        raise TaskExitCodeError(failures)

    LOG.info("All tasks have exited successfully.")
