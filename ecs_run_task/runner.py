import dataclasses
import json
import logging
from typing import Any, Dict, List, Optional

from botocore.client import BaseClient
from botocore.exceptions import ClientError, ParamValidationError

from ecs_run_task.aws.api.ecs import (
    RegisterTaskDefinitionRequest,
    RegisterTaskDefinitionResponse,
    RunTaskRequest,
    RunTaskResponse,
)
from ecs_run_task.config import RunTaskInputs
from ecs_run_task.constants import OUTPUT_TASK_ARN, OUTPUT_TASK_DEFINITION_ARN
from ecs_run_task.exceptions import RunTaskError, TaskDefinitionRegistrationError
from ecs_run_task.outputs import ActionOutputs
from ecs_run_task.request import build_run_task_request, resolve_placement
from ecs_run_task.task_definition import load_task_definition, normalize
from ecs_run_task.watcher import CompletionWatcher, PollDriver, TaskOutcome, verify_outcomes

LOG = logging.getLogger(__name__)


def _error_message(error: Exception) -> str:
    if isinstance(error, ClientError):
        return error.response.get("Error", {}).get("Message") or str(error)
    return str(error)


@dataclasses.dataclass
class RunResult:
    task_definition_arn: str
    task_arns: List[str]
    outcomes: Optional[List[TaskOutcome]] = None


class TaskRunner:
    """
    Registers a task definition and runs it: one RegisterTaskDefinition call, followed by one RunTask
    call, optionally followed by waiting for the tasks to stop and checking their exit codes.
    """

    def __init__(
        self,
        ecs_client: BaseClient,
        outputs: ActionOutputs = None,
        poll_driver: PollDriver = None,
    ):
        self.ecs_client = ecs_client
        self.outputs = outputs or ActionOutputs()
        self.poll_driver = poll_driver

    def register(self, task_definition: RegisterTaskDefinitionRequest) -> str:
        """
        Registers the (normalized) task definition and publishes the ARN of the new revision.

        :raises TaskDefinitionRegistrationError: if ECS rejects the task definition
        """
        LOG.debug("Registering the task definition")
        try:
            response: RegisterTaskDefinitionResponse = self.ecs_client.register_task_definition(
                **task_definition
            )
        except (ClientError, ParamValidationError) as e:
            LOG.debug("Task definition contents:")
            LOG.debug(json.dumps(task_definition, indent=2))
            raise TaskDefinitionRegistrationError(_error_message(e)) from e

        task_definition_arn = response["taskDefinition"]["taskDefinitionArn"]
        self.outputs.set_output(OUTPUT_TASK_DEFINITION_ARN, task_definition_arn)
        return task_definition_arn

    def run(self, request: RunTaskRequest) -> List[str]:
        """
        Runs the tasks and publishes their ARNs.

        :raises RunTaskError: if ECS rejects the request, or no task could be started
        """
        LOG.debug("Running task with %s", json.dumps(request))
        try:
            response: RunTaskResponse = self.ecs_client.run_task(**request)
        except (ClientError, ParamValidationError) as e:
            raise RunTaskError(_error_message(e)) from e
        LOG.debug("Run task response %s", json.dumps(response, default=str))

        tasks = response.get("tasks") or []
        failures = response.get("failures") or []
        for failure in failures:
            LOG.warning("Failed to start task: %s is %s", failure.get("arn"), failure.get("reason"))
        if failures and not tasks:
            failure = failures[0]
            raise RunTaskError(f"{failure.get('arn')} is {failure.get('reason')}")

        task_arns = [task["taskArn"] for task in tasks]
        self.outputs.set_output(OUTPUT_TASK_ARN, task_arns)
        return task_arns

    def execute(self, inputs: RunTaskInputs, workspace: str = None) -> RunResult:
        """
        Runs the whole step for the given inputs. Input errors (unreadable task definition file,
        malformed capacity provider strategy) are raised before any request is sent to ECS.
        """
        task_definition: Dict[str, Any] = normalize(
            load_task_definition(inputs.task_definition, workspace)
        )
        placement = resolve_placement(inputs.launch_type, inputs.capacity_provider_strategy)

        task_definition_arn = self.register(task_definition)
        request = build_run_task_request(inputs, task_definition_arn, placement)
        task_arns = self.run(request)
        result = RunResult(task_definition_arn=task_definition_arn, task_arns=task_arns)

        if inputs.wait_for_finish and not task_arns:
            LOG.warning("No tasks were started, there is nothing to wait for.")
        elif inputs.wait_for_finish:
            watcher = CompletionWatcher(self.ecs_client, inputs.cluster, self.poll_driver)
            result.outcomes = watcher.await_completion(
                task_arns, inputs.wait_for_minutes, inputs.container_to_watch
            )
            verify_outcomes(result.outcomes)

        return result
