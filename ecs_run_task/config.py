import dataclasses
import os
from typing import Mapping, Optional, Union

from ecs_run_task.constants import (
    DEFAULT_ASSIGN_PUBLIC_IP,
    DEFAULT_CLUSTER,
    DEFAULT_WAIT_MINUTES,
    ENV_INPUT_PREFIX,
    LOG_LEVELS,
    TRUE_STRINGS,
    USER_AGENT,
)
from ecs_run_task.exceptions import InputError


def eval_log_type(env_var_name: str) -> Union[str, bool]:
    """Get the log type from environment variable"""
    log_type = os.environ.get(env_var_name, "").lower().strip()
    return log_type if log_type in LOG_LEVELS else False


def is_env_true(env_var_name: str) -> bool:
    """Whether the given environment variable has a truthy value."""
    return os.environ.get(env_var_name, "").lower().strip() in TRUE_STRINGS


def input_env_var_name(name: str) -> str:
    return f"{ENV_INPUT_PREFIX}{name.replace(' ', '_').upper()}"


def _parse_int(value: Optional[str]) -> Optional[int]:
    try:
        return int(str(value).strip())
    except (TypeError, ValueError):
        return None


@dataclasses.dataclass
class RunTaskInputs:
    """
    The validated inputs of a single invocation.

    Attributes:
        task_definition:   path of the task definition file
        cluster:           short name or ARN of the cluster
        count:             number of tasks to start
        started_by:        tag recorded on the started tasks
        wait_for_finish:   whether to wait for the tasks to stop and check exit codes
        wait_for_minutes:  requested wait time, capped later by the watcher
        container_to_watch: only check the exit code of containers with this name
        subnets:           comma separated subnet IDs
        security_groups:   comma separated security group IDs
        launch_type:       ECS launch type, e.g. FARGATE
        capacity_provider_strategy: JSON encoded capacity provider strategy
        assign_public_ip:  ENABLED or DISABLED
        task_role_override: role ARN assumed by the containers
        task_execution_role_override: role ARN used by the ECS agent
    """

    task_definition: str
    count: int
    cluster: str = DEFAULT_CLUSTER
    started_by: str = USER_AGENT
    wait_for_finish: bool = False
    wait_for_minutes: int = DEFAULT_WAIT_MINUTES
    container_to_watch: Optional[str] = None
    subnets: str = ""
    security_groups: str = ""
    launch_type: str = ""
    capacity_provider_strategy: str = ""
    assign_public_ip: str = DEFAULT_ASSIGN_PUBLIC_IP
    task_role_override: Optional[str] = None
    task_execution_role_override: Optional[str] = None

    @classmethod
    def from_mapping(cls, inputs: Mapping[str, Optional[str]]) -> "RunTaskInputs":
        """
        Builds the inputs from a mapping of input names (as declared by the action, e.g.
        ``task-definition``) to their raw string values. Empty values fall back to the defaults.
        """

        def _get(name: str) -> str:
            value = inputs.get(name)
            return str(value).strip() if value is not None else ""

        task_definition = _get("task-definition")
        if not task_definition:
            raise InputError("Input required and not supplied: task-definition")

        raw_count = _get("count")
        if not raw_count:
            raise InputError("Input required and not supplied: count")
        count = _parse_int(raw_count)
        if count is None or count < 1:
            raise InputError(f"Invalid value for input count: {raw_count!r}")

        wait_for_minutes = _parse_int(_get("wait-for-minutes"))
        if wait_for_minutes is None or wait_for_minutes < 1:
            wait_for_minutes = DEFAULT_WAIT_MINUTES

        return cls(
            task_definition=task_definition,
            count=count,
            cluster=_get("cluster") or DEFAULT_CLUSTER,
            started_by=_get("started-by") or USER_AGENT,
            wait_for_finish=_get("wait-for-finish").lower() == "true",
            wait_for_minutes=wait_for_minutes,
            container_to_watch=_get("container-to-watch") or None,
            subnets=_get("subnets"),
            security_groups=_get("security-groups"),
            launch_type=_get("launch-type"),
            capacity_provider_strategy=_get("capacity-provider-strategy"),
            assign_public_ip=_get("assign-public-ip") or DEFAULT_ASSIGN_PUBLIC_IP,
            task_role_override=_get("task-role-override") or None,
            task_execution_role_override=_get("task-execution-role-override") or None,
        )


# whether we are running as a step of a GitHub Actions workflow
GITHUB_ACTIONS = is_env_true("GITHUB_ACTIONS")

# root of the checked out repository, relative task definition paths are resolved against it
GITHUB_WORKSPACE = os.environ.get("GITHUB_WORKSPACE", "").strip()

# file that step outputs are appended to
GITHUB_OUTPUT = os.environ.get("GITHUB_OUTPUT", "").strip()

# explicit log level, e.g. ECS_RUN_TASK_LOG=debug
LOG_LEVEL = eval_log_type("ECS_RUN_TASK_LOG")

# whether to log debug output (RUNNER_DEBUG is set when a workflow is re-run with debug logging)
DEBUG = is_env_true("DEBUG") or is_env_true("RUNNER_DEBUG") or LOG_LEVEL in ("debug", "trace")
