"""Construction of the RunTask request from the step inputs."""
import dataclasses
import json
import logging
from typing import List, Optional, Union

from ecs_run_task.aws.api.ecs import (
    AwsVpcConfiguration,
    CapacityProviderStrategy,
    CapacityProviderStrategyItem,
    LaunchType,
    RunTaskRequest,
    TaskOverride,
)
from ecs_run_task.config import RunTaskInputs
from ecs_run_task.exceptions import CapacityProviderStrategyError

LOG = logging.getLogger(__name__)


@dataclasses.dataclass(frozen=True)
class LaunchTypePlacement:
    launch_type: str


@dataclasses.dataclass(frozen=True)
class CapacityProviderPlacement:
    strategy: CapacityProviderStrategy


# either placement requires an awsvpc network configuration
Placement = Union[LaunchTypePlacement, CapacityProviderPlacement]


def split_csv(value: Optional[str]) -> Optional[List[str]]:
    """
    Splits a comma separated list. An empty value is returned as None rather than an empty list,
    since ECS treats an empty list differently from an absent one.
    """
    if not value or not value.strip():
        return None
    items = [item.strip() for item in value.split(",") if item.strip()]
    return items or None


def _validate_strategy_item(item) -> CapacityProviderStrategyItem:
    if not isinstance(item, dict):
        raise ValueError(f"expected an object, got {json.dumps(item)}")
    if not isinstance(item.get("capacityProvider"), str) or not item["capacityProvider"]:
        raise ValueError(f"missing capacityProvider in {json.dumps(item)}")
    for key in ("weight", "base"):
        if key in item and (isinstance(item[key], bool) or not isinstance(item[key], int)):
            raise ValueError(f"{key} must be an integer in {json.dumps(item)}")
    return CapacityProviderStrategyItem(**item)


def parse_capacity_provider_strategy(raw_value: str) -> CapacityProviderStrategy:
    """
    Parses the JSON encoded capacity provider strategy, e.g.
    ``[{"capacityProvider": "FARGATE_SPOT", "weight": 1, "base": 0}]``.

    :raises CapacityProviderStrategyError: if the value is not a valid strategy
    """
    try:
        strategy = json.loads(raw_value)
        if not isinstance(strategy, list):
            raise ValueError("expected a list of capacity provider strategy items")
        return [_validate_strategy_item(item) for item in strategy]
    except ValueError as e:
        LOG.debug("Parameter value:")
        LOG.debug(raw_value)
        raise CapacityProviderStrategyError(raw_value, str(e)) from e


def resolve_placement(
    launch_type: Optional[str], capacity_provider_strategy: Optional[str]
) -> Optional[Placement]:
    """
    Launch type and capacity provider strategy are mutually exclusive, a capacity provider strategy
    always takes precedence.
    """
    if capacity_provider_strategy:
        LOG.info("Capacity provider strategy is set. Launch type will be ignored.")
        return CapacityProviderPlacement(parse_capacity_provider_strategy(capacity_provider_strategy))
    if launch_type == LaunchType.FARGATE:
        return LaunchTypePlacement(launch_type)
    if launch_type:
        LOG.debug("Launch type %s is not passed on, ECS uses the default of the cluster", launch_type)
    return None


def build_vpc_configuration(
    subnets: Optional[str], security_groups: Optional[str], assign_public_ip: str
) -> AwsVpcConfiguration:
    vpc_configuration = AwsVpcConfiguration(assignPublicIp=assign_public_ip)
    subnet_ids = split_csv(subnets)
    if subnet_ids is not None:
        vpc_configuration["subnets"] = subnet_ids
    security_group_ids = split_csv(security_groups)
    if security_group_ids is not None:
        vpc_configuration["securityGroups"] = security_group_ids
    return vpc_configuration


def build_run_task_request(
    inputs: RunTaskInputs, task_definition_arn: str, placement: Optional[Placement] = None
) -> RunTaskRequest:
    """
    Builds the RunTask request for the registered task definition.

    :param inputs: the step inputs
    :param task_definition_arn: ARN of the registered task definition revision
    :param placement: the resolved placement, resolved from the inputs if not given
    :raises CapacityProviderStrategyError: if the capacity provider strategy is malformed
    """
    if placement is None:
        placement = resolve_placement(inputs.launch_type, inputs.capacity_provider_strategy)

    request = RunTaskRequest(
        cluster=inputs.cluster,
        taskDefinition=task_definition_arn,
        count=inputs.count,
        startedBy=inputs.started_by,
    )

    if isinstance(placement, LaunchTypePlacement):
        request["launchType"] = placement.launch_type
    elif isinstance(placement, CapacityProviderPlacement):
        request["capacityProviderStrategy"] = placement.strategy

    if placement is not None:
        request["networkConfiguration"] = {
            "awsvpcConfiguration": build_vpc_configuration(
                inputs.subnets, inputs.security_groups, inputs.assign_public_ip
            )
        }

    overrides = TaskOverride()
    if inputs.task_role_override:
        overrides["taskRoleArn"] = inputs.task_role_override
    if inputs.task_execution_role_override:
        overrides["executionRoleArn"] = inputs.task_execution_role_override
    if overrides:
        request["overrides"] = overrides

    return request
