from typing import Any, Dict, List, Optional, TypedDict

BoxedInteger = int
CapacityProviderStrategyItemBase = int
CapacityProviderStrategyItemWeight = int
String = str
StringList = List[String]


class AssignPublicIp(str):
    ENABLED = "ENABLED"
    DISABLED = "DISABLED"


class LaunchType(str):
    EC2 = "EC2"
    FARGATE = "FARGATE"
    EXTERNAL = "EXTERNAL"


class AwsVpcConfiguration(TypedDict, total=False):
    subnets: StringList
    securityGroups: Optional[StringList]
    assignPublicIp: Optional[AssignPublicIp]


class NetworkConfiguration(TypedDict, total=False):
    awsvpcConfiguration: Optional[AwsVpcConfiguration]


class CapacityProviderStrategyItem(TypedDict, total=False):
    capacityProvider: String
    weight: Optional[CapacityProviderStrategyItemWeight]
    base: Optional[CapacityProviderStrategyItemBase]


CapacityProviderStrategy = List[CapacityProviderStrategyItem]


class TaskOverride(TypedDict, total=False):
    executionRoleArn: Optional[String]
    taskRoleArn: Optional[String]


class RunTaskRequest(TypedDict, total=False):
    capacityProviderStrategy: Optional[CapacityProviderStrategy]
    cluster: Optional[String]
    count: Optional[BoxedInteger]
    launchType: Optional[LaunchType]
    networkConfiguration: Optional[NetworkConfiguration]
    overrides: Optional[TaskOverride]
    startedBy: Optional[String]
    taskDefinition: String


class Failure(TypedDict, total=False):
    arn: Optional[String]
    reason: Optional[String]
    detail: Optional[String]


Failures = List[Failure]


class Container(TypedDict, total=False):
    containerArn: Optional[String]
    taskArn: Optional[String]
    name: Optional[String]
    lastStatus: Optional[String]
    exitCode: Optional[BoxedInteger]
    reason: Optional[String]


Containers = List[Container]


class Task(TypedDict, total=False):
    clusterArn: Optional[String]
    containers: Optional[Containers]
    desiredStatus: Optional[String]
    lastStatus: Optional[String]
    stoppedReason: Optional[String]
    taskArn: Optional[String]
    taskDefinitionArn: Optional[String]


Tasks = List[Task]


class RunTaskResponse(TypedDict, total=False):
    tasks: Optional[Tasks]
    failures: Optional[Failures]


class DescribeTasksResponse(TypedDict, total=False):
    tasks: Optional[Tasks]
    failures: Optional[Failures]


# the task definition document is passed through to RegisterTaskDefinition as-is
RegisterTaskDefinitionRequest = Dict[String, Any]


class TaskDefinition(TypedDict, total=False):
    taskDefinitionArn: Optional[String]
    family: Optional[String]
    revision: Optional[BoxedInteger]
    status: Optional[String]


class RegisterTaskDefinitionResponse(TypedDict, total=False):
    taskDefinition: Optional[TaskDefinition]
