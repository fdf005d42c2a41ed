"""Errors raised while registering, running and watching ECS tasks."""
from typing import List


class EcsRunTaskError(Exception):
    """Base class for every condition that fails the step."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InputError(EcsRunTaskError):
    """Raised for malformed inputs, before any request is sent to AWS."""


class TaskDefinitionFileError(InputError):
    def __init__(self, path: str, message: str):
        super().__init__(f"Failed to read task definition file {path}: {message}")
        self.path = path


class CapacityProviderStrategyError(InputError):
    def __init__(self, raw_value: str, message: str):
        super().__init__(f"Failed to parse capacity provider strategy definition: {message}")
        self.raw_value = raw_value


class RemoteRejectionError(EcsRunTaskError):
    """ECS rejected a request. The message of the remote error is preserved verbatim."""


class TaskDefinitionRegistrationError(RemoteRejectionError):
    def __init__(self, remote_message: str):
        super().__init__(f"Failed to register task definition in ECS: {remote_message}")
        self.remote_message = remote_message


class RunTaskError(RemoteRejectionError):
    pass


class TaskWaitTimeoutError(EcsRunTaskError):
    def __init__(self, task_arns: List[str], wait_minutes: int):
        super().__init__(
            f"Tasks did not stop within {wait_minutes} minutes: {', '.join(task_arns)}"
        )
        self.task_arns = task_arns
        self.wait_minutes = wait_minutes


class TaskExitCodeError(EcsRunTaskError):
    """At least one watched container exited with a non-zero exit code."""

    def __init__(self, reasons: List[str]):
        super().__init__("\n".join(reasons))
        self.reasons = reasons
