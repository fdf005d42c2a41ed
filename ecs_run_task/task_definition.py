"""
Loading and normalization of task definition documents.

A task definition file usually starts its life as the output of ``aws ecs describe-task-definition``.
That output carries empty values and read-only attributes which RegisterTaskDefinition rejects, so
the document is converted into a ``Node`` tree, pruned, and stripped of those attributes before it is
registered.
"""
import dataclasses
import datetime
import logging
import os
from typing import Any, Dict, Optional, Tuple, Union

import yaml

from ecs_run_task import config
from ecs_run_task.exceptions import TaskDefinitionFileError

LOG = logging.getLogger(__name__)

# Attributes that are returned by DescribeTaskDefinition, but are not valid RegisterTaskDefinition inputs
IGNORED_TASK_DEFINITION_ATTRIBUTES = (
    "compatibilities",
    "taskDefinitionArn",
    "requiresAttributes",
    "revision",
    "status",
    "registeredBy",
    "registeredAt",
)


@dataclasses.dataclass(frozen=True)
class Null:
    def is_empty(self) -> bool:
        return True

    def prune(self) -> Optional["Node"]:
        return None

    def to_python(self) -> Any:
        return None


@dataclasses.dataclass(frozen=True)
class Bool:
    value: bool

    def is_empty(self) -> bool:
        return False

    def prune(self) -> Optional["Node"]:
        return self

    def to_python(self) -> Any:
        return self.value


@dataclasses.dataclass(frozen=True)
class Number:
    value: Union[int, float]

    def is_empty(self) -> bool:
        return False

    def prune(self) -> Optional["Node"]:
        return self

    def to_python(self) -> Any:
        return self.value


@dataclasses.dataclass(frozen=True)
class String:
    value: str

    def is_empty(self) -> bool:
        return self.value == ""

    def prune(self) -> Optional["Node"]:
        return None if self.is_empty() else self

    def to_python(self) -> Any:
        return self.value


@dataclasses.dataclass(frozen=True)
class Array:
    items: Tuple["Node", ...] = ()

    def is_empty(self) -> bool:
        return all(item.is_empty() for item in self.items)

    def prune(self) -> Optional["Node"]:
        items = tuple(p for p in (item.prune() for item in self.items) if p is not None)
        return Array(items) if items else None

    def to_python(self) -> Any:
        return [item.to_python() for item in self.items]


@dataclasses.dataclass(frozen=True)
class Object:
    members: Tuple[Tuple[str, "Node"], ...] = ()

    def is_empty(self) -> bool:
        return all(value.is_empty() for _, value in self.members)

    def prune(self) -> Optional["Node"]:
        members = []
        for key, value in self.members:
            pruned = value.prune()
            if pruned is not None:
                members.append((key, pruned))
        return Object(tuple(members)) if members else None

    def to_python(self) -> Any:
        return {key: value.to_python() for key, value in self.members}


Node = Union[Null, Bool, Number, String, Array, Object]


def to_node(value: Any) -> Node:
    """
    Converts a parsed YAML/JSON value into a ``Node`` tree.

    :raises TypeError: for values that cannot appear in a task definition document
    """
    if value is None:
        return Null()
    # bool is a subclass of int and must be matched first
    if isinstance(value, bool):
        return Bool(value)
    if isinstance(value, (int, float)):
        return Number(value)
    if isinstance(value, str):
        return String(value)
    if isinstance(value, (datetime.date, datetime.datetime)):
        # unquoted timestamps (e.g. registeredAt) are parsed into datetime objects by YAML
        return String(value.isoformat())
    if isinstance(value, (list, tuple)):
        return Array(tuple(to_node(item) for item in value))
    if isinstance(value, dict):
        return Object(tuple((str(key), to_node(item)) for key, item in value.items()))
    raise TypeError(f"Unsupported value of type {type(value).__name__} in task definition")


def is_empty_value(value: Any) -> bool:
    """Whether the given (raw) value is null, an empty string, or a collection of only empty values."""
    return to_node(value).is_empty()


def clean_empty_values(document: Dict[str, Any]) -> Dict[str, Any]:
    """Returns a copy of the document without any empty values, at any depth."""
    pruned = to_node(document).prune()
    return pruned.to_python() if pruned is not None else {}


def remove_ignored_attributes(document: Dict[str, Any]) -> Dict[str, Any]:
    for attribute in IGNORED_TASK_DEFINITION_ATTRIBUTES:
        if attribute in document:
            LOG.warning(
                "Ignoring property '%s' in the task definition file. "
                "This property is returned by the Amazon ECS DescribeTaskDefinition API and may be shown in "
                "the ECS console, but it is not a valid field when registering a new task definition. "
                "This field can be safely removed from your task definition file.",
                attribute,
            )
            del document[attribute]
    return document


def normalize(document: Dict[str, Any]) -> Dict[str, Any]:
    """
    Prepares a task definition document to be used as a RegisterTaskDefinition request: empty values
    are removed recursively (``0`` and ``false`` are kept) and the read-only top-level attributes in
    ``IGNORED_TASK_DEFINITION_ATTRIBUTES`` are dropped, with a warning for each one.

    :param document: the parsed task definition
    :return: the normalized copy of the document
    """
    return remove_ignored_attributes(clean_empty_values(document))


def resolve_task_definition_path(path: str, workspace: str = None) -> str:
    if os.path.isabs(path):
        return path
    workspace = workspace or config.GITHUB_WORKSPACE or os.getcwd()
    return os.path.join(workspace, path)


def load_task_definition(path: str, workspace: str = None) -> Dict[str, Any]:
    """
    Reads and parses a task definition file (YAML or JSON).

    :param path: absolute path, or path relative to the workspace
    :param workspace: root that relative paths are resolved against, defaults to ``GITHUB_WORKSPACE``
        and then the current working directory
    :raises TaskDefinitionFileError: if the file cannot be read or decoded, or does not contain a mapping
        of plain JSON compatible values
    """
    task_definition_path = resolve_task_definition_path(path, workspace)
    try:
        with open(task_definition_path, "r", encoding="utf-8") as fd:
            document = yaml.safe_load(fd)
    except OSError as e:
        raise TaskDefinitionFileError(task_definition_path, e.strerror or str(e)) from e
    except (UnicodeDecodeError, yaml.YAMLError) as e:
        raise TaskDefinitionFileError(task_definition_path, str(e)) from e

    if not isinstance(document, dict):
        raise TaskDefinitionFileError(
            task_definition_path, "the file does not contain a task definition object"
        )
    try:
        # tagged values like !!binary or !!set have no JSON counterpart
        to_node(document)
    except TypeError as e:
        raise TaskDefinitionFileError(task_definition_path, str(e)) from e
    return document
