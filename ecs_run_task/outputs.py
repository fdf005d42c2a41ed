"""Step outputs, made available to later steps of the workflow."""
import json
import logging
import sys
import uuid
from typing import Any, Dict, Optional

from ecs_run_task import config

LOG = logging.getLogger(__name__)


def format_output_value(value: Any) -> str:
    """Strings are written as-is, everything else is JSON encoded (e.g. the list of task ARNs)."""
    if isinstance(value, str):
        return value
    return json.dumps(value)


class ActionOutputs:
    """
    Publishes step outputs. With a ``GITHUB_OUTPUT`` file (GitHub Actions runners) the outputs are
    appended to it in the multi-line delimiter form, otherwise the ``set-output`` workflow command is
    printed. All published values are also kept in ``values``.
    """

    values: Dict[str, str]

    def __init__(self, output_file: Optional[str] = None, stream=None):
        self.output_file = output_file
        self.stream = stream
        self.values = {}

    @classmethod
    def from_config(cls) -> "ActionOutputs":
        return cls(output_file=config.GITHUB_OUTPUT or None)

    def set_output(self, name: str, value: Any) -> None:
        formatted = format_output_value(value)
        self.values[name] = formatted
        LOG.debug("Setting output %s=%s", name, formatted)

        if self.output_file:
            delimiter = f"ghadelimiter_{uuid.uuid4()}"
            with open(self.output_file, "a", encoding="utf-8") as fd:
                fd.write(f"{name}<<{delimiter}\n{formatted}\n{delimiter}\n")
        else:
            stream = self.stream or sys.stdout
            stream.write(f"::set-output name={name}::{formatted}\n")
            stream.flush()

    def get(self, name: str) -> Optional[str]:
        return self.values.get(name)
