import logging
import traceback
from typing import Optional

import click

from ecs_run_task import __version__, config
from ecs_run_task.config import RunTaskInputs, input_env_var_name
from ecs_run_task.exceptions import EcsRunTaskError

from .exceptions import CLIError

LOG = logging.getLogger(__name__)


class EcsRunTaskCommand(click.Command):
    """
    The ``ecs-run-task`` command. It implements global exception handling by:

    - Raising click exceptions unmodified (already handled)
    - Converting every other exception into a single CLIError, which fails the step with the message
      of the error. The traceback is only logged at debug level.
    """

    def invoke(self, ctx: click.Context):
        try:
            return super(EcsRunTaskCommand, self).invoke(ctx)
        except click.exceptions.Exit:
            # raise Exit exceptions unmodified (e.g., raised on --help)
            raise
        except click.ClickException:
            LOG.debug(traceback.format_exc())
            raise
        except EcsRunTaskError as e:
            LOG.debug(traceback.format_exc())
            raise CLIError(e.message) from e
        except Exception as e:
            LOG.debug(traceback.format_exc())
            raise CLIError(str(e)) from e


def _input_option(name: str, help: str, **kwargs):
    """An option that can also be passed as GitHub Actions input (``INPUT_<NAME>`` env variable)."""
    return click.option(
        f"--{name}",
        type=str,
        envvar=input_env_var_name(name),
        show_envvar=True,
        help=help,
        **kwargs,
    )


@click.command(
    name="ecs-run-task",
    cls=EcsRunTaskCommand,
    context_settings={"help_option_names": ["-h", "--help"]},
)
@click.version_option(
    __version__,
    "--version",
    "-v",
    message="ecs-run-task %(version)s",
    help="Show the version and exit",
)
@_input_option("task-definition", "Path to the task definition file (YAML or JSON)")
@_input_option("cluster", "Name of the ECS cluster to run the tasks on")
@_input_option("count", "Number of tasks to run")
@_input_option("started-by", "Value of the startedBy tag of the tasks")
@_input_option("wait-for-finish", "Wait for the tasks to stop and check their exit codes (true/false)")
@_input_option("wait-for-minutes", "How long to wait for the tasks to stop (capped at 360)")
@_input_option("container-to-watch", "Only check the exit code of the container with this name")
@_input_option("subnets", "Comma separated list of subnet IDs")
@_input_option("security-groups", "Comma separated list of security group IDs")
@_input_option("launch-type", "Launch type of the tasks, e.g. FARGATE")
@_input_option("capacity-provider-strategy", "JSON encoded capacity provider strategy")
@_input_option("assign-public-ip", "Assign a public IP to the tasks (ENABLED/DISABLED)")
@_input_option("task-role-override", "ARN of the task role to use instead of the one of the task definition")
@_input_option(
    "task-execution-role-override",
    "ARN of the execution role to use instead of the one of the task definition",
)
@click.option("-d", "--debug", is_flag=True, help="Enable debug logging")
def ecs_run_task(debug: bool, **inputs: Optional[str]) -> None:
    """
    Register an Amazon ECS task definition and run it, optionally waiting for the tasks to stop.

    Every option can also be passed as GitHub Actions step input.
    """
    from ecs_run_task.aws.connect import connect_to
    from ecs_run_task.logging.setup import setup_logging_from_config
    from ecs_run_task.outputs import ActionOutputs
    from ecs_run_task.runner import TaskRunner

    if debug:
        config.DEBUG = True
    setup_logging_from_config()

    run_inputs = RunTaskInputs.from_mapping(
        {name.replace("_", "-"): value for name, value in inputs.items()}
    )

    runner = TaskRunner(connect_to.get_client("ecs"), ActionOutputs.from_config())
    runner.execute(run_inputs)
