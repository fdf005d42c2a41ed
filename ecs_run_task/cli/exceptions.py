import typing as t
from gettext import gettext

import click
from click import ClickException, echo
from click._compat import get_text_stderr

from ecs_run_task import config
from ecs_run_task.logging.format import escape_command_data


class CLIError(ClickException):
    """
    A ClickException that fails the step. On GitHub Actions the message is written as an ``::error::``
    workflow command (to stdout, where the runner reads commands), otherwise as a red error line.
    """

    def format_message(self) -> str:
        if config.GITHUB_ACTIONS:
            return f"::error::{escape_command_data(self.message)}"
        return click.style(f"❌ Error: {self.message}", fg="red")

    def show(self, file: t.Optional[t.IO[t.Any]] = None) -> None:
        if file is None:
            file = click.get_text_stream("stdout") if config.GITHUB_ACTIONS else get_text_stderr()

        echo(gettext(self.format_message()), file=file)
