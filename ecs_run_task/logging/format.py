"""Tools for formatting ecs-run-task logs."""
import logging
from functools import lru_cache

MAX_NAME_LEN = 26

LOG_FORMAT = f"%(asctime)s.%(msecs)03d %(ert_level)5s --- %(ert_name)-{MAX_NAME_LEN}s : %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%dT%H:%M:%S"

CUSTOM_LEVEL_NAMES = {
    50: "FATAL",
    40: "ERROR",
    30: "WARN",
    20: "INFO",
    10: "DEBUG",
}

# log levels rendered as GitHub Actions workflow commands, everything else is printed as-is
WORKFLOW_COMMANDS = {
    logging.DEBUG: "debug",
    logging.WARNING: "warning",
    logging.ERROR: "error",
    logging.CRITICAL: "error",
}


class DefaultFormatter(logging.Formatter):
    """
    A formatter that uses ``LOG_FORMAT`` and ``LOG_DATE_FORMAT``.
    """

    def __init__(self, fmt=LOG_FORMAT, datefmt=LOG_DATE_FORMAT):
        super(DefaultFormatter, self).__init__(fmt=fmt, datefmt=datefmt)


class WorkflowCommandFormatter(logging.Formatter):
    """
    Formats records as GitHub Actions workflow commands, e.g. ``::warning::message``, so the runner
    annotates warnings and errors and hides debug output unless step debugging is enabled.
    """

    def __init__(self):
        super(WorkflowCommandFormatter, self).__init__(fmt="%(message)s")

    def format(self, record: logging.LogRecord) -> str:
        message = super(WorkflowCommandFormatter, self).format(record)
        command = WORKFLOW_COMMANDS.get(record.levelno)
        if not command:
            return message
        return f"::{command}::{escape_command_data(message)}"


def escape_command_data(data: str) -> str:
    """Escapes the data of a workflow command, multi-line messages are kept in one command."""
    return data.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


class AddFormattedAttributes(logging.Filter):
    """
    Filter that adds two attributes to a log record:

    - ert_level: the abbreviated loglevel that's max 5 characters long
    - ert_name: the abbreviated name of the logger (e.g., `e.watcher`), trimmed to ``MAX_NAME_LEN``
    """

    max_name_len: int

    def __init__(self, max_name_len: int = None):
        super(AddFormattedAttributes, self).__init__()
        self.max_name_len = max_name_len if max_name_len else MAX_NAME_LEN

    def filter(self, record):
        record.ert_level = CUSTOM_LEVEL_NAMES.get(record.levelno, record.levelname)
        record.ert_name = self._get_compressed_logger_name(record.name)
        return True

    @lru_cache(maxsize=256)
    def _get_compressed_logger_name(self, name):
        return compress_logger_name(name, self.max_name_len)


def compress_logger_name(name: str, length: int) -> str:
    """
    Creates a short version of a logger name. For example ``my.very.long.logger.name`` with length=17 turns into
    ``m.v.l.logger.name``.

    :param name: the logger name
    :param length: the max length of the logger name
    :return: the compressed name
    """
    if len(name) <= length:
        return name

    parts = name.split(".")
    parts.reverse()

    new_parts = []

    # start with every part collapsed, x.x.x requires 2n - 1 characters
    cur_length = (len(parts) * 2) - 1

    for i in range(len(parts)):
        part = parts[i]
        next_len = cur_length + (len(part) - 1)

        if next_len > length:
            # only the first letter of all remaining parts fits
            new_parts += [p[0] for p in parts[i:]]

            # the innermost part is shown as far as the length allows
            if i == 0:
                remaining = length - cur_length
                if remaining > 0:
                    new_parts[0] = part[: (remaining + 1)]

            break

        new_parts.append(part)
        cur_length = next_len

    new_parts.reverse()
    return ".".join(new_parts)
