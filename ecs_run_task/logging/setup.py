import logging
import sys
import warnings

from ecs_run_task import config

from .format import AddFormattedAttributes, DefaultFormatter, WorkflowCommandFormatter

default_log_levels = {
    "boto3": logging.INFO,
    "botocore": logging.ERROR,
    "s3transfer": logging.INFO,
    "urllib3": logging.WARNING,
}


def get_log_level_from_config() -> int:
    # overriding the log level if ECS_RUN_TASK_LOG has been set
    if config.LOG_LEVEL:
        log_level = str(config.LOG_LEVEL).upper()
        if log_level == "TRACE":
            log_level = "DEBUG"
        return logging.getLevelName(log_level)

    return logging.DEBUG if config.DEBUG else logging.INFO


def create_default_handler(log_level: int) -> logging.Handler:
    if config.GITHUB_ACTIONS:
        # workflow commands are read from stdout, the runner decides whether to show debug output
        log_handler = logging.StreamHandler(stream=sys.stdout)
        log_handler.setLevel(logging.DEBUG)
        log_handler.setFormatter(WorkflowCommandFormatter())
        return log_handler

    log_handler = logging.StreamHandler(stream=sys.stderr)
    log_handler.setLevel(log_level)
    log_handler.setFormatter(DefaultFormatter())
    log_handler.addFilter(AddFormattedAttributes())
    return log_handler


def setup_logging(log_level=logging.INFO) -> None:
    """
    Configures the python logging environment for ecs-run-task.

    :param log_level: the optional log level.
    """
    log_handler = create_default_handler(log_level)

    # replace any existing handlers
    logging.basicConfig(level=log_level, handlers=[log_handler], force=True)

    # disable some logs and warnings
    warnings.filterwarnings("ignore")
    logging.captureWarnings(True)

    # set log levels of loggers
    logging.root.setLevel(log_level)
    logging.getLogger("ecs_run_task").setLevel(log_level)
    for logger, level in default_log_levels.items():
        logging.getLogger(logger).setLevel(level)


def setup_logging_from_config() -> None:
    log_level = get_log_level_from_config()
    if config.GITHUB_ACTIONS:
        # ::debug:: lines are hidden by the runner unless step debugging is enabled
        log_level = logging.DEBUG
    setup_logging(log_level)
