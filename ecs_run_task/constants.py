import ecs_run_task

# ecs-run-task version
VERSION = ecs_run_task.__version__

# user agent reported to AWS and default value of the "started-by" input
USER_AGENT = "amazon-ecs-run-task-for-github-actions"

# cluster used by ECS when no cluster is given
DEFAULT_CLUSTER = "default"

# default for the "assign-public-ip" input
DEFAULT_ASSIGN_PUBLIC_IP = "DISABLED"

# polling settings for waiting on stopped tasks
WAIT_DEFAULT_DELAY_SEC = 5
DEFAULT_WAIT_MINUTES = 30
MAX_WAIT_MINUTES = 360

# task lifecycle state that cannot transition any further
TASK_STATUS_STOPPED = "STOPPED"

# link to the task list of a cluster in the ECS console
ECS_CONSOLE_TASKS_URL = (
    "https://console.aws.amazon.com/ecs/home?region={region}#/clusters/{cluster}/tasks"
)

# environment variable prefix GitHub Actions uses to pass step inputs
ENV_INPUT_PREFIX = "INPUT_"

# names of the outputs published by the run
OUTPUT_TASK_DEFINITION_ARN = "task-definition-arn"
OUTPUT_TASK_ARN = "task-arn"

TRUE_STRINGS = ("1", "true", "True", "TRUE")

# accepted values of the ECS_RUN_TASK_LOG variable
LOG_LEVELS = ("trace", "debug", "info", "warn", "error", "warning")
