from .run_task import ecs_run_task

name = "cli"

__all__ = [
    "ecs_run_task",
]
