from ecs_run_task.version import __version__

__all__ = ["__version__"]
