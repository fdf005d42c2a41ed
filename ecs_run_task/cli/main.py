def main():
    from .run_task import ecs_run_task

    ecs_run_task()


if __name__ == "__main__":
    main()
