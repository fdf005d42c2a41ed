import pytest

from ecs_run_task import config

TEST_AWS_ACCESS_KEY_ID = "test"
TEST_AWS_SECRET_ACCESS_KEY = "test"
TEST_AWS_REGION_NAME = "us-east-1"


@pytest.fixture(autouse=True)
def set_boto_test_credentials_and_region(monkeypatch):
    """
    Automatically sets the default credentials and region for all unit tests.
    """
    monkeypatch.setenv("AWS_ACCESS_KEY_ID", TEST_AWS_ACCESS_KEY_ID)
    monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", TEST_AWS_SECRET_ACCESS_KEY)
    monkeypatch.setenv("AWS_DEFAULT_REGION", TEST_AWS_REGION_NAME)


@pytest.fixture(autouse=True)
def isolate_from_github_actions(monkeypatch):
    """
    Makes sure tests behave the same when they are executed in a GitHub Actions workflow.
    """
    monkeypatch.setattr(config, "GITHUB_ACTIONS", False)
    monkeypatch.setattr(config, "GITHUB_OUTPUT", "")
    monkeypatch.setattr(config, "GITHUB_WORKSPACE", "")
    monkeypatch.setattr(config, "DEBUG", False)
    monkeypatch.setattr(config, "LOG_LEVEL", False)


@pytest.fixture
def ecs_client():
    import boto3

    return boto3.client("ecs", region_name=TEST_AWS_REGION_NAME)
