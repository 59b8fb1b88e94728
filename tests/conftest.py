"""
Shared fixtures: a scripted command runner standing in for apigeecli,
gsutil and zip, a fixed clock and a test configuration.
"""
import logging
from datetime import datetime

import pytest

from apigee_backup.config.loader import Config
from apigee_backup.core.logger import ROOT_LOGGER_NAME

NOW = datetime(2024, 3, 1, 12, 0, 0)
TODAY = "2024-03-01"

NO_MATCH = (False, "", "CommandException: One or more URLs matched no objects.")


class FakeRunner:
    """
    Records commands and answers with scripted results.

    Responses are matched on a command prefix. The most recently
    registered matching prefix wins, so register general answers first
    and specific ones after. Unmatched commands succeed with no output.
    """

    def __init__(self):
        self.calls = []
        self.responses = []

    def on(self, *prefix, result=(True, "", "")):
        self.responses.append((tuple(prefix), result))
        return self

    def __call__(self, command, **kwargs):
        self.calls.append((list(command), kwargs))
        for prefix, result in reversed(self.responses):
            if tuple(command[:len(prefix)]) == prefix:
                if isinstance(result, Exception):
                    raise result
                return result
        return True, "", ""

    def commands(self, *prefix):
        return [command for command, _ in self.calls if tuple(command[:len(prefix)]) == prefix]

    def kwargs_for(self, *prefix):
        return [kwargs for command, kwargs in self.calls if tuple(command[:len(prefix)]) == prefix]


@pytest.fixture
def runner():
    return FakeRunner()


@pytest.fixture
def clock():
    return lambda: NOW


@pytest.fixture
def project_file(tmp_path):
    path = tmp_path / "projects.txt"
    path.write_text("proj-a\nproj-b\n", encoding="utf-8")
    return path


@pytest.fixture
def config(tmp_path, project_file):
    return Config(
        project_file=str(project_file),
        bucket="my-bucket",
        token="secret-token",
        webhook_url="https://discord.test/webhook",
        tag_ids=("111", "222"),
        workspace_webhook_url="https://chat.test/webhook",
        backup_dir=str(tmp_path / "staging"),
        log_file=str(tmp_path / "logs" / "apigee.log"),
    )


@pytest.fixture(autouse=True)
def reset_logging():
    yield
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    for handler in list(logger.handlers):
        handler.close()
    logger.handlers.clear()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)
