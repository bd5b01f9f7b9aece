from unittest import mock

import pytest
from typer.testing import CliRunner

from dockstream.cli import app
from dockstream.managers.image.base import DaemonOperationError, ImageValidationError, Operation


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def manager():
    with mock.patch("dockstream.cli.ImageManager") as image_manager:
        yield image_manager


def test_build_command(runner, manager):
    result = runner.invoke(app, ["--url", "tcp://daemon:2375", "build", "./app", "-t", "myapp:1.0"])

    assert result.exit_code == 0, result.output
    config = manager.call_args.args[0]
    assert config.url == "tcp://daemon:2375"
    manager.return_value.build_image.assert_called_once_with("./app", "myapp:1.0")


def test_build_failure_exits_with_error(runner, manager):
    manager.return_value.build_image.side_effect = DaemonOperationError(Operation.BUILD, "no space left on device")

    result = runner.invoke(app, ["build", "./app", "-t", "myapp:1.0"])

    assert result.exit_code == 1


def test_push_splits_tag_from_repository(runner, manager):
    result = runner.invoke(app, ["-u", "alice", "-p", "secret", "push", "registry:5000/myapp:1.0"])

    assert result.exit_code == 0, result.output
    manager.return_value.push_image.assert_called_once_with("registry:5000/myapp", "1.0")
    assert manager.call_args.args[0].auth_config == {"username": "alice", "password": "secret"}


def test_push_with_explicit_tag(runner, manager):
    result = runner.invoke(app, ["push", "registry/myapp", "-t", "2.0"])

    assert result.exit_code == 0, result.output
    manager.return_value.push_image.assert_called_once_with("registry/myapp", "2.0")


def test_tag_command(runner, manager):
    result = runner.invoke(app, ["tag", "3f2a1b", "myapp:stable"])

    assert result.exit_code == 0, result.output
    manager.return_value.tag_image.assert_called_once_with("3f2a1b", "myapp", "stable")


def test_tag_validation_error_exits_with_error(runner, manager):
    manager.return_value.tag_image.side_effect = ImageValidationError("image_id")

    result = runner.invoke(app, ["tag", " ", "myapp"])

    assert result.exit_code == 1


def test_bad_config_file_exits_with_error(runner, manager, tmp_path):
    path = tmp_path / "dockstream.json"
    path.write_text('{"docker": 1}', encoding="utf-8")

    result = runner.invoke(app, ["--config", str(path), "build", "./app", "-t", "myapp:1.0"])

    assert result.exit_code == 1
    manager.assert_not_called()


@pytest.mark.parametrize("reachable, exit_code", [(True, 0), (False, 1)])
def test_ping_command(runner, manager, reachable, exit_code):
    manager.return_value.ping.return_value = reachable

    result = runner.invoke(app, ["ping"])

    assert result.exit_code == exit_code
