import logging
import os

import pytest
from click.testing import CliRunner

import lavalinkctl.cli as cli_module
import lavalinkctl.services.runtime_selector as runtime_selector_module
from lavalinkctl.errors import RuntimeNotFoundError

CONFIG_VARIABLES = (
    "LAVALINK_CONTAINER_NAME",
    "LAVALINK_CONTAINER_IMAGE",
    "LAVALINK_INTERACTIVE",
    "LAVALINK_PORT",
    "LAVALINK_ADDRESS",
    "LAVALINK_SERVER_PASSWORD",
    "CONTAINER_RUNTIME",
)


@pytest.fixture
def launches(monkeypatch):
    recorded = {"commands": [], "created": 0, "status": 0, "error": None}

    class FakeLauncher:
        def __init__(self, logger):
            recorded["created"] += 1

        def exec(self, command):
            recorded["commands"].append(command.argv)
            if recorded["error"] is not None:
                raise recorded["error"]
            return recorded["status"]

    monkeypatch.setattr(cli_module, "ProcessLauncher", FakeLauncher)
    return recorded


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    for variable in CONFIG_VARIABLES:
        monkeypatch.delenv(variable, raising=False)
    monkeypatch.chdir(tmp_path)
    return tmp_path


def _installed(monkeypatch, *names):
    monkeypatch.setattr(
        runtime_selector_module.shutil,
        "which",
        lambda name: f"/usr/bin/{name}" if name in names else None,
    )


def test_missing_verb_prints_usage_and_runs_nothing(clean_env, launches):
    result = CliRunner().invoke(cli_module.main, [])

    assert result.exit_code == 2
    assert "Usage:" in result.output
    assert launches["created"] == 0
    assert launches["commands"] == []


def test_unknown_verb_prints_usage_and_runs_nothing(clean_env, launches):
    result = CliRunner().invoke(cli_module.main, ["frobnicate", "--force"])

    assert result.exit_code == 2
    assert "Usage:" in result.output
    assert "frobnicate" in result.output
    assert launches["commands"] == []


def test_down_scenario_with_docker(clean_env, launches, monkeypatch):
    _installed(monkeypatch, "docker")

    result = CliRunner().invoke(cli_module.main, ["down", "--time", "5"])

    assert result.exit_code == 0
    assert launches["commands"] == [["docker", "rm", "-f", "--time", "5", "musicbot2-lavalink"]]


@pytest.mark.parametrize(
    "args, expected_prefix",
    [
        (["up"], ["podman", "run", "--rm"]),
        (["down"], ["podman", "rm", "-f"]),
        (["logs", "--follow"], ["podman", "logs", "--follow"]),
    ],
)
def test_runtime_override_forces_podman(clean_env, launches, monkeypatch, args, expected_prefix):
    _installed(monkeypatch, "docker")

    result = CliRunner().invoke(cli_module.main, args, env={"CONTAINER_RUNTIME": "podman"})

    assert result.exit_code == 0
    argv = launches["commands"][0]
    assert argv[: len(expected_prefix)] == expected_prefix
    assert "docker" not in argv


def test_up_uses_layered_configuration(clean_env, launches, monkeypatch):
    _installed(monkeypatch, "podman", "docker")
    (clean_env / ".env").write_text(
        "LAVALINK_PORT=2333\nLAVALINK_INTERACTIVE=true\n",
        encoding="utf-8",
    )
    (clean_env / ".env.local").write_text("LAVALINK_INTERACTIVE=false\n", encoding="utf-8")

    result = CliRunner().invoke(
        cli_module.main,
        ["up", "--memory", "1g"],
        env={"LAVALINK_SERVER_PASSWORD": "s3cret"},
    )

    assert result.exit_code == 0
    argv = launches["commands"][0]
    assert argv[:3] == ["podman", "run", "--rm"]
    assert "SERVER_PORT=2333" in argv
    assert "LAVALINK_SERVER_PASSWORD=s3cret" in argv
    assert argv[-4:] == ["--detach", "--memory", "1g", "fredboat/lavalink:master"]
    assert "--interactive" not in argv


def test_options_after_verb_are_passed_through(clean_env, launches, monkeypatch):
    _installed(monkeypatch, "docker")

    result = CliRunner().invoke(cli_module.main, ["logs", "--help", "--verbose", "--", "-f"])

    assert result.exit_code == 0
    assert launches["commands"] == [
        ["docker", "logs", "--help", "--verbose", "--", "-f", "musicbot2-lavalink"]
    ]


def test_project_root_option_locates_env_files(clean_env, launches, monkeypatch, tmp_path):
    _installed(monkeypatch, "docker")
    project = tmp_path / "bot"
    project.mkdir()
    (project / ".env").write_text("LAVALINK_CONTAINER_NAME=bot-lavalink\n", encoding="utf-8")

    result = CliRunner().invoke(cli_module.main, ["--project-root", str(project), "logs"])

    assert result.exit_code == 0
    assert launches["commands"] == [["docker", "logs", "bot-lavalink"]]


def test_dry_run_prints_command_without_executing(clean_env, launches, monkeypatch):
    _installed(monkeypatch, "docker")

    result = CliRunner().invoke(cli_module.main, ["--dry-run", "up", "--label", "team=music bot"])

    assert result.exit_code == 0
    volume = os.path.join(os.getcwd(), "lavalink", "application.yml")
    assert f"{volume}:/opt/Lavalink/application.yml" in result.output
    assert "'team=music bot' fredboat/lavalink:master" in result.output
    assert launches["commands"] == []


def test_delegated_exit_status_is_propagated(clean_env, launches, monkeypatch):
    _installed(monkeypatch, "docker")
    launches["status"] = 125

    result = CliRunner().invoke(cli_module.main, ["up"])

    assert result.exit_code == 125


def test_missing_runtime_exits_with_command_not_found(clean_env, launches, monkeypatch):
    _installed(monkeypatch)
    launches["error"] = RuntimeNotFoundError("Container runtime `docker` was not found on PATH.")

    result = CliRunner().invoke(cli_module.main, ["logs"])

    assert result.exit_code == 127
    assert "was not found on PATH" in result.output
    assert launches["commands"] == [["docker", "logs", "musicbot2-lavalink"]]


def test_malformed_env_file_stops_before_runtime_call(clean_env, launches, monkeypatch):
    _installed(monkeypatch, "docker")
    (clean_env / ".env").write_text("this is not valid\n", encoding="utf-8")

    result = CliRunner().invoke(cli_module.main, ["down"])

    assert result.exit_code == 1
    assert "Invalid environment file" in result.output
    assert launches["commands"] == []


def test_log_file_records_dispatch_details(clean_env, launches, monkeypatch):
    _installed(monkeypatch, "docker")
    log_file = clean_env / "lavalinkctl.log"
    logger = logging.getLogger("lavalinkctl")
    root_level = logging.getLogger().level

    try:
        result = CliRunner().invoke(
            cli_module.main,
            ["--verbose", "--log-file", str(log_file), "logs"],
        )
    finally:
        for handler in list(logger.handlers):
            handler.close()
            logger.removeHandler(handler)
        logger.setLevel(logging.NOTSET)
        logging.getLogger().setLevel(root_level)

    assert result.exit_code == 0
    content = log_file.read_text(encoding="utf-8")
    assert "Dispatching 'logs' via docker (detected)" in content
    assert "[DEBUG]" in content


def test_log_file_without_verbose_records_info_and_warnings_only(clean_env, launches, monkeypatch):
    _installed(monkeypatch)
    log_file = clean_env / "lavalinkctl.log"
    logger = logging.getLogger("lavalinkctl")

    try:
        result = CliRunner().invoke(cli_module.main, ["--log-file", str(log_file), "down"])
        level = logger.level
        file_levels = [handler.level for handler in logger.handlers]
    finally:
        for handler in list(logger.handlers):
            handler.close()
            logger.removeHandler(handler)
        logger.setLevel(logging.NOTSET)

    assert result.exit_code == 0
    assert level == logging.INFO
    assert file_levels == [logging.INFO]
    content = log_file.read_text(encoding="utf-8")
    assert "[WARNING] No container runtime found" in content
    assert "[DEBUG]" not in content
