#!/usr/bin/env python3
"""Tests for the CLI module."""

from unittest.mock import MagicMock

import pytest
import yaml

from dmhelper.cli import build_parser, main
from dmhelper.cli.parsers import split_passthrough
from dmhelper.containers import DockerObject
from dmhelper.interfaces.process import ProcessResult
from dmhelper.paths import CONFIG_FILE_NAME

from conftest import RecordingRunner


def ok(stdout=""):
    return ProcessResult(["x"], 0, stdout, "")


def run_main(argv):
    with pytest.raises(SystemExit) as exc_info:
        main(argv)
    return exc_info.value.code


@pytest.fixture
def runner(tmp_path, monkeypatch):
    """Run the CLI in an empty project directory against a recording runner."""
    monkeypatch.chdir(tmp_path)
    for var in ("DMHELPER_CONFIG", "DMHELPER_MACHINE_NAME"):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.setattr("dmhelper.cli.utils.docker_machine_bin", lambda: "docker-machine")
    monkeypatch.setattr("dmhelper.cli.utils.vboxmanage_bin", lambda: "VBoxManage")

    recording = RecordingRunner()
    monkeypatch.setattr("dmhelper.cli.utils.SubprocessRunner", lambda: recording)
    return recording


@pytest.fixture
def configured(tmp_path, runner):
    (tmp_path / CONFIG_FILE_NAME).write_text(
        yaml.safe_dump({"name": "dev-box", "shared_directories": ["/src"]})
    )
    return runner


@pytest.fixture
def existing(configured):
    configured.responses[("docker-machine", "ls")] = ok("dev-box\n")
    return configured


class TestParser:
    def test_aliases(self):
        parser = build_parser()

        assert parser.parse_args(["b"]).func is parser.parse_args(["bash"]).func
        assert parser.parse_args(["d", "ps"]).func is parser.parse_args(["docker", "ps"]).func
        assert parser.parse_args(["i"]).func is parser.parse_args(["info"]).func

    def test_docker_keeps_option_arguments(self):
        args = build_parser().parse_args(["docker", "ps", "-a"])
        assert args.docker_args == ["ps", "-a"]

    def test_split_passthrough_skips_config_value(self):
        assert split_passthrough(["-c", "d", "b", "-c", "ls"]) == (["-c", "d", "b"], ["-c", "ls"])
        assert split_passthrough(["status", "d"]) == (["status", "d"], [])

    def test_unknown_command_prints_help_and_fails(self, capsys):
        assert run_main(["frobnicate"]) == 1
        assert "usage:" in capsys.readouterr().err

    def test_help_command(self, capsys):
        assert run_main(["help"]) == 0
        out = capsys.readouterr().out
        assert "bash" in out and "inspect" in out


class TestPreflight:
    def test_missing_name_exits_64(self, runner):
        assert run_main(["status"]) == 64
        assert runner.commands == []

    def test_missing_tool_exits_1(self, tmp_path, monkeypatch, capsys):
        monkeypatch.chdir(tmp_path)
        monkeypatch.delenv("DMHELPER_DOCKER_MACHINE_BIN", raising=False)
        monkeypatch.setattr("dmhelper.paths.shutil.which", lambda name: None)

        assert run_main([]) == 1
        assert "docker-machine not found" in capsys.readouterr().err

    @pytest.mark.parametrize("command", ["stop", "rm", "status", "inspect", "info", "d", "b"])
    def test_missing_machine_exits_65_without_mutations(self, configured, command, capsys):
        configured.responses[("docker-machine", "ls")] = ok("other-box\n")

        assert run_main([command]) == 65
        assert configured.commands == [
            ["docker-machine", "ls", "--filter", "driver=virtualbox", "--format", "{{.Name}}"]
        ]
        assert "Machine 'dev-box' does not exist" in capsys.readouterr().err


class TestCommands:
    def test_stop(self, existing):
        assert run_main(["stop"]) == 0
        assert existing.commands[-1] == ["docker-machine", "stop", "dev-box"]

    def test_stop_failure_passes_status_through(self, existing):
        existing.responses[("docker-machine", "stop")] = ProcessResult(["x"], 3, "", "boom")
        assert run_main(["stop"]) == 3

    def test_rm(self, existing):
        assert run_main(["rm"]) == 0
        assert existing.commands[-1] == ["docker-machine", "rm", "--force", "dev-box"]

    def test_status_prints_lowercase(self, existing, capsys):
        existing.responses[("docker-machine", "status")] = ok("Stopped\n")

        assert run_main(["status"]) == 0
        assert capsys.readouterr().out.strip() == "stopped"

    def test_docker_passes_arguments(self, existing):
        assert run_main(["d", "ps", "-a"]) == 0
        assert existing.commands[-1] == ["docker-machine", "ssh", "dev-box", "docker ps -a"]

    @pytest.mark.parametrize(
        "argv, expected",
        [
            (["d", "--version"], "docker --version"),
            (["d", "-h"], "docker -h"),
            (["docker", "--context", "x", "ps"], "docker --context x ps"),
            (["-v", "d", "-H", "tcp://h:2376", "ps"], "docker -H tcp://h:2376 ps"),
        ],
    )
    def test_docker_option_arguments_reach_docker(self, existing, argv, expected):
        assert run_main(argv) == 0
        assert existing.commands[-1] == ["docker-machine", "ssh", "dev-box", expected]

    def test_stop_on_stopped_machine_is_a_no_op(self, existing):
        existing.responses[("docker-machine", "status")] = ok("Stopped\n")

        assert run_main(["stop"]) == 0
        assert [c[1] for c in existing.commands] == ["ls", "ls", "status"]

    def test_docker_status_passed_through(self, existing):
        existing.responses[("docker-machine", "ssh")] = ProcessResult(["x"], 125, "", "")
        assert run_main(["docker", "run", "nope"]) == 125

    def test_up_on_running_machine_only_connects(self, existing, tmp_path):
        existing.responses[("docker-machine", "status")] = ok("Running\n")

        assert run_main([]) == 0
        assert [c[1] for c in existing.commands] == ["ls", "status", "ssh"]
        assert existing.commands[-1] == [
            "docker-machine", "ssh", "dev-box", "-t",
            f"cd {tmp_path.resolve()}; exec $SHELL --login",
        ]

    def test_info(self, existing, capsys):
        existing.responses[("docker-machine", "status")] = ok("Stopped\n")
        existing.responses[("docker-machine", "inspect")] = ok("1024\n")
        existing.responses[("VBoxManage", "guestproperty")] = ok("No value set!\n")
        existing.responses[("VBoxManage", "showvminfo")] = ok(
            'SharedFolderNameMachineMapping1="/src"\nSharedFolderPathMachineMapping1="/src"\n'
        )

        assert run_main(["info"]) == 0
        out = capsys.readouterr().out
        assert "dev-box" in out
        assert "1024M" in out
        assert "/media" in out and "sf_" in out
        assert "/src" in out


class TestBashCommand:
    def _select(self, monkeypatch, answer):
        select = MagicMock()
        select.return_value.ask.return_value = answer
        monkeypatch.setattr("dmhelper.cli.container_commands.questionary.select", select)
        return select

    def test_nothing_to_select(self, existing, capsys):
        assert run_main(["b"]) == 1
        assert "No available containers or images" in capsys.readouterr().err

    def test_cancelled_selection(self, existing, monkeypatch):
        existing.responses[("docker-machine", "ssh", "dev-box", "docker images")] = ok(
            '{"Repository": "alpine", "Tag": "3", "ID": "abc"}\n'
        )
        self._select(monkeypatch, None)

        assert run_main(["b"]) == 1

    def test_run_selected_image_with_command(self, existing, monkeypatch):
        existing.responses[("docker-machine", "ssh", "dev-box", "docker images")] = ok(
            '{"Repository": "alpine", "Tag": "3", "ID": "abc"}\n'
        )
        self._select(monkeypatch, DockerObject("image", "alpine:3"))

        assert run_main(["b", "sh", "-l"]) == 0
        assert existing.commands[-1] == [
            "docker-machine", "ssh", "dev-box", "-t",
            "docker run --rm -it -v /src:/src alpine:3 sh -l",
        ]

    def test_option_like_command_is_passed_through(self, existing, monkeypatch):
        existing.responses[("docker-machine", "ssh", "dev-box", "docker images")] = ok(
            '{"Repository": "alpine", "Tag": "3", "ID": "abc"}\n'
        )
        self._select(monkeypatch, DockerObject("image", "alpine:3"))

        assert run_main(["b", "-c", "ls"]) == 0
        assert existing.commands[-1] == [
            "docker-machine", "ssh", "dev-box", "-t",
            "docker run --rm -it -v /src:/src alpine:3 -c ls",
        ]


class TestInit:
    def test_writes_config(self, runner, tmp_path):
        assert run_main(["init", "my-box", "--memory", "2048"]) == 0

        data = yaml.safe_load((tmp_path / CONFIG_FILE_NAME).read_text())
        assert data["name"] == "my-box"
        assert data["memory_mb"] == 2048
        assert data["shared_directories"] == [str(tmp_path.resolve())]

    def test_refuses_to_overwrite(self, configured):
        assert run_main(["init"]) == 1

    def test_force_overwrites(self, configured, tmp_path):
        assert run_main(["init", "--force"]) == 0
        data = yaml.safe_load((tmp_path / CONFIG_FILE_NAME).read_text())
        assert data["name"] == tmp_path.name