"""
Pytest fixtures and fakes for docker-machine-helper tests.

The fakes share one ``events`` list so tests can assert on the exact order of
calls across the machine, the hypervisor and the boot script.
"""
from typing import Dict, List, Optional
from unittest.mock import MagicMock

import pytest

from dmhelper.bootlocal import SHEBANG, BootScript
from dmhelper.errors import ExternalToolError
from dmhelper.interfaces.hypervisor import HypervisorBackend, SharedFolder
from dmhelper.interfaces.machine import MachineBackend
from dmhelper.interfaces.process import ProcessResult, ProcessRunner
from dmhelper.models import MachineConfig


class FakeMachine(MachineBackend):
    driver = "virtualbox"

    def __init__(self, events: list, machines: Optional[Dict[str, str]] = None):
        self.events = events
        self.machines: Dict[str, str] = dict(machines or {})
        self.inspect_output: Dict[str, str] = {}
        self.exec_output: Dict[str, str] = {}
        self.ssh_status = 0

    def list_machines(self) -> List[str]:
        self.events.append(("ls",))
        return list(self.machines)

    def status(self, name: str) -> str:
        self.events.append(("status", name))
        return self.machines.get(name, "")

    def create(self, name, memory_mb, disk_size_mb):
        self.events.append(("create", name, memory_mb, disk_size_mb))
        self.machines[name] = "running"

    def start(self, name):
        self.events.append(("start", name))
        self.machines[name] = "running"

    def stop(self, name):
        self.events.append(("stop", name))
        self.machines[name] = "stopped"

    def restart(self, name):
        self.events.append(("restart", name))
        self.machines[name] = "running"

    def remove(self, name):
        self.events.append(("rm", name))
        self.machines.pop(name, None)

    def inspect(self, name, fmt=None):
        self.events.append(("inspect", name, fmt))
        return ProcessResult(["docker-machine", "inspect"], 0, self.inspect_output.get(fmt, ""))

    def execute(self, name, command, check=True):
        self.events.append(("execute", name, command))
        return ProcessResult(["docker-machine", "ssh"], 0, self.exec_output.get(command, ""))

    def ssh(self, name, command=None, tty=True):
        self.events.append(("ssh", name, command, tty))
        return self.ssh_status


class FakeHypervisor(HypervisorBackend):
    name = "virtualbox"

    def __init__(self, events: list):
        self.events = events
        self.folders: Dict[str, List[SharedFolder]] = {}
        self.failing: set = set()
        self.properties: Dict[str, str] = {}

    def vm_info(self, vm):
        return {}

    def shared_folders(self, vm):
        return list(self.folders.get(vm, []))

    def add_shared_folder(self, vm, name, host_path, automount=True):
        if host_path in self.failing:
            raise ExternalToolError(["VBoxManage", "sharedfolder", "add"], 1, "VBOX_E_FILE_ERROR")
        self.events.append(("sharedfolder_add", vm, host_path))
        self.folders.setdefault(vm, []).append(SharedFolder(name=name, host_path=host_path))

    def guest_property(self, vm, key):
        return self.properties.get(key)


class FakeBootScript(BootScript):
    def __init__(self, events: list, lines: Optional[List[str]] = None):
        self.events = events
        self.content: Optional[List[str]] = list(lines) if lines is not None else None

    def exists(self):
        return self.content is not None

    def create(self):
        self.events.append(("seed",))
        self.content = [SHEBANG]

    def read(self):
        return "\n".join(self.content or []) + "\n"

    def append(self, line):
        self.events.append(("append", line))
        self.content.append(line)


class RecordingRunner(ProcessRunner):
    """Runner returning canned results for commands starting with a given prefix."""

    def __init__(self, responses: Optional[Dict[tuple, ProcessResult]] = None):
        self.commands: List[List[str]] = []
        self.responses = responses or {}

    def run(self, command, capture_output=True, check=True):
        self.commands.append(list(command))
        joined = " ".join(command)
        for prefix, result in self.responses.items():
            if joined.startswith(" ".join(prefix)):
                if check and result.returncode != 0:
                    raise ExternalToolError(list(command), result.returncode, result.stderr)
                return result
        return ProcessResult(list(command), 0, "", "")


@pytest.fixture
def events():
    return []


@pytest.fixture
def machine(events):
    return FakeMachine(events)


@pytest.fixture
def hypervisor(events):
    return FakeHypervisor(events)


@pytest.fixture
def boot_script(events):
    return FakeBootScript(events)


@pytest.fixture
def dev_box_config():
    """One machine, one shared directory, docker-compose only."""
    return MachineConfig(
        name="dev-box",
        shared_directories=["/home/user/project"],
        docker_compose_version="1.24.1",
        dive_version="",
        disable_swap=False,
        default_ssh_command="cd /home/user/project; exec $SHELL --login",
    )


@pytest.fixture
def quiet_console(monkeypatch):
    """Silence rich output from the provisioner."""
    fake = MagicMock()
    monkeypatch.setattr("dmhelper.provisioner.console", fake)
    monkeypatch.setattr("dmhelper.output.console", fake)
    monkeypatch.setattr("dmhelper.output.err_console", fake)
    return fake
