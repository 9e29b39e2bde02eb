"""docker-machine backend implementation."""

from typing import List, Optional

import structlog

from dmhelper.backends.subprocess_runner import SubprocessRunner
from dmhelper.interfaces.machine import MachineBackend
from dmhelper.interfaces.process import ProcessResult, ProcessRunner
from dmhelper.paths import DOCKER_MACHINE

log = structlog.get_logger(__name__)


class DockerMachineBackend(MachineBackend):
    """Drive machines through the ``docker-machine`` CLI.

    Lifecycle commands run attached to the terminal so the tool's own progress
    output reaches the operator; queries capture their output.
    """

    driver = "virtualbox"

    def __init__(self, binary: str = DOCKER_MACHINE, runner: Optional[ProcessRunner] = None):
        self.binary = binary
        self.runner = runner or SubprocessRunner()

    def _command(self, *args: str) -> List[str]:
        return [self.binary, *args]

    def list_machines(self) -> List[str]:
        result = self.runner.run(
            self._command("ls", "--filter", f"driver={self.driver}", "--format", "{{.Name}}")
        )
        return [line.strip() for line in result.stdout.splitlines() if line.strip()]

    def status(self, name: str) -> str:
        result = self.runner.run(self._command("status", name), check=False)
        if not result.success:
            return ""
        return result.stdout.strip().lower()

    def create(self, name: str, memory_mb: int, disk_size_mb: int) -> None:
        log.info("machine.create", machine=name, memory_mb=memory_mb, disk_size_mb=disk_size_mb)
        self.runner.run(
            self._command(
                "create",
                "--driver", self.driver,
                "--virtualbox-memory", str(memory_mb),
                "--virtualbox-disk-size", str(disk_size_mb),
                "--virtualbox-no-share",
                name,
            ),
            capture_output=False,
        )

    def start(self, name: str) -> None:
        log.info("machine.start", machine=name)
        self.runner.run(self._command("start", name), capture_output=False)

    def stop(self, name: str) -> None:
        log.info("machine.stop", machine=name)
        self.runner.run(self._command("stop", name), capture_output=False)

    def restart(self, name: str) -> None:
        log.info("machine.restart", machine=name)
        self.runner.run(self._command("restart", name), capture_output=False)

    def remove(self, name: str) -> None:
        log.info("machine.remove", machine=name)
        self.runner.run(self._command("rm", "--force", name), capture_output=False)

    def inspect(self, name: str, fmt: Optional[str] = None) -> ProcessResult:
        if fmt is None:
            return self.runner.run(self._command("inspect", name), capture_output=False)
        return self.runner.run(self._command("inspect", f"--format={fmt}", name))

    def execute(self, name: str, command: str, check: bool = True) -> ProcessResult:
        return self.runner.run(self._command("ssh", name, command), check=check)

    def ssh(self, name: str, command: Optional[str] = None, tty: bool = True) -> int:
        cmd = self._command("ssh", name)
        if command:
            if tty:
                cmd.append("-t")
            cmd.append(command)
        result = self.runner.run(cmd, capture_output=False, check=False)
        return result.returncode
