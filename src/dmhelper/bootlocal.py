"""
Boot2Docker ``bootlocal.sh`` management.

``bootlocal.sh`` is persistent and executed on every machine boot, which makes
it the place to apply setup that would otherwise be lost on restart (mounts,
swap policy, tool installs). Lines are only ever appended, and only when they
are not present yet, so re-running a setup step never duplicates it.
"""

import re
import shlex
from abc import ABC, abstractmethod
from typing import List

import structlog

from dmhelper.interfaces.machine import MachineBackend

log = structlog.get_logger(__name__)

BOOTLOCAL_PATH = "/var/lib/boot2docker/bootlocal.sh"
SHEBANG = "#!/usr/bin/env sh"


# ── line builders ────────────────────────────────────────────────────────────

def swap_lines() -> List[str]:
    return ["sysctl vm.swappiness=0", "swapoff -a"]


def mount_lines(directory: str) -> List[str]:
    """Create *directory* in the guest and mount the same-named vboxsf share on it."""
    return [
        f"mkdir -p {directory}",
        "mount -t vboxsf -o defaults,uid=`id -u docker`,gid=`id -g docker` "
        f"{directory} {directory}",
    ]


def docker_compose_install_line(version: str) -> str:
    return (
        f"curl -L https://github.com/docker/compose/releases/download/{version}/"
        "docker-compose-`uname -s`-`uname -m` -o /usr/local/bin/docker-compose"
        " && chmod +x /usr/local/bin/docker-compose"
    )


def dive_install_line(version: str, tmp_file: str = "/tmp/dive.rpm") -> str:
    return (
        f"wget -qO {tmp_file} https://github.com/wagoodman/dive/releases/download/"
        f"v{version}/dive_{version}_linux_amd64.rpm"
        f" && rpm -i {tmp_file} && rm {tmp_file}"
    )


# ── script access ────────────────────────────────────────────────────────────

class BootScript(ABC):
    """A boot script that can only grow by idempotent line appends."""

    @abstractmethod
    def exists(self) -> bool:
        pass

    @abstractmethod
    def create(self) -> None:
        """Create the script, make it executable and seed the shebang line."""
        pass

    @abstractmethod
    def read(self) -> str:
        pass

    @abstractmethod
    def append(self, line: str) -> None:
        """Append *line* unconditionally."""
        pass

    def ensure(self) -> bool:
        """Create the script when missing. Returns True if it was created."""
        if self.exists():
            return False
        self.create()
        return True

    def lines(self) -> List[str]:
        return [line.rstrip() for line in self.read().splitlines()]

    def contains(self, line: str) -> bool:
        return line.strip() in (existing.strip() for existing in self.lines())

    def references(self, word: str) -> bool:
        """True if any line mentions *word* as a whole whitespace-delimited token."""
        pattern = re.compile(rf"(?<!\S){re.escape(word)}(?!\S)")
        return any(pattern.search(line) for line in self.lines())

    def append_once(self, line: str) -> bool:
        """Append *line* unless an identical line exists. Returns True if written."""
        if self.contains(line):
            log.debug("bootlocal.line_present", line=line)
            return False
        self.append(line)
        log.debug("bootlocal.line_appended", line=line)
        return True


class RemoteBootScript(BootScript):
    """``bootlocal.sh`` inside a machine, edited over ``docker-machine ssh``."""

    def __init__(self, machine: MachineBackend, name: str, path: str = BOOTLOCAL_PATH):
        self.machine = machine
        self.name = name
        self.path = path

    def _exec(self, command: str, check: bool = True):
        return self.machine.execute(self.name, command, check=check)

    def exists(self) -> bool:
        return self._exec(f"sudo test -f {self.path}", check=False).success

    def create(self) -> None:
        self._exec(f"sudo touch {self.path}")
        self._exec(f"sudo chmod +x {self.path}")
        self._exec(f"echo {shlex.quote(SHEBANG)} | sudo tee {self.path} > /dev/null")

    def read(self) -> str:
        return self._exec(f"sudo cat {self.path}").stdout

    def append(self, line: str) -> None:
        self._exec(f"echo {shlex.quote(line)} | sudo tee -a {self.path} > /dev/null")
