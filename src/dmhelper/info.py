"""Collect a summary of the managed machine for the ``info`` command."""

from dataclasses import dataclass, field
from typing import List, Optional

import structlog

from dmhelper.errors import ExternalToolError
from dmhelper.interfaces.hypervisor import HypervisorBackend, SharedFolder
from dmhelper.interfaces.machine import MachineBackend

log = structlog.get_logger(__name__)

MOUNT_DIR_PROPERTY = "/VirtualBox/GuestAdd/SharedFolders/MountDir"
MOUNT_PREFIX_PROPERTY = "/VirtualBox/GuestAdd/SharedFolders/MountPrefix"
DEFAULT_MOUNT_DIR = "/media"
DEFAULT_MOUNT_PREFIX = "sf_"


@dataclass
class MachineSummary:
    name: str
    state: str
    ip_address: Optional[str] = None
    memory: str = ""
    memory_usage: Optional[str] = None  # `free -h` output while running
    mount_dir: str = DEFAULT_MOUNT_DIR
    mount_prefix: str = DEFAULT_MOUNT_PREFIX
    shared_folders: List[SharedFolder] = field(default_factory=list)

    @property
    def running(self) -> bool:
        return self.state == "running"


def collect_summary(
    machine: MachineBackend, hypervisor: HypervisorBackend, name: str
) -> MachineSummary:
    summary = MachineSummary(name=name, state=machine.status(name))

    if summary.running:
        summary.ip_address = machine.inspect(name, "{{.Driver.IPAddress}}").stdout.strip()
        summary.memory_usage = machine.execute(name, "free -h").stdout.rstrip()
    else:
        memory = machine.inspect(name, "{{.Driver.Memory}}").stdout.strip()
        summary.memory = f"{memory}M" if memory else ""

    summary.mount_dir = (
        hypervisor.guest_property(name, MOUNT_DIR_PROPERTY) or DEFAULT_MOUNT_DIR
    )
    summary.mount_prefix = (
        hypervisor.guest_property(name, MOUNT_PREFIX_PROPERTY) or DEFAULT_MOUNT_PREFIX
    )

    try:
        summary.shared_folders = hypervisor.shared_folders(name)
    except ExternalToolError as e:
        log.warning("shared_folders.unavailable", machine=name, error=str(e))

    return summary
