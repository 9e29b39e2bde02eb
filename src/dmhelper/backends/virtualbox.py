"""VirtualBox hypervisor backend implementation."""

import re
from typing import Dict, List, Optional

import structlog

from dmhelper.backends.subprocess_runner import SubprocessRunner
from dmhelper.interfaces.hypervisor import HypervisorBackend, SharedFolder
from dmhelper.interfaces.process import ProcessRunner
from dmhelper.paths import VBOXMANAGE

log = structlog.get_logger(__name__)

_SHARED_FOLDER_KEY = re.compile(r"^SharedFolderName(Machine|Transient)Mapping(\d+)$")


def _unquote(value: str) -> str:
    value = value.strip()
    if len(value) >= 2 and value[0] == value[-1] == '"':
        value = value[1:-1].replace('\\"', '"').replace("\\\\", "\\")
    return value


def parse_machinereadable(text: str) -> Dict[str, str]:
    """Parse ``VBoxManage showvminfo --machinereadable`` output.

    >>> parse_machinereadable('name="dev-box"\\nmemory=1024')
    {'name': 'dev-box', 'memory': '1024'}
    """
    info: Dict[str, str] = {}
    for line in text.splitlines():
        if "=" not in line:
            continue
        key, _, value = line.partition("=")
        info[_unquote(key)] = _unquote(value)
    return info


class VirtualBoxBackend(HypervisorBackend):
    """VirtualBox backend built on ``VBoxManage``."""

    name = "virtualbox"

    def __init__(self, binary: str = VBOXMANAGE, runner: Optional[ProcessRunner] = None):
        self.binary = binary
        self.runner = runner or SubprocessRunner()

    def vm_info(self, vm: str) -> Dict[str, str]:
        result = self.runner.run([self.binary, "showvminfo", vm, "--machinereadable"])
        return parse_machinereadable(result.stdout)

    def shared_folders(self, vm: str) -> List[SharedFolder]:
        info = self.vm_info(vm)
        folders: List[SharedFolder] = []
        for key, value in info.items():
            match = _SHARED_FOLDER_KEY.match(key)
            if not match:
                continue
            kind, index = match.groups()
            folders.append(
                SharedFolder(
                    name=value,
                    host_path=info.get(f"SharedFolderPath{kind}Mapping{index}", ""),
                    transient=kind == "Transient",
                )
            )
        return folders

    def add_shared_folder(
        self, vm: str, name: str, host_path: str, automount: bool = True
    ) -> None:
        cmd = [self.binary, "sharedfolder", "add", vm, "--name", name, "--hostpath", host_path]
        if automount:
            cmd.append("--automount")
        log.info("shared_folder.add", vm=vm, name=name, host_path=host_path)
        self.runner.run(cmd)

    def guest_property(self, vm: str, key: str) -> Optional[str]:
        result = self.runner.run([self.binary, "guestproperty", "get", vm, key], check=False)
        if not result.success:
            return None
        for line in result.stdout.splitlines():
            if line.startswith("Value:"):
                return line[len("Value:"):].strip()
        return None
