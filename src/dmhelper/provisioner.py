#!/usr/bin/env python3
"""
Idempotent provisioning of the managed docker-machine instance.

The provisioner only decides *what* to call; every call goes through the
injected machine and hypervisor backends, so the whole sequence can be driven
against fakes.
"""

from typing import Callable, Dict, List, Optional

from dmhelper.bootlocal import (
    BOOTLOCAL_PATH,
    BootScript,
    RemoteBootScript,
    dive_install_line,
    docker_compose_install_line,
    mount_lines,
    swap_lines,
)
from dmhelper.errors import ExternalToolError, ResourceNotFoundError, ResourceStateError
from dmhelper.interfaces.hypervisor import HypervisorBackend
from dmhelper.interfaces.machine import MachineBackend
from dmhelper.logging import get_logger, log_operation
from dmhelper.models import MachineConfig
from dmhelper.output import console, print_error, print_header, print_missing, print_ok
from dmhelper.state import Action, MachineState, Step, next_step, provisioning_plan

log = get_logger(__name__)

FSTAB_DISABLE_SWAP = "sudo sed -i '/ swap / s/^/#/' /etc/fstab"


class Provisioner:
    """Bring the configured machine up and connect to it."""

    def __init__(
        self,
        config: MachineConfig,
        machine: MachineBackend,
        hypervisor: HypervisorBackend,
        boot_script: Optional[BootScript] = None,
    ):
        self.config = config
        self.machine = machine
        self.hypervisor = hypervisor
        self.boot_script = boot_script or RemoteBootScript(machine, config.name)
        self.failed_shared_folders: List[str] = []

    @property
    def name(self) -> str:
        return self.config.name

    # ── entry points ────────────────────────────────────────────────────────

    def ensure_ready(self) -> int:
        """Provision the machine if needed, start it, and open an SSH session.

        Returns the exit status of the SSH session.
        """
        action = next_step(self.machine.state(self.name), MachineState.RUNNING)

        if action is Action.PROVISION:
            print_missing(f"Machine '{self.name}' does not exist")
            self.provision()
            action = next_step(self.machine.state(self.name), MachineState.RUNNING)

        if action is Action.START:
            self.machine.start(self.name)

        return self.connect()

    def assert_exists(self) -> None:
        if not self.machine.exists(self.name):
            raise ResourceNotFoundError(f"Machine '{self.name}' does not exist")

    def converge(self, desired: MachineState) -> Action:
        """Move an existing machine to *desired* and return the action taken."""
        action = next_step(self.machine.state(self.name), desired)

        if action is Action.MISSING:
            raise ResourceNotFoundError(f"Machine '{self.name}' does not exist")
        if action is Action.PROVISION:
            raise ResourceStateError(f"Machine '{self.name}' has to be provisioned first")

        if action is Action.NONE:
            print_ok(f"Machine '{self.name}' is already {desired.value}")
        elif action is Action.START:
            self.machine.start(self.name)
        elif action is Action.STOP:
            self.machine.stop(self.name)
        elif action is Action.REMOVE:
            self.machine.remove(self.name)
        return action

    def provision(self) -> None:
        """Run the full first-time setup sequence."""
        handlers = self._step_handlers()
        with log_operation(log, "provision", machine=self.name):
            for step in provisioning_plan(self.config):
                print_header(self._step_title(step))
                handlers[step]()

        if self.failed_shared_folders:
            print_error(
                f"{len(self.failed_shared_folders)} shared folder(s) could not be added: "
                + ", ".join(self.failed_shared_folders)
            )

    def connect(self) -> int:
        return self.machine.ssh(self.name, self.config.default_ssh_command or None)

    # ── steps ───────────────────────────────────────────────────────────────

    def _step_handlers(self) -> Dict[Step, Callable[[], object]]:
        return {
            Step.CREATE: lambda: self.machine.create(
                self.name, self.config.memory_mb, self.config.disk_size_mb
            ),
            Step.STOP: lambda: self.machine.stop(self.name),
            Step.ATTACH_SHARED_FOLDERS: self.attach_shared_folders,
            Step.START: lambda: self.machine.start(self.name),
            Step.SEED_BOOT_SCRIPT: self.boot_script.ensure,
            Step.DISABLE_SWAP: self.disable_swap,
            Step.MOUNT_SHARED_FOLDERS: self.mount_shared_folders,
            Step.INSTALL_DOCKER_COMPOSE: lambda: self.boot_script.append_once(
                docker_compose_install_line(self.config.docker_compose_version)
            ),
            Step.INSTALL_DIVE: lambda: self.boot_script.append_once(
                dive_install_line(self.config.dive_version)
            ),
            Step.SHOW_BOOT_SCRIPT: self.show_boot_script,
            Step.RESTART: lambda: self.machine.restart(self.name),
        }

    @staticmethod
    def _step_title(step: Step) -> str:
        if step is Step.SHOW_BOOT_SCRIPT:
            return f"`{BOOTLOCAL_PATH}` configuration"
        return step.value

    def attach_shared_folders(self) -> List[str]:
        """Attach every shared directory not attached yet.

        Failures are reported per folder and do not stop the remaining ones
        unless ``strict_shared_folders`` is set. Returns the failed directories.
        """
        failed: List[str] = []
        for directory in self.config.shared_directories:
            try:
                if self.hypervisor.shared_folder_exists(self.name, directory):
                    print_ok(f"Shared folder `{directory}` already exists")
                    continue
                self.hypervisor.add_shared_folder(
                    self.name, directory, directory, automount=True
                )
            except ExternalToolError as e:
                failed.append(directory)
                print_error(f"Failed to add shared folder `{directory}`")
                log.warning("shared_folder.add_failed", directory=directory, error=str(e))
                if self.config.strict_shared_folders:
                    raise ResourceStateError(
                        f"Failed to add shared folder `{directory}`"
                    ) from e
            else:
                print_ok(f"Successfully added shared folder `{directory}`")

        self.failed_shared_folders.extend(failed)
        return failed

    def disable_swap(self) -> None:
        self.machine.execute(self.name, FSTAB_DISABLE_SWAP)
        for line in swap_lines():
            self.boot_script.append_once(line)

    def mount_shared_folders(self) -> None:
        """Append mount lines for directories the boot script does not mention yet."""
        for directory in self.config.shared_directories:
            if self.boot_script.references(directory):
                log.debug("bootlocal.mount_present", directory=directory)
                continue
            for line in mount_lines(directory):
                self.boot_script.append(line)

    def show_boot_script(self) -> None:
        console.print(self.boot_script.read(), markup=False)
