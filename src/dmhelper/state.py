"""
Machine lifecycle states and the pure sequencing rules built on top of them.

Nothing in this module talks to docker-machine or VirtualBox: the provisioner
queries the current state through a backend and asks these functions what to
do next.
"""

from enum import Enum
from typing import List

from dmhelper.models import MachineConfig


class MachineState(Enum):
    """Lifecycle state of the managed machine."""

    ABSENT = "absent"
    STOPPED = "stopped"
    RUNNING = "running"
    OTHER = "other"

    @classmethod
    def from_status(cls, status: str) -> "MachineState":
        """Map ``docker-machine status`` output (any case) to a state."""
        value = (status or "").strip().lower()
        if value == "running":
            return cls.RUNNING
        if value == "stopped":
            return cls.STOPPED
        return cls.OTHER


class Action(Enum):
    """What has to happen to move the machine towards a desired state."""

    NONE = "none"
    PROVISION = "provision"
    START = "start"
    STOP = "stop"
    REMOVE = "remove"
    MISSING = "missing"


class Step(Enum):
    """Ordered steps of the first-time provisioning sequence."""

    CREATE = "Create machine"
    STOP = "Stop machine"
    ATTACH_SHARED_FOLDERS = "Add shared directories"
    START = "Start machine"
    SEED_BOOT_SCRIPT = "Create bootlocal.sh"
    DISABLE_SWAP = "Disable swap"
    MOUNT_SHARED_FOLDERS = "Automount shared directories"
    INSTALL_DOCKER_COMPOSE = "Autoinstall docker-compose"
    INSTALL_DIVE = "Autoinstall dive"
    SHOW_BOOT_SCRIPT = "bootlocal.sh configuration"
    RESTART = "Restart machine"


def next_step(current: MachineState, desired: MachineState) -> Action:
    """Return the single action that moves ``current`` towards ``desired``.

    >>> next_step(MachineState.ABSENT, MachineState.RUNNING)
    <Action.PROVISION: 'provision'>
    >>> next_step(MachineState.RUNNING, MachineState.RUNNING)
    <Action.NONE: 'none'>
    """
    if desired is MachineState.OTHER:
        raise ValueError("'other' is not a state that can be requested")

    if current is desired:
        return Action.NONE

    if desired is MachineState.ABSENT:
        return Action.REMOVE

    if current is MachineState.ABSENT:
        # Only a full provisioning run may bring a machine into existence.
        return Action.PROVISION if desired is MachineState.RUNNING else Action.MISSING

    if desired is MachineState.RUNNING:
        return Action.START

    return Action.STOP


def provisioning_plan(config: MachineConfig) -> List[Step]:
    """Return the provisioning steps ``config`` requires, in execution order.

    Folders can only be attached while the machine is powered off, hence the
    stop right after creation.
    """
    steps = [
        Step.CREATE,
        Step.STOP,
        Step.ATTACH_SHARED_FOLDERS,
        Step.START,
        Step.SEED_BOOT_SCRIPT,
    ]
    if config.disable_swap:
        steps.append(Step.DISABLE_SWAP)
    steps.append(Step.MOUNT_SHARED_FOLDERS)
    if config.docker_compose_version:
        steps.append(Step.INSTALL_DOCKER_COMPOSE)
    if config.dive_version:
        steps.append(Step.INSTALL_DIVE)
    steps.extend([Step.SHOW_BOOT_SCRIPT, Step.RESTART])
    return steps
