"""Abstract interfaces for the external tools docker-machine-helper drives."""

from dmhelper.interfaces.hypervisor import HypervisorBackend, SharedFolder
from dmhelper.interfaces.machine import MachineBackend
from dmhelper.interfaces.process import ProcessResult, ProcessRunner

__all__ = [
    "HypervisorBackend",
    "MachineBackend",
    "ProcessResult",
    "ProcessRunner",
    "SharedFolder",
]
