"""Concrete backends for docker-machine, VirtualBox and process execution."""

from dmhelper.backends.docker_machine import DockerMachineBackend
from dmhelper.backends.subprocess_runner import SubprocessRunner
from dmhelper.backends.virtualbox import VirtualBoxBackend

__all__ = ["DockerMachineBackend", "SubprocessRunner", "VirtualBoxBackend"]
