#!/usr/bin/env python3
"""
Shared utilities for the docker-machine-helper CLI.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from questionary import Style

from dmhelper.backends.docker_machine import DockerMachineBackend
from dmhelper.backends.subprocess_runner import SubprocessRunner
from dmhelper.backends.virtualbox import VirtualBoxBackend
from dmhelper.models import MachineConfig, load_machine_config
from dmhelper.output import console, err_console
from dmhelper.paths import docker_machine_bin, vboxmanage_bin
from dmhelper.provisioner import Provisioner

# Custom questionary style
custom_style = Style(
    [
        ("qmark", "fg:cyan bold"),
        ("question", "bold"),
        ("answer", "fg:green"),
        ("pointer", "fg:cyan bold"),
        ("highlighted", "fg:cyan bold"),
        ("selected", "fg:green"),
        ("separator", "fg:gray"),
        ("instruction", "fg:gray italic"),
    ]
)

__all__ = [
    "HelperContext",
    "build_context",
    "console",
    "custom_style",
    "err_console",
    "require_machine",
]


@dataclass
class HelperContext:
    """Configuration plus the backends one command invocation works with."""

    config: MachineConfig
    machine: DockerMachineBackend
    hypervisor: VirtualBoxBackend

    @property
    def name(self) -> str:
        return self.config.name

    @property
    def provisioner(self) -> Provisioner:
        return Provisioner(self.config, self.machine, self.hypervisor)


def build_context(args) -> HelperContext:
    """Resolve executables and configuration.

    Missing executables are reported before a missing machine name.
    """
    machine_bin = docker_machine_bin()
    vbox_bin = vboxmanage_bin()

    config_path: Optional[str] = getattr(args, "config", None)
    config = load_machine_config(Path(config_path) if config_path else None)

    runner = SubprocessRunner()
    return HelperContext(
        config=config,
        machine=DockerMachineBackend(machine_bin, runner),
        hypervisor=VirtualBoxBackend(vbox_bin, runner),
    )


def require_machine(args) -> HelperContext:
    """Build the context and fail with ``ResourceNotFoundError`` if the machine is absent."""
    ctx = build_context(args)
    ctx.provisioner.assert_exists()
    return ctx
