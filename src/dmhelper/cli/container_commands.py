#!/usr/bin/env python3
"""
Commands that work with docker inside the machine.
"""

import shlex
from typing import List, Optional

import questionary

from dmhelper.cli.utils import custom_style, require_machine
from dmhelper.containers import (
    DEFAULT_SHELL_COMMAND,
    DockerObject,
    list_docker_objects,
    open_in,
)
from dmhelper.output import print_header, print_missing


def choose_docker_object(objects: List[DockerObject]) -> Optional[DockerObject]:
    """Ask the operator to pick a container or image. ``None`` when cancelled."""
    return questionary.select(
        "Select a container or image:",
        choices=[questionary.Choice(title=obj.label, value=obj) for obj in objects],
        style=custom_style,
    ).ask()


def cmd_bash(args) -> int:
    """List containers/images and run a command on the selected one."""
    ctx = require_machine(args)
    command = " ".join(args.cmd) if args.cmd else DEFAULT_SHELL_COMMAND

    objects = list_docker_objects(ctx.machine, ctx.name)
    if not objects:
        print_missing("No available containers or images")
        return 1

    print_header(f"Run '{command}'")
    target = choose_docker_object(objects)
    if target is None:
        return 1

    return open_in(
        ctx.machine,
        ctx.name,
        target,
        command,
        volumes=ctx.config.shared_directories,
    )


def cmd_docker(args) -> int:
    """Run the docker CLI inside the machine."""
    ctx = require_machine(args)
    command = shlex.join(["docker", *args.docker_args])
    return ctx.machine.ssh(ctx.name, command, tty=False)
