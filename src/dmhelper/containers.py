#!/usr/bin/env python3
"""
Containers and images living inside the managed machine.

Listings are requested as one JSON record per line (``--format '{{json .}}'``)
so parsing does not depend on docker's column layout.
"""

import json
import shlex
from dataclasses import dataclass
from typing import Any, Dict, List, Sequence

import structlog

from dmhelper.errors import ContainerNotFoundError
from dmhelper.interfaces.machine import MachineBackend

log = structlog.get_logger(__name__)

DEFAULT_SHELL_COMMAND = "/usr/bin/env bash"

_LIST_CONTAINERS = "docker ps --format '{{json .}}' 2>/dev/null"
_LIST_IMAGES = "docker images --format '{{json .}}' 2>/dev/null"


@dataclass(frozen=True)
class DockerObject:
    """A running container or a local image."""

    kind: str  # "container" or "image"
    reference: str
    image: str = ""
    command: str = ""

    @property
    def is_container(self) -> bool:
        return self.kind == "container"

    @property
    def label(self) -> str:
        if self.is_container:
            return f"[CONTAINER] {self.image}\t({self.reference})\t{self.command}"
        return f"[  IMAGE  ] {self.reference}"


def parse_json_lines(text: str) -> List[Dict[str, Any]]:
    records: List[Dict[str, Any]] = []
    for line in (text or "").splitlines():
        line = line.strip()
        if not line:
            continue
        try:
            record = json.loads(line)
        except json.JSONDecodeError:
            log.debug("docker.unparsable_line", line=line[:120])
            continue
        if isinstance(record, dict):
            records.append(record)
    return records


def _container_from_record(record: Dict[str, Any]) -> DockerObject:
    names = str(record.get("Names") or "")
    return DockerObject(
        kind="container",
        reference=names.split(",")[0],
        image=str(record.get("Image") or ""),
        command=str(record.get("Command") or "").strip('"'),
    )


def _image_from_record(record: Dict[str, Any]) -> DockerObject:
    repository = str(record.get("Repository") or "<none>")
    tag = str(record.get("Tag") or "<none>")
    if repository == "<none>" or tag == "<none>":
        # Dangling images can only be addressed by ID.
        reference = str(record.get("ID") or "")
    else:
        reference = f"{repository}:{tag}"
    return DockerObject(kind="image", reference=reference, image=reference)


def list_docker_objects(machine: MachineBackend, name: str) -> List[DockerObject]:
    """Running containers first, then images, in docker's own order."""
    ps = machine.execute(name, _LIST_CONTAINERS, check=False)
    images = machine.execute(name, _LIST_IMAGES, check=False)

    objects = [_container_from_record(r) for r in parse_json_lines(ps.stdout)]
    objects.extend(_image_from_record(r) for r in parse_json_lines(images.stdout))
    return [o for o in objects if o.reference]


def container_exists(machine: MachineBackend, name: str, container: str) -> bool:
    name_filter = shlex.quote(f"name=^/{container}$")
    result = machine.execute(
        name, f"docker ps --filter {name_filter} --format '{{{{.Names}}}}'", check=False
    )
    return container in result.stdout.split()


def exec_in_container(
    machine: MachineBackend, name: str, container: str, command: str = DEFAULT_SHELL_COMMAND
) -> int:
    if not container_exists(machine, name, container):
        raise ContainerNotFoundError(f"Container '{container}' does not exist")
    return machine.ssh(name, f"docker exec -it {shlex.quote(container)} {command}")


def run_image(
    machine: MachineBackend,
    name: str,
    image: str,
    command: str = DEFAULT_SHELL_COMMAND,
    volumes: Sequence[str] = (),
) -> int:
    """Run a throw-away container from *image* with *volumes* mounted 1:1."""
    args = ["docker", "run", "--rm", "-it"]
    for directory in volumes:
        args.extend(["-v", f"{directory}:{directory}"])
    args.append(image)
    return machine.ssh(name, f"{shlex.join(args)} {command}")


def open_in(
    machine: MachineBackend,
    name: str,
    target: DockerObject,
    command: str = DEFAULT_SHELL_COMMAND,
    volumes: Sequence[str] = (),
) -> int:
    """Exec into a container or start one from an image, depending on *target*."""
    if target.is_container:
        return exec_in_container(machine, name, target.reference, command)
    return run_image(machine, name, target.reference, command, volumes)
