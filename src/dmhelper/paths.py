"""
Canonical locations for docker-machine-helper: the project config file and the
external executables it drives.

Every module that needs to locate either should import from here instead of
computing paths inline.
"""

import os
import shutil
from pathlib import Path
from typing import Optional

import structlog

from dmhelper.errors import ToolNotFoundError

log = structlog.get_logger(__name__)

CONFIG_FILE_NAME = ".dmhelper.yaml"

DOCKER_MACHINE = "docker-machine"
VBOXMANAGE = "VBoxManage"

DOCKER_MACHINE_INSTALL_HINT = (
    "Visit https://docs.docker.com/machine/install-machine/ for installation instructions"
)


# ── config file ──────────────────────────────────────────────────────────────

def find_config_file(start: Optional[Path] = None) -> Optional[Path]:
    """Locate the project config file.

    Resolution order:
      1. ``DMHELPER_CONFIG`` environment variable
      2. ``.dmhelper.yaml`` in *start* or the closest parent directory
    """
    env_path = os.getenv("DMHELPER_CONFIG")
    if env_path:
        return Path(env_path).expanduser()

    directory = Path(start or Path.cwd()).resolve()
    for candidate_dir in [directory, *directory.parents]:
        candidate = candidate_dir / CONFIG_FILE_NAME
        if candidate.is_file():
            log.debug("config_file_found", path=str(candidate))
            return candidate
    return None


# ── executables ──────────────────────────────────────────────────────────────

def resolve_binary(tool: str, env_var: str, hint: Optional[str] = None) -> str:
    """Return the absolute path of *tool*, honouring an override in *env_var*."""
    override = os.getenv(env_var)
    candidate = override or tool
    found = shutil.which(candidate)
    if found is None:
        raise ToolNotFoundError(candidate, hint)
    return found


def docker_machine_bin() -> str:
    return resolve_binary(
        DOCKER_MACHINE, "DMHELPER_DOCKER_MACHINE_BIN", DOCKER_MACHINE_INSTALL_HINT
    )


def vboxmanage_bin() -> str:
    return resolve_binary(VBOXMANAGE, "DMHELPER_VBOXMANAGE_BIN")
