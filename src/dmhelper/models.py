#!/usr/bin/env python3
"""
Pydantic models for docker-machine-helper configuration validation.
"""

import os
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from dmhelper.errors import ConfigurationError
from dmhelper.paths import CONFIG_FILE_NAME, find_config_file

DEFAULT_MEMORY_MB = 1024
DEFAULT_DISK_SIZE_MB = 1024 * 15
DEFAULT_DOCKER_COMPOSE_VERSION = "1.24.1"
DEFAULT_DIVE_VERSION = "0.8.1"


def default_ssh_command_for(base_dir: Path) -> str:
    """Open a login shell in the project directory."""
    return f"cd {base_dir}; exec $SHELL --login"


class MachineConfig(BaseModel):
    """Immutable description of the single managed docker-machine instance."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str = Field(default="", description="Unique docker-machine name")
    memory_mb: int = Field(
        default=DEFAULT_MEMORY_MB, ge=512, le=131072, description="RAM in MB"
    )
    disk_size_mb: int = Field(
        default=DEFAULT_DISK_SIZE_MB, ge=1024, description="Disk size in MB"
    )
    disable_swap: bool = Field(default=True, description="Run swapoff at boot")
    shared_directories: Tuple[str, ...] = Field(
        default=(), description="Host directories shared 1:1 with the machine"
    )
    docker_compose_version: str = Field(
        default=DEFAULT_DOCKER_COMPOSE_VERSION,
        description="docker-compose release installed at boot (empty disables)",
    )
    dive_version: str = Field(
        default=DEFAULT_DIVE_VERSION,
        description="dive release installed at boot (empty disables)",
    )
    default_ssh_command: str = Field(
        default="", description="Command run on connect (empty: plain login shell)"
    )
    strict_shared_folders: bool = Field(
        default=False, description="Abort provisioning when a shared folder cannot be added"
    )

    @field_validator("name")
    @classmethod
    def name_must_be_valid(cls, v: str) -> str:
        v = (v or "").strip()
        if len(v) > 64:
            raise ValueError("Machine name must be <= 64 characters")
        if any(ch.isspace() for ch in v):
            raise ValueError("Machine name cannot contain whitespace")
        return v

    @field_validator("shared_directories")
    @classmethod
    def shared_directories_must_be_absolute(cls, v: Tuple[str, ...]) -> Tuple[str, ...]:
        seen = []
        for directory in v:
            directory = str(directory).rstrip("/") or "/"
            if not directory.startswith("/"):
                raise ValueError(f"Shared directory must be absolute: {directory}")
            if any(ch.isspace() for ch in directory):
                raise ValueError(f"Shared directory cannot contain whitespace: {directory}")
            if directory not in seen:
                seen.append(directory)
        return tuple(seen)

    @field_validator("docker_compose_version", "dive_version")
    @classmethod
    def strip_version(cls, v: Optional[str]) -> str:
        return (v or "").strip().lstrip("v")

    @classmethod
    def for_directory(cls, base_dir: Path, **overrides: Any) -> "MachineConfig":
        """Defaults for a project rooted at ``base_dir``."""
        base_dir = Path(base_dir).resolve()
        data: Dict[str, Any] = {
            "shared_directories": [str(base_dir)],
            "default_ssh_command": default_ssh_command_for(base_dir),
        }
        data.update(overrides)
        return cls.model_validate(data)

    @classmethod
    def load(cls, path: Path) -> "MachineConfig":
        """Load configuration from a YAML file.

        ``~`` is expanded and relative shared directories are resolved against
        the file's directory, which is also the default (and only) shared
        directory when the key is omitted.
        """
        path = Path(path)
        if path.is_dir():
            path = path / CONFIG_FILE_NAME
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        data = yaml.safe_load(path.read_text()) or {}
        if not isinstance(data, dict):
            raise ValueError(f"Config file must contain a mapping: {path}")

        base_dir = path.parent.resolve()
        if "shared_directories" in data:
            directories = [Path(str(d)).expanduser() for d in data["shared_directories"] or []]
            data["shared_directories"] = [
                str(d if d.is_absolute() else (base_dir / d).resolve()) for d in directories
            ]
        return cls.for_directory(base_dir, **data)

    def save(self, path: Path) -> None:
        """Save configuration to a YAML file."""
        config_dict = self.model_dump(mode="json")
        path.write_text(yaml.safe_dump(config_dict, default_flow_style=False, sort_keys=False))


def load_machine_config(
    config_path: Optional[Path] = None, cwd: Optional[Path] = None
) -> MachineConfig:
    """Resolve, load and validate the configuration for this invocation.

    Raises ``ConfigurationError`` when no machine name can be determined.
    """
    cwd = Path(cwd or Path.cwd())
    path = Path(config_path) if config_path else find_config_file(cwd)

    try:
        if path is not None:
            config = MachineConfig.load(path)
        else:
            config = MachineConfig.for_directory(cwd)

        env_name = os.getenv("DMHELPER_MACHINE_NAME")
        if env_name:
            config = MachineConfig.model_validate({**config.model_dump(), "name": env_name})
    except FileNotFoundError as e:
        raise ConfigurationError(str(e)) from e
    except (ValidationError, ValueError, yaml.YAMLError) as e:
        raise ConfigurationError(f"Invalid configuration in {path}: {e}") from e

    if not config.name:
        where = path or f"{cwd}/{CONFIG_FILE_NAME}"
        raise ConfigurationError(
            f"'name' not specified -- please check the configuration ({where}) "
            "or run 'docker-machine-helper init'"
        )
    return config
