"""Interfaces for the hypervisor that hosts the machine."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List, Optional


@dataclass(frozen=True)
class SharedFolder:
    """Shared folder attached to a VM."""

    name: str
    host_path: str
    transient: bool = False


class HypervisorBackend(ABC):
    """Abstract interface for hypervisor-level operations."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Backend name (e.g., 'virtualbox')."""
        pass

    @abstractmethod
    def vm_info(self, vm: str) -> dict:
        """Structured VM information as key/value pairs."""
        pass

    @abstractmethod
    def shared_folders(self, vm: str) -> List[SharedFolder]:
        """Shared folders currently attached to *vm*."""
        pass

    @abstractmethod
    def add_shared_folder(
        self, vm: str, name: str, host_path: str, automount: bool = True
    ) -> None:
        """Attach *host_path* as shared folder *name*. The VM must be powered off."""
        pass

    @abstractmethod
    def guest_property(self, vm: str, key: str) -> Optional[str]:
        """Value of guest property *key*, ``None`` when unset."""
        pass

    def shared_folder_exists(self, vm: str, host_path: str) -> bool:
        return any(
            host_path in (folder.name, folder.host_path)
            for folder in self.shared_folders(vm)
        )
