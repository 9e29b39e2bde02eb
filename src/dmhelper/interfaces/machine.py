"""Abstract interface for the virtual-machine lifecycle tool."""

from abc import ABC, abstractmethod
from typing import List, Optional

from dmhelper.interfaces.process import ProcessResult
from dmhelper.state import MachineState


class MachineBackend(ABC):
    """Abstract interface for machine lifecycle operations.

    Mutating methods raise ``ExternalToolError`` on failure; its return code is
    the wrapped tool's exit status. :meth:`ssh` returns the session's status.
    """

    @property
    @abstractmethod
    def driver(self) -> str:
        """Driver the machine listing is filtered to (e.g. 'virtualbox')."""
        pass

    @abstractmethod
    def list_machines(self) -> List[str]:
        """Names of all machines using :attr:`driver`."""
        pass

    @abstractmethod
    def status(self, name: str) -> str:
        """Lowercase status reported by the tool, empty when unavailable."""
        pass

    @abstractmethod
    def create(self, name: str, memory_mb: int, disk_size_mb: int) -> None:
        """Create a machine with shared-folder automount disabled."""
        pass

    @abstractmethod
    def start(self, name: str) -> None:
        pass

    @abstractmethod
    def stop(self, name: str) -> None:
        pass

    @abstractmethod
    def restart(self, name: str) -> None:
        pass

    @abstractmethod
    def remove(self, name: str) -> None:
        pass

    @abstractmethod
    def inspect(self, name: str, fmt: Optional[str] = None) -> ProcessResult:
        """Inspect the machine; with *fmt* the output is captured."""
        pass

    @abstractmethod
    def execute(self, name: str, command: str, check: bool = True) -> ProcessResult:
        """Run *command* inside the machine and capture its output."""
        pass

    @abstractmethod
    def ssh(self, name: str, command: Optional[str] = None, tty: bool = True) -> int:
        """Attach the terminal to the machine, optionally running *command*."""
        pass

    def exists(self, name: str) -> bool:
        """Exact, case-sensitive match against :meth:`list_machines`."""
        return name in self.list_machines()

    def state(self, name: str) -> MachineState:
        if not self.exists(name):
            return MachineState.ABSENT
        return MachineState.from_status(self.status(name))
