"""Abstract interface for process execution."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List


@dataclass
class ProcessResult:
    """Result of process execution."""

    command: List[str]
    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def success(self) -> bool:
        return self.returncode == 0


class ProcessRunner(ABC):
    """Abstract interface for process execution."""

    @abstractmethod
    def run(
        self,
        command: List[str],
        capture_output: bool = True,
        check: bool = True,
    ) -> ProcessResult:
        """Run a command and wait for it.

        With ``capture_output=False`` the child inherits the terminal, which is
        what interactive sessions and progress output of the wrapped tools need.
        With ``check=True`` a non-zero exit raises ``ExternalToolError``.
        """
        pass
