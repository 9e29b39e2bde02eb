"""Exceptions raised by docker-machine-helper.

Every error carries the process exit status the CLI should terminate with.
"""

from typing import List, Optional

EXIT_FAILURE = 1
EXIT_MACHINE_NOT_SPECIFIED = 64
EXIT_MACHINE_DOES_NOT_EXIST = 65


class HelperError(Exception):
    """Base exception for all docker-machine-helper errors."""

    exit_code = EXIT_FAILURE


class ConfigurationError(HelperError):
    """Raised when the configuration is missing or invalid."""

    exit_code = EXIT_MACHINE_NOT_SPECIFIED


class ToolNotFoundError(HelperError):
    """Raised when a required executable is not available on the host."""

    def __init__(self, tool: str, hint: Optional[str] = None):
        self.tool = tool
        self.hint = hint
        message = f"{tool} not found"
        if hint:
            message = f"{message}\n{hint}"
        super().__init__(message)


class ResourceNotFoundError(HelperError):
    """Raised when the machine (or a container inside it) does not exist."""

    exit_code = EXIT_MACHINE_DOES_NOT_EXIST


class ContainerNotFoundError(ResourceNotFoundError):
    """Raised when a container or image inside the machine is missing."""

    exit_code = EXIT_FAILURE


class ResourceStateError(HelperError):
    """Raised when a best-effort step could not bring a resource into shape."""

    pass


class ExternalToolError(HelperError):
    """Raised when a wrapped tool exits with a non-zero status."""

    def __init__(self, command: List[str], returncode: int, stderr: str = ""):
        self.command = command
        self.returncode = returncode
        self.stderr = stderr
        detail = stderr.strip().splitlines()[-1] if stderr and stderr.strip() else ""
        message = f"'{' '.join(command[:2])}' exited with status {returncode}"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)

    @property
    def exit_code(self) -> int:
        return self.returncode or EXIT_FAILURE
