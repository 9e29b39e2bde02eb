"""Subprocess process runner implementation."""

import subprocess
from typing import List

import structlog

from dmhelper.errors import ExternalToolError
from dmhelper.interfaces.process import ProcessResult, ProcessRunner

log = structlog.get_logger(__name__)


class SubprocessRunner(ProcessRunner):
    """Run processes using the subprocess module."""

    def run(
        self,
        command: List[str],
        capture_output: bool = True,
        check: bool = True,
    ) -> ProcessResult:
        """Run a command."""
        log.debug("process.run", command=command, capture_output=capture_output)
        result = subprocess.run(
            command,
            capture_output=capture_output,
            check=False,
            text=True,
        )
        if result.returncode != 0:
            log.debug(
                "process.nonzero",
                command=command[:3],
                rc=result.returncode,
                stderr=(result.stderr or "").strip()[:200],
            )
            if check:
                raise ExternalToolError(command, result.returncode, result.stderr or "")
        return ProcessResult(
            command=list(command),
            returncode=result.returncode,
            stdout=result.stdout or "",
            stderr=result.stderr or "",
        )
