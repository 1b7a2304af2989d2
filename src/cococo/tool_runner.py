"""Thin wrapper around the external coverage inspection command.

Brief:
  The converter never reads xcresult bundles itself. Everything goes through
  ``xcrun xccov view ...``; this module owns spawning that process and turning
  every way it can go wrong into a single ``ToolInvocationError``.
"""

from __future__ import annotations

import logging
import shutil
import subprocess
from typing import List, Optional, Sequence

logger = logging.getLogger(__name__)


class ToolInvocationError(RuntimeError):
    """Brief: Raised when the external tool cannot produce usable output.

    Inputs:
      - message: Human-readable description.
      - command: argv that was (or would have been) executed.
      - returncode: Process exit status, or None when it never ran.
      - stderr: Captured standard error text, possibly empty.
    """

    def __init__(
        self,
        message: str,
        *,
        command: Sequence[str] = (),
        returncode: Optional[int] = None,
        stderr: str = "",
    ) -> None:
        super().__init__(message)
        self.command: List[str] = list(command)
        self.returncode = returncode
        self.stderr = stderr


class ToolRunner:
    """Brief: Run a command and return its standard output as text.

    Notes:
      - There is no timeout; a hung tool blocks the calling worker.
    """

    def run(self, command_name: str, arguments: Sequence[str]) -> str:
        """Brief: Execute ``command_name arguments...`` and capture stdout.

        Inputs:
          - command_name: Executable name or path, resolved through PATH.
          - arguments: Argument list passed verbatim (no shell).

        Outputs:
          - str: Decoded standard output.

        Raises:
          - ToolInvocationError: command missing or not startable, nonzero
            exit status, or output that is not valid UTF-8.
        """

        argv = [command_name, *arguments]
        executable = shutil.which(command_name)
        if executable is None:
            raise ToolInvocationError(
                f"command not found: {command_name}", command=argv
            )

        logger.debug("running %s", " ".join(argv))
        try:
            proc = subprocess.run(
                [executable, *arguments],
                capture_output=True,
                check=False,
            )
        except OSError as exc:
            raise ToolInvocationError(
                f"failed to start {command_name}: {exc}", command=argv
            ) from exc

        stderr = proc.stderr.decode("utf-8", errors="replace").strip()
        if proc.returncode != 0:
            detail = f": {stderr}" if stderr else ""
            raise ToolInvocationError(
                f"{' '.join(argv)} exited with status {proc.returncode}{detail}",
                command=argv,
                returncode=proc.returncode,
                stderr=stderr,
            )

        try:
            return proc.stdout.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise ToolInvocationError(
                f"unreadable output from {' '.join(argv)}: {exc}",
                command=argv,
                returncode=proc.returncode,
                stderr=stderr,
            ) from exc
