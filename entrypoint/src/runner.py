"""
Run the step's command, passing its exit code through.
"""

import logging
import subprocess
import sys
from typing import Protocol

from entrypoint.src.errors import fatal

logger = logging.getLogger(__name__)

class Runner(Protocol):
    def run(self, *args: str) -> None:
        ...

class RealRunner:
    """
    Runs a command with the step's stdout/stderr.

    A non-zero exit ends this process with the same code, so Kubernetes sees
    the command's real exit code.
    """

    def run(self, *args: str) -> None:
        if not args:
            return

        try:
            proc = subprocess.Popen(list(args))
        except OSError as e:
            fatal(f"Error executing command {args[0]!r}: {e}")

        returncode = proc.wait()
        if returncode < 0:
            # Killed by a signal, report it the way a shell would
            returncode = 128 - returncode
        if returncode != 0:
            logger.debug(f"Command {args[0]!r} exited with code {returncode}")
            sys.exit(returncode)
