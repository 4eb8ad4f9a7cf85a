"""
Block until a predecessor step signals completion.
"""

import logging
import os
import time
from typing import Protocol

from entrypoint.src.errors import fatal

logger = logging.getLogger(__name__)

class Waiter(Protocol):
    def wait(self, file: str) -> None:
        ...

class RealWaiter:
    """
    Polls for a file's existence.

    There is no notification channel between step containers, only the
    shared volume, so this checks every `poll_interval` seconds and never
    gives up on its own.
    """

    def __init__(self, poll_interval: float = 1.0):
        self.poll_interval = poll_interval

    def wait(self, file: str) -> None:
        if not file:
            return

        logger.debug(f"Waiting for {file}")
        while True:
            try:
                os.stat(file)
                return
            except FileNotFoundError:
                pass
            except OSError as e:
                fatal(f"Waiting for {file!r}: {e}")
            time.sleep(self.poll_interval)
