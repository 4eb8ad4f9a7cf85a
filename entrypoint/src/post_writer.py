"""
Signal completion to the next step.
"""

from typing import Protocol

from entrypoint.src.errors import fatal

class PostWriter(Protocol):
    def write(self, file: str) -> None:
        ...

class RealPostWriter:
    """Creates an empty file. Only its existence matters."""

    def write(self, file: str) -> None:
        if not file:
            return
        try:
            with open(file, "w"):
                pass
        except OSError as e:
            fatal(f"Creating {file!r}: {e}")
