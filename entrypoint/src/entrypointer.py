"""
Wraps a step's command: wait for the previous step, run, signal the next one.
"""

from dataclasses import dataclass, field
from typing import List

from entrypoint.src.post_writer import PostWriter, RealPostWriter
from entrypoint.src.runner import RealRunner, Runner
from entrypoint.src.waiter import RealWaiter, Waiter

@dataclass
class Entrypointer:
    entrypoint: str = ""
    wait_file: str = ""
    post_file: str = ""
    args: List[str] = field(default_factory=list)

    waiter: Waiter = field(default_factory=RealWaiter)
    runner: Runner = field(default_factory=RealRunner)
    post_writer: PostWriter = field(default_factory=RealPostWriter)

    def go(self):
        """
        Any fatal fault or a failing command exits the process, so the post
        file is only written after the command succeeded.
        """
        if self.wait_file:
            self.waiter.wait(self.wait_file)

        args = list(self.args)
        if self.entrypoint:
            args = [self.entrypoint] + args
        self.runner.run(*args)

        if self.post_file:
            self.post_writer.write(self.post_file)
