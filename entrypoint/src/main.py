"""
PodLine step entrypoint.

Runs inside each step container:

    podline-entrypoint --wait-file /tools/0 --post-file /tools/1 -- make test
"""

import logging
import sys
from typing import Tuple

import click
from pydantic import ValidationError

from entrypoint.src.config import get_settings
from entrypoint.src.entrypointer import Entrypointer
from entrypoint.src.errors import fatal
from entrypoint.src.waiter import RealWaiter

logger = logging.getLogger(__name__)

@click.command(context_settings={"ignore_unknown_options": True, "allow_interspersed_args": False})
@click.option("--entrypoint", envvar="PODLINE_ENTRYPOINT", default="",
              help="Binary to run, prepended to the command arguments.")
@click.option("--wait-file", envvar="PODLINE_WAIT_FILE", default="",
              help="Wait for this file to exist before running.")
@click.option("--post-file", envvar="PODLINE_POST_FILE", default="",
              help="Create this file after the command succeeds.")
@click.argument("args", nargs=-1, type=click.UNPROCESSED)
def main(entrypoint: str, wait_file: str, post_file: str, args: Tuple[str, ...]):
    """Run ARGS after --wait-file appears, then create --post-file."""
    try:
        settings = get_settings()

        # stdout belongs to the wrapped command
        logging.basicConfig(
            level=settings.log_level,
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            handlers=[logging.StreamHandler(sys.stderr)]
        )
    except (ValidationError, ValueError) as e:
        fatal(f"Invalid entrypoint configuration: {e}")

    Entrypointer(
        entrypoint=entrypoint,
        wait_file=wait_file,
        post_file=post_file,
        args=list(args),
        waiter=RealWaiter(poll_interval=settings.poll_interval),
    ).go()

if __name__ == "__main__":
    main()
