"""
Fatal faults of the step runner itself.
"""

import logging
import sys
from typing import NoReturn

logger = logging.getLogger(__name__)

# Exit code for faults inside the runner (wait, exec, post file), as opposed
# to a failure of the wrapped command, whose own exit code is passed through.
INTERNAL_FAULT_EXIT_CODE = 125

def fatal(message: str) -> NoReturn:
    """Log and exit with the internal fault code."""
    logger.critical(message)
    sys.exit(INTERNAL_FAULT_EXIT_CODE)
