"""
Errors raised while turning a build spec into a pod.
"""


class BuildValidationError(Exception):
    """
    The build spec is malformed.

    Carries a machine-readable ``reason`` (e.g. ``MissingRevision``) and a
    human ``message``. Never retried; no pod is produced.
    """

    def __init__(self, reason: str, message: str):
        super().__init__(f"{reason}: {message}")
        self.reason = reason
        self.message = message


class BuildConfigError(Exception):
    """Raised when a build configuration document cannot be parsed."""
    pass
