"""
Exception hierarchy for version resolution.

Only VersionNotFoundException is expected during normal operation: callers
log it and wait for the next reconcile. Everything else is propagated to the
caller, wrapped with context where it crosses a layer.
"""

from typing import Optional


class VersionCheckerException(Exception):
    """Base class for all version-checker errors."""


class VersionNotFoundException(VersionCheckerException):
    """No tag satisfied the policy, or the registry returned no tags."""


class FetchException(VersionCheckerException):
    """The registry collaborator failed to list tags for an image."""

    def __init__(self, image_url: str, message: str):
        self.image_url = image_url
        super().__init__(f"failed to get tags from remote registry for {image_url!r}: {message}")


class ContextCancelledException(VersionCheckerException):
    """The governing context was cancelled."""


class DeadlineExceededException(VersionCheckerException):
    """The governing context's deadline passed."""


class PolicyException(VersionCheckerException):
    """Annotations could not be turned into a valid policy."""

    def __init__(self, errors: list[str]):
        self.errors = errors
        super().__init__(", ".join(errors))


class IntegrationException(VersionCheckerException):
    """A registry integration failed (HTTP error, bad response, bad credentials)."""

    def __init__(self, service: str, message: str, status_code: Optional[int] = None):
        self.service = service
        self.status_code = status_code
        super().__init__(f"{service}: {message}")


def is_version_not_found(err: BaseException) -> bool:
    """Return True if ``err`` is, or was caused by, a VersionNotFoundException."""
    while err is not None:
        if isinstance(err, VersionNotFoundException):
            return True
        err = err.__cause__
    return False
