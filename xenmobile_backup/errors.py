"""
Exception taxonomy for XenMobile Backup.

AuthenticationError always aborts the run. FetchError aborts the run for the
top-level resources (properties, application list) and is collected as a
non-fatal failure for per-application detail fetches.
"""


class XenMobileError(Exception):
    """Base class for all errors raised while talking to the server."""


class AuthenticationError(XenMobileError):
    """Login failed or the server returned no usable token."""


class FetchError(XenMobileError):
    """A resource could not be retrieved."""

    def __init__(self, resource: str, message: str = "") -> None:
        self.resource = resource
        self.message = message
        super().__init__(f"Failed to fetch {resource}: {message}" if message else f"Failed to fetch {resource}")


class MalformedResponseError(FetchError):
    """The response body is not JSON or lacks the expected envelope key."""
