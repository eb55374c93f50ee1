"""
Notification Errors
===================
Failures that abort a single build notification attempt.

Both kinds are caught at the notification boundary, logged with their
traceback and swallowed. They never reach the host build.
"""


class NotificationError(Exception):
    """Base class for anything that aborts one notification attempt."""


class MissingFieldError(NotificationError):
    """A required source-control variable was absent."""

    def __init__(self, field_name: str) -> None:
        self.field_name = field_name
        super().__init__(f"{field_name} variable was null")


class DeliveryError(NotificationError):
    """Network, serialization or non-2xx failure while posting a build report."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.status_code = status_code
        super().__init__(message)
