"""Exceptions raised inside the visualcodex core.

Only failures that abort a whole turn are exceptions. File and command
failures are reported as result values by the components that hit them.
"""

from typing import Optional


class VisualCodexError(RuntimeError):
    """Base class for errors that abort a conversation turn."""


class AuthError(VisualCodexError):
    """No credential could be resolved, or the provider rejected it."""

    def __init__(self, message: str, provider: Optional[str] = None):
        super().__init__(message)
        self.provider = provider


class NetworkError(VisualCodexError):
    """The model endpoint could not be reached or did not answer in time."""


class ProviderError(VisualCodexError):
    """The model endpoint answered with an error or an unusable body."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class ConfigurationError(VisualCodexError):
    """The settings file is unreadable or holds invalid values."""
