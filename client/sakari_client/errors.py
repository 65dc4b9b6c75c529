"""
Error types for the Sakari client

ConfigurationError is raised when a required credential cannot be resolved,
RequestError when the HTTP exchange with the Sakari API fails. Result wraps
either outcome for callers that prefer not to rely on exceptions.
"""

from typing import Any, Optional


class SakariError(Exception):
    """Base class for all Sakari client errors"""


class ConfigurationError(SakariError):
    """A required setting is missing or the settings file is unreadable"""


class RequestError(SakariError):
    """The HTTP exchange failed: transport error, timeout or non-2xx status"""

    def __init__(self, message: str, status_code: Optional[int] = None,
                 body: Any = None, timeout: bool = False):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.body = body
        self.timeout = timeout

    @property
    def has_response(self) -> bool:
        return self.status_code is not None


class Result:
    """Outcome of a call: either a value or the error that prevented it"""

    __slots__ = ('value', 'error')

    def __init__(self, value: Any = None, error: Optional[SakariError] = None):
        self.value = value
        self.error = error

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> Any:
        """Return the value, or raise the carried error"""
        if self.error is not None:
            raise self.error
        return self.value

    def __repr__(self):
        if self.ok:
            return f"Result(value={self.value!r})"
        return f"Result(error={self.error!r})"
