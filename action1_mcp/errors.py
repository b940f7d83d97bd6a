"""Error types raised by the Action1 API layer.

Every error derives from Action1Error so the tool layer can turn any of them
into a structured failure payload without catching unrelated exceptions.
"""

from typing import Any, Optional


class Action1Error(Exception):
    """Base class for all errors raised by this package"""


class MissingParameter(Action1Error):
    """A required path placeholder or body field had no value"""

    def __init__(self, key: str):
        self.key = key
        super().__init__(f"Missing path param: {key}")


class HttpError(Action1Error):
    """The upstream API answered with a non-2xx status

    Args:
        status: HTTP status code
        snippet: First 500 characters of the response body
        url: Requested URL
    """

    def __init__(self, status: int, snippet: str = "", url: str = "", reason: str = ""):
        self.status = status
        self.snippet = snippet
        self.url = url
        super().__init__(f"HTTP {status} {reason}".rstrip())


class ResponseParseError(Action1Error):
    """A 2xx response declared JSON but the body could not be parsed"""

    def __init__(self, status: int, snippet: str = ""):
        self.status = status
        self.snippet = snippet
        super().__init__("Failed to parse JSON response")


class TransportError(Action1Error):
    """The request never produced an HTTP response (connection error, timeout)"""


class UnsupportedOperation(Action1Error):
    """No descriptor exists for the requested resource, operation or action"""


class ConfirmationDenied(Action1Error):
    """The destructive-action gate refused a mutating call"""

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(reason)


class ResolutionFailure(Action1Error):
    """Entity resolution could not be attempted"""


class PollError(Action1Error):
    """Base for job polling errors; carries the last observed payload"""

    def __init__(self, message: str, data: Optional[Any] = None):
        self.data = data
        super().__init__(message)


class PollTimeout(PollError):
    pass


class PollFailure(PollError):
    pass


__all__ = [
    "Action1Error",
    "MissingParameter",
    "HttpError",
    "ResponseParseError",
    "TransportError",
    "UnsupportedOperation",
    "ConfirmationDenied",
    "ResolutionFailure",
    "PollError",
    "PollTimeout",
    "PollFailure",
]
