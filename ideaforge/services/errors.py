"""
Errors raised by completion clients.

Each error carries a ``retryable`` flag that RetryPolicy inspects; nothing
else about the wrapped operation is known to the retry loop.
"""


class CompletionError(Exception):
    """Base class for failures talking to a remote text-completion service."""

    retryable = False

    def __init__(self, message: str, status_code: int = None):
        super().__init__(message)
        self.status_code = status_code


class AuthError(CompletionError):
    """The remote service rejected the credential (HTTP 401/403)."""


class RateLimited(CompletionError):
    """The remote service signalled a rate limit or exhausted quota."""

    retryable = True


class NetworkError(CompletionError):
    """No response was received (timeout, DNS failure, refused connection)."""

    retryable = True


class ProtocolError(CompletionError):
    """A response arrived but could not be used."""


class ParseError(ProtocolError):
    """The model answered, but nothing structured could be recovered from it."""


QUOTA_MARKERS = ("429", "quota", "rate limit", "resource_exhausted", "resource exhausted")


def is_quota_message(message: str) -> bool:
    """Return True when an error message carries a quota/rate-limit marker."""
    lowered = (message or "").lower()
    return any(marker in lowered for marker in QUOTA_MARKERS)
